"""Plain-text email bodies.

Each builder returns a ready ``EmailMessage``; the template name is stored in
``email_log`` so deliveries can be audited per kind.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence, Tuple

from .model import EmailMessage

REJECTION_REASONS = {
    "DEAD_BY_CANDIDATE": "We appreciate your interest and wish you the best in your job search.",
    "DEAD_BY_COMPANY": "Thank you for your interest. We have decided to move forward with other candidates.",
    "DEAD_COMPENSATION": "Thank you for your interest. Unfortunately, we cannot meet your compensation requirements.",
    "DEAD_LOCATION": "Thank you for your interest. The position location does not align with your preferences.",
    "DEAD_TIMING": "Thank you for your interest. The timing is not right at this moment.",
    "DEAD_QUALIFICATIONS": "Thank you for your interest. We are looking for candidates with different qualifications.",
    "DEAD_CULTURE_FIT": "Thank you for your interest. We are looking for a different cultural fit.",
    "DEAD_OTHER": "Thank you for your interest. We have decided to move in a different direction.",
}


def _fmt_date(value: date) -> str:
    return value.strftime("%A, %B %d, %Y").replace(" 0", " ")


def _fmt_when(value: datetime) -> str:
    return value.strftime("%B %d, %Y at %I:%M %p").replace(" 0", " ")


def _days(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else f"{value:g}"


def pto_decision(
    *,
    to: str,
    first_name: str,
    approved: bool,
    start_date: date,
    end_date: date,
    days: float,
    review_notes: Optional[str] = None,
) -> EmailMessage:
    verdict = "approved" if approved else "denied"
    lines = [
        f"Hi {first_name},",
        "",
        f"Your PTO request for {_fmt_date(start_date)} through {_fmt_date(end_date)} "
        f"({_days(days)} day(s)) has been {verdict}.",
    ]
    if review_notes:
        lines += ["", f"Notes from your reviewer: {review_notes}"]
    return EmailMessage(
        to=to,
        subject=f"PTO Request {verdict.capitalize()}",
        body="\n".join(lines),
        template="pto_approved" if approved else "pto_denied",
    )


def pto_reminder_employee(*, to: str, first_name: str, start_date: date, end_date: date, days_until: int) -> EmailMessage:
    when = "tomorrow" if days_until == 1 else f"in {days_until} days"
    return EmailMessage(
        to=to,
        subject=f"Reminder: your PTO starts {when}",
        body=(
            f"Hi {first_name},\n\n"
            f"Your approved PTO starts {when} ({_fmt_date(start_date)} through {_fmt_date(end_date)}).\n"
            "Please hand off any open work before you leave."
        ),
        template=f"pto_reminder_{days_until}",
    )


def pto_reminder_manager(
    *,
    to: str,
    employee_name: str,
    start_date: date,
    end_date: date,
    days_until: int,
) -> EmailMessage:
    when = "tomorrow" if days_until == 1 else f"in {days_until} days"
    return EmailMessage(
        to=to,
        subject=f"Team PTO {when}: {employee_name}",
        body=(
            f"{employee_name} has approved PTO starting {when}: "
            f"{_fmt_date(start_date)} through {_fmt_date(end_date)}."
        ),
        template=f"pto_manager_reminder_{days_until}",
    )


def task_overdue(*, to: str, first_name: str, task_name: str, due_date: date, days_overdue: int) -> EmailMessage:
    return EmailMessage(
        to=to,
        subject=f"Overdue onboarding task: {task_name}",
        body=(
            f"Hi {first_name},\n\n"
            f'Your task "{task_name}" was due on {_fmt_date(due_date)} and is now '
            f"{days_overdue} day(s) overdue. Please complete it as soon as possible."
        ),
        template="task_overdue",
    )


def onboarding_digest(*, to: str, first_name: str, tasks: Sequence[Tuple[str, date]]) -> EmailMessage:
    items = "\n".join(f"  - {name} (due {_fmt_date(due)})" for name, due in tasks)
    return EmailMessage(
        to=to,
        subject=f"You have {len(tasks)} onboarding task(s) due",
        body=f"Hi {first_name},\n\nThe following onboarding tasks are due:\n{items}",
        template="onboarding_reminder",
    )


def interview_reminder(*, to: str, recipient_name: str, candidate_name: str, scheduled_at: datetime,
                       location: Optional[str] = None) -> EmailMessage:
    where = f"\nLocation: {location}" if location else ""
    return EmailMessage(
        to=to,
        subject=f"Interview tomorrow: {candidate_name}",
        body=f"Hi {recipient_name},\n\nReminder: interview with {candidate_name} on {_fmt_when(scheduled_at)}.{where}",
        template="interview_reminder",
    )


def interview_feedback_reminder(*, to: str, interviewer_name: str, candidate_name: str,
                                scheduled_at: datetime, days_since: int) -> EmailMessage:
    return EmailMessage(
        to=to,
        subject=f"Feedback needed: interview with {candidate_name}",
        body=(
            f"Hi {interviewer_name},\n\n"
            f"The interview with {candidate_name} on {_fmt_when(scheduled_at)} was {days_since} day(s) ago "
            "and is still marked as scheduled. Please record the outcome and your feedback."
        ),
        template="interview_feedback_reminder",
    )


def interview_escalation(*, to: str, candidate_name: str, interviewer_name: str, scheduled_at: datetime,
                         days_since: int, days_until_no_show: int) -> EmailMessage:
    return EmailMessage(
        to=to,
        subject=f"Escalation: interview outcome missing for {candidate_name}",
        body=(
            f"The interview with {candidate_name} (interviewer: {interviewer_name}) on {_fmt_when(scheduled_at)} "
            f"has had no outcome recorded for {days_since} days.\n"
            f"It will be marked as an auto NO_SHOW in {days_until_no_show} days if nothing changes."
        ),
        template="interview_escalation",
    )


def interview_auto_no_show(*, to: str, candidate_name: str, scheduled_at: datetime, days_since: int) -> EmailMessage:
    return EmailMessage(
        to=to,
        subject=f"Auto NO_SHOW: {candidate_name}",
        body=(
            f"The interview with {candidate_name} on {_fmt_when(scheduled_at)} had no outcome recorded for "
            f"{days_since} days. It was marked as a no-show and the candidate moved to DEAD_BY_CANDIDATE."
        ),
        template="interview_auto_no_show",
    )


def candidate_rejection(*, to: str, first_name: str, position: str, reason: Optional[str]) -> EmailMessage:
    wording = REJECTION_REASONS.get(reason or "", REJECTION_REASONS["DEAD_OTHER"])
    return EmailMessage(
        to=to,
        subject=f"Your application for {position}",
        body=f"Hi {first_name},\n\nThank you for applying for the {position} position.\n{wording}",
        template="candidate_rejection",
    )


def candidate_reschedule(*, to: str, first_name: str, position: str) -> EmailMessage:
    return EmailMessage(
        to=to,
        subject="We missed you at your interview",
        body=(
            f"Hi {first_name},\n\n"
            f"We missed you at your interview for the {position} position. "
            "If you are still interested, reply to this email and we will find a new time."
        ),
        template="candidate_reschedule",
    )


def candidate_status(*, to: str, first_name: str, status: str) -> EmailMessage:
    return EmailMessage(
        to=to,
        subject="Update on your application",
        body=f"Hi {first_name},\n\nYour application status is now: {status}.",
        template="candidate_status",
    )


def candidate_offer(*, to: str, first_name: str, position: str, salary: str, start_date: str) -> EmailMessage:
    return EmailMessage(
        to=to,
        subject=f"Offer: {position}",
        body=(
            f"Hi {first_name},\n\nWe are pleased to offer you the {position} position.\n"
            f"Compensation: {salary}\nStart date: {start_date}"
        ),
        template="candidate_offer",
    )


def welcome(
    *,
    to: str,
    first_name: str,
    position: str,
    start_date: date,
    temp_password: str,
    portal_url: str,
    training_url: str,
    equipment_url: Optional[str] = None,
) -> EmailMessage:
    lines = [
        f"Hi {first_name},",
        "",
        f"Welcome aboard as our new {position}! Your first day is {_fmt_date(start_date)}.",
        "",
        f"Portal: {portal_url}",
        f"Login: {to}",
        f"Temporary password: {temp_password} (you will be asked to change it on first login)",
        f"Online training: {training_url}",
    ]
    if equipment_url:
        lines.append(f"Equipment receipt (available on your start date): {equipment_url}")
    return EmailMessage(to=to, subject="Welcome to the team!", body="\n".join(lines), template="welcome")
