from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import CandidateStatus, InterviewStatus, NoteType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json, fetchall, fetchone, load_json
from .model import Candidate, CandidateNote, Interview, NewCandidate
from .repository import CandidateNoteRepository, CandidateRepository, InterviewRepository

_CANDIDATE_COLUMNS = (
    "id, first_name, last_name, email, phone, position, department, status, assigned_to, score, tags, created_at"
)
_INTERVIEW_COLUMNS = "id, candidate_id, interviewer_id, scheduled_at, status, location, notes"


def _row_to_candidate(row: dict) -> Candidate:
    return Candidate(
        candidate_id=int(row["id"]),
        first_name=row["first_name"],
        last_name=row["last_name"],
        email=row["email"],
        phone=row.get("phone"),
        position=row["position"],
        department=row.get("department"),
        status=CandidateStatus(row["status"]),
        assigned_to=row.get("assigned_to"),
        score=row.get("score"),
        tags=tuple(load_json(row.get("tags"), default=[])),
        created_at=row.get("created_at"),
    )


def _row_to_interview(row: dict) -> Interview:
    return Interview(
        interview_id=int(row["id"]),
        candidate_id=int(row["candidate_id"]),
        interviewer_id=row.get("interviewer_id"),
        scheduled_at=row["scheduled_at"],
        status=InterviewStatus(row["status"]),
        location=row.get("location"),
        notes=row.get("notes"),
    )


class MySQLCandidateRepository(CandidateRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, candidate: NewCandidate) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO candidates(first_name, last_name, email, phone, position, department, status, tags)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    candidate.first_name,
                    candidate.last_name,
                    candidate.email,
                    candidate.phone,
                    candidate.position,
                    candidate.department,
                    CandidateStatus.NEW.value,
                    dump_json([]),
                ),
            )
            return int(cur.lastrowid)

    def get_by_id(self, candidate_id: int) -> Optional[Candidate]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_CANDIDATE_COLUMNS} FROM candidates WHERE id=%s", (int(candidate_id),))
            row = fetchone(cur)
            return _row_to_candidate(row) if row else None

    def list_candidates(self, *, status: Optional[CandidateStatus] = None, limit: int = 200) -> Sequence[Candidate]:
        where, params = "", []
        if status is not None:
            where, params = "WHERE status=%s", [status.value]
        params.append(int(limit))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_CANDIDATE_COLUMNS} FROM candidates {where} ORDER BY created_at DESC, id DESC LIMIT %s",
                tuple(params),
            )
            return [_row_to_candidate(r) for r in fetchall(cur)]

    def update_status(self, candidate_id: int, status: CandidateStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE candidates SET status=%s WHERE id=%s", (status.value, int(candidate_id)))
            return cur.rowcount == 1

    def update_tags(self, candidate_id: int, tags: Sequence[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE candidates SET tags=%s WHERE id=%s", (dump_json(list(tags)), int(candidate_id)))
            return cur.rowcount == 1

    def assign(self, candidate_id: int, user_id: Optional[int]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE candidates SET assigned_to=%s WHERE id=%s", (user_id, int(candidate_id)))
            return cur.rowcount == 1


class MySQLInterviewRepository(InterviewRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, interview_id: int) -> Optional[Interview]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_INTERVIEW_COLUMNS} FROM interviews WHERE id=%s", (int(interview_id),))
            row = fetchone(cur)
            return _row_to_interview(row) if row else None

    def list_scheduled_before(self, moment: datetime) -> Sequence[Interview]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_INTERVIEW_COLUMNS}
                FROM interviews
                WHERE status=%s AND scheduled_at < %s
                ORDER BY scheduled_at
                """,
                (InterviewStatus.SCHEDULED.value, moment),
            )
            return [_row_to_interview(r) for r in fetchall(cur)]

    def list_scheduled_between(self, start: datetime, end: datetime) -> Sequence[Interview]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_INTERVIEW_COLUMNS}
                FROM interviews
                WHERE status=%s AND scheduled_at >= %s AND scheduled_at < %s
                ORDER BY scheduled_at
                """,
                (InterviewStatus.SCHEDULED.value, start, end),
            )
            return [_row_to_interview(r) for r in fetchall(cur)]

    def update_status(self, interview_id: int, status: InterviewStatus, *, notes: Optional[str] = None) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            if notes is None:
                cur.execute("UPDATE interviews SET status=%s WHERE id=%s", (status.value, int(interview_id)))
            else:
                cur.execute(
                    "UPDATE interviews SET status=%s, notes=%s WHERE id=%s",
                    (status.value, notes, int(interview_id)),
                )
            return cur.rowcount == 1


class MySQLCandidateNoteRepository(CandidateNoteRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, note: CandidateNote) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO candidate_notes(candidate_id, author_id, content, type) VALUES(%s,%s,%s,%s)",
                (int(note.candidate_id), note.author_id, note.content, note.type.value),
            )
            return int(cur.lastrowid)

    def list_for_candidate(self, candidate_id: int) -> Sequence[CandidateNote]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT candidate_id, author_id, content, type
                FROM candidate_notes
                WHERE candidate_id=%s
                ORDER BY created_at DESC, id DESC
                """,
                (int(candidate_id),),
            )
            return [
                CandidateNote(
                    candidate_id=int(r["candidate_id"]),
                    author_id=r.get("author_id"),
                    content=r["content"],
                    type=NoteType(r["type"]),
                )
                for r in fetchall(cur)
            ]
