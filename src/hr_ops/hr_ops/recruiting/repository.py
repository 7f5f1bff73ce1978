from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import CandidateStatus, InterviewStatus
from .model import Candidate, CandidateNote, Interview, NewCandidate


class CandidateRepository(Protocol):
    def create(self, candidate: NewCandidate) -> int:
        raise NotImplementedError

    def get_by_id(self, candidate_id: int) -> Optional[Candidate]:
        raise NotImplementedError

    def list_candidates(self, *, status: Optional[CandidateStatus] = None, limit: int = 200) -> Sequence[Candidate]:
        raise NotImplementedError

    def update_status(self, candidate_id: int, status: CandidateStatus) -> bool:
        raise NotImplementedError

    def update_tags(self, candidate_id: int, tags: Sequence[str]) -> bool:
        raise NotImplementedError

    def assign(self, candidate_id: int, user_id: Optional[int]) -> bool:
        raise NotImplementedError


class InterviewRepository(Protocol):
    def get_by_id(self, interview_id: int) -> Optional[Interview]:
        raise NotImplementedError

    def list_scheduled_before(self, moment: datetime) -> Sequence[Interview]:
        """SCHEDULED interviews whose time is earlier than ``moment``."""
        raise NotImplementedError

    def list_scheduled_between(self, start: datetime, end: datetime) -> Sequence[Interview]:
        raise NotImplementedError

    def update_status(self, interview_id: int, status: InterviewStatus, *, notes: Optional[str] = None) -> bool:
        raise NotImplementedError


class CandidateNoteRepository(Protocol):
    def create(self, note: CandidateNote) -> int:
        raise NotImplementedError

    def list_for_candidate(self, candidate_id: int) -> Sequence[CandidateNote]:
        raise NotImplementedError
