from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from ..common.datetime_utils import now_local
from ..common.log import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class JobOutcome:
    """What one invocation did: skipped, succeeded with ``result``, or failed with ``error``."""

    skipped: bool = False
    result: Any = None
    error: Optional[str] = None


class GuardedJob:
    """Wraps a job so only one run is in flight per process.

    A call made while the previous run is still going is skipped. Errors are
    logged and kept on ``last_error``; they never reach the scheduler thread
    or the cron endpoint caller.
    """

    def __init__(self, name: str, func: Callable[[], Any], *, description: str = ""):
        self.name = name
        self.description = description
        self._func = func
        self._lock = threading.Lock()
        self._running = False
        self.last_started_at: Optional[datetime] = None
        self.last_finished_at: Optional[datetime] = None
        self.last_result: Any = None
        self.last_error: Optional[str] = None

    @property
    def running(self) -> bool:
        with self._lock:
            return self._running

    def run(self) -> JobOutcome:
        with self._lock:
            if self._running:
                logger.warning("Job %s is still running, skipping this run", self.name)
                return JobOutcome(skipped=True)
            self._running = True
            self.last_started_at = now_local()

        logger.info("Job %s started", self.name)
        try:
            result = self._func()
        except Exception as exc:
            self.last_error = str(exc)
            logger.exception("Job %s failed", self.name)
            return JobOutcome(error=self.last_error)
        else:
            self.last_result = result
            self.last_error = None
            logger.info("Job %s finished: %s", self.name, result)
            return JobOutcome(result=result)
        finally:
            with self._lock:
                self._running = False
                self.last_finished_at = now_local()

    def __call__(self) -> Any:
        # scheduler entry point; skipped and failed runs yield None
        return self.run().result

    def status(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "running": self.running,
            "lastStartedAt": self.last_started_at.isoformat() if self.last_started_at else None,
            "lastFinishedAt": self.last_finished_at.isoformat() if self.last_finished_at else None,
            "lastError": self.last_error,
        }
