from __future__ import annotations

from ..common.log import get_logger
from ..core.enums import EmailStatus
from .model import EmailMessage
from .repository import EmailLogRepository

logger = get_logger(__name__)


class EmailOutbox:
    """Queues outgoing mail in ``email_log``.

    Delivery is handled by whatever relay reads the queue; callers only see a
    failure when the message could not be stored.
    """

    def __init__(self, log: EmailLogRepository, *, enabled: bool = True):
        self._log = log
        self._enabled = enabled

    def send(self, message: EmailMessage) -> int:
        if not message.to:
            raise ValueError(f"Email '{message.template}' has no recipient")
        if not self._enabled:
            logger.info("Email disabled, skipping %s to %s", message.template, message.to)
            return self._log.record(message, status=EmailStatus.FAILED, error="email disabled")
        email_id = self._log.record(message, status=EmailStatus.QUEUED)
        logger.info("Queued %s email to %s (id=%s)", message.template, message.to, email_id)
        return email_id
