"""Log-only email sender for environments without an email provider."""

from __future__ import annotations

import logging

from review_engine.shared.telemetry.logging import get_logger
from review_engine.shared.utils.datetime import utc_now

logger = get_logger(__name__)


class LogOnlyEmailSender:
    """IEmailSender implementation that logs instead of sending email."""

    async def send(self, to: str, subject: str, html: str) -> str | None:
        """Log the email; nothing is delivered and no message id is returned."""
        logger.info("Task review email: would send (subject=%r)", (subject or "")[:80])
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Task review email recipient: %s (at %s)", to, utc_now().isoformat()
            )
        logger.debug("Task review email body (first 500 chars): %s", (html or "")[:500])
        return None
