"""Email sender factory: picks the configured backend."""

import httpx

from review_engine.application.interfaces.services import IEmailSender
from review_engine.core.config import Settings
from review_engine.infrastructure.external.email.log_only_sender import (
    LogOnlyEmailSender,
)
from review_engine.infrastructure.external.email.resend_sender import (
    ResendEmailSender,
)
from review_engine.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


def create_email_sender(
    settings: Settings, *, http_client: httpx.AsyncClient | None = None
) -> IEmailSender:
    """Return the IEmailSender for settings.email_backend.

    Raises:
        ValueError: If the backend is not supported or its API key is missing.
    """
    backend = settings.email_backend.lower()
    if backend == "log":
        logger.info("Email backend: log only (no email is delivered)")
        return LogOnlyEmailSender()
    if backend == "resend":
        if settings.resend_api_key is None:
            raise ValueError("RESEND_API_KEY is required when email_backend is 'resend'.")
        logger.info("Email backend: resend")
        return ResendEmailSender(
            settings.resend_api_key.get_secret_value(),
            settings.email_from,
            api_url=settings.resend_api_url,
            http_client=http_client,
            timeout=settings.http_timeout_seconds,
        )
    raise ValueError(f"Unsupported email backend: {settings.email_backend}")
