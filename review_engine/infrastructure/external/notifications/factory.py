"""In-app notifier factory: picks the configured backend."""

import httpx

from review_engine.application.interfaces.services import IInAppNotifier
from review_engine.core.config import Settings
from review_engine.infrastructure.external.notifications.log_only_notifier import (
    LogOnlyInAppNotifier,
)
from review_engine.infrastructure.external.notifications.novu_notifier import (
    NovuInAppNotifier,
)
from review_engine.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


def create_in_app_notifier(
    settings: Settings, *, http_client: httpx.AsyncClient | None = None
) -> IInAppNotifier:
    """Return the IInAppNotifier for settings.in_app_backend.

    Raises:
        ValueError: If the backend is not supported or its API key is missing.
    """
    backend = settings.in_app_backend.lower()
    if backend == "log":
        logger.info("In-app backend: log only")
        return LogOnlyInAppNotifier()
    if backend == "novu":
        if settings.novu_api_key is None:
            raise ValueError("NOVU_API_KEY is required when in_app_backend is 'novu'.")
        logger.info("In-app backend: novu (workflow=%s)", settings.novu_workflow_id)
        return NovuInAppNotifier(
            settings.novu_api_key.get_secret_value(),
            settings.novu_workflow_id,
            api_url=settings.novu_api_url,
            http_client=http_client,
            timeout=settings.http_timeout_seconds,
        )
    raise ValueError(f"Unsupported in-app backend: {settings.in_app_backend}")
