"""Log-only in-app notifier for environments without Novu."""

from __future__ import annotations

from review_engine.application.dtos.task_review import InAppEvent
from review_engine.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


class LogOnlyInAppNotifier:
    """IInAppNotifier implementation that logs instead of triggering notifications."""

    async def trigger_bulk(self, events: list[InAppEvent]) -> None:
        if not events:
            logger.info("In-app notify: no events, skipping trigger")
            return
        logger.info("In-app notify: would trigger %d event(s)", len(events))
        for event in events:
            logger.debug(
                "In-app notify subscriber=%s task=%s",
                event.subscriber_id,
                event.payload.get("taskId"),
            )
