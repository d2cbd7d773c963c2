"""Email and in-app fan-out for a task review run.

Each recipient gets one email; sends run concurrently and every send is
awaited regardless of the others' outcome. A failed email is logged with the
user and task id and counted, never raised. After the email phase a single
bulk in-app trigger covers all recipients; its failure is reported on the
outcome without failing the run.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

from review_engine.application.dtos.task_review import (
    DispatchOutcome,
    InAppEvent,
    TaskReviewRecipient,
)
from review_engine.shared.telemetry.logging import get_logger
from review_engine.shared.telemetry.tracing import add_span_attributes, traced

if TYPE_CHECKING:
    from review_engine.application.interfaces.services import (
        IEmailSender,
        IInAppNotifier,
        ITaskReviewRenderer,
    )

logger = get_logger(__name__)

DEFAULT_MAX_CONCURRENCY = 10


def build_task_url(app_url: str, organization_id: str, task_id: str) -> str:
    """Return the deep link to a task in the web app."""
    return f"{app_url.rstrip('/')}/{organization_id}/tasks/{task_id}"


class NotificationDispatcher:
    """Sends one email and one in-app event per recipient, isolating failures."""

    def __init__(
        self,
        email_sender: "IEmailSender",
        in_app_notifier: "IInAppNotifier",
        renderer: "ITaskReviewRenderer",
        app_url: str,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
    ) -> None:
        self._email_sender = email_sender
        self._in_app_notifier = in_app_notifier
        self._renderer = renderer
        self._app_url = app_url
        self._max_concurrency = max(1, max_concurrency)

    def _task_url(self, recipient: TaskReviewRecipient) -> str:
        return build_task_url(
            self._app_url, recipient.task.organization_id, recipient.task.id
        )

    @traced("task_review.dispatch")
    async def dispatch(self, recipients: list[TaskReviewRecipient]) -> DispatchOutcome:
        """Send email to every recipient, then trigger in-app notifications in bulk."""
        if not recipients:
            return DispatchOutcome(emails_sent=0, emails_failed=0, in_app_delivered=True)

        semaphore = asyncio.Semaphore(self._max_concurrency)

        async def send_one(recipient: TaskReviewRecipient) -> bool:
            async with semaphore:
                return await self._send_email(recipient)

        results = await asyncio.gather(*(send_one(r) for r in recipients))
        failed_keys = tuple(
            r.key for r, ok in zip(recipients, results, strict=True) if not ok
        )
        sent = len(recipients) - len(failed_keys)

        in_app_delivered = await self._trigger_in_app(recipients)

        add_span_attributes(
            emails_sent=sent,
            emails_failed=len(failed_keys),
            in_app_delivered=in_app_delivered,
        )
        return DispatchOutcome(
            emails_sent=sent,
            emails_failed=len(failed_keys),
            in_app_delivered=in_app_delivered,
            failed_recipient_keys=failed_keys,
        )

    async def _send_email(self, recipient: TaskReviewRecipient) -> bool:
        """Send one email. Returns False (after logging) on any error."""
        try:
            subject, html = self._renderer.render_email(
                recipient, self._task_url(recipient)
            )
            message_id = await self._email_sender.send(recipient.email, subject, html)
        except Exception as e:
            logger.error(
                "Failed to send task review email to user %s for task %s: %s",
                recipient.user_id,
                recipient.task.id,
                e,
            )
            return False
        logger.info(
            "Task review email sent to user %s for task %s (id=%s)",
            recipient.user_id,
            recipient.task.id,
            message_id,
        )
        return True

    def build_in_app_event(self, recipient: TaskReviewRecipient) -> InAppEvent:
        """Return the in-app event for a recipient."""
        task = recipient.task
        payload: dict[str, Any] = {
            "email": recipient.email,
            "userName": recipient.name,
            "taskName": task.title,
            "organizationName": task.organization.name,
            "organizationId": task.organization_id,
            "taskId": task.id,
            "taskUrl": self._task_url(recipient),
            "targetStatus": recipient.target_status.value,
        }
        return InAppEvent(
            subscriber_id=recipient.subscriber_id,
            email=recipient.email,
            payload=payload,
        )

    async def _trigger_in_app(self, recipients: list[TaskReviewRecipient]) -> bool:
        """Trigger the bulk in-app call. Returns False (after logging) on any error."""
        events = [self.build_in_app_event(r) for r in recipients]
        try:
            await self._in_app_notifier.trigger_bulk(events)
        except Exception as e:
            logger.error(
                "Failed to trigger %d in-app task review notification(s): %s",
                len(events),
                e,
            )
            return False
        logger.info("Triggered %d in-app task review notification(s)", len(events))
        return True
