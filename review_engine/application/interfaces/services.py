"""Service interfaces (ports) for the application layer.

Protocols define contracts for outbound delivery and preference lookups (DIP).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from review_engine.domain.enums import NotificationCategory

if TYPE_CHECKING:
    from review_engine.application.dtos.task_review import (
        InAppEvent,
        TaskReviewRecipient,
    )


# Email content renderer
class ITaskReviewRenderer(Protocol):
    """Protocol for rendering the task review email for one recipient."""

    def render_email(
        self, recipient: TaskReviewRecipient, task_url: str
    ) -> tuple[str, str]:
        """Return (subject, html body) for the recipient's task status change."""


# Transactional email interface
class IEmailSender(Protocol):
    """Protocol for sending one transactional email."""

    async def send(self, to: str, subject: str, html: str) -> str | None:
        """Send the email; return provider message id. Raises on delivery failure."""


# In-app notification interface
class IInAppNotifier(Protocol):
    """Protocol for triggering in-app notifications in bulk."""

    async def trigger_bulk(self, events: list[InAppEvent]) -> None:
        """Trigger one in-app notification per event. Raises on failure."""


# Unsubscribe preference lookup
class IUnsubscribeChecker(Protocol):
    """Protocol for checking whether a user opted out of a notification category."""

    async def is_unsubscribed(
        self,
        email: str,
        category: NotificationCategory,
        organization_id: str | None = None,
    ) -> bool:
        """Return True when the user must not be emailed for this category."""
