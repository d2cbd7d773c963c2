"""Infrastructure exceptions for outbound notification delivery.

Delivery errors extend ReviewEngineException so the dispatcher can log
them per recipient with a consistent code and context.
"""

from review_engine.domain.exceptions import ReviewEngineException


class NotificationDeliveryException(ReviewEngineException):
    """Base exception for notification delivery failures."""


class EmailDeliveryException(NotificationDeliveryException):
    """Email provider rejected the message or could not be reached."""

    def __init__(self, to: str, reason: str, status_code: int | None = None) -> None:
        super().__init__(
            f"Failed to deliver email to {to}: {reason}",
            "EMAIL_DELIVERY_ERROR",
            {"to": to, "reason": reason, "status_code": status_code},
        )


class InAppDeliveryException(NotificationDeliveryException):
    """In-app notification provider rejected the bulk trigger or could not be reached."""

    def __init__(
        self, event_count: int, reason: str, status_code: int | None = None
    ) -> None:
        super().__init__(
            f"Failed to trigger {event_count} in-app notification(s): {reason}",
            "IN_APP_DELIVERY_ERROR",
            {"event_count": event_count, "reason": reason, "status_code": status_code},
        )
