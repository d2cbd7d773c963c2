"""Application DTOs (no ORM dependency)."""

from review_engine.application.dtos.task_review import (
    DispatchOutcome,
    InAppEvent,
    StatusPartition,
    TaskReviewRecipient,
    TaskReviewRunResult,
)

__all__ = [
    "DispatchOutcome",
    "InAppEvent",
    "StatusPartition",
    "TaskReviewRecipient",
    "TaskReviewRunResult",
]
