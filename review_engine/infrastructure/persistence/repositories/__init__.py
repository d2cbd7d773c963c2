"""Persistence repositories. Re-exports for dependency injection."""

from review_engine.infrastructure.persistence.repositories.notification_preference_repo import (
    SqlUnsubscribeChecker,
)
from review_engine.infrastructure.persistence.repositories.task_review_repo import (
    TaskReviewRepository,
)

__all__ = [
    "SqlUnsubscribeChecker",
    "TaskReviewRepository",
]
