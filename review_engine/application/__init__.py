"""Application layer: interfaces, services, use cases.

Depends only on domain and protocol definitions (DIP).
Infrastructure implements the interfaces (repository, email, in-app, preferences).
"""

from review_engine.application.interfaces import (
    IEmailSender,
    IInAppNotifier,
    ITaskReviewRenderer,
    ITaskReviewRepository,
    IUnsubscribeChecker,
)
from review_engine.application.services import (
    NotificationDispatcher,
    RecipientResolver,
)
from review_engine.application.use_cases.tasks import RunTaskReviewUseCase

__all__ = [
    "IEmailSender",
    "IInAppNotifier",
    "ITaskReviewRenderer",
    "ITaskReviewRepository",
    "IUnsubscribeChecker",
    "NotificationDispatcher",
    "RecipientResolver",
    "RunTaskReviewUseCase",
]
