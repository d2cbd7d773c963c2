"""Application interfaces (ports): repository and service protocols.

Define contracts for infrastructure implementations (DIP).
No runtime imports from review_engine.infrastructure.
"""

from review_engine.application.interfaces.repositories import ITaskReviewRepository
from review_engine.application.interfaces.services import (
    IEmailSender,
    IInAppNotifier,
    ITaskReviewRenderer,
    IUnsubscribeChecker,
)

__all__ = [
    "IEmailSender",
    "IInAppNotifier",
    "ITaskReviewRenderer",
    "ITaskReviewRepository",
    "IUnsubscribeChecker",
]
