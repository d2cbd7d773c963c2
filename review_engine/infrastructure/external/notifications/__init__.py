"""In-app notification delivery."""

from review_engine.infrastructure.external.notifications.factory import (
    create_in_app_notifier,
)
from review_engine.infrastructure.external.notifications.log_only_notifier import (
    LogOnlyInAppNotifier,
)
from review_engine.infrastructure.external.notifications.novu_notifier import (
    NovuInAppNotifier,
)

__all__ = ["NovuInAppNotifier", "LogOnlyInAppNotifier", "create_in_app_notifier"]
