"""Application services: recurrence, automation status, partitioning, recipients, dispatch."""

from review_engine.application.services.automation_status import (
    latest_runs_by_check_id,
    target_status,
    target_status_for_task,
)
from review_engine.application.services.notification_dispatcher import (
    NotificationDispatcher,
    build_task_url,
)
from review_engine.application.services.recipient_resolver import RecipientResolver
from review_engine.application.services.recurrence_calculator import (
    add_months,
    next_due_date,
)
from review_engine.application.services.task_partitioning import (
    is_overdue,
    partition_by_target_status,
    select_overdue_tasks,
)

__all__ = [
    "NotificationDispatcher",
    "RecipientResolver",
    "add_months",
    "build_task_url",
    "is_overdue",
    "latest_runs_by_check_id",
    "next_due_date",
    "partition_by_target_status",
    "select_overdue_tasks",
    "target_status",
    "target_status_for_task",
]
