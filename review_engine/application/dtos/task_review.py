"""DTOs for the recurring task review run (no dependency on ORM)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from review_engine.domain.entities import TaskEntity
from review_engine.domain.enums import TaskStatus


@dataclass(frozen=True)
class StatusPartition:
    """Overdue tasks grouped by the status their automations call for.

    Lists are disjoint: every overdue task is in exactly one of them.
    """

    kept_done: list[TaskEntity] = field(default_factory=list)
    to_todo: list[TaskEntity] = field(default_factory=list)
    to_failed: list[TaskEntity] = field(default_factory=list)

    @property
    def changed(self) -> list[TaskEntity]:
        """Tasks whose status changes (to_todo followed by to_failed)."""
        return [*self.to_todo, *self.to_failed]

    @property
    def total(self) -> int:
        """Total number of overdue tasks partitioned."""
        return len(self.kept_done) + len(self.to_todo) + len(self.to_failed)


@dataclass(frozen=True)
class TaskReviewRecipient:
    """One (user, task) notification target. Unique on (user_id, task.id)."""

    user_id: str
    email: str
    name: str
    task: TaskEntity
    target_status: TaskStatus

    @property
    def key(self) -> tuple[str, str]:
        """Dedup key for a run."""
        return (self.user_id, self.task.id)

    @property
    def subscriber_id(self) -> str:
        """In-app subscriber key (one inbox per user per organization)."""
        return f"{self.user_id}-{self.task.organization_id}"


@dataclass(frozen=True)
class InAppEvent:
    """One event of the in-app bulk trigger."""

    subscriber_id: str
    email: str
    payload: dict[str, Any]


@dataclass(frozen=True)
class DispatchOutcome:
    """Per-run delivery summary from the notification dispatcher."""

    emails_sent: int
    emails_failed: int
    in_app_delivered: bool
    failed_recipient_keys: tuple[tuple[str, str], ...] = ()


@dataclass(frozen=True)
class TaskReviewRunResult:
    """Result of one task review invocation (value object, logged and returned)."""

    run_id: str
    success: bool
    total_tasks_checked: int
    updated_to_todo: int
    updated_to_failed: int
    tasks_kept_done: int
    message: str
    updated_task_ids: tuple[str, ...] = ()
    notifications_sent: int = 0
    notifications_failed: int = 0
    notifications_skipped: int = 0
    in_app_delivered: bool | None = None
    """None when no in-app call was made (no recipients)."""
    error: str | None = None
