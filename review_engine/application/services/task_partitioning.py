"""Overdue task selection and partitioning by target status."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from review_engine.application.dtos.task_review import StatusPartition
from review_engine.application.services.automation_status import (
    target_status_for_task,
)
from review_engine.application.services.recurrence_calculator import next_due_date
from review_engine.domain.entities import TaskEntity
from review_engine.domain.enums import TaskStatus


def is_overdue(task: TaskEntity, now: datetime) -> bool:
    """Return whether the task's next review date is at or before now.

    Tasks without review_date or frequency are never overdue.
    """
    if task.review_date is None or task.frequency is None:
        return False
    return next_due_date(task.review_date, task.frequency) <= now


def select_overdue_tasks(
    tasks: Iterable[TaskEntity], now: datetime
) -> list[TaskEntity]:
    """Return done recurring tasks past their computed review deadline, in input order."""
    return [
        task for task in tasks if task.is_review_candidate() and is_overdue(task, now)
    ]


def partition_by_target_status(tasks: Iterable[TaskEntity]) -> StatusPartition:
    """Group tasks into kept_done / to_todo / to_failed by their automations."""
    kept_done: list[TaskEntity] = []
    to_todo: list[TaskEntity] = []
    to_failed: list[TaskEntity] = []
    buckets = {
        TaskStatus.DONE: kept_done,
        TaskStatus.TODO: to_todo,
        TaskStatus.FAILED: to_failed,
    }
    for task in tasks:
        buckets[target_status_for_task(task)].append(task)
    return StatusPartition(kept_done=kept_done, to_todo=to_todo, to_failed=to_failed)
