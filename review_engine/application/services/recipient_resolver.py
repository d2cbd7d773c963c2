"""Notification audience for tasks whose status changed in a review run."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from review_engine.application.dtos.task_review import (
    StatusPartition,
    TaskReviewRecipient,
)
from review_engine.domain.entities import MemberEntity, TaskEntity
from review_engine.domain.enums import NotificationCategory, TaskStatus
from review_engine.shared.telemetry.logging import get_logger

if TYPE_CHECKING:
    from review_engine.application.interfaces.services import IUnsubscribeChecker

logger = get_logger(__name__)

TASK_REVIEW_CATEGORY = NotificationCategory.TASK_REMINDERS


class RecipientResolver:
    """Builds the deduplicated (user, task) recipient list for a run.

    Recipients are the organization's notifiable members plus the task
    assignee. A user reachable through several membership records is
    recorded once per task.
    """

    def __init__(
        self,
        unsubscribe_checker: "IUnsubscribeChecker",
        category: NotificationCategory = TASK_REVIEW_CATEGORY,
    ) -> None:
        self._unsubscribe_checker = unsubscribe_checker
        self._category = category

    def resolve(self, partition: StatusPartition) -> list[TaskReviewRecipient]:
        """Return one recipient per (user_id, task_id) for to_todo and to_failed tasks."""
        failed_ids = {task.id for task in partition.to_failed}
        recipients: dict[tuple[str, str], TaskReviewRecipient] = {}
        for task in partition.changed:
            status = TaskStatus.FAILED if task.id in failed_ids else TaskStatus.TODO
            candidates = list(task.organization.members)
            if task.assignee is not None:
                candidates.append(task.assignee)
            for member in candidates:
                self._add(recipients, member, task, status)
        return list(recipients.values())

    @staticmethod
    def _add(
        recipients: dict[tuple[str, str], TaskReviewRecipient],
        member: MemberEntity,
        task: TaskEntity,
        status: TaskStatus,
    ) -> None:
        if not member.is_notifiable():
            return
        key = (member.user_id, task.id)
        if key in recipients:
            return
        recipients[key] = TaskReviewRecipient(
            user_id=member.user_id,
            email=member.email,
            name=(member.name or "").strip() or member.email,
            task=task,
            target_status=status,
        )

    async def filter_subscribed(
        self, recipients: list[TaskReviewRecipient]
    ) -> tuple[list[TaskReviewRecipient], int]:
        """Drop recipients unsubscribed from task review emails.

        A failed preference lookup counts as subscribed so a broken lookup
        never silently drops notifications.

        Returns:
            (recipients to notify, number skipped as unsubscribed)
        """
        results = await asyncio.gather(
            *(
                self._unsubscribe_checker.is_unsubscribed(
                    r.email, self._category, r.task.organization_id
                )
                for r in recipients
            ),
            return_exceptions=True,
        )
        kept: list[TaskReviewRecipient] = []
        skipped = 0
        for recipient, outcome in zip(recipients, results, strict=True):
            if isinstance(outcome, BaseException):
                logger.warning(
                    "Unsubscribe lookup failed for user %s (task %s), sending anyway: %s",
                    recipient.user_id,
                    recipient.task.id,
                    outcome,
                )
                kept.append(recipient)
            elif outcome:
                logger.info(
                    "Skipping notification: user %s is unsubscribed from %s",
                    recipient.user_id,
                    self._category.value,
                )
                skipped += 1
            else:
                kept.append(recipient)
        return kept, skipped
