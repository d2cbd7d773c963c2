"""Run the recurring task review: re-open overdue done tasks and notify the organization."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from review_engine.application.dtos.task_review import (
    StatusPartition,
    TaskReviewRunResult,
)
from review_engine.application.services.task_partitioning import (
    partition_by_target_status,
    select_overdue_tasks,
)
from review_engine.domain.entities import TaskEntity
from review_engine.domain.enums import TaskStatus
from review_engine.shared.telemetry.logging import get_logger
from review_engine.shared.telemetry.tracing import (
    add_span_attributes,
    set_span_error,
    traced,
)
from review_engine.shared.utils.datetime import utc_now
from review_engine.shared.utils.generators import generate_cuid

if TYPE_CHECKING:
    from review_engine.application.interfaces.repositories import (
        ITaskReviewRepository,
    )
    from review_engine.application.services.notification_dispatcher import (
        NotificationDispatcher,
    )
    from review_engine.application.services.recipient_resolver import (
        RecipientResolver,
    )

logger = get_logger(__name__)

MESSAGE_NO_OVERDUE = "No tasks found past their computed review deadline"
MESSAGE_ALL_PASSING = (
    "All overdue tasks have passing automations, no status changes needed"
)
MESSAGE_UPDATE_FAILED = "Failed to update tasks past their review deadline"


class RunTaskReviewUseCase:
    """Re-evaluates done recurring tasks whose review date has passed.

    Loads candidate tasks, keeps those past their next due date, and splits
    them by what their automations say: kept done, back to todo (no
    automations) or failed (a configured automation is not passing). The
    todo and failed batches are written as two independent bulk updates;
    a failure in either ends the run as failed. Re-running recomputes the
    same target statuses, so a partially applied run is repaired by the next
    one. Recipients of the changed tasks are then notified; delivery errors
    are reported in the result but never fail the run.
    """

    def __init__(
        self,
        task_repo: "ITaskReviewRepository",
        recipient_resolver: "RecipientResolver",
        dispatcher: "NotificationDispatcher",
    ) -> None:
        self._task_repo = task_repo
        self._recipient_resolver = recipient_resolver
        self._dispatcher = dispatcher

    @traced("task_review.run")
    async def run(
        self, now: datetime | None = None, run_id: str | None = None
    ) -> TaskReviewRunResult:
        """Run one review pass.

        Args:
            now: Reference instant for deadlines (defaults to current UTC time).
            run_id: Identifier used in logs (generated when omitted).

        Returns:
            TaskReviewRunResult with counts, or success=False and error when
            persisting status changes failed.
        """
        now = now or utc_now()
        run_id = run_id or generate_cuid()

        candidates = await self._task_repo.list_recurring_done_tasks()
        overdue = select_overdue_tasks(candidates, now)
        logger.info(
            "[%s] Found %d tasks past their computed review deadline (%d candidates)",
            run_id,
            len(overdue),
            len(candidates),
        )

        partition = partition_by_target_status(overdue)
        logger.info(
            '[%s] %d tasks -> "todo", %d tasks -> "failed", %d tasks kept as "done"',
            run_id,
            len(partition.to_todo),
            len(partition.to_failed),
            len(partition.kept_done),
        )
        for task in partition.kept_done:
            logger.info(
                '[%s] Task "%s" (%s) kept as "done" - all automations passing',
                run_id,
                task.title,
                task.id,
            )
        add_span_attributes(
            run_id=run_id,
            tasks_checked=len(overdue),
            to_todo=len(partition.to_todo),
            to_failed=len(partition.to_failed),
            kept_done=len(partition.kept_done),
        )

        if not partition.to_todo and not partition.to_failed:
            return TaskReviewRunResult(
                run_id=run_id,
                success=True,
                total_tasks_checked=len(overdue),
                updated_to_todo=0,
                updated_to_failed=0,
                tasks_kept_done=len(partition.kept_done),
                message=MESSAGE_NO_OVERDUE if not overdue else MESSAGE_ALL_PASSING,
            )

        todo_count = 0
        failed_count = 0
        try:
            todo_count = await self._persist(partition.to_todo, TaskStatus.TODO)
            failed_count = await self._persist(partition.to_failed, TaskStatus.FAILED)
        except Exception as e:
            logger.error("[%s] Failed to update overdue tasks: %s", run_id, e)
            set_span_error(e)
            return TaskReviewRunResult(
                run_id=run_id,
                success=False,
                total_tasks_checked=len(overdue),
                updated_to_todo=todo_count,
                updated_to_failed=failed_count,
                tasks_kept_done=len(partition.kept_done),
                message=MESSAGE_UPDATE_FAILED,
                error=str(e),
            )
        self._log_updates(run_id, partition)

        recipients = self._recipient_resolver.resolve(partition)
        to_notify, skipped = await self._recipient_resolver.filter_subscribed(
            recipients
        )
        logger.info(
            "[%s] Notifying %d recipient(s) (%d unsubscribed)",
            run_id,
            len(to_notify),
            skipped,
        )
        outcome = await self._dispatcher.dispatch(to_notify)

        logger.info(
            '[%s] Successfully updated %d tasks to "todo" and %d tasks to "failed"',
            run_id,
            todo_count,
            failed_count,
        )
        return TaskReviewRunResult(
            run_id=run_id,
            success=True,
            total_tasks_checked=len(overdue),
            updated_to_todo=todo_count,
            updated_to_failed=failed_count,
            tasks_kept_done=len(partition.kept_done),
            message=(
                f'Updated {todo_count} to "todo", {failed_count} to "failed" '
                f"({len(partition.kept_done)} kept as done)"
            ),
            updated_task_ids=tuple(task.id for task in partition.changed),
            notifications_sent=outcome.emails_sent,
            notifications_failed=outcome.emails_failed,
            notifications_skipped=skipped,
            in_app_delivered=outcome.in_app_delivered if to_notify else None,
        )

    async def _persist(self, tasks: list[TaskEntity], status: TaskStatus) -> int:
        """Write one status bucket; empty buckets issue no statement."""
        if not tasks:
            return 0
        return await self._task_repo.bulk_set_status([t.id for t in tasks], status)

    @staticmethod
    def _log_updates(run_id: str, partition: StatusPartition) -> None:
        for task in partition.to_todo:
            logger.info(
                '[%s] Updated task "%s" (%s) to "todo" - no automations - org "%s" - frequency %s',
                run_id,
                task.title,
                task.id,
                task.organization.name,
                task.frequency.value if task.frequency else None,
            )
        for task in partition.to_failed:
            logger.info(
                '[%s] Updated task "%s" (%s) to "failed" - automations failing - org "%s" - frequency %s',
                run_id,
                task.title,
                task.id,
                task.organization.name,
                task.frequency.value if task.frequency else None,
            )
