"""Task review repository: load recurring done tasks, bulk-write status."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from review_engine.domain.entities import (
    AutomationRun,
    CustomAutomationCheck,
    IntegrationCheckRun,
    MemberEntity,
    OrganizationEntity,
    TaskEntity,
)
from review_engine.domain.enums import (
    EvaluationStatus,
    IntegrationCheckStatus,
    TaskFrequency,
    TaskStatus,
)
from review_engine.domain.exceptions import TaskStatusUpdateException
from review_engine.infrastructure.persistence.models.organization import (
    Member,
    Organization,
)
from review_engine.infrastructure.persistence.models.task import (
    EvidenceAutomation,
    EvidenceAutomationRun,
    Task,
)
from review_engine.shared.telemetry.logging import get_logger
from review_engine.shared.utils.datetime import ensure_utc

logger = get_logger(__name__)


def _member_to_entity(m: Member) -> MemberEntity:
    """Map Member ORM (with user loaded) to MemberEntity."""
    return MemberEntity(
        id=m.id,
        user_id=m.user.id if m.user else None,
        name=m.user.name if m.user else None,
        email=m.user.email if m.user else None,
        role=m.role or "",
        deactivated=m.deactivated,
        is_platform_admin=bool(m.user and m.user.is_platform_admin),
    )


def _parse_frequency(t: Task) -> TaskFrequency | None:
    if t.frequency is None:
        return None
    try:
        return TaskFrequency(t.frequency)
    except ValueError:
        logger.warning("Task %s has unknown frequency %r; skipping", t.id, t.frequency)
        return None


def _to_entity(
    t: Task, latest_evaluations: dict[str, str | None]
) -> TaskEntity:
    """Map Task ORM (relationships loaded) to TaskEntity."""
    custom_checks = [
        CustomAutomationCheck(
            id=a.id,
            runs=(
                [AutomationRun(EvaluationStatus.parse(latest_evaluations[a.id]))]
                if a.id in latest_evaluations
                else []
            ),
        )
        for a in t.evidence_automations
    ]
    integration_runs = [
        IntegrationCheckRun(
            check_id=r.check_id,
            status=IntegrationCheckStatus.parse(r.status),
            created_at=ensure_utc(r.created_at),
        )
        for r in t.integration_check_runs
    ]
    return TaskEntity(
        id=t.id,
        title=t.title,
        status=TaskStatus(t.status),
        review_date=ensure_utc(t.review_date),
        frequency=_parse_frequency(t),
        organization=OrganizationEntity(
            id=t.organization.id,
            name=t.organization.name,
            members=[_member_to_entity(m) for m in t.organization.members],
        ),
        assignee=_member_to_entity(t.assignee) if t.assignee else None,
        custom_checks=custom_checks,
        integration_runs=integration_runs,
    )


class TaskReviewRepository:
    """Task review repository. Implements ITaskReviewRepository.

    Each bulk_set_status call commits on its own, so the todo and failed
    batches of a run are independent statements.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def list_recurring_done_tasks(self) -> list[TaskEntity]:
        """Return done tasks with review_date and frequency set, automations attached."""
        stmt = (
            select(Task)
            .where(
                Task.status == TaskStatus.DONE.value,
                Task.review_date.is_not(None),
                Task.frequency.is_not(None),
            )
            .options(
                selectinload(Task.organization)
                .selectinload(Organization.members)
                .selectinload(Member.user),
                selectinload(Task.assignee).selectinload(Member.user),
                selectinload(
                    Task.evidence_automations.and_(
                        EvidenceAutomation.is_enabled.is_(True)
                    )
                ),
                selectinload(Task.integration_check_runs),
            )
        )
        result = await self.db.execute(stmt)
        tasks = list(result.scalars().all())
        automation_ids = [a.id for t in tasks for a in t.evidence_automations]
        latest = await self._latest_evaluations(automation_ids)
        return [_to_entity(t, latest) for t in tasks]

    async def _latest_evaluations(
        self, automation_ids: Sequence[str]
    ) -> dict[str, str | None]:
        """Return evaluation_status of the newest run per automation id."""
        if not automation_ids:
            return {}
        ranked = (
            select(
                EvidenceAutomationRun.evidence_automation_id,
                EvidenceAutomationRun.evaluation_status,
                func.row_number()
                .over(
                    partition_by=EvidenceAutomationRun.evidence_automation_id,
                    order_by=EvidenceAutomationRun.created_at.desc(),
                )
                .label("rn"),
            )
            .where(EvidenceAutomationRun.evidence_automation_id.in_(automation_ids))
            .subquery()
        )
        stmt = select(ranked.c.evidence_automation_id, ranked.c.evaluation_status).where(
            ranked.c.rn == 1
        )
        result = await self.db.execute(stmt)
        return {row[0]: row[1] for row in result.fetchall()}

    async def bulk_set_status(self, task_ids: Sequence[str], status: TaskStatus) -> int:
        """Set status on task_ids and commit; return rows updated.

        Raises:
            TaskStatusUpdateException: the update or commit failed (rolled back).
        """
        if not task_ids:
            return 0
        stmt = (
            update(Task)
            .where(Task.id.in_(list(task_ids)))
            .values(status=status.value)
            .execution_options(synchronize_session=False)
        )
        try:
            result = await self.db.execute(stmt)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise TaskStatusUpdateException(status.value, len(task_ids), str(e)) from e
        return result.rowcount
