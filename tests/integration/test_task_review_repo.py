"""Task review repository integration tests. Require Postgres; session is rolled back after each test."""

from datetime import UTC, datetime, timedelta

import pytest

from review_engine.domain.enums import EvaluationStatus, TaskStatus
from review_engine.infrastructure.persistence.models import (
    EvidenceAutomation,
    EvidenceAutomationRun,
    Member,
    Organization,
    Task,
    User,
)
from review_engine.infrastructure.persistence.repositories import TaskReviewRepository
from review_engine.shared.utils.generators import generate_cuid


async def _seed(db_session) -> str:
    """Insert an org, member and done monthly task with automations; return the task id."""
    org = Organization(name="Repo Test Org")
    user = User(email=f"{generate_cuid()}@example.com", name="Ada")
    db_session.add_all([org, user])
    await db_session.flush()
    member = Member(organization_id=org.id, user_id=user.id, role="owner")
    db_session.add(member)
    await db_session.flush()
    task = Task(
        organization_id=org.id,
        title="Rotate keys",
        status=TaskStatus.DONE.value,
        review_date=datetime(2024, 1, 1, tzinfo=UTC),
        frequency="monthly",
        assignee_id=member.id,
    )
    db_session.add(task)
    await db_session.flush()
    automation = EvidenceAutomation(task_id=task.id, name="MFA", is_enabled=True)
    disabled = EvidenceAutomation(task_id=task.id, name="Old", is_enabled=False)
    db_session.add_all([automation, disabled])
    await db_session.flush()
    now = datetime.now(UTC)
    db_session.add_all(
        [
            EvidenceAutomationRun(
                evidence_automation_id=automation.id,
                evaluation_status="fail",
                created_at=now - timedelta(days=2),
            ),
            EvidenceAutomationRun(
                evidence_automation_id=automation.id,
                evaluation_status="pass",
                created_at=now,
            ),
        ]
    )
    await db_session.flush()
    task_id = task.id
    db_session.expire_all()
    return task_id


@pytest.mark.requires_db
async def test_list_recurring_done_tasks_loads_automations(db_session) -> None:
    """Enabled automations only, with the newest run's evaluation."""
    task_id = await _seed(db_session)
    repo = TaskReviewRepository(db_session)

    tasks = {t.id: t for t in await repo.list_recurring_done_tasks()}

    task = tasks[task_id]
    assert task.organization.name == "Repo Test Org"
    assert [m.name for m in task.organization.members] == ["Ada"]
    assert task.assignee is not None
    assert len(task.custom_checks) == 1
    assert task.custom_checks[0].latest_run.evaluation_status is EvaluationStatus.PASS


@pytest.mark.requires_db
async def test_bulk_set_status_updates_rows(db_session) -> None:
    """bulk_set_status commits, so seeded rows persist (use a test DB for CI)."""
    task_id = await _seed(db_session)
    repo = TaskReviewRepository(db_session)

    assert await repo.bulk_set_status([task_id], TaskStatus.TODO) == 1
    assert await repo.bulk_set_status([], TaskStatus.FAILED) == 0
