"""Pytest configuration and fixtures for the review engine.

Entity factories build in-memory tasks for service and use case tests.
The db_session fixture uses review_engine.infrastructure.persistence.database
and skips when DATABASE_URL is not set.
"""

import os
from collections.abc import Callable
from datetime import UTC, datetime
from itertools import count

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

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

_ids = count(1)


def _next_id(prefix: str) -> str:
    return f"{prefix}_{next(_ids)}"


@pytest.fixture
def make_member() -> Callable[..., MemberEntity]:
    """Factory for notifiable members; override fields via kwargs."""

    def _make(**kwargs) -> MemberEntity:
        user_id = kwargs.pop("user_id", _next_id("usr"))
        defaults = {
            "id": _next_id("mem"),
            "user_id": user_id,
            "name": f"User {user_id}",
            "email": f"{user_id}@example.com",
            "role": "employee",
        }
        defaults.update(kwargs)
        return MemberEntity(**defaults)

    return _make


@pytest.fixture
def make_org() -> Callable[..., OrganizationEntity]:
    """Factory for organizations with the given members."""

    def _make(members: list[MemberEntity] | None = None, **kwargs) -> OrganizationEntity:
        defaults = {"id": _next_id("org"), "name": "Acme"}
        defaults.update(kwargs)
        return OrganizationEntity(members=list(members or []), **defaults)

    return _make


@pytest.fixture
def make_task(make_org) -> Callable[..., TaskEntity]:
    """Factory for done monthly tasks reviewed on 2024-01-01."""

    def _make(**kwargs) -> TaskEntity:
        defaults = {
            "id": _next_id("tsk"),
            "title": "Review access",
            "status": TaskStatus.DONE,
            "review_date": datetime(2024, 1, 1, tzinfo=UTC),
            "frequency": TaskFrequency.MONTHLY,
        }
        defaults.update(kwargs)
        if "organization" not in defaults:
            defaults["organization"] = make_org()
        return TaskEntity(**defaults)

    return _make


@pytest.fixture
def custom_check() -> Callable[..., CustomAutomationCheck]:
    """Factory for a custom automation whose runs are given newest-first."""

    def _make(*statuses: EvaluationStatus | None) -> CustomAutomationCheck:
        return CustomAutomationCheck(
            id=_next_id("aut"), runs=[AutomationRun(s) for s in statuses]
        )

    return _make


@pytest.fixture
def integration_run() -> Callable[..., IntegrationCheckRun]:
    """Factory for integration check runs (created_at defaults to 2024-01-01 UTC)."""

    def _make(
        check_id: str,
        status: IntegrationCheckStatus,
        created_at: datetime | None = None,
    ) -> IntegrationCheckRun:
        return IntegrationCheckRun(
            check_id=check_id,
            status=status,
            created_at=created_at or datetime(2024, 1, 1, tzinfo=UTC),
        )

    return _make


@pytest.fixture
async def db_session() -> AsyncSession:
    """Database session for repository tests. Rolls back after test.

    Skips (pytest.skip) when DATABASE_URL is not set. Use
    @pytest.mark.requires_db on tests that need it; run without DB via:
    pytest -m 'not requires_db'.
    """
    if not os.environ.get("DATABASE_URL"):
        pytest.skip("Postgres not configured: set DATABASE_URL")
    from review_engine.infrastructure.persistence import database

    factory = database.get_session_factory()
    async with factory() as session:
        yield session
        await session.rollback()
    await database.dispose_engine()
