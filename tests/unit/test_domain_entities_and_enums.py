"""Unit tests for domain enums parsing and entity helpers."""

from review_engine.domain.entities import MemberEntity
from review_engine.domain.enums import (
    EvaluationStatus,
    IntegrationCheckStatus,
    TaskFrequency,
    TaskStatus,
)
from review_engine.domain.exceptions import TaskStatusUpdateException


def test_evaluation_status_parse() -> None:
    assert EvaluationStatus.parse("pass") is EvaluationStatus.PASS
    assert EvaluationStatus.parse("FAIL") is EvaluationStatus.FAIL
    assert EvaluationStatus.parse(None) is EvaluationStatus.UNKNOWN
    assert EvaluationStatus.parse("skipped") is EvaluationStatus.UNKNOWN


def test_integration_check_status_parse() -> None:
    assert IntegrationCheckStatus.parse("success") is IntegrationCheckStatus.SUCCESS
    assert IntegrationCheckStatus.parse("error") is IntegrationCheckStatus.UNKNOWN
    assert IntegrationCheckStatus.parse(None) is IntegrationCheckStatus.UNKNOWN


def test_enum_values() -> None:
    assert TaskFrequency.values() == ["daily", "weekly", "monthly", "quarterly", "yearly"]
    assert "failed" in TaskStatus.values()


def test_member_roles_and_notifiable() -> None:
    member = MemberEntity(
        id="m1", user_id="u1", name="Ada", email="ada@example.com", role="owner, admin"
    )
    assert member.roles == ["owner", "admin"]
    assert member.is_notifiable()
    assert not MemberEntity(
        id="m2", user_id="u2", name=None, email="b@example.com", deactivated=True
    ).is_notifiable()


def test_review_candidate(make_task) -> None:
    assert make_task().is_review_candidate()
    assert not make_task(status=TaskStatus.TODO).is_review_candidate()
    assert not make_task(frequency=None).is_review_candidate()


def test_task_status_update_exception_details() -> None:
    exc = TaskStatusUpdateException("failed", 3, "deadlock")
    assert exc.error_code == "TASK_STATUS_UPDATE_ERROR"
    assert exc.details == {"status": "failed", "task_count": 3, "reason": "deadlock"}
    assert "3 task(s)" in str(exc)
