"""Unit tests for RunTaskReviewUseCase: end-to-end runs over in-memory ports."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

from review_engine.application.services.notification_dispatcher import (
    NotificationDispatcher,
)
from review_engine.application.services.recipient_resolver import RecipientResolver
from review_engine.application.use_cases.tasks.run_task_review import (
    MESSAGE_ALL_PASSING,
    MESSAGE_NO_OVERDUE,
    MESSAGE_UPDATE_FAILED,
    RunTaskReviewUseCase,
)
from review_engine.domain.enums import (
    EvaluationStatus,
    IntegrationCheckStatus,
    TaskStatus,
)
from review_engine.domain.exceptions import TaskStatusUpdateException

NOW = datetime(2024, 3, 1, tzinfo=UTC)


def _repo(tasks) -> AsyncMock:
    repo = AsyncMock()
    repo.list_recurring_done_tasks.return_value = list(tasks)
    repo.bulk_set_status.side_effect = lambda ids, status: len(ids)
    return repo


def _use_case(repo, email_sender=None, in_app=None, unsubscribed=()):
    checker = AsyncMock()
    checker.is_unsubscribed.side_effect = lambda email, category, org_id: (
        email in unsubscribed
    )
    renderer = MagicMock()
    renderer.render_email.return_value = ("subject", "<p>body</p>")
    email_sender = email_sender or AsyncMock()
    in_app = in_app or AsyncMock()
    dispatcher = NotificationDispatcher(
        email_sender, in_app, renderer, app_url="https://app.example.com"
    )
    return RunTaskReviewUseCase(repo, RecipientResolver(checker), dispatcher)


async def test_monthly_task_without_automations_goes_to_todo(
    make_member, make_org, make_task
) -> None:
    members = [make_member(), make_member(), make_member()]
    task = make_task(
        review_date=datetime(2024, 1, 15, tzinfo=UTC), organization=make_org(members)
    )
    repo = _repo([task])
    email_sender = AsyncMock()

    result = await _use_case(repo, email_sender).run(now=NOW, run_id="run-1")

    assert result.success
    assert result.run_id == "run-1"
    assert result.total_tasks_checked == 1
    assert result.updated_to_todo == 1
    assert result.updated_to_failed == 0
    assert result.updated_task_ids == (task.id,)
    assert result.notifications_sent == 3
    assert result.in_app_delivered is True
    assert result.message == 'Updated 1 to "todo", 0 to "failed" (0 kept as done)'
    repo.bulk_set_status.assert_awaited_once_with([task.id], TaskStatus.TODO)
    assert {c.args[0] for c in email_sender.send.await_args_list} == {
        m.email for m in members
    }


async def test_custom_fail_with_integration_success_goes_to_failed(
    make_member, make_org, make_task, custom_check, integration_run
) -> None:
    task = make_task(
        organization=make_org([make_member()]),
        custom_checks=[custom_check(EvaluationStatus.FAIL)],
        integration_runs=[integration_run("c1", IntegrationCheckStatus.SUCCESS)],
    )
    repo = _repo([task])

    result = await _use_case(repo).run(now=NOW)

    assert result.success
    assert result.updated_to_failed == 1
    assert result.updated_to_todo == 0
    repo.bulk_set_status.assert_awaited_once_with([task.id], TaskStatus.FAILED)


async def test_no_overdue_tasks_returns_early(make_task) -> None:
    repo = _repo([make_task(review_date=datetime(2024, 2, 20, tzinfo=UTC))])

    result = await _use_case(repo).run(now=NOW)

    assert result.success
    assert result.message == MESSAGE_NO_OVERDUE
    assert result.total_tasks_checked == 0
    repo.bulk_set_status.assert_not_awaited()


async def test_all_overdue_passing_returns_early(make_task, custom_check) -> None:
    task = make_task(custom_checks=[custom_check(EvaluationStatus.PASS)])
    repo = _repo([task])
    email_sender = AsyncMock()

    result = await _use_case(repo, email_sender).run(now=NOW)

    assert result.success
    assert result.message == MESSAGE_ALL_PASSING
    assert result.tasks_kept_done == 1
    assert result.in_app_delivered is None
    repo.bulk_set_status.assert_not_awaited()
    email_sender.send.assert_not_awaited()


async def test_mixed_run_updates_both_buckets(
    make_member, make_org, make_task, custom_check
) -> None:
    org = make_org([make_member()])
    manual = make_task(organization=org)
    failing = make_task(organization=org, custom_checks=[custom_check(EvaluationStatus.FAIL)])
    passing = make_task(organization=org, custom_checks=[custom_check(EvaluationStatus.PASS)])
    repo = _repo([manual, failing, passing])

    result = await _use_case(repo).run(now=NOW)

    assert (result.updated_to_todo, result.updated_to_failed, result.tasks_kept_done) == (
        1,
        1,
        1,
    )
    assert result.updated_task_ids == (manual.id, failing.id)
    assert result.notifications_sent == 2
    assert [c.args for c in repo.bulk_set_status.await_args_list] == [
        ([manual.id], TaskStatus.TODO),
        ([failing.id], TaskStatus.FAILED),
    ]


async def test_persistence_failure_fails_run_without_notifying(
    make_member, make_org, make_task, custom_check
) -> None:
    org = make_org([make_member()])
    manual = make_task(organization=org)
    failing = make_task(organization=org, custom_checks=[custom_check(EvaluationStatus.FAIL)])
    repo = _repo([manual, failing])

    def bulk_set_status(ids, status):
        if status is TaskStatus.FAILED:
            raise TaskStatusUpdateException(status.value, len(ids), "connection reset")
        return len(ids)

    repo.bulk_set_status.side_effect = bulk_set_status
    email_sender = AsyncMock()

    result = await _use_case(repo, email_sender).run(now=NOW)

    assert not result.success
    assert result.message == MESSAGE_UPDATE_FAILED
    assert result.updated_to_todo == 1
    assert result.updated_to_failed == 0
    assert "connection reset" in result.error
    email_sender.send.assert_not_awaited()


async def test_delivery_failures_do_not_fail_run(make_member, make_org, make_task) -> None:
    members = [make_member(), make_member()]
    task = make_task(organization=make_org(members))
    email_sender = AsyncMock()
    email_sender.send.side_effect = RuntimeError("provider down")
    in_app = AsyncMock()
    in_app.trigger_bulk.side_effect = RuntimeError("provider down")

    result = await _use_case(_repo([task]), email_sender, in_app).run(now=NOW)

    assert result.success
    assert result.notifications_sent == 0
    assert result.notifications_failed == 2
    assert result.in_app_delivered is False


async def test_unsubscribed_members_are_skipped(make_member, make_org, make_task) -> None:
    keep, drop = make_member(), make_member()
    task = make_task(organization=make_org([keep, drop]))
    email_sender = AsyncMock()
    in_app = AsyncMock()

    result = await _use_case(
        _repo([task]), email_sender, in_app, unsubscribed={drop.email}
    ).run(now=NOW)

    assert result.notifications_sent == 1
    assert result.notifications_skipped == 1
    email_sender.send.assert_awaited_once()
    assert email_sender.send.await_args.args[0] == keep.email
    (events,), _ = in_app.trigger_bulk.await_args
    assert [e.email for e in events] == [keep.email]


async def test_monthly_task_due_first_of_month_is_reopened_next_day(
    make_member, make_org, make_task
) -> None:
    """Reviewed 2024-01-01 monthly: due 2024-02-01, overdue on 2024-02-02."""
    active, inactive = make_member(), make_member(deactivated=True)
    task = make_task(
        review_date=datetime(2024, 1, 1, tzinfo=UTC),
        organization=make_org([active, inactive]),
    )
    email_sender = AsyncMock()

    result = await _use_case(_repo([task]), email_sender).run(
        now=datetime(2024, 2, 2, tzinfo=UTC)
    )

    assert result.updated_to_todo == 1
    assert result.notifications_sent == 1
    assert email_sender.send.await_args.args[0] == active.email
