"""Unit tests for RecipientResolver (dedup, eligibility, unsubscribe filtering)."""

from unittest.mock import AsyncMock

from review_engine.application.dtos.task_review import StatusPartition
from review_engine.application.services.recipient_resolver import RecipientResolver
from review_engine.domain.enums import NotificationCategory, TaskStatus


def _resolver(checker=None) -> RecipientResolver:
    checker = checker or AsyncMock()
    return RecipientResolver(checker)


def test_one_recipient_per_member_per_task(make_member, make_org, make_task) -> None:
    alice, bob = make_member(), make_member()
    org = make_org([alice, bob])
    t1, t2 = make_task(organization=org), make_task(organization=org)

    recipients = _resolver().resolve(StatusPartition(to_todo=[t1, t2]))

    assert {r.key for r in recipients} == {
        (alice.user_id, t1.id),
        (bob.user_id, t1.id),
        (alice.user_id, t2.id),
        (bob.user_id, t2.id),
    }


def test_user_with_multiple_memberships_notified_once(
    make_member, make_org, make_task
) -> None:
    first = make_member(user_id="usr_dup", role="owner")
    second = make_member(user_id="usr_dup", role="admin")
    task = make_task(organization=make_org([first, second]))

    recipients = _resolver().resolve(StatusPartition(to_todo=[task]))

    assert [r.key for r in recipients] == [("usr_dup", task.id)]


def test_assignee_is_added_without_duplicate(make_member, make_org, make_task) -> None:
    member = make_member()
    outside_assignee = make_member()
    task_a = make_task(organization=make_org([member]), assignee=member)
    task_b = make_task(organization=make_org([member]), assignee=outside_assignee)

    recipients = _resolver().resolve(StatusPartition(to_todo=[task_a, task_b]))

    keys = [r.key for r in recipients]
    assert keys.count((member.user_id, task_a.id)) == 1
    assert (outside_assignee.user_id, task_b.id) in keys
    assert len(keys) == 3


def test_ineligible_members_are_skipped(make_member, make_org, make_task) -> None:
    eligible = make_member()
    members = [
        eligible,
        make_member(deactivated=True),
        make_member(is_platform_admin=True),
        make_member(email=None),
        make_member(user_id=None),
    ]
    task = make_task(organization=make_org(members))

    recipients = _resolver().resolve(StatusPartition(to_failed=[task]))

    assert [r.user_id for r in recipients] == [eligible.user_id]


def test_target_status_and_name_fallback(make_member, make_org, make_task) -> None:
    nameless = make_member(name="  ")
    org = make_org([nameless])
    todo_task, failed_task = make_task(organization=org), make_task(organization=org)

    recipients = _resolver().resolve(
        StatusPartition(to_todo=[todo_task], to_failed=[failed_task])
    )

    by_task = {r.task.id: r for r in recipients}
    assert by_task[todo_task.id].target_status is TaskStatus.TODO
    assert by_task[failed_task.id].target_status is TaskStatus.FAILED
    assert by_task[todo_task.id].name == nameless.email
    assert by_task[todo_task.id].subscriber_id == f"{nameless.user_id}-{org.id}"


def test_kept_done_tasks_produce_no_recipients(make_member, make_org, make_task) -> None:
    task = make_task(organization=make_org([make_member()]))
    assert _resolver().resolve(StatusPartition(kept_done=[task])) == []


async def test_filter_subscribed_skips_unsubscribed(
    make_member, make_org, make_task
) -> None:
    keep, drop = make_member(), make_member()
    task = make_task(organization=make_org([keep, drop]))
    checker = AsyncMock()
    checker.is_unsubscribed.side_effect = lambda email, category, org_id: (
        email == drop.email
    )
    resolver = _resolver(checker)
    recipients = resolver.resolve(StatusPartition(to_todo=[task]))

    kept, skipped = await resolver.filter_subscribed(recipients)

    assert [r.user_id for r in kept] == [keep.user_id]
    assert skipped == 1
    checker.is_unsubscribed.assert_any_await(
        drop.email, NotificationCategory.TASK_REMINDERS, task.organization_id
    )


async def test_filter_subscribed_fails_open(make_member, make_org, make_task) -> None:
    member = make_member()
    task = make_task(organization=make_org([member]))
    checker = AsyncMock()
    checker.is_unsubscribed.side_effect = RuntimeError("preference store down")
    resolver = _resolver(checker)

    kept, skipped = await resolver.filter_subscribed(
        resolver.resolve(StatusPartition(to_todo=[task]))
    )

    assert [r.user_id for r in kept] == [member.user_id]
    assert skipped == 0
