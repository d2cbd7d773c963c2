"""Target status of an overdue task from its evidence automations.

Two kinds of automation can back a recurring task:

- custom evidence automations: the newest run of each must evaluate to pass;
- integration checks: runs are grouped by check_id and the latest run of each
  group must be success.

A kind with no configured automations places no requirement on the task.
With no automations of either kind the task goes back to manual tracking
(todo). If every configured kind passes the task stays done; otherwise it is
failed.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from review_engine.domain.entities import (
    CustomAutomationCheck,
    IntegrationCheckRun,
    TaskEntity,
)
from review_engine.domain.enums import IntegrationCheckStatus, TaskStatus


def _supersedes(candidate: IntegrationCheckRun, current: IntegrationCheckRun) -> bool:
    """Return whether candidate replaces current as the latest run of a check.

    Equal timestamps resolve toward the non-success run so the result does
    not depend on input order.
    """
    if candidate.created_at != current.created_at:
        return candidate.created_at > current.created_at
    return (
        current.status is IntegrationCheckStatus.SUCCESS
        and candidate.status is not IntegrationCheckStatus.SUCCESS
    )


def latest_runs_by_check_id(
    runs: Iterable[IntegrationCheckRun],
) -> dict[str, IntegrationCheckRun]:
    """Reduce integration check runs to the latest run per check_id.

    Input order is irrelevant; runs need not be sorted by created_at.
    """
    latest: dict[str, IntegrationCheckRun] = {}
    for run in runs:
        current = latest.get(run.check_id)
        if current is None or _supersedes(run, current):
            latest[run.check_id] = run
    return latest


def target_status(
    custom_checks: Sequence[CustomAutomationCheck],
    integration_runs: Iterable[IntegrationCheckRun],
) -> TaskStatus:
    """Return DONE, TODO or FAILED for a task with the given automations."""
    latest_integration = latest_runs_by_check_id(integration_runs)

    has_custom = len(custom_checks) > 0
    has_integration = len(latest_integration) > 0
    if not has_custom and not has_integration:
        return TaskStatus.TODO

    custom_passing = all(check.is_passing() for check in custom_checks)
    integration_passing = all(
        run.status is IntegrationCheckStatus.SUCCESS
        for run in latest_integration.values()
    )
    if (not has_custom or custom_passing) and (
        not has_integration or integration_passing
    ):
        return TaskStatus.DONE
    return TaskStatus.FAILED


def target_status_for_task(task: TaskEntity) -> TaskStatus:
    """Return the target status for a task entity."""
    return target_status(task.custom_checks, task.integration_runs)
