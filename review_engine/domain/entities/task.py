"""Task domain entities for recurring review.

A recurring task carries the automations that produce evidence for it:
custom evidence automations (runs newest-first) and platform integration
check runs (unordered, grouped by check_id).
"""

from dataclasses import dataclass, field
from datetime import datetime

from review_engine.domain.enums import (
    EvaluationStatus,
    IntegrationCheckStatus,
    TaskFrequency,
    TaskStatus,
)


@dataclass(frozen=True)
class AutomationRun:
    """One evaluation of a custom evidence automation."""

    evaluation_status: EvaluationStatus | None


@dataclass
class CustomAutomationCheck:
    """Enabled user-configured evidence automation bound to a task.

    runs are ordered newest-first; only runs[0] reflects the current state.
    """

    id: str
    runs: list[AutomationRun] = field(default_factory=list)

    @property
    def latest_run(self) -> AutomationRun | None:
        """Return the newest run, or None when the automation never ran."""
        return self.runs[0] if self.runs else None

    def is_passing(self) -> bool:
        """Return whether the newest run evaluated to pass (no runs is not passing)."""
        latest = self.latest_run
        return latest is not None and latest.evaluation_status is EvaluationStatus.PASS


@dataclass(frozen=True)
class IntegrationCheckRun:
    """Result of a platform integration check; check_id groups runs over time."""

    check_id: str
    status: IntegrationCheckStatus
    created_at: datetime


@dataclass
class MemberEntity:
    """Organization membership of a user (one user may hold several)."""

    id: str
    user_id: str | None
    name: str | None
    email: str | None
    role: str = ""
    deactivated: bool = False
    is_platform_admin: bool = False

    def is_notifiable(self) -> bool:
        """Return whether this member may receive task notifications."""
        return (
            bool(self.user_id)
            and bool(self.email)
            and not self.deactivated
            and not self.is_platform_admin
        )

    @property
    def roles(self) -> list[str]:
        """Return the member's roles (role is stored comma-separated)."""
        return [r.strip() for r in (self.role or "").split(",") if r.strip()]


@dataclass
class OrganizationEntity:
    """Organization owning tasks, with its member list."""

    id: str
    name: str
    members: list[MemberEntity] = field(default_factory=list)


@dataclass
class TaskEntity:
    """Domain entity for a recurring compliance task."""

    id: str
    title: str
    status: TaskStatus
    review_date: datetime | None
    frequency: TaskFrequency | None
    organization: OrganizationEntity
    assignee: MemberEntity | None = None
    custom_checks: list[CustomAutomationCheck] = field(default_factory=list)
    integration_runs: list[IntegrationCheckRun] = field(default_factory=list)

    @property
    def organization_id(self) -> str:
        """Return the owning organization id."""
        return self.organization.id

    def is_review_candidate(self) -> bool:
        """Return whether the engine should evaluate this task at all."""
        return (
            self.status is TaskStatus.DONE
            and self.review_date is not None
            and self.frequency is not None
        )
