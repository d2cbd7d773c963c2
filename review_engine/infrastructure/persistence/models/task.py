"""Task and automation ORM models read by the review engine."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, String, text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from review_engine.domain.enums import TaskStatus
from review_engine.infrastructure.persistence.database import Base
from review_engine.infrastructure.persistence.models.mixins import (
    CuidMixin,
    OrganizationScopedModel,
)
from review_engine.infrastructure.persistence.models.organization import (
    Member,
    Organization,
)


class Task(OrganizationScopedModel, Base):
    """Compliance task. Table: task.

    review_date is the last completion/review; frequency is daily, weekly,
    monthly, quarterly or yearly (null for one-off tasks).
    """

    __tablename__ = "task"

    title: Mapped[str] = mapped_column(String(500), nullable=False)
    status: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default=TaskStatus.TODO.value,
        server_default=TaskStatus.TODO.value,
        index=True,
    )
    review_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    frequency: Mapped[str | None] = mapped_column(String(32), nullable=True)
    assignee_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("member.id", ondelete="SET NULL"), nullable=True, index=True
    )

    organization: Mapped[Organization] = relationship(lazy="raise")
    assignee: Mapped[Member | None] = relationship(lazy="raise")
    evidence_automations: Mapped[list["EvidenceAutomation"]] = relationship(
        back_populates="task", lazy="raise"
    )
    integration_check_runs: Mapped[list["IntegrationCheckRun"]] = relationship(
        back_populates="task", lazy="raise"
    )

    __table_args__ = (Index("ix_task_status_frequency", "status", "frequency"),)


class EvidenceAutomation(CuidMixin, Base):
    """Custom evidence automation bound to a task. Table: evidence_automation."""

    __tablename__ = "evidence_automation"

    task_id: Mapped[str] = mapped_column(
        String, ForeignKey("task.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String, nullable=False, default="")
    is_enabled: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=text("false")
    )

    task: Mapped[Task] = relationship(back_populates="evidence_automations", lazy="raise")


class EvidenceAutomationRun(CuidMixin, Base):
    """One execution of an evidence automation. Table: evidence_automation_run."""

    __tablename__ = "evidence_automation_run"

    evidence_automation_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("evidence_automation.id", ondelete="CASCADE"),
        nullable=False,
    )
    # pass | fail | null while the run has not been evaluated
    evaluation_status: Mapped[str | None] = mapped_column(String(32), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (
        Index(
            "ix_evidence_automation_run_automation_created",
            "evidence_automation_id",
            "created_at",
        ),
    )


class IntegrationCheckRun(CuidMixin, Base):
    """Result of a platform integration check for a task. Table: integration_check_run."""

    __tablename__ = "integration_check_run"

    task_id: Mapped[str] = mapped_column(
        String, ForeignKey("task.id", ondelete="CASCADE"), nullable=False, index=True
    )
    check_id: Mapped[str] = mapped_column(String, nullable=False)
    status: Mapped[str] = mapped_column(String(32), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    task: Mapped[Task] = relationship(back_populates="integration_check_runs", lazy="raise")

    __table_args__ = (
        Index("ix_integration_check_run_task_check", "task_id", "check_id"),
    )
