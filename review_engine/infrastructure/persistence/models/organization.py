"""Organization, user and membership ORM models."""

from typing import Any

from sqlalchemy import JSON, Boolean, ForeignKey, Index, String, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from review_engine.infrastructure.persistence.database import Base
from review_engine.infrastructure.persistence.models.mixins import (
    CuidMixin,
    OrganizationScopedModel,
    TimestampMixin,
)


class Organization(CuidMixin, TimestampMixin, Base):
    """Root organization entity. Table: organization."""

    __tablename__ = "organization"

    name: Mapped[str] = mapped_column(String, nullable=False)

    members: Mapped[list["Member"]] = relationship(
        back_populates="organization", lazy="raise"
    )


class User(CuidMixin, TimestampMixin, Base):
    """User account. Table: app_user. Email is unique across organizations."""

    __tablename__ = "app_user"

    email: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    name: Mapped[str | None] = mapped_column(String, nullable=True)
    is_platform_admin: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=text("false")
    )
    # Global opt-out from all notification emails (pre-dates per-category preferences).
    email_notifications_unsubscribed: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=text("false")
    )
    # Category key (e.g. "taskReminders") -> enabled; missing keys default to enabled.
    email_preferences: Mapped[dict[str, Any] | None] = mapped_column(
        JSON, nullable=True
    )


class Member(OrganizationScopedModel, Base):
    """Membership of a user in an organization. Table: member.

    role is a comma-separated list (e.g. "admin,auditor").
    """

    __tablename__ = "member"

    user_id: Mapped[str] = mapped_column(
        String, ForeignKey("app_user.id", ondelete="CASCADE"), nullable=False, index=True
    )
    role: Mapped[str] = mapped_column(String, nullable=False, default="employee")
    deactivated: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=text("false")
    )

    organization: Mapped[Organization] = relationship(
        back_populates="members", lazy="raise"
    )
    user: Mapped[User] = relationship(lazy="raise")

    __table_args__ = (Index("ix_member_org_user", "organization_id", "user_id"),)


class RoleNotificationSetting(OrganizationScopedModel, Base):
    """Per-role switches for notification categories. Table: role_notification_setting."""

    __tablename__ = "role_notification_setting"

    role: Mapped[str] = mapped_column(String, nullable=False)
    policy_notifications: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    task_reminders: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    task_assignments: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    task_mentions: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    weekly_task_digest: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    finding_notifications: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True
    )

    __table_args__ = (
        Index("ix_role_notification_setting_org_role", "organization_id", "role", unique=True),
    )
