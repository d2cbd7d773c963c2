"""Email notification preferences: per-user opt-outs and per-role organization settings."""

from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from review_engine.domain.enums import NotificationCategory
from review_engine.infrastructure.persistence.models.organization import (
    Member,
    RoleNotificationSetting,
    User,
)
from review_engine.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

# Category -> RoleNotificationSetting column. Categories missing here have no role-level switch.
_ROLE_SETTING_COLUMNS: dict[NotificationCategory, str] = {
    NotificationCategory.POLICY_NOTIFICATIONS: "policy_notifications",
    NotificationCategory.TASK_REMINDERS: "task_reminders",
    NotificationCategory.TASK_ASSIGNMENTS: "task_assignments",
    NotificationCategory.TASK_MENTIONS: "task_mentions",
    NotificationCategory.WEEKLY_TASK_DIGEST: "weekly_task_digest",
    NotificationCategory.FINDING_NOTIFICATIONS: "finding_notifications",
}


def merge_preferences(stored: Any) -> dict[str, bool]:
    """Return stored preferences over all-enabled defaults (non-dict -> defaults)."""
    preferences = {category.value: True for category in NotificationCategory}
    if isinstance(stored, dict):
        for key, value in stored.items():
            if key in preferences and isinstance(value, bool):
                preferences[key] = value
    return preferences


def split_roles(role_values: list[str]) -> list[str]:
    """Flatten comma-separated member role strings into distinct role names."""
    roles: list[str] = []
    for value in role_values:
        for role in (value or "").split(","):
            role = role.strip()
            if role and role not in roles:
                roles.append(role)
    return roles


class SqlUnsubscribeChecker:
    """Implements IUnsubscribeChecker from user preferences and role settings.

    Decision order:
    1. Unknown email -> not unsubscribed.
    2. Global unsubscribe flag -> unsubscribed.
    3. With an organization and a category that has a role-level switch:
       when settings exist for the user's roles and every one of them turns
       the category off -> unsubscribed.
    4. Otherwise the user's personal preference for the category decides.
    Any lookup error -> not unsubscribed.

    Lookups run concurrently during dispatch, so each call opens its own
    short-lived session.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def is_unsubscribed(
        self,
        email: str,
        category: NotificationCategory,
        organization_id: str | None = None,
    ) -> bool:
        """Return True when the user must not be emailed for this category."""
        try:
            async with self._session_factory() as db:
                return await self._is_unsubscribed(db, email, category, organization_id)
        except Exception as e:
            logger.warning(
                "Unsubscribe lookup failed for category %s (org %s): %s",
                category.value,
                organization_id,
                e,
            )
            return False

    async def _is_unsubscribed(
        self,
        db: AsyncSession,
        email: str,
        category: NotificationCategory,
        organization_id: str | None,
    ) -> bool:
        result = await db.execute(select(User).where(User.email == email))
        user = result.scalar_one_or_none()
        if user is None:
            return False
        if user.email_notifications_unsubscribed:
            return True

        if organization_id and category in _ROLE_SETTING_COLUMNS:
            role_enabled = await self._role_enables(
                db, user.id, category, organization_id
            )
            if role_enabled is False:
                return True

        preferences = merge_preferences(user.email_preferences)
        return not preferences[category.value]

    async def _role_enables(
        self,
        db: AsyncSession,
        user_id: str,
        category: NotificationCategory,
        organization_id: str,
    ) -> bool | None:
        """Return whether any of the user's roles enables the category.

        None when the user has no membership or no role has settings.
        """
        result = await db.execute(
            select(Member.role).where(
                Member.user_id == user_id,
                Member.organization_id == organization_id,
            )
        )
        roles = split_roles([row[0] for row in result.fetchall()])
        if not roles:
            return None
        result = await db.execute(
            select(RoleNotificationSetting).where(
                RoleNotificationSetting.organization_id == organization_id,
                RoleNotificationSetting.role.in_(roles),
            )
        )
        settings = list(result.scalars().all())
        if not settings:
            return None
        column = _ROLE_SETTING_COLUMNS[category]
        return any(getattr(s, column) for s in settings)
