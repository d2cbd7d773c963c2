"""Persistence models: ORM entities and mixins."""

from review_engine.infrastructure.persistence.models.mixins import (
    CuidMixin,
    OrganizationMixin,
    OrganizationScopedModel,
    TimestampMixin,
)
from review_engine.infrastructure.persistence.models.organization import (
    Member,
    Organization,
    RoleNotificationSetting,
    User,
)
from review_engine.infrastructure.persistence.models.task import (
    EvidenceAutomation,
    EvidenceAutomationRun,
    IntegrationCheckRun,
    Task,
)

__all__ = [
    "Organization",
    "User",
    "Member",
    "RoleNotificationSetting",
    "Task",
    "EvidenceAutomation",
    "EvidenceAutomationRun",
    "IntegrationCheckRun",
    "CuidMixin",
    "OrganizationMixin",
    "TimestampMixin",
    "OrganizationScopedModel",
]
