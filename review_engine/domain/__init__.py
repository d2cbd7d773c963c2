"""Domain layer: entities, enums, and exceptions.

No dependencies on infrastructure. Used by application and
infrastructure layers.
"""

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
    NotificationCategory,
    TaskFrequency,
    TaskStatus,
)
from review_engine.domain.exceptions import (
    ReviewEngineException,
    SqlNotConfiguredException,
    TaskStatusUpdateException,
)

__all__ = [
    # Entities
    "AutomationRun",
    "CustomAutomationCheck",
    "IntegrationCheckRun",
    "MemberEntity",
    "OrganizationEntity",
    "TaskEntity",
    # Enums
    "EvaluationStatus",
    "IntegrationCheckStatus",
    "NotificationCategory",
    "TaskFrequency",
    "TaskStatus",
    # Exceptions
    "ReviewEngineException",
    "SqlNotConfiguredException",
    "TaskStatusUpdateException",
]
