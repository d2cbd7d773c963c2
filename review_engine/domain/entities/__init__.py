"""Domain entities and aggregates.

Pure domain models; no ORM or persistence concerns.
"""

from review_engine.domain.entities.task import (
    AutomationRun,
    CustomAutomationCheck,
    IntegrationCheckRun,
    MemberEntity,
    OrganizationEntity,
    TaskEntity,
)

__all__ = [
    "AutomationRun",
    "CustomAutomationCheck",
    "IntegrationCheckRun",
    "MemberEntity",
    "OrganizationEntity",
    "TaskEntity",
]
