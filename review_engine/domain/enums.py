"""Domain enumerations for the review engine.

Enums represent fixed sets of domain values (task status, review frequency,
automation results). Automation results coming from storage are free strings;
parse() maps anything unrecognized to an UNKNOWN member so status
computation stays total.
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class TaskStatus(_ValuesMixin, str, Enum):
    """Task lifecycle status.

    The review engine only reads DONE tasks and only writes TODO or FAILED.
    """

    TODO = "todo"
    IN_PROGRESS = "in_progress"
    DONE = "done"
    FAILED = "failed"
    NOT_RELEVANT = "not_relevant"


class TaskFrequency(_ValuesMixin, str, Enum):
    """How often a completed task must be reviewed again."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


class EvaluationStatus(_ValuesMixin, str, Enum):
    """Evaluation result of a custom evidence automation run."""

    PASS = "pass"
    FAIL = "fail"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: str | None) -> "EvaluationStatus":
        """Map a stored evaluation status to a member (None or unrecognized -> UNKNOWN)."""
        if value is None:
            return cls.UNKNOWN
        try:
            return cls(value.lower())
        except ValueError:
            return cls.UNKNOWN


class IntegrationCheckStatus(_ValuesMixin, str, Enum):
    """Status of a platform integration check run."""

    SUCCESS = "success"
    FAILED = "failed"
    PENDING = "pending"
    RUNNING = "running"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: str | None) -> "IntegrationCheckStatus":
        """Map a stored check run status to a member (None or unrecognized -> UNKNOWN)."""
        if value is None:
            return cls.UNKNOWN
        try:
            return cls(value.lower())
        except ValueError:
            return cls.UNKNOWN


class NotificationCategory(_ValuesMixin, str, Enum):
    """Email preference categories a user can unsubscribe from.

    Values match the keys stored in the user's email preferences.
    """

    POLICY_NOTIFICATIONS = "policyNotifications"
    TASK_REMINDERS = "taskReminders"
    TASK_ASSIGNMENTS = "taskAssignments"
    TASK_MENTIONS = "taskMentions"
    WEEKLY_TASK_DIGEST = "weeklyTaskDigest"
    FINDING_NOTIFICATIONS = "findingNotifications"
    UNASSIGNED_ITEMS_NOTIFICATIONS = "unassignedItemsNotifications"
