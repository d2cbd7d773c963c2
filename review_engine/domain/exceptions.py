"""Domain exceptions for the review engine.

Defines domain-level exceptions that represent business rule violations
and fatal run conditions. These exceptions are independent of
infrastructure concerns; the scheduler maps them to a failed run result.
"""

from typing import Any


class ReviewEngineException(Exception):
    """Base exception for all review engine errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, task_ids).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)


class SqlNotConfiguredException(ReviewEngineException):
    """Raised when an operation requires the database but it is not configured."""

    def __init__(self) -> None:
        super().__init__(
            message="This operation requires a SQL database that is not configured.",
            error_code="SERVICE_UNAVAILABLE",
        )


class TaskStatusUpdateException(ReviewEngineException):
    """Raised when a bulk task status update fails (fatal to the run)."""

    def __init__(self, status: str, task_count: int, reason: str) -> None:
        """Initialize with target status, batch size, and reason.

        Args:
            status: Status the batch was being moved to.
            task_count: Number of tasks in the failed batch.
            reason: Underlying error message.
        """
        super().__init__(
            f"Failed to set status '{status}' on {task_count} task(s): {reason}",
            "TASK_STATUS_UPDATE_ERROR",
            {"status": status, "task_count": task_count, "reason": reason},
        )
