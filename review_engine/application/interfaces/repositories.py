"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference domain entities only; no infrastructure imports.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol

from review_engine.domain.enums import TaskStatus

if TYPE_CHECKING:
    from review_engine.domain.entities import TaskEntity


# Task review repository interface
class ITaskReviewRepository(Protocol):
    """Protocol for loading review candidates and writing their status."""

    async def list_recurring_done_tasks(self) -> list[TaskEntity]:
        """Return done tasks with review_date and frequency set.

        Each task carries its organization members, assignee, enabled custom
        automations (newest run first) and all integration check runs.
        """

    async def bulk_set_status(self, task_ids: Sequence[str], status: TaskStatus) -> int:
        """Set status on the given tasks; return number of rows updated."""
