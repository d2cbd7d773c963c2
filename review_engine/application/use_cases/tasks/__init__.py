"""Task use cases: recurring task review."""

from review_engine.application.use_cases.tasks.run_task_review import (
    RunTaskReviewUseCase,
)

__all__ = ["RunTaskReviewUseCase"]
