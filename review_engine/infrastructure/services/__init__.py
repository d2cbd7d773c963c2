"""Infrastructure services."""

from review_engine.infrastructure.services.task_review_templates import (
    TaskReviewTemplateRenderer,
)

__all__ = ["TaskReviewTemplateRenderer"]
