"""Task review email templates: target status -> subject/body (Jinja)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from jinja2 import Environment, Template

from review_engine.domain.enums import TaskStatus

if TYPE_CHECKING:
    from review_engine.application.dtos.task_review import TaskReviewRecipient

# Context: name, task, organization, task_url
_DEFAULT_TEMPLATES: dict[str, tuple[str, str]] = {
    TaskStatus.TODO.value: (
        'Task "{{ task.title }}" is due for review',
        "<p>Hi {{ name }},</p>\n"
        '<p>The task <strong>{{ task.title }}</strong> in {{ organization.name }} '
        'has reached its review date and was moved back to "To Do".</p>\n'
        '<p><a href="{{ task_url }}">Review the task</a></p>',
    ),
    TaskStatus.FAILED.value: (
        'Task "{{ task.title }}" failed its automated checks',
        "<p>Hi {{ name }},</p>\n"
        '<p>The task <strong>{{ task.title }}</strong> in {{ organization.name }} '
        "is due for review and one or more of its automated evidence checks is "
        'failing, so it was marked "Failed".</p>\n'
        '<p><a href="{{ task_url }}">Review the task</a></p>',
    ),
}


class TaskReviewTemplateRenderer:
    """Renders the task review email for the recipient's target status."""

    def __init__(
        self,
        templates: dict[str, tuple[str, str]] | None = None,
    ) -> None:
        """Initialize with optional template dict; falls back to _DEFAULT_TEMPLATES."""
        self._templates = templates or _DEFAULT_TEMPLATES
        # Task titles and member names are user input rendered into HTML.
        self._html_env = Environment(autoescape=True)
        self._text_env = Environment(autoescape=False)
        self._compiled: dict[str, tuple[Template, Template]] = {}
        for key, (sub_str, body_str) in self._templates.items():
            self._compiled[key] = (
                self._text_env.from_string(sub_str),
                self._html_env.from_string(body_str),
            )

    def render_email(
        self, recipient: TaskReviewRecipient, task_url: str
    ) -> tuple[str, str]:
        """Render (subject, html). Raises KeyError if no template for the target status."""
        key = recipient.target_status.value
        if key not in self._compiled:
            raise KeyError(f"Unknown task review template: {key}")
        ctx = {
            "name": recipient.name,
            "task": recipient.task,
            "organization": recipient.task.organization,
            "task_url": task_url,
        }
        subject_tpl, body_tpl = self._compiled[key]
        return subject_tpl.render(**ctx), body_tpl.render(**ctx)
