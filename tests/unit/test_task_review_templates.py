"""Unit tests for the task review email renderer."""

import pytest

from review_engine.application.dtos.task_review import TaskReviewRecipient
from review_engine.domain.enums import TaskStatus
from review_engine.infrastructure.services import TaskReviewTemplateRenderer


def _recipient(task, status: TaskStatus, name: str = "Ada") -> TaskReviewRecipient:
    return TaskReviewRecipient(
        user_id="usr_1",
        email="ada@example.com",
        name=name,
        task=task,
        target_status=status,
    )


def test_todo_email(make_task) -> None:
    task = make_task(title="Rotate keys")
    subject, html = TaskReviewTemplateRenderer().render_email(
        _recipient(task, TaskStatus.TODO), "https://app.example.com/o/tasks/t"
    )
    assert subject == 'Task "Rotate keys" is due for review'
    assert "Hi Ada" in html
    assert 'href="https://app.example.com/o/tasks/t"' in html
    assert "To Do" in html


def test_failed_email(make_task) -> None:
    subject, html = TaskReviewTemplateRenderer().render_email(
        _recipient(make_task(title="Backups"), TaskStatus.FAILED), "https://x"
    )
    assert subject == 'Task "Backups" failed its automated checks'
    assert "Failed" in html


def test_body_escapes_user_input(make_task) -> None:
    task = make_task(title="<script>alert(1)</script>")
    _, html = TaskReviewTemplateRenderer().render_email(
        _recipient(task, TaskStatus.TODO, name="<b>Eve</b>"), "https://x"
    )
    assert "<script>" not in html
    assert "&lt;script&gt;" in html
    assert "<b>Eve</b>" not in html


def test_unknown_status_raises(make_task) -> None:
    with pytest.raises(KeyError):
        TaskReviewTemplateRenderer().render_email(
            _recipient(make_task(), TaskStatus.DONE), "https://x"
        )
