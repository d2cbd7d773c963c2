"""Transactional email senders."""

from review_engine.infrastructure.external.email.factory import create_email_sender
from review_engine.infrastructure.external.email.log_only_sender import (
    LogOnlyEmailSender,
)
from review_engine.infrastructure.external.email.resend_sender import (
    ResendEmailSender,
)

__all__ = ["ResendEmailSender", "LogOnlyEmailSender", "create_email_sender"]
