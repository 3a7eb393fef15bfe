"""Client notifications."""

from loan_origination.notifications.email import (
    Attachment,
    EmailMessage,
    LoggingEmailSender,
    NotificationSender,
    render_registration_email,
    render_schedule_email,
    render_schedule_text,
)

__all__ = [
    "Attachment",
    "EmailMessage",
    "LoggingEmailSender",
    "NotificationSender",
    "render_registration_email",
    "render_schedule_email",
    "render_schedule_text",
]
