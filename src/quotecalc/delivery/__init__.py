"""Quote email delivery."""

from .config import AzureSMTPConfig, GraphConfig, MailConfig, RetryPolicy, SMTPConfig
from .mailer import QuoteMailer, compose_quote_email
from .message import OutgoingEmail

__all__ = [
    "AzureSMTPConfig",
    "GraphConfig",
    "MailConfig",
    "OutgoingEmail",
    "QuoteMailer",
    "RetryPolicy",
    "SMTPConfig",
    "compose_quote_email",
]
