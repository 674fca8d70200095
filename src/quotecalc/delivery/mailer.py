"""Quote email delivery with provider fallback.

Providers are tried in configured order (Graph, Office 365 SMTP with OAuth2,
then plain SMTP). A provider whose last ``circuit_breaker_failures`` sends all
failed is skipped for the rest of the mailer's lifetime.
"""
from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path
from typing import Iterable, List, Optional

from ..money import format_currency
from ..quote import QuoteResult
from ..reporting import make_summary_text
from .config import MailConfig, RetryPolicy
from .graph import GraphSender
from .message import OutgoingEmail
from .retry import ProviderHealth, ProviderUnavailable, deliver_with_retry
from .smtp import AzureSMTPSender, SMTPSender

LOGGER = logging.getLogger(__name__)


def compose_quote_email(
    result: QuoteResult,
    to: Iterable[str],
    attachments: Iterable[Path] | None = None,
    business_name: str = "",
) -> OutgoingEmail:
    request = result.request
    label = request.quote_number or request.title or "your event"
    greeting = f"Hi {request.customer_name}," if request.customer_name else "Hello,"
    lines = [
        greeting,
        "",
        f"Thank you for your interest. Here is the quote for {label}.",
        "",
        make_summary_text(result.line_items, result.totals),
    ]
    if request.deposit is not None:
        lines.append(f"A deposit of {format_currency(result.totals.deposit)} secures your date.")
    lines.append(f"This quote is valid until {request.valid_until:%B %d, %Y}.")
    if business_name:
        lines.extend(["", business_name])
    subject = f"Quote {label}: {format_currency(result.totals.total)}"
    return OutgoingEmail(
        to=list(to),
        subject=subject,
        body="\n".join(lines),
        attachments=list(attachments or []),
    )


class QuoteMailer:
    """Sends quote emails through the first provider that succeeds."""

    def __init__(self, config: MailConfig) -> None:
        self.config = config
        self.health = ProviderHealth()
        self._senders = []
        for name in config.configured_providers():
            sender, policy = self._build_sender(name)
            self._senders.append((sender, policy))

    def _build_sender(self, name: str):
        default_sender = self.config.sender or ""
        if name == "graph":
            return GraphSender(self.config.graph, default_sender), self.config.graph.retry
        if name == "azure_smtp":
            return AzureSMTPSender(self.config.azure_smtp, default_sender), self.config.azure_smtp.retry
        return SMTPSender(self.config.smtp, default_sender), self.config.smtp.retry

    @property
    def providers(self) -> List[str]:
        return [sender.name for sender, _ in self._senders]

    def send(self, email: OutgoingEmail, *, force: bool = False) -> Optional[str]:
        """Return the name of the provider that delivered ``email``, or ``None``."""
        if not self.config.enabled and not force:
            LOGGER.info("Mail delivery is disabled; skipping email send")
            return None
        if not self.config.sender:
            raise ValueError("Mail sender address is not configured")
        if not email.to:
            LOGGER.warning("No recipients given; email skipped")
            return None
        if not self._senders:
            LOGGER.error("No mail provider is configured; email to %s not sent", ", ".join(email.to))
            return None

        email = replace(
            email,
            bcc=list(email.bcc or self.config.bcc),
            reply_to=email.reply_to or self.config.reply_to,
        )

        for sender, policy in self._senders:
            if self._send_with(sender, policy, email):
                return sender.name
        LOGGER.error("All mail providers failed for %s", ", ".join(email.to))
        return None

    def _send_with(self, sender, policy: RetryPolicy, email: OutgoingEmail) -> bool:
        LOGGER.info("Sending quote email to %s via %s", ", ".join(email.to), sender.name)
        try:
            deliver_with_retry(sender.name, lambda timeout: sender.send(email, timeout), policy, self.health)
        except ProviderUnavailable as exc:
            LOGGER.warning("%s; trying next provider", exc)
            return False
        except Exception as exc:
            LOGGER.warning("%s delivery failed: %s; trying next provider", sender.name, exc)
            return False
        return True


__all__ = ["QuoteMailer", "compose_quote_email"]
