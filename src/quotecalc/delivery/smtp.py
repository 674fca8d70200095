"""SMTP transports: Office 365 with an OAuth2 token, and plain SMTP with a password."""
from __future__ import annotations

import smtplib

from .config import AzureSMTPConfig, SMTPConfig
from .message import OutgoingEmail, build_mime_message


def xoauth2_string(username: str, access_token: str) -> str:
    return f"user={username}\x01auth=Bearer {access_token}\x01\x01"


class AzureSMTPSender:
    name = "azure_smtp"

    def __init__(self, config: AzureSMTPConfig, default_sender: str) -> None:
        self.config = config
        self.sender = default_sender or config.username

    def send(self, email: OutgoingEmail, timeout: float) -> None:
        message = build_mime_message(email, self.sender)
        auth_string = xoauth2_string(self.config.username, self.config.access_token)
        with smtplib.SMTP(self.config.host, self.config.port, timeout=timeout) as smtp:
            smtp.ehlo()
            smtp.starttls()
            smtp.ehlo()
            smtp.auth("XOAUTH2", lambda challenge=None: auth_string, initial_response_ok=True)
            smtp.send_message(message)


class SMTPSender:
    name = "smtp"

    def __init__(self, config: SMTPConfig, default_sender: str) -> None:
        self.config = config
        self.sender = default_sender

    def send(self, email: OutgoingEmail, timeout: float) -> None:
        message = build_mime_message(email, self.sender)
        with smtplib.SMTP(self.config.host, self.config.port, timeout=timeout) as smtp:
            if self.config.use_tls:
                smtp.starttls()
            if self.config.username and self.config.password:
                smtp.login(self.config.username, self.config.password)
            smtp.send_message(message)


__all__ = ["AzureSMTPSender", "SMTPSender", "xoauth2_string"]
