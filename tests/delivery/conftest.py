from __future__ import annotations

from typing import List

import pytest

from quotecalc.delivery.config import MailConfig


class DummySMTP:
    def __init__(self, host: str, port: int, timeout: float):
        self.host = host
        self.port = port
        self.timeout = timeout
        self.started_tls = False
        self.logged_in = False
        self.auth_mechanism = None
        self.auth_response = None
        self.sent_messages: List[object] = []

    def __enter__(self) -> "DummySMTP":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        return None

    def ehlo(self) -> None:
        return None

    def starttls(self) -> None:
        self.started_tls = True

    def login(self, username: str, password: str) -> None:
        self.logged_in = True

    def auth(self, mechanism, authobject, *, initial_response_ok=True) -> None:
        self.auth_mechanism = mechanism
        self.auth_response = authobject()

    def send_message(self, message) -> None:
        self.sent_messages.append(message)


@pytest.fixture(autouse=True)
def _clean_mail_env(monkeypatch):
    for prefix in ("GRAPH_", "AZURE_SMTP_", "SMTP_"):
        for key in ("HOST", "PORT", "USERNAME", "PASSWORD", "USE_TLS", "SENDER", "ACCESS_TOKEN", "ENDPOINT"):
            monkeypatch.delenv(f"{prefix}{key}", raising=False)
    for key in ("MAIL_ENABLED", "MAIL_SENDER", "MAIL_REPLY_TO", "MAIL_BCC"):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def mail_config() -> MailConfig:
    no_retry = {"retries": 0, "backoff_factor": 0.0}
    return MailConfig.from_dict(
        {
            "sender": "quotes@example.com",
            "graph": {"access_token": "graph-token", "retry": no_retry},
            "azure_smtp": {"username": "quotes@example.com", "access_token": "azure-token", "retry": no_retry},
            "smtp": {
                "host": "smtp.example.com",
                "port": 587,
                "username": "user",
                "password": "pass",
                "retry": no_retry,
            },
        }
    )


@pytest.fixture
def dummy_smtp():
    return DummySMTP
