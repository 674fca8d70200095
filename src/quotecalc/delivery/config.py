"""Configuration for quote email delivery."""
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

import yaml

LOGGER = logging.getLogger(__name__)

PROVIDERS = ("graph", "azure_smtp", "smtp")
_FALSE = {"0", "false", "no", "off"}


@dataclass
class RetryPolicy:
    retries: int = 2
    backoff_factor: float = 1.0
    timeout_seconds: float = 30.0
    circuit_breaker_failures: int = 3


@dataclass
class GraphConfig:
    access_token: str
    sender: str | None = None
    endpoint: str = "https://graph.microsoft.com/v1.0"
    save_to_sent_items: bool = True
    retry: RetryPolicy = field(default_factory=RetryPolicy)


@dataclass
class AzureSMTPConfig:
    """Office 365 SMTP submission authenticated with an OAuth2 bearer token (XOAUTH2)."""

    username: str
    access_token: str
    host: str = "smtp.office365.com"
    port: int = 587
    retry: RetryPolicy = field(default_factory=RetryPolicy)


@dataclass
class SMTPConfig:
    host: str
    port: int = 587
    use_tls: bool = True
    username: str | None = None
    password: str | None = None
    retry: RetryPolicy = field(default_factory=RetryPolicy)


@dataclass
class MailConfig:
    enabled: bool = True
    sender: str | None = None
    reply_to: str | None = None
    bcc: List[str] = field(default_factory=list)
    providers: List[str] = field(default_factory=lambda: list(PROVIDERS))
    graph: Optional[GraphConfig] = None
    azure_smtp: Optional[AzureSMTPConfig] = None
    smtp: Optional[SMTPConfig] = None

    @classmethod
    def load(cls, path: Path | None = None) -> "MailConfig":
        """Load from a YAML/JSON file; with no file, build from environment variables only."""
        if path is None:
            return cls.from_dict({})
        if not path.exists():
            raise FileNotFoundError(f"Mail configuration file not found: {path}")

        with path.open("r", encoding="utf-8") as f:
            if path.suffix.lower() in {".yaml", ".yml"}:
                raw = yaml.safe_load(f) or {}
            else:
                raw = json.load(f)
        return cls.from_dict(raw)

    @classmethod
    def from_dict(cls, raw: dict) -> "MailConfig":
        graph_cfg = None
        graph_raw = _with_env_overrides(raw.get("graph") or {}, prefix="GRAPH_")
        if graph_raw.get("access_token"):
            graph_cfg = GraphConfig(
                access_token=graph_raw["access_token"],
                sender=graph_raw.get("sender"),
                endpoint=graph_raw.get("endpoint", "https://graph.microsoft.com/v1.0"),
                save_to_sent_items=graph_raw.get("save_to_sent_items", True),
                retry=_retry(graph_raw.get("retry")),
            )

        azure_cfg = None
        azure_raw = _with_env_overrides(raw.get("azure_smtp") or {}, prefix="AZURE_SMTP_")
        if azure_raw.get("username") and azure_raw.get("access_token"):
            azure_cfg = AzureSMTPConfig(
                username=azure_raw["username"],
                access_token=azure_raw["access_token"],
                host=azure_raw.get("host", "smtp.office365.com"),
                port=int(azure_raw.get("port", 587)),
                retry=_retry(azure_raw.get("retry")),
            )

        smtp_cfg = None
        smtp_raw = _with_env_overrides(raw.get("smtp") or {}, prefix="SMTP_")
        if smtp_raw.get("host"):
            smtp_cfg = SMTPConfig(
                host=smtp_raw["host"],
                port=int(smtp_raw.get("port", 587)),
                use_tls=bool(smtp_raw.get("use_tls", True)),
                username=smtp_raw.get("username"),
                password=smtp_raw.get("password"),
                retry=_retry(smtp_raw.get("retry")),
            )

        providers = [str(p).lower() for p in raw.get("providers") or PROVIDERS]
        unknown = [p for p in providers if p not in PROVIDERS]
        if unknown:
            raise ValueError(f"Unknown mail providers: {', '.join(unknown)}")

        enabled = raw.get("enabled", True)
        if "MAIL_ENABLED" in os.environ:
            enabled = os.environ["MAIL_ENABLED"].strip().lower() not in _FALSE

        return cls(
            enabled=bool(enabled),
            sender=raw.get("sender") or os.environ.get("MAIL_SENDER"),
            reply_to=raw.get("reply_to") or os.environ.get("MAIL_REPLY_TO"),
            bcc=list(raw.get("bcc") or _env_list("MAIL_BCC")),
            providers=providers,
            graph=graph_cfg,
            azure_smtp=azure_cfg,
            smtp=smtp_cfg,
        )

    def configured_providers(self) -> List[str]:
        """Providers in fallback order, skipping any without settings."""
        configured = {
            "graph": self.graph is not None,
            "azure_smtp": self.azure_smtp is not None,
            "smtp": self.smtp is not None,
        }
        return [name for name in self.providers if configured[name]]


def _retry(raw: dict | None) -> RetryPolicy:
    if not raw:
        return RetryPolicy()
    return RetryPolicy(
        retries=int(raw.get("retries", 2)),
        backoff_factor=float(raw.get("backoff_factor", 1.0)),
        timeout_seconds=float(raw.get("timeout_seconds", 30.0)),
        circuit_breaker_failures=int(raw.get("circuit_breaker_failures", 3)),
    )


_ENV_FIELDS = {
    "host": str,
    "port": int,
    "username": str,
    "password": str,
    "use_tls": lambda value: value.strip().lower() not in _FALSE,
    "sender": str,
    "access_token": str,
    "endpoint": str,
}


def _with_env_overrides(data: dict, prefix: str) -> dict:
    """Return ``data`` with any ``{prefix}{FIELD}`` environment variables applied on top."""
    merged = dict(data)
    for name, convert in _ENV_FIELDS.items():
        raw = os.environ.get(prefix + name.upper())
        if raw is not None:
            merged[name] = convert(raw)
    return merged


def _env_list(name: str) -> List[str]:
    raw = os.environ.get(name)
    if not raw:
        return []
    return [entry.strip() for entry in raw.split(",") if entry.strip()]


__all__ = [
    "PROVIDERS",
    "AzureSMTPConfig",
    "GraphConfig",
    "MailConfig",
    "RetryPolicy",
    "SMTPConfig",
]
