"""Per-provider retry and failure tracking for mail delivery."""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, TypeVar

from .config import RetryPolicy

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


class ProviderUnavailable(RuntimeError):
    """Raised when a provider has failed ``circuit_breaker_failures`` sends in a row."""

    def __init__(self, provider: str, failures: int) -> None:
        super().__init__(f"{provider} disabled after {failures} consecutive failed sends")
        self.provider = provider
        self.failures = failures


@dataclass
class ProviderHealth:
    """Consecutive failed sends per provider; a threshold of 0 never disables one."""

    failures: Dict[str, int] = field(default_factory=dict)

    def ok(self, provider: str) -> None:
        self.failures.pop(provider, None)

    def failed(self, provider: str) -> int:
        self.failures[provider] = self.failures.get(provider, 0) + 1
        return self.failures[provider]

    def check(self, provider: str, threshold: int) -> None:
        failures = self.failures.get(provider, 0)
        if threshold > 0 and failures >= threshold:
            raise ProviderUnavailable(provider, failures)


def backoff_delay(policy: RetryPolicy, attempt: int) -> float:
    """Seconds to wait before retry number ``attempt`` (1-based)."""
    return max(0.0, policy.backoff_factor * (2 ** (attempt - 1)))


def deliver_with_retry(
    provider: str,
    send: Callable[[float], T],
    policy: RetryPolicy,
    health: ProviderHealth,
    sleeper: Callable[[float], None] = time.sleep,
) -> T:
    """Call ``send(timeout)`` up to ``policy.retries + 1`` times.

    The last error propagates and counts as one failed send for ``provider``.
    """

    health.check(provider, policy.circuit_breaker_failures)
    attempt = 0
    while True:
        try:
            result = send(policy.timeout_seconds)
        except Exception as exc:
            attempt += 1
            if attempt > policy.retries:
                health.failed(provider)
                raise
            delay = backoff_delay(policy, attempt)
            LOGGER.warning(
                "%s send failed (%s); retry %d/%d in %.2fs", provider, exc, attempt, policy.retries, delay
            )
            if delay:
                sleeper(delay)
        else:
            health.ok(provider)
            return result


__all__ = ["ProviderHealth", "ProviderUnavailable", "backoff_delay", "deliver_with_retry"]
