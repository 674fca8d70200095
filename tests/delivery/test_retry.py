from __future__ import annotations

import pytest

from quotecalc.delivery.config import RetryPolicy
from quotecalc.delivery.retry import ProviderHealth, ProviderUnavailable, backoff_delay, deliver_with_retry


def _always_fails(timeout: float) -> None:
    raise OSError("down")


def test_retries_with_exponential_backoff() -> None:
    delays = []
    calls = {"count": 0}

    def flaky(timeout: float) -> str:
        calls["count"] += 1
        if calls["count"] < 3:
            raise OSError("temporary failure")
        return "ok"

    health = ProviderHealth()
    result = deliver_with_retry(
        "smtp", flaky, RetryPolicy(retries=3, backoff_factor=0.5), health, sleeper=delays.append
    )
    assert result == "ok"
    assert delays == [0.5, 1.0]
    assert health.failures == {}


def test_timeout_passed_to_send() -> None:
    seen = []
    deliver_with_retry("graph", seen.append, RetryPolicy(timeout_seconds=12.5), ProviderHealth())
    assert seen == [12.5]


def test_provider_disabled_after_threshold() -> None:
    health = ProviderHealth()
    policy = RetryPolicy(retries=0, backoff_factor=0.0, circuit_breaker_failures=2)
    for _ in range(2):
        with pytest.raises(OSError):
            deliver_with_retry("graph", _always_fails, policy, health)
    with pytest.raises(ProviderUnavailable) as excinfo:
        deliver_with_retry("graph", _always_fails, policy, health)
    assert excinfo.value.provider == "graph"
    assert excinfo.value.failures == 2


def test_retries_within_one_send_count_once() -> None:
    health = ProviderHealth()
    policy = RetryPolicy(retries=2, backoff_factor=0.0)
    with pytest.raises(OSError):
        deliver_with_retry("smtp", _always_fails, policy, health, sleeper=lambda _: None)
    assert health.failures == {"smtp": 1}


def test_success_resets_failures() -> None:
    health = ProviderHealth(failures={"smtp": 2})
    deliver_with_retry("smtp", lambda timeout: None, RetryPolicy(), health)
    assert "smtp" not in health.failures


def test_zero_threshold_never_disables() -> None:
    health = ProviderHealth(failures={"smtp": 50})
    health.check("smtp", 0)


def test_backoff_delay() -> None:
    policy = RetryPolicy(backoff_factor=1.5)
    assert [backoff_delay(policy, n) for n in (1, 2, 3)] == [1.5, 3.0, 6.0]
    assert backoff_delay(RetryPolicy(backoff_factor=-1.0), 1) == 0.0
