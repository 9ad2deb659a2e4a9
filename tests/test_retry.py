import pytest

from ctplane.core.errors import NonRetryableError, RetryableError
from ctplane.core.runtime.retry import retry_context


class FakeClock:
    def __init__(self):
        self.now = 0.0
        self.sleeps = []

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


def test_returns_first_success_without_sleeping():
    clock = FakeClock()
    assert retry_context(60, lambda: "ok", sleep=clock.sleep, clock=clock) == "ok"
    assert clock.sleeps == []


def test_retries_retryable_errors_until_success():
    clock = FakeClock()
    attempts = []

    def fn():
        attempts.append(1)
        if len(attempts) < 3:
            raise RetryableError(ConnectionError("reset"))
        return "created"

    assert retry_context(60, fn, sleep=clock.sleep, clock=clock) == "created"
    assert len(attempts) == 3
    assert clock.sleeps == [0.5, 1.0]


def test_non_retryable_error_is_raised_immediately():
    clock = FakeClock()
    original = ValueError("bad request")

    def fn():
        raise NonRetryableError(original)

    with pytest.raises(ValueError) as exc:
        retry_context(60, fn, sleep=clock.sleep, clock=clock)
    assert exc.value is original
    assert clock.sleeps == []


def test_gives_up_after_timeout_with_last_error():
    clock = FakeClock()

    def fn():
        raise RetryableError(TimeoutError(f"attempt at {clock.now}"))

    with pytest.raises(TimeoutError):
        retry_context(60, fn, sleep=clock.sleep, clock=clock)
    assert sum(clock.sleeps) == pytest.approx(60)
    assert max(clock.sleeps) <= 10.0


def test_other_exceptions_propagate_without_retry():
    clock = FakeClock()

    def fn():
        raise KeyError("unexpected")

    with pytest.raises(KeyError):
        retry_context(60, fn, sleep=clock.sleep, clock=clock)
    assert clock.sleeps == []
