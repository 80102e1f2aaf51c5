"""
Unit tests for retry policy and deadlines.
"""

import pytest

from twlauncher.core.exceptions import DownloadCancelledError, RetryExhaustedError
from twlauncher.core.retry import Deadline, RetryPolicy, retry_with_policy


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now: float = 100.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


class TestRetryPolicy:
    """Test RetryPolicy."""

    def test_defaults(self):
        policy = RetryPolicy()
        assert policy.max_attempts == 3
        assert policy.delay_seconds == 2.0

    def test_no_delay_before_first_attempt(self):
        policy = RetryPolicy()
        assert policy.delay_before(1) == 0.0
        assert policy.delay_before(2) == 2.0
        assert policy.delay_before(3) == 2.0

    @pytest.mark.parametrize("attempts", [0, -1])
    def test_invalid_attempts(self, attempts):
        with pytest.raises(ValueError):
            RetryPolicy(max_attempts=attempts)

    def test_negative_delay(self):
        with pytest.raises(ValueError):
            RetryPolicy(delay_seconds=-1)


class TestRetryWithPolicy:
    """Test retry_with_policy()."""

    def test_first_attempt_succeeds(self, fast_policy, sleeps):
        result = retry_with_policy(lambda n: n, fast_policy, sleep=sleeps.append)

        assert result == 1
        assert sleeps == []

    def test_succeeds_after_failures(self, fast_policy, sleeps):
        def operation(attempt):
            if attempt < 3:
                raise ConnectionError(f"attempt {attempt}")
            return "ok"

        assert retry_with_policy(operation, fast_policy, sleep=sleeps.append) == "ok"
        assert sleeps == [2.0, 2.0]

    def test_exhausted(self, fast_policy, sleeps):
        attempts = []

        def operation(attempt):
            attempts.append(attempt)
            raise ConnectionError(f"attempt {attempt}")

        with pytest.raises(RetryExhaustedError) as exc_info:
            retry_with_policy(operation, fast_policy, sleep=sleeps.append)

        assert attempts == [1, 2, 3]
        assert sleeps == [2.0, 2.0]
        assert exc_info.value.attempts == 3
        assert str(exc_info.value.last_error) == "attempt 3"
        assert exc_info.value.__cause__ is exc_info.value.last_error

    def test_on_failure_called_per_attempt(self, sleeps):
        failures = []

        def operation(attempt):
            raise ValueError("boom")

        with pytest.raises(RetryExhaustedError):
            retry_with_policy(
                operation,
                RetryPolicy(max_attempts=2, delay_seconds=0),
                sleep=sleeps.append,
                on_failure=lambda n, e: failures.append((n, str(e))),
            )

        assert failures == [(1, "boom"), (2, "boom")]
        assert sleeps == []


class TestDeadline:
    """Test Deadline."""

    def test_never(self):
        deadline = Deadline.never()

        assert deadline.remaining() is None
        assert deadline.expired is False
        assert deadline.timeout(30) == 30
        deadline.check()

    def test_remaining(self):
        clock = FakeClock()
        deadline = Deadline(10, clock=clock)

        clock.now += 4
        assert deadline.remaining() == pytest.approx(6)
        assert deadline.timeout(30) == pytest.approx(6)
        assert deadline.timeout(2) == 2

    def test_expiry(self):
        clock = FakeClock()
        deadline = Deadline(10, clock=clock)

        clock.now += 10
        assert deadline.expired is True
        assert deadline.remaining() == 0.0
        with pytest.raises(DownloadCancelledError, match="deadline exceeded"):
            deadline.check()

    def test_cancel(self):
        deadline = Deadline(60)
        deadline.cancel()

        assert deadline.cancelled is True
        assert deadline.expired is True
        assert deadline.remaining() == 0.0
        with pytest.raises(DownloadCancelledError, match="operation cancelled"):
            deadline.timeout(30)

    def test_guard_stops_stream(self):
        deadline = Deadline.never()
        seen = []

        with pytest.raises(DownloadCancelledError):
            for chunk in deadline.guard(iter([b"a", b"b", b"c"])):
                seen.append(chunk)
                deadline.cancel()

        assert seen == [b"a"]
