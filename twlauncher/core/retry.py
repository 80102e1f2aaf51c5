"""
Retry policy and deadline handling.

Downloads are retried with a fixed delay between attempts. The policy is a
small value object so that retry behaviour can be tested with a fake sleep
function instead of real time.

A Deadline is the cancellation signal shared by every network call and the
final process invocation of one launcher run.
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Iterable, Iterator, Optional, TypeVar

from .exceptions import DownloadCancelledError, RetryExhaustedError

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_RETRY_DELAY = 2.0


@dataclass(frozen=True)
class RetryPolicy:
    """
    Fixed-delay retry policy.

    Attributes:
        max_attempts: Total number of attempts, including the first one
        delay_seconds: Delay before every attempt after the first
    """

    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    delay_seconds: float = DEFAULT_RETRY_DELAY

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.delay_seconds < 0:
            raise ValueError("delay_seconds cannot be negative")

    def delay_before(self, attempt: int) -> float:
        """
        Get the delay to wait before an attempt.

        Args:
            attempt: Attempt number (1-indexed)

        Returns:
            0 for the first attempt, the fixed delay otherwise
        """
        return 0.0 if attempt <= 1 else self.delay_seconds


def retry_with_policy(
    operation: Callable[[int], T],
    policy: RetryPolicy,
    sleep: Callable[[float], None] = time.sleep,
    on_failure: Optional[Callable[[int, Exception], None]] = None,
) -> T:
    """
    Run an operation until it succeeds or the policy runs out of attempts.

    Args:
        operation: Callable receiving the attempt number (1-indexed)
        policy: Retry policy
        sleep: Function used to wait between attempts
        on_failure: Called with (attempt, error) after each failed attempt

    Returns:
        Result of the first successful attempt

    Raises:
        RetryExhaustedError: If every attempt failed (chained from the last error)
    """
    last_error: Optional[Exception] = None

    for attempt in range(1, policy.max_attempts + 1):
        delay = policy.delay_before(attempt)
        if delay > 0:
            logger.info(
                f"Retrying in {delay:g}s (attempt {attempt}/{policy.max_attempts})"
            )
            sleep(delay)

        try:
            return operation(attempt)
        except Exception as e:
            last_error = e
            logger.info(f"Attempt {attempt}/{policy.max_attempts} failed: {e}")
            if on_failure is not None:
                on_failure(attempt, e)

    raise RetryExhaustedError(policy.max_attempts, last_error) from last_error


class Deadline:
    """
    Cancellation signal with an optional time limit.

    Example:
        >>> deadline = Deadline(180)
        >>> requests.get(url, timeout=deadline.timeout(30))
    """

    def __init__(
        self,
        seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize deadline.

        Args:
            seconds: Time budget from now; None means no time limit
            clock: Monotonic clock (injectable for tests)
        """
        self._clock = clock
        self._expires_at = None if seconds is None else clock() + seconds
        self._cancelled = threading.Event()

    @classmethod
    def never(cls) -> "Deadline":
        """Create a deadline that only fires when cancelled."""
        return cls(None)

    def cancel(self) -> None:
        """Fire the signal immediately."""
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def expired(self) -> bool:
        """True once cancelled or out of time."""
        if self.cancelled:
            return True
        remaining = self.remaining()
        return remaining is not None and remaining <= 0

    def remaining(self) -> Optional[float]:
        """Seconds left, 0 once fired, None when unbounded."""
        if self.cancelled:
            return 0.0
        if self._expires_at is None:
            return None
        return max(0.0, self._expires_at - self._clock())

    def check(self) -> None:
        """
        Raise if the signal has fired.

        Raises:
            DownloadCancelledError: If cancelled or expired
        """
        if self.cancelled:
            raise DownloadCancelledError("operation cancelled")
        if self.expired:
            raise DownloadCancelledError("deadline exceeded")

    def timeout(self, cap: float) -> float:
        """
        Get a per-call timeout bounded by the remaining time.

        Args:
            cap: Upper bound in seconds

        Returns:
            The smaller of cap and the remaining time

        Raises:
            DownloadCancelledError: If the signal has already fired
        """
        self.check()
        remaining = self.remaining()
        return cap if remaining is None else min(cap, remaining)

    def guard(self, chunks: Iterable[T]) -> Iterator[T]:
        """Yield from chunks, checking the signal before each one."""
        for chunk in chunks:
            self.check()
            yield chunk
