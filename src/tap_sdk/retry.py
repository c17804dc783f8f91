"""
Network retry policy with exponential backoff.

Only transient failures are retried: timeouts, failed connections and
``409 Conflict`` responses.  Retries are opt-in (``max_retries`` defaults to 0).

Usage:
    policy = RetryPolicy(max_retries=2)

    if policy.should_retry(error, num_retries):
        num_retries += 1
        time.sleep(policy.sleep_time(num_retries))
"""
from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Optional

import httpx

if TYPE_CHECKING:
    from .config import TapSettings

RETRYABLE_EXCEPTIONS: tuple[type[BaseException], ...] = (
    httpx.TimeoutException,
    httpx.ConnectError,
)
RETRYABLE_STATUS_CODES = frozenset({409})


@dataclass(frozen=True)
class RetryPolicy:
    """Decides whether to retry a failed attempt and how long to wait.

    Attributes:
        max_retries: Maximum number of retries after the first attempt
        initial_delay: Delay before the first retry, and the floor for all delays
        max_delay: Cap on the un-jittered delay
        rand: Source of uniform values in [0, 1) used for jitter
    """

    max_retries: int = 0
    initial_delay: float = 0.5
    max_delay: float = 2.0
    rand: Callable[[], float] = field(default=random.random, compare=False, repr=False)

    @classmethod
    def from_settings(cls, settings: "TapSettings") -> "RetryPolicy":
        return cls(
            max_retries=settings.max_network_retries,
            initial_delay=settings.initial_network_retry_delay,
            max_delay=settings.max_network_retry_delay,
        )

    def should_retry(
        self,
        error: Optional[BaseException],
        num_retries: int,
        status_code: Optional[int] = None,
    ) -> bool:
        """Whether a failed attempt should be retried.

        Args:
            error: Transport exception raised by the attempt, if any
            num_retries: Retries already performed for this call
            status_code: HTTP status of the failed response, if one arrived
        """
        if num_retries >= self.max_retries:
            return False
        if error is not None and isinstance(error, RETRYABLE_EXCEPTIONS):
            return True
        return status_code in RETRYABLE_STATUS_CODES

    def base_delay(self, num_retries: int) -> float:
        """Un-jittered delay before retry number ``num_retries`` (1-based)."""
        return min(self.initial_delay * (2 ** (num_retries - 1)), self.max_delay)

    def sleep_time(self, num_retries: int) -> float:
        """Delay before retry number ``num_retries`` (1-based).

        The base delay is scaled into [base / 2, base) for jitter, then
        floored at ``initial_delay``.
        """
        sleep_seconds = self.base_delay(num_retries)
        sleep_seconds *= 0.5 * (1 + self.rand())
        return max(self.initial_delay, sleep_seconds)


__all__ = ["RETRYABLE_EXCEPTIONS", "RETRYABLE_STATUS_CODES", "RetryPolicy"]
