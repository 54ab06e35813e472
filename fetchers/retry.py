"""
Retry with exponential backoff. Knows nothing about what it wraps.

Only FetchError is retried. Anything else is a bug and propagates.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, TypeVar

from fetchers.base import FetchError

log = logging.getLogger(__name__)

T = TypeVar("T")


class RetryExhausted(FetchError):
    """Every attempt failed. Carries the last underlying error."""

    def __init__(self, attempts: int, last_error: FetchError):
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(f"All {attempts} attempts failed. Last error: {last_error}")


@dataclass
class RetryPolicy:
    max_attempts: int = 3
    base_delay: float = 2.0     # seconds
    multiplier: float = 2.0
    sleep: Callable[[float], None] = field(default=time.sleep, repr=False)

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {self.max_attempts}")

    def delay_for(self, attempt: int) -> float:
        """Backoff after the given (1-based) failed attempt."""
        return self.base_delay * self.multiplier ** (attempt - 1)

    def call(self, fn: Callable[..., T], *args, describe: str = "operation") -> T:
        last_error: FetchError | None = None

        for attempt in range(1, self.max_attempts + 1):
            log.debug(f"Attempt {attempt}/{self.max_attempts} for {describe}")
            try:
                return fn(*args)
            except FetchError as e:
                last_error = e
                log.warning(f"Attempt {attempt}/{self.max_attempts} failed for {describe}: {e}")

            if attempt < self.max_attempts:
                delay = self.delay_for(attempt)
                log.debug(f"Waiting {delay:.1f}s before retry")
                self.sleep(delay)

        raise RetryExhausted(self.max_attempts, last_error)
