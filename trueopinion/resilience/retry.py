"""
Retry policy with exponential backoff for infrastructure failures.
"""

import logging
from dataclasses import dataclass

from ..errors import ApiError

logger = logging.getLogger(__name__)


def exponential_backoff(attempt: int, base_delay_ms: float = 1000.0, multiplier: float = 2.0,
                        max_delay_ms: float = 5000.0) -> float:
    """Calculate exponential backoff delay for a zero-based attempt number."""
    delay = base_delay_ms * (multiplier ** attempt)
    return min(delay, max_delay_ms)


@dataclass(frozen=True)
class RetryPolicy:
    """
    Decides whether a failed attempt is retried and how long to wait.

    The policy holds no per-call state: the remaining budget travels with the
    request, so one instance is shared by every call.
    """
    max_attempts: int = 3
    base_delay_ms: int = 1000
    max_delay_ms: int = 5000

    @classmethod
    def from_config(cls, config) -> "RetryPolicy":
        return cls(
            max_attempts=config.max_attempts,
            base_delay_ms=config.base_delay_ms,
            max_delay_ms=config.max_delay_ms,
        )

    @staticmethod
    def is_retryable(error: BaseException) -> bool:
        """Network errors, timeouts, 5xx and 429 are retryable. Nothing else is."""
        return isinstance(error, ApiError) and error.is_retryable()

    def should_retry(self, error: BaseException, attempt: int) -> bool:
        """
        Check whether another attempt should follow.

        Args:
            error: The failure of the attempt that just finished
            attempt: Zero-based number of retries already performed
        """
        if not self.is_retryable(error):
            return False
        return attempt < self.max_attempts

    def delay_for(self, attempt: int) -> float:
        """Backoff before retry number ``attempt`` (zero-based), in milliseconds."""
        return exponential_backoff(attempt, self.base_delay_ms, 2.0, self.max_delay_ms)
