"""
Circuit breaker implementation protecting the backend from repeated failures.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from ..common.utils import get_current_time, monotonic_ms
from ..errors import CircuitOpenError

logger = logging.getLogger(__name__)


class CircuitState(Enum):
    """Circuit breaker states."""
    CLOSED = "closed"      # Normal operation, requests allowed
    OPEN = "open"          # Failure mode, requests blocked
    HALF_OPEN = "half_open"  # One trial request allowed


@dataclass
class StateTransition:
    """Circuit breaker state transition."""
    from_state: CircuitState
    to_state: CircuitState
    timestamp: datetime
    reason: str
    failure_count: int = 0


@dataclass
class CircuitStats:
    """Circuit breaker statistics."""
    name: str
    state: CircuitState
    failure_count: int = 0
    total_requests: int = 0
    rejected_requests: int = 0
    total_failures: int = 0
    total_successes: int = 0
    reopens_in_ms: Optional[float] = None
    last_failure_time: Optional[datetime] = None
    last_success_time: Optional[datetime] = None
    state_change_time: datetime = field(default_factory=get_current_time)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'name': self.name,
            'state': self.state.value,
            'failure_count': self.failure_count,
            'total_requests': self.total_requests,
            'rejected_requests': self.rejected_requests,
            'total_failures': self.total_failures,
            'total_successes': self.total_successes,
            'reopens_in_ms': self.reopens_in_ms,
            'last_failure_time': self.last_failure_time.isoformat() if self.last_failure_time else None,
            'last_success_time': self.last_success_time.isoformat() if self.last_success_time else None,
            'state_change_time': self.state_change_time.isoformat(),
        }


def _is_infrastructure_failure(error: BaseException) -> bool:
    is_retryable = getattr(error, "is_retryable", None)
    return bool(is_retryable and is_retryable())


@dataclass
class CircuitBreakerOptions:
    """Circuit breaker configuration options."""
    name: str = "api"
    max_failures: int = 5
    reset_timeout_ms: int = 30_000
    on_state_change: Optional[Callable[[StateTransition], None]] = None
    is_failure: Callable[[BaseException], bool] = _is_infrastructure_failure


class CircuitBreaker:
    """
    Circuit breaker shared by every call made through one client.

    States:
    - CLOSED: Normal operation, all requests allowed
    - OPEN: Failure mode, all requests rejected until ``reopens_at``
    - HALF_OPEN: Exactly one trial request allowed to test recovery

    Only failures accepted by ``options.is_failure`` (network errors,
    timeouts, 5xx, 429) count. A call the backend answered with any other
    error leaves the counter alone, and closes the breaker if it was the
    half-open trial.

    State is mutated synchronously in the completion handlers, so no lock is
    needed on a single event loop.
    """

    def __init__(self, options: Optional[CircuitBreakerOptions] = None,
                 clock: Optional[Callable[[], float]] = None):
        self.options = options or CircuitBreakerOptions()
        self._clock = clock or monotonic_ms
        self._state = CircuitState.CLOSED
        self._failure_count = 0
        self._reopens_at: Optional[float] = None
        self._trial_in_flight = False
        self._total_requests = 0
        self._rejected_requests = 0
        self._total_failures = 0
        self._total_successes = 0
        self._last_failure_time: Optional[datetime] = None
        self._last_success_time: Optional[datetime] = None
        self._state_change_time = get_current_time()
        self._transitions: List[StateTransition] = []

        logger.info(f"Circuit breaker '{self.name}' initialized")

    @property
    def name(self) -> str:
        """Get circuit breaker name."""
        return self.options.name

    @property
    def state(self) -> CircuitState:
        """Get current state."""
        return self._state

    @property
    def failure_count(self) -> int:
        return self._failure_count

    @property
    def reopens_at(self) -> Optional[float]:
        return self._reopens_at

    @property
    def is_open(self) -> bool:
        return self._state == CircuitState.OPEN

    @property
    def stats(self) -> CircuitStats:
        """Get current statistics."""
        reopens_in = None
        if self._reopens_at is not None:
            reopens_in = max(0.0, self._reopens_at - self._clock())

        return CircuitStats(
            name=self.name,
            state=self._state,
            failure_count=self._failure_count,
            total_requests=self._total_requests,
            rejected_requests=self._rejected_requests,
            total_failures=self._total_failures,
            total_successes=self._total_successes,
            reopens_in_ms=reopens_in,
            last_failure_time=self._last_failure_time,
            last_success_time=self._last_success_time,
            state_change_time=self._state_change_time,
        )

    def reset(self) -> None:
        """Reset circuit breaker to closed state."""
        old_state = self._state
        self._state = CircuitState.CLOSED
        self._failure_count = 0
        self._reopens_at = None
        self._trial_in_flight = False
        self._state_change_time = get_current_time()
        self._record_transition(old_state, CircuitState.CLOSED, "Manual reset")

        logger.info(f"Circuit breaker '{self.name}' manually reset")

    async def call(self, func: Callable, *args, **kwargs) -> Any:
        """Execute a coroutine function with circuit breaker protection."""
        self.before_call()

        try:
            result = await func(*args, **kwargs)
        except asyncio.CancelledError:
            self.record_cancelled()
            raise
        except Exception as e:
            if self.options.is_failure(e):
                self.record_failure(e)
            else:
                self.record_answered(e)
            raise

        self.record_success()
        return result

    def before_call(self) -> None:
        """Admit a call or raise ``CircuitOpenError`` without touching the network."""
        self._total_requests += 1

        if self._state == CircuitState.CLOSED:
            return

        if self._state == CircuitState.OPEN:
            now = self._clock()
            if self._reopens_at is not None and now >= self._reopens_at:
                self._transition_to_half_open()
                self._trial_in_flight = True
                return
            self._reject(now)

        if self._state == CircuitState.HALF_OPEN:
            if not self._trial_in_flight:
                self._trial_in_flight = True
                return
            self._reject(self._clock())

    def _reject(self, now: float) -> None:
        self._rejected_requests += 1
        reopens_in = None
        if self._reopens_at is not None:
            reopens_in = max(0.0, self._reopens_at - now)
        logger.debug(f"Circuit breaker '{self.name}' rejected call ({self._state.value})")
        raise CircuitOpenError(reopens_in_ms=reopens_in)

    def record_success(self) -> None:
        """Handle a successful call."""
        self._total_successes += 1
        self._last_success_time = get_current_time()
        self._failure_count = 0

        if self._state == CircuitState.HALF_OPEN:
            self._transition_to_closed("Trial call succeeded")

    def record_failure(self, exception: Optional[BaseException] = None) -> None:
        """Handle a call that ended in an infrastructure failure."""
        self._total_failures += 1
        self._failure_count += 1
        self._last_failure_time = get_current_time()

        logger.warning(f"Circuit breaker '{self.name}' recorded failure "
                       f"{self._failure_count}/{self.options.max_failures}: {exception}")

        if self._state == CircuitState.HALF_OPEN:
            self._transition_to_open("Trial call failed")
        elif self._state == CircuitState.CLOSED and self._failure_count >= self.options.max_failures:
            self._transition_to_open(f"Failure threshold reached ({self._failure_count} failures)")

    def record_answered(self, exception: Optional[BaseException] = None) -> None:
        """Handle a call the backend answered with a non-infrastructure error."""
        if self._state == CircuitState.HALF_OPEN and self._trial_in_flight:
            self._transition_to_closed(f"Backend answered trial call ({exception})")

    def record_cancelled(self) -> None:
        """Free the trial slot of a cancelled half-open call."""
        if self._state == CircuitState.HALF_OPEN:
            self._trial_in_flight = False

    def _transition_to_open(self, reason: str) -> None:
        """Transition to open state."""
        old_state = self._state
        self._state = CircuitState.OPEN
        self._reopens_at = self._clock() + self.options.reset_timeout_ms
        self._trial_in_flight = False
        self._state_change_time = get_current_time()
        self._record_transition(old_state, CircuitState.OPEN, reason)

        logger.warning(f"Circuit breaker '{self.name}' opened: {reason}")

    def _transition_to_half_open(self) -> None:
        """Transition to half-open state."""
        old_state = self._state
        self._state = CircuitState.HALF_OPEN
        self._state_change_time = get_current_time()

        reason = "Reset timeout elapsed, attempting recovery"
        self._record_transition(old_state, CircuitState.HALF_OPEN, reason)

        logger.info(f"Circuit breaker '{self.name}' half-opened: {reason}")

    def _transition_to_closed(self, reason: str) -> None:
        """Transition to closed state."""
        old_state = self._state
        self._state = CircuitState.CLOSED
        self._failure_count = 0
        self._reopens_at = None
        self._trial_in_flight = False
        self._state_change_time = get_current_time()
        self._record_transition(old_state, CircuitState.CLOSED, reason)

        logger.info(f"Circuit breaker '{self.name}' closed: {reason}")

    def _record_transition(self, from_state: CircuitState, to_state: CircuitState, reason: str) -> None:
        """Record state transition."""
        transition = StateTransition(
            from_state=from_state,
            to_state=to_state,
            timestamp=get_current_time(),
            reason=reason,
            failure_count=self._failure_count,
        )

        self._transitions.append(transition)

        # Keep only recent transitions
        if len(self._transitions) > 100:
            self._transitions = self._transitions[-50:]

        if self.options.on_state_change:
            try:
                self.options.on_state_change(transition)
            except Exception as e:
                logger.error(f"State change callback failed: {e}")

    def get_transitions(self) -> List[StateTransition]:
        """Get state transition history."""
        return self._transitions.copy()
