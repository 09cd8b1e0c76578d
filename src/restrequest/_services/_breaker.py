import threading
import time
from enum import Enum
from logging import getLogger
from typing import Any, Callable, Optional

import pybreaker

from .._utils.constants import LOGGER_NAME
from ..models.circuit import CircuitParameters

logger = getLogger(LOGGER_NAME)


class BreakerState(str, Enum):
    CLOSED = pybreaker.STATE_CLOSED
    OPEN = pybreaker.STATE_OPEN
    HALF_OPEN = pybreaker.STATE_HALF_OPEN


class BreakerErrorKind(str, Enum):
    FAST_FAIL = "fastFail"


class BreakerError(Exception):
    """Passed to the fallback when the breaker rejects a dispatch."""

    def __init__(self, kind: BreakerErrorKind, reason: Optional[str] = None):
        self.kind = kind
        self.reason = reason
        super().__init__(reason or kind.value)

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, BreakerError):
            return self.kind == other.kind
        if isinstance(other, BreakerErrorKind):
            return self.kind == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.kind)


class _NotifiedFailure(Exception):
    """Carries a failure reported by a command back through pybreaker."""


class Invocation:
    """Handle given to a protected command for one run.

    The command reports the transport-level outcome with `notify_success` or
    `notify_failure`. The first notification is recorded by the breaker at
    once, before the command goes on to deliver its result. A command that
    reports nothing counts as a success; one that raises counts as a failure.
    """

    def __init__(
        self,
        command_args: Any,
        on_outcome: Optional[Callable[["Invocation"], None]] = None,
    ):
        self.command_args = command_args
        self.failure_reason: Optional[str] = None
        self.reported = False
        self._on_outcome = on_outcome

    @property
    def failed(self) -> bool:
        return self.failure_reason is not None

    def notify_success(self) -> None:
        self.failure_reason = None
        self.finish()

    def notify_failure(self, reason: str = "failure") -> None:
        self.failure_reason = reason
        self.finish()

    def finish(self) -> None:
        """Record the outcome unless a notification already did."""
        if self.reported:
            return
        self.reported = True
        if self._on_outcome is not None:
            self._on_outcome(self)


Command = Callable[[Invocation], None]


class _LoggingListener(pybreaker.CircuitBreakerListener):
    def state_change(self, cb, old_state, new_state) -> None:
        old_name = old_state.name if old_state is not None else None
        if old_name == new_state.name:
            return
        if new_state.name == pybreaker.STATE_OPEN:
            logger.warning(
                f"Circuit '{cb.name}' opened after {cb.fail_counter} failures"
            )
        else:
            logger.info(f"Circuit '{cb.name}' {old_name} -> {new_state.name}")

    def failure(self, cb, exc) -> None:
        logger.debug(f"Circuit '{cb.name}' recorded failure: {exc}")


class _OpenedAtListener(pybreaker.CircuitBreakerListener):
    def __init__(self) -> None:
        self.opened_at: Optional[float] = None

    def state_change(self, cb, old_state, new_state) -> None:
        if new_state.name == pybreaker.STATE_OPEN:
            self.opened_at = time.monotonic()


class CircuitBreaker:
    """Failure-driven circuit breaker around a single bound command.

    Failure counting and state transitions are delegated to `pybreaker`.
    On top of it this class adds the rolling failure window, the bulkhead and
    the fallback call made when a dispatch is rejected.

    Commands run outside pybreaker's lock, so protected dispatches proceed
    concurrently up to the bulkhead; only admission and outcome recording
    are serialized. While half-open a single trial command is admitted.
    """

    def __init__(self, parameters: CircuitParameters, command: Command):
        self.parameters = parameters
        self._command = command
        self._opened = _OpenedAtListener()
        self._breaker = pybreaker.CircuitBreaker(
            fail_max=parameters.max_failures,
            reset_timeout=parameters.reset_timeout / 1000,
            name=parameters.name,
            listeners=[_LoggingListener(), self._opened],
        )
        self._gate = threading.Lock()
        self._trial_in_flight = False
        self._window_lock = threading.Lock()
        self._last_failure_at: Optional[float] = None
        self._bulkhead = (
            threading.BoundedSemaphore(parameters.bulkhead)
            if parameters.bulkhead > 0
            else None
        )

    @property
    def name(self) -> str:
        return self.parameters.name

    @property
    def state(self) -> BreakerState:
        return BreakerState(self._breaker.current_state)

    @property
    def failure_count(self) -> int:
        return self._breaker.fail_counter

    def reset(self) -> None:
        """Force the breaker closed and clear its failure count."""
        with self._gate:
            self._trial_in_flight = False
            self._breaker.close()

    def run(self, command_args: Any, fallback_args: Any = None) -> None:
        """Run the bound command, or the fallback if the breaker is open.

        Blocks while the command runs; call it from a worker thread.
        """
        if self._bulkhead is None:
            self._run(command_args, fallback_args)
            return
        with self._bulkhead:
            self._run(command_args, fallback_args)

    def _run(self, command_args: Any, fallback_args: Any) -> None:
        self._expire_failures()
        trial = self._admit()
        if trial is None:
            logger.debug(f"Circuit '{self.name}' is open, calling fallback")
            self.parameters.fallback(
                BreakerError(
                    BreakerErrorKind.FAST_FAIL, f"Circuit '{self.name}' is open"
                ),
                fallback_args,
            )
            return

        invocation = Invocation(command_args, on_outcome=self._record)
        try:
            self._command(invocation)
        except Exception as e:
            invocation.notify_failure(repr(e))
            raise
        finally:
            invocation.finish()
            if trial:
                with self._gate:
                    self._trial_in_flight = False

    def _admit(self) -> Optional[bool]:
        """Admit one command; returns whether it is the half-open trial, or None."""
        with self._gate:
            state = self._breaker.current_state
            if state == pybreaker.STATE_CLOSED:
                return False
            if state == pybreaker.STATE_OPEN:
                opened_at = self._opened.opened_at
                reset_after = self.parameters.reset_timeout / 1000
                if (
                    opened_at is not None
                    and time.monotonic() - opened_at < reset_after
                ):
                    return None
                self._breaker.half_open()
            if self._trial_in_flight:
                return None
            self._trial_in_flight = True
            return True

    def _record(self, invocation: Invocation) -> None:
        if invocation.failed:
            with self._window_lock:
                self._last_failure_at = time.monotonic()
        try:
            self._breaker.call(self._outcome, invocation)
        except (_NotifiedFailure, pybreaker.CircuitBreakerError):
            pass

    @staticmethod
    def _outcome(invocation: Invocation) -> None:
        if invocation.failed:
            raise _NotifiedFailure(invocation.failure_reason)

    def _expire_failures(self) -> None:
        window = self.parameters.rolling_window
        if window <= 0:
            return
        with self._window_lock:
            last_failure = self._last_failure_at
            if last_failure is None:
                return
            if time.monotonic() - last_failure < window / 1000:
                return
            self._last_failure_at = None
        if (
            self._breaker.current_state == pybreaker.STATE_CLOSED
            and self._breaker.fail_counter > 0
        ):
            logger.debug(f"Circuit '{self.name}' failures expired from window")
            self._breaker.close()
