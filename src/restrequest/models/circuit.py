from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable

if TYPE_CHECKING:
    from .._services._breaker import BreakerError


@dataclass(frozen=True)
class CircuitParameters:
    """Settings for the circuit breaker attached to a `RestRequest`.

    Durations are in milliseconds.

    Attributes:
        fallback: Called with ``(BreakerError, fallback_args)`` whenever the
            breaker rejects a dispatch instead of running it.
        name: Breaker name, used in logs.
        timeout: Per-request timeout applied to protected dispatches.
        reset_timeout: Time an open breaker waits before allowing a trial call.
        max_failures: Failures that open the breaker.
        rolling_window: Failures older than this no longer count.
        bulkhead: Maximum concurrent protected dispatches; 0 means unbounded.
    """

    fallback: Callable[["BreakerError", Any], None]
    name: str = "circuitName"
    timeout: int = 2000
    reset_timeout: int = 60000
    max_failures: int = 5
    rolling_window: int = 10000
    bulkhead: int = 0

    def __post_init__(self) -> None:
        if self.max_failures < 1:
            raise ValueError("max_failures must be at least 1")
        if self.timeout <= 0 or self.reset_timeout < 0 or self.rolling_window < 0:
            raise ValueError("circuit durations must be positive")
        if self.bulkhead < 0:
            raise ValueError("bulkhead must not be negative")
