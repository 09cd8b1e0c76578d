from ._breaker import (
    BreakerError,
    BreakerErrorKind,
    BreakerState,
    CircuitBreaker,
    Invocation,
)
from ._download import Download, DownloadDelegate, DownloadState
from ._global import (
    configure_global_transport,
    get_global_transport,
    shutdown_global_transport,
)
from ._transport import Transport

__all__ = [
    "BreakerError",
    "BreakerErrorKind",
    "BreakerState",
    "CircuitBreaker",
    "Download",
    "DownloadDelegate",
    "DownloadState",
    "Invocation",
    "Transport",
    "configure_global_transport",
    "get_global_transport",
    "shutdown_global_transport",
]
