import threading
from logging import getLogger
from typing import Optional

from .._config import TransportConfig
from .._utils.constants import LOGGER_NAME
from ..models.errors import TransportAlreadyConfiguredError
from ._transport import Transport

logger = getLogger(LOGGER_NAME)

_lock = threading.Lock()
_transport: Optional[Transport] = None


def configure_global_transport(config: TransportConfig) -> Transport:
    """Create the process-wide transport with `config`.

    The shared transport can be configured once. Call
    `shutdown_global_transport` before configuring it again.

    Raises:
        TransportAlreadyConfiguredError: If the shared transport already exists,
            either configured explicitly or created by first use.
    """
    global _transport
    with _lock:
        if _transport is not None:
            raise TransportAlreadyConfiguredError()
        _transport = Transport(config)
        logger.debug(f"Configured shared transport: {config}")
        return _transport


def get_global_transport() -> Transport:
    """Return the process-wide transport, creating it from the environment."""
    global _transport
    with _lock:
        if _transport is None:
            _transport = Transport(TransportConfig.from_env())
        return _transport


def shutdown_global_transport(wait: bool = True) -> None:
    global _transport
    with _lock:
        transport, _transport = _transport, None
    if transport is not None:
        transport.shutdown(wait=wait)
