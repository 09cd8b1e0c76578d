from contextlib import contextmanager
from typing import Generator

import httpx

from ..models.errors import RestError


def classify_transport_error(error: BaseException) -> RestError:
    """Map an exception raised while exchanging a request into a `RestError`.

    httpx errors (connect/read timeouts, refused connections, protocol
    errors, ...) become ``TRANSPORT_ERROR``; anything else is
    ``OTHER_ERROR``. Errors that are already a `RestError` pass through.
    """
    if isinstance(error, RestError):
        return error
    if isinstance(error, httpx.HTTPError):
        return RestError.transport_error(error)
    return RestError.other_error(error)


@contextmanager
def handle_transport_errors() -> Generator[None, None, None]:
    """Context manager converting errors raised in the block into `RestError`.

    Raises:
        RestError: ``TRANSPORT_ERROR`` for httpx errors, ``OTHER_ERROR``
            for any other exception.
    """
    try:
        yield
    except RestError:
        raise
    except Exception as e:
        raise classify_transport_error(e) from e
