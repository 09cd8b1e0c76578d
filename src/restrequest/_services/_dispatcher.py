from logging import getLogger
from typing import Any, Callable, Optional

import httpx

from .._utils._errors import classify_transport_error, handle_transport_errors
from .._utils.constants import CIRCUIT_OPEN_MESSAGE, LOGGER_NAME
from ..models.errors import RestError
from ..models.request import PreparedRequest
from ..models.result import CompletionHandler, Result
from ._breaker import CircuitBreaker, Invocation
from ._transport import Transport

logger = getLogger(LOGGER_NAME)


def classify_response(response: httpx.Response) -> Result[httpx.Response]:
    """2xx responses succeed; any other status is ``ERROR_STATUS_CODE``."""
    if 200 <= response.status_code < 300:
        return Result.success(response)
    logger.debug(f"Error status code {response.status_code} for {response.url}")
    return Result.failure(RestError.error_status_code(response))


def deliver(completion_handler: Callable[[Result[Any]], None], result: Result) -> None:
    """Invoke a user completion handler, logging anything it raises."""
    try:
        completion_handler(result)
    except Exception:
        logger.exception("Unhandled error in completion handler")


def send(
    transport: Transport,
    request: PreparedRequest,
    completion_handler: CompletionHandler[httpx.Response],
    breaker: Optional[CircuitBreaker] = None,
) -> None:
    """Dispatch `request` and report the classified outcome.

    Without a breaker the request goes straight to the transport. With one,
    it runs through `breaker.run`; if the breaker is open its fallback is
    called instead and `completion_handler` is not.
    """

    def on_response(
        response: Optional[httpx.Response], error: Optional[BaseException]
    ) -> None:
        if error is not None:
            deliver(completion_handler, Result.failure(classify_transport_error(error)))
            return
        deliver(completion_handler, classify_response(response))

    try:
        if breaker is None:
            transport.execute(request, on_response)
        else:
            transport.submit(
                breaker.run, (request, completion_handler), CIRCUIT_OPEN_MESSAGE
            )
    except RuntimeError as e:
        deliver(completion_handler, Result.failure(RestError.other_error(e)))


def perform_protected(
    transport: Transport, invocation: Invocation, timeout_ms: int
) -> None:
    """Breaker command body: send one request through `transport`.

    Only transport-level failures are reported to the breaker; a completed
    exchange counts as a success whatever its status code.
    """
    request, completion_handler = invocation.command_args
    try:
        with handle_transport_errors():
            response = transport.perform(request, httpx.Timeout(timeout_ms / 1000))
    except RestError as e:
        invocation.notify_failure(repr(e.error or e))
        deliver(completion_handler, Result.failure(e))
        return
    invocation.notify_success()
    deliver(completion_handler, classify_response(response))
