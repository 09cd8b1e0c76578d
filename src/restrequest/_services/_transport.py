import logging
import threading
from concurrent.futures import Executor, ThreadPoolExecutor
from logging import getLogger
from typing import Any, Callable, Optional

import httpx
from tenacity import (
    Retrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from .._config import TransportConfig
from .._utils._ssl_context import create_ssl_context
from .._utils._tracing import record_status, request_span
from .._utils.constants import LOGGER_NAME
from ..models.client_certificate import ClientCertificate
from ..models.request import PreparedRequest

logger = getLogger(LOGGER_NAME)

TransportCallback = Callable[
    [Optional[httpx.Response], Optional[BaseException]], None
]


def is_retryable_exception(exception: BaseException) -> bool:
    return isinstance(exception, (httpx.ConnectError, httpx.ConnectTimeout))


class Transport:
    """Sends prepared requests over a pooled httpx client.

    `execute` hands the exchange to the transport's worker pool and returns
    immediately; the callback runs on a worker thread. One transport may be
    shared by any number of `RestRequest` objects.
    """

    def __init__(
        self,
        config: Optional[TransportConfig] = None,
        client_certificate: Optional[ClientCertificate] = None,
        executor: Optional[Executor] = None,
    ) -> None:
        self._config = config or TransportConfig()
        self._closed = False
        self._lock = threading.Lock()

        client_kwargs: dict[str, Any] = {
            "verify": create_ssl_context(
                insecure=self._config.insecure,
                client_certificate=client_certificate,
            ),
            "timeout": self._config.timeout.to_httpx(),
            "follow_redirects": self._config.follow_redirects,
        }
        if self._config.proxy:
            client_kwargs["proxy"] = self._config.proxy

        self._client = httpx.Client(**client_kwargs)
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=self._config.max_workers,
            thread_name_prefix="restrequest",
        )

    @property
    def config(self) -> TransportConfig:
        return self._config

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def client(self) -> httpx.Client:
        return self._client

    def perform(
        self, request: PreparedRequest, timeout: Optional[httpx.Timeout] = None
    ) -> httpx.Response:
        """Send `request` and read the whole body, blocking the caller.

        Connect failures are retried up to ``config.max_retries`` times.
        Non-2xx responses are returned, not raised.
        """
        logger.debug(f"Request: {request.method.value} {request.url}")
        logger.debug(f"HEADERS: {dict(request.headers)}")

        retrying = Retrying(
            retry=retry_if_exception(is_retryable_exception),
            stop=stop_after_attempt(self._config.max_retries + 1),
            wait=wait_exponential(multiplier=0.5, min=0.5, max=10),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        with request_span(request) as span:
            response = retrying(self._send, request, timeout)
            record_status(span, response.status_code)

        logger.debug(f"Response: {response.status_code} {request.url}")
        return response

    def _send(
        self, request: PreparedRequest, timeout: Optional[httpx.Timeout]
    ) -> httpx.Response:
        response = self._client.send(request.to_httpx(timeout))
        try:
            response.read()
        finally:
            response.close()
        return response

    def stream(self, request: PreparedRequest) -> httpx.Response:
        """Open a streaming response; the caller must close it."""
        logger.debug(f"Stream: {request.method.value} {request.url}")
        return self._client.send(request.to_httpx(), stream=True)

    def submit(self, fn: Callable[..., Any], *args: Any) -> None:
        """Run `fn(*args)` on a worker thread."""
        with self._lock:
            if self._closed:
                raise RuntimeError("Transport has been shut down")
            self._executor.submit(self._run_guarded, fn, *args)

    def execute(
        self,
        request: PreparedRequest,
        callback: TransportCallback,
        timeout: Optional[httpx.Timeout] = None,
    ) -> None:
        """Send `request` on a worker thread and report the outcome to `callback`."""
        self.submit(self._execute, request, callback, timeout)

    def _execute(
        self,
        request: PreparedRequest,
        callback: TransportCallback,
        timeout: Optional[httpx.Timeout],
    ) -> None:
        try:
            response = self.perform(request, timeout)
        except Exception as e:
            logger.debug(f"Request failed: {request.method.value} {request.url}: {e!r}")
            callback(None, e)
            return
        callback(response, None)

    @staticmethod
    def _run_guarded(fn: Callable[..., Any], *args: Any) -> None:
        try:
            fn(*args)
        except Exception:
            logger.exception("Unhandled error in completion handler")

    def shutdown(self, wait: bool = True) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
        if self._owns_executor:
            self._executor.shutdown(wait=wait)
        self._client.close()

    def __enter__(self) -> "Transport":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.shutdown()
