import os
import tempfile
from enum import Enum
from logging import getLogger
from pathlib import Path
from typing import Any, Callable, Dict, FrozenSet, Optional, Protocol

import httpx

from .._utils.constants import DOWNLOAD_CHUNK_SIZE, LOGGER_NAME
from ..models.errors import RestError
from ..models.request import PreparedRequest
from ..models.response import RestResponse
from ..models.result import CompletionHandler, Result
from ._dispatcher import deliver
from ._transport import Transport

logger = getLogger(LOGGER_NAME)


class DownloadState(str, Enum):
    STARTED = "started"
    HEADER_RECEIVED = "headerReceived"
    BODY_CHUNK_RECEIVED = "bodyChunkReceived"
    FINISHED = "finished"
    FAILED = "failed"


_TRANSITIONS: Dict[DownloadState, FrozenSet[DownloadState]] = {
    DownloadState.STARTED: frozenset(
        {DownloadState.HEADER_RECEIVED, DownloadState.FAILED}
    ),
    DownloadState.HEADER_RECEIVED: frozenset(
        {
            DownloadState.BODY_CHUNK_RECEIVED,
            DownloadState.FINISHED,
            DownloadState.FAILED,
        }
    ),
    DownloadState.BODY_CHUNK_RECEIVED: frozenset(
        {
            DownloadState.BODY_CHUNK_RECEIVED,
            DownloadState.FINISHED,
            DownloadState.FAILED,
        }
    ),
    DownloadState.FINISHED: frozenset(),
    DownloadState.FAILED: frozenset(),
}


class DownloadDelegate(Protocol):
    """Receives progress events while a download runs.

    Methods are called on a transport worker thread, in state order:
    `on_header` once, `on_chunk` for every chunk written, then exactly one of
    `on_complete` or `on_error`.
    """

    def on_header(self, response: httpx.Response) -> None: ...

    def on_chunk(self, chunk: bytes, received: int, total: Optional[int]) -> None: ...

    def on_complete(self, destination: Path) -> None: ...

    def on_error(self, error: RestError) -> None: ...


class Download:
    """Streams one response body to a file.

    The body is written to a temporary file next to `destination` and moved
    into place once complete, so a failed download never leaves a partial
    file behind.
    """

    def __init__(
        self,
        transport: Transport,
        request: PreparedRequest,
        destination: Path,
        delegate: Optional[DownloadDelegate] = None,
    ):
        self.transport = transport
        self.request = request
        self.destination = destination
        self.delegate = delegate
        self._state = DownloadState.STARTED
        self._received = 0

    @property
    def state(self) -> DownloadState:
        return self._state

    @property
    def received(self) -> int:
        return self._received

    def _transition(self, state: DownloadState) -> None:
        if state not in _TRANSITIONS[self._state]:
            raise RuntimeError(
                f"Invalid download transition {self._state.value} -> {state.value}"
            )
        self._state = state

    def _notify(self, method: str, *args: Any) -> None:
        if self.delegate is None:
            return
        try:
            getattr(self.delegate, method)(*args)
        except Exception:
            logger.exception(f"Unhandled error in download delegate {method}")

    def _fail(self, error: RestError) -> Result[RestResponse[Path]]:
        self._transition(DownloadState.FAILED)
        logger.debug(f"Download of {self.request.url} failed: {error}")
        self._notify("on_error", error)
        return Result.failure(error)

    def run(self) -> Result[RestResponse[Path]]:
        if self.destination.is_dir():
            return self._fail(
                RestError.invalid_file(IsADirectoryError(str(self.destination)))
            )

        logger.debug(f"Download: {self.request.url} -> {self.destination}")
        try:
            response = self.transport.stream(self.request)
        except Exception as e:
            return self._fail(RestError.download_error(error=e))

        try:
            self._transition(DownloadState.HEADER_RECEIVED)
            self._notify("on_header", response)

            if not 200 <= response.status_code < 300:
                response.read()
                return self._fail(RestError.download_error(response=response))

            try:
                self._write_body(response)
            except OSError as e:
                return self._fail(RestError.file_manager_error(e))
            except httpx.HTTPError as e:
                return self._fail(RestError.download_error(response=response, error=e))
        finally:
            response.close()

        self._transition(DownloadState.FINISHED)
        self._notify("on_complete", self.destination)
        return Result.success(
            RestResponse.from_transport(self.request, response, self.destination)
        )

    def _write_body(self, response: httpx.Response) -> None:
        total = response.headers.get("content-length")
        expected = int(total) if total and total.isdigit() else None

        fd, tmp_path = tempfile.mkstemp(
            prefix=f".{self.destination.name}.", dir=self.destination.parent
        )
        try:
            with os.fdopen(fd, "wb") as f:
                for chunk in response.iter_bytes(DOWNLOAD_CHUNK_SIZE):
                    f.write(chunk)
                    self._received += len(chunk)
                    self._transition(DownloadState.BODY_CHUNK_RECEIVED)
                    self._notify("on_chunk", chunk, self._received, expected)
            os.replace(tmp_path, self.destination)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise


def download(
    transport: Transport,
    request: PreparedRequest,
    destination: Path,
    completion_handler: CompletionHandler[RestResponse[Path]],
    delegate: Optional[DownloadDelegate] = None,
) -> None:
    """Download `request` to `destination` on a transport worker thread."""
    job = Download(transport, request, destination, delegate)

    def run(handler: Callable[[Result[Any]], None]) -> None:
        deliver(handler, job.run())

    try:
        transport.submit(run, completion_handler)
    except RuntimeError as e:
        deliver(completion_handler, Result.failure(RestError.other_error(e)))
