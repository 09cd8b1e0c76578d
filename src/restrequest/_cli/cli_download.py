from pathlib import Path
from typing import Optional, Tuple

import click
import httpx
from rich.progress import (
    BarColumn,
    DownloadColumn,
    Progress,
    TaskID,
    TransferSpeedColumn,
)

from .._rest_request import RestRequest
from ..models.errors import RestError
from ._utils._common import (
    create_transport,
    parse_headers,
    parse_params,
    parse_query,
    report_error,
    request_options,
    wait_for_result,
)
from ._utils._console import ConsoleLogger

console = ConsoleLogger()


class ProgressDelegate:
    """Drives a rich progress bar from download events."""

    def __init__(self, progress: Progress, task: TaskID) -> None:
        self.progress = progress
        self.task = task

    def on_header(self, response: httpx.Response) -> None:
        length = response.headers.get("content-length")
        if length and length.isdigit():
            self.progress.update(self.task, total=int(length))

    def on_chunk(self, chunk: bytes, received: int, total: Optional[int]) -> None:
        self.progress.update(self.task, completed=received)

    def on_complete(self, destination: Path) -> None:
        self.progress.update(self.task, visible=False)

    def on_error(self, error: RestError) -> None:
        self.progress.update(self.task, visible=False)


@click.command()
@click.argument("url")
@click.argument("destination", type=click.Path(path_type=Path))
@request_options
def download(
    url: str,
    destination: Path,
    params: Tuple[str, ...],
    query: Tuple[str, ...],
    headers: Tuple[str, ...],
    insecure: bool,
    timeout: Optional[float],
) -> None:
    r"""Download URL into DESTINATION.

    \b
    Examples:
        restrequest download https://example.com/report.pdf report.pdf
        restrequest download 'https://example.com/files/{name}' out.bin -p name=data.bin
    """
    template_params = parse_params(params)
    query_items = parse_query(query)
    header_parameters = parse_headers(headers)

    progress = Progress(
        "[progress.description]{task.description}",
        BarColumn(),
        DownloadColumn(),
        TransferSpeedColumn(),
        console=console.err,
        disable=not console.err.is_terminal,
    )

    with create_transport(insecure, timeout) as transport, progress:
        request = RestRequest(url, transport=transport)
        request.header_parameters = header_parameters
        delegate = ProgressDelegate(progress, progress.add_task(destination.name))
        # the body is streamed, so only the transport timeouts bound the wait
        result = wait_for_result(
            lambda handler: request.download(
                destination,
                handler,
                delegate=delegate,
                template_params=template_params,
                query_items=query_items,
            )
        )

    if result.error is not None:
        report_error(console, result.error)
        raise click.exceptions.Exit(1)

    response = result.value
    console.success(
        f"Saved {destination} ({destination.stat().st_size} bytes, "
        f"HTTP {response.status_code})"
    )
