import json
import logging
import os
import threading
from typing import Any, Callable, Dict, List, Optional, Tuple

import click
from dotenv import load_dotenv

from ..._config import Timeout, TransportConfig
from ..._services._transport import Transport
from ..._utils.constants import DOTENV_FILE, LOGGER_NAME
from ...models.credentials import Credentials
from ...models.errors import ErrorKind, RestError
from ...models.result import Result
from ._console import ConsoleLogger


def load_environment() -> None:
    load_dotenv(dotenv_path=os.path.join(os.getcwd(), DOTENV_FILE), override=True)


def setup_logging(verbose: bool) -> None:
    from rich.logging import RichHandler

    logger = logging.getLogger(LOGGER_NAME)
    if verbose:
        logger.setLevel(logging.DEBUG)
        if not logger.handlers:
            logger.addHandler(RichHandler(show_path=False))


def request_options(function):
    """Options shared by every command that builds a request."""
    function = click.option(
        "--timeout",
        type=click.FloatRange(min=0, min_open=True),
        help="Connect and read timeout in seconds",
    )(function)
    function = click.option(
        "--insecure",
        "-k",
        is_flag=True,
        help="Skip TLS certificate verification",
    )(function)
    function = click.option(
        "--header",
        "-H",
        "headers",
        multiple=True,
        help="Request header as 'Name: value' (repeatable)",
    )(function)
    function = click.option(
        "--query",
        "-q",
        "query",
        multiple=True,
        help="Query item as name=value, or a bare name (repeatable)",
    )(function)
    function = click.option(
        "--param",
        "-p",
        "params",
        multiple=True,
        help="Value for a {placeholder} in the URL as name=value (repeatable)",
    )(function)
    return function


def parse_params(values: Tuple[str, ...]) -> Optional[Dict[str, str]]:
    params: Dict[str, str] = {}
    for value in values:
        name, sep, param = value.partition("=")
        if not sep or not name:
            raise click.BadParameter(
                f"'{value}' is not in name=value form", param_hint="--param"
            )
        params[name] = param
    return params or None


def parse_query(values: Tuple[str, ...]) -> Optional[List[Tuple[str, Optional[str]]]]:
    if not values:
        return None
    items: List[Tuple[str, Optional[str]]] = []
    for value in values:
        name, sep, item = value.partition("=")
        items.append((name, item if sep else None))
    return items


def parse_headers(values: Tuple[str, ...]) -> Dict[str, str]:
    headers: Dict[str, str] = {}
    for value in values:
        name, sep, header = value.partition(":")
        if not sep or not name.strip():
            raise click.BadParameter(
                f"'{value}' is not in 'Name: value' form", param_hint="--header"
            )
        headers[name.strip()] = header.strip()
    return headers


def parse_credentials(
    bearer: Optional[str], user: Optional[str]
) -> Optional[Credentials]:
    if bearer and user:
        raise click.UsageError("--bearer and --user are mutually exclusive")
    if bearer:
        return Credentials.bearer_authentication(bearer)
    if user:
        username, _, password = user.partition(":")
        return Credentials.basic_authentication(username, password)
    return None


def create_transport(insecure: bool, timeout: Optional[float]) -> Transport:
    update: Dict[str, Any] = {}
    if insecure:
        update["insecure"] = True
    if timeout is not None:
        update["timeout"] = Timeout(connect=timeout, read=timeout)
    config = TransportConfig.from_env().model_copy(update=update)
    return Transport(config)


# slack on top of the transport timeouts for retry backoff and delivery
RESULT_WAIT_MARGIN = 10.0


def result_timeout(config: TransportConfig) -> Optional[float]:
    """Longest a request sent with `config` can take, or None if unbounded."""
    connect, read = config.timeout.connect, config.timeout.read
    if connect is None or read is None:
        return None
    attempts = config.max_retries + 1
    return (connect + read + RESULT_WAIT_MARGIN) * attempts


def wait_for_result(
    dispatch: Callable[[Callable[[Result[Any]], None]], None],
    timeout: Optional[float] = None,
) -> Result[Any]:
    """Run a callback-style dispatch and block until its handler fires.

    Raises:
        click.ClickException: The handler did not fire within `timeout`.
    """
    done = threading.Event()
    outcome: List[Result[Any]] = []

    def handler(result: Result[Any]) -> None:
        outcome.append(result)
        done.set()

    dispatch(handler)
    if not done.wait(timeout):
        raise click.ClickException(f"No response within {timeout:g} seconds")
    return outcome[0]


def report_error(console: ConsoleLogger, error: RestError) -> None:
    console.error(str(error))
    if error.kind is ErrorKind.ERROR_STATUS_CODE and error.response_data:
        body = error.response_data
        try:
            console.print_json(json.loads(body))
        except ValueError:
            console.print(body.decode("utf-8", errors="replace"))
