import json
from typing import Optional, Tuple

import click

from .._rest_request import RestRequest
from ..models.errors import RestError
from ..models.http_method import HTTPMethod
from ._utils._common import (
    create_transport,
    parse_credentials,
    parse_headers,
    parse_params,
    parse_query,
    report_error,
    request_options,
    result_timeout,
    wait_for_result,
)
from ._utils._console import ConsoleLogger

console = ConsoleLogger()

DECODERS = ("text", "json", "bytes", "none")


@click.command()
@click.argument("method")
@click.argument("url")
@request_options
@click.option("--data", "-d", help="Raw request body")
@click.option("--json", "json_body", help="JSON request body")
@click.option("--bearer", help="Bearer token for the Authorization header")
@click.option("--user", "-u", help="Basic credentials as username:password")
@click.option(
    "--decode",
    type=click.Choice(DECODERS),
    default="text",
    show_default=True,
    help="How to decode the response body",
)
@click.option(
    "--include", "-i", is_flag=True, help="Print the status line and headers"
)
def send(
    method: str,
    url: str,
    params: Tuple[str, ...],
    query: Tuple[str, ...],
    headers: Tuple[str, ...],
    insecure: bool,
    timeout: Optional[float],
    data: Optional[str],
    json_body: Optional[str],
    bearer: Optional[str],
    user: Optional[str],
    decode: str,
    include: bool,
) -> None:
    r"""Send METHOD to URL and print the response.

    \b
    Examples:
        restrequest send GET https://httpbin.org/get -q name=value
        restrequest send GET 'https://example.com/users/{id}' -p id=42 --decode json
        restrequest send POST https://httpbin.org/post --json '{"Hello": "World"}'
    """
    if data is not None and json_body is not None:
        raise click.UsageError("--data and --json are mutually exclusive")

    template_params = parse_params(params)
    query_items = parse_query(query)
    header_parameters = parse_headers(headers)
    credentials = parse_credentials(bearer, user)

    with create_transport(insecure, timeout) as transport:
        request = RestRequest(url, HTTPMethod(method), transport=transport)
        request.header_parameters = header_parameters
        if credentials is not None:
            request.credentials = credentials
        if json_body is not None:
            try:
                request.message_body = json.dumps(json.loads(json_body)).encode("utf-8")
            except ValueError as e:
                raise click.BadParameter(str(e), param_hint="--json") from e
        elif data is not None:
            request.message_body = data.encode("utf-8")

        decoder = {
            "text": request.response_string,
            "json": request.response_data,
            "bytes": request.response_data,
            "none": request.response_void,
        }[decode]

        with console.spinner(f"{request.method.value} {url}"):
            result = wait_for_result(
                lambda handler: decoder(
                    handler, template_params=template_params, query_items=query_items
                ),
                result_timeout(transport.config),
            )

    if result.error is not None:
        report_error(console, result.error)
        raise click.exceptions.Exit(1)

    response = result.value
    if include:
        console.info(f"HTTP {response.status_code} {response.request.url}")
        for name, value in response.headers.multi_items():
            console.info(f"{name}: {value}")

    if decode == "text":
        console.print(response.body)
    elif decode == "json":
        try:
            console.print_json(json.loads(response.body))
        except ValueError as e:
            report_error(console, RestError.serialization_error(response.raw, e))
            raise click.exceptions.Exit(1) from e
    elif decode == "bytes":
        click.get_binary_stream("stdout").write(response.body)
