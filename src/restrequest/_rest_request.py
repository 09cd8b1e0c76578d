import json
from logging import getLogger
from pathlib import Path
from typing import (
    Any,
    Callable,
    Dict,
    List,
    Mapping,
    Optional,
    Sequence,
    Type,
    TypeVar,
    Union,
)

import httpx
from pydantic import TypeAdapter

from ._config import Timeout, TransportConfig
from ._services import _dispatcher, _download
from ._services._breaker import CircuitBreaker, Invocation
from ._services._download import DownloadDelegate
from ._services._global import get_global_transport
from ._services._transport import Transport
from ._utils._charset import encoding_from_content_type
from ._utils._query import QueryItem, resolve_query
from ._utils._url import parse_url
from ._utils._url_template import expand, should_expand
from ._utils._user_agent import generate_user_agent
from ._utils.constants import (
    CONTENT_TYPE_JSON,
    HEADER_ACCEPT,
    HEADER_AUTHORIZATION,
    HEADER_CONTENT_TYPE,
    HEADER_USER_AGENT,
    LOGGER_NAME,
)
from .models.circuit import CircuitParameters
from .models.client_certificate import ClientCertificate
from .models.credentials import Credentials
from .models.errors import RestError
from .models.http_method import HTTPMethod
from .models.json_value import JSONError, JSONType, JSONValue, PathComponent
from .models.multipart import MultipartFormData
from .models.request import PreparedRequest
from .models.response import RestResponse
from .models.result import CompletionHandler, Result

logger = getLogger(LOGGER_NAME)

T = TypeVar("T")

TemplateParams = Optional[Mapping[str, str]]
QueryItems = Optional[Sequence[QueryItem]]


class RestRequest:
    """A reusable HTTP request description with callback-based dispatch.

    A `RestRequest` accumulates the method, URL, headers, body and query
    items of a request. Each dispatch method snapshots that state into a
    `PreparedRequest`, sends it on a transport worker thread and reports the
    outcome to a completion handler with a `Result`, exactly once.

    The URL may contain ``{name}`` placeholders, filled per call from
    ``template_params``. Query items passed to a dispatch method replace the
    request's `query_items` and are kept for later calls.

    Requests share the process-wide transport unless built with
    ``insecure``, ``client_certificate`` or ``timeout``, in which case the
    request owns a dedicated transport; release it with `close` or by using
    the request as a context manager.

    Examples:
        ```python
        from restrequest import RestRequest

        request = RestRequest("https://example.com/users/{id}")
        request.response_dictionary(
            lambda result: print(result.unwrap().body),
            template_params={"id": "42"},
        )
        ```
    """

    def __init__(
        self,
        url: str,
        method: Union[HTTPMethod, str] = HTTPMethod.GET,
        *,
        insecure: bool = False,
        client_certificate: Optional[ClientCertificate] = None,
        timeout: Optional[Timeout] = None,
        transport: Optional[Transport] = None,
    ) -> None:
        self._url = url
        self._method = HTTPMethod(method)
        self._headers = httpx.Headers(
            {HEADER_ACCEPT: CONTENT_TYPE_JSON, HEADER_CONTENT_TYPE: CONTENT_TYPE_JSON}
        )
        self._body: Optional[bytes] = None
        self._query_items: Optional[List[QueryItem]] = None
        self._credentials: Optional[Credentials] = None
        self._product_info: Optional[str] = None
        self._circuit_parameters: Optional[CircuitParameters] = None
        self._breaker: Optional[CircuitBreaker] = None

        self._owns_transport = False
        self._transport = transport
        if transport is None and (insecure or client_certificate or timeout):
            update: Dict[str, Any] = {"insecure": insecure}
            if timeout is not None:
                update["timeout"] = timeout
            config = TransportConfig.from_env().model_copy(update=update)
            self._transport = Transport(config, client_certificate=client_certificate)
            self._owns_transport = True

    @property
    def transport(self) -> Transport:
        if self._transport is not None:
            return self._transport
        return get_global_transport()

    def close(self) -> None:
        """Shut down the transport owned by this request, if any."""
        if self._owns_transport and self._transport is not None:
            self._transport.shutdown()

    def __enter__(self) -> "RestRequest":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"RestRequest({self._method.value} {self._url})"

    # Configuration

    @property
    def method(self) -> HTTPMethod:
        return self._method

    @method.setter
    def method(self, value: Union[HTTPMethod, str]) -> None:
        self._method = HTTPMethod(value)

    @property
    def url(self) -> str:
        """The URL string, possibly containing ``{name}`` placeholders."""
        return self._url

    @url.setter
    def url(self, value: str) -> None:
        self._url = value

    @property
    def header_parameters(self) -> Dict[str, str]:
        """The request headers. Assigning a mapping adds or overwrites entries."""
        return dict(self._headers.items())

    @header_parameters.setter
    def header_parameters(self, value: Mapping[str, str]) -> None:
        for name, header_value in value.items():
            self._headers[name] = header_value

    def _set_header(self, name: str, value: Optional[str]) -> None:
        if value is None:
            self._headers.pop(name, None)
        else:
            self._headers[name] = value

    @property
    def accept_type(self) -> Optional[str]:
        return self._headers.get(HEADER_ACCEPT)

    @accept_type.setter
    def accept_type(self, value: Optional[str]) -> None:
        self._set_header(HEADER_ACCEPT, value)

    @property
    def content_type(self) -> Optional[str]:
        return self._headers.get(HEADER_CONTENT_TYPE)

    @content_type.setter
    def content_type(self, value: Optional[str]) -> None:
        self._set_header(HEADER_CONTENT_TYPE, value)

    @property
    def product_info(self) -> Optional[str]:
        """Product string sent in ``User-Agent``, ahead of the platform description."""
        return self._product_info

    @product_info.setter
    def product_info(self, value: Optional[str]) -> None:
        self._product_info = value
        self._set_header(
            HEADER_USER_AGENT, generate_user_agent(value) if value else None
        )

    @property
    def credentials(self) -> Optional[Credentials]:
        return self._credentials

    @credentials.setter
    def credentials(self, value: Optional[Credentials]) -> None:
        self._credentials = value
        self._set_header(
            HEADER_AUTHORIZATION, value.authorization_header if value else None
        )

    @property
    def message_body(self) -> Optional[bytes]:
        return self._body

    @message_body.setter
    def message_body(self, value: Optional[bytes]) -> None:
        self._body = value

    def _json_body(self, expected: type) -> Any:
        if self._body is None:
            return None
        try:
            parsed = json.loads(self._body)
        except ValueError:
            return None
        return parsed if isinstance(parsed, expected) else None

    def _set_json_body(self, value: Any) -> None:
        if value is None:
            self._body = None
            return
        try:
            self._body = json.dumps(value).encode("utf-8")
        except (TypeError, ValueError) as e:
            logger.debug(f"Could not serialize message body: {e}")
            self._body = None

    @property
    def message_body_dictionary(self) -> Optional[Dict[str, Any]]:
        """The body as a JSON object, or ``None`` if it is not one.

        Setting it replaces `message_body` with the serialized object, or
        clears the body if the value cannot be serialized.
        """
        return self._json_body(dict)

    @message_body_dictionary.setter
    def message_body_dictionary(self, value: Optional[Dict[str, Any]]) -> None:
        self._set_json_body(value)

    @property
    def message_body_array(self) -> Optional[List[Any]]:
        """The body as a JSON array, or ``None`` if it is not one."""
        return self._json_body(list)

    @message_body_array.setter
    def message_body_array(self, value: Optional[List[Any]]) -> None:
        self._set_json_body(value)

    def set_body_object(self, obj: Any) -> None:
        """Serialize `obj` (a pydantic model, dataclass, dict, ...) as JSON.

        Raises:
            RestError: ``ENCODING_ERROR`` if `obj` cannot be serialized.
        """
        try:
            self._body = TypeAdapter(type(obj)).dump_json(obj, by_alias=True)
        except Exception as e:
            raise RestError.encoding_error(e) from e

    def set_body_multipart(self, form: MultipartFormData) -> None:
        """Use `form` as the body and set the matching ``Content-Type``."""
        self._body = form.to_bytes()
        self.content_type = form.content_type

    @property
    def query_items(self) -> Optional[List[QueryItem]]:
        """Query items replacing the URL's query string; ``None`` keeps it."""
        if self._query_items is None:
            return None
        return list(self._query_items)

    @query_items.setter
    def query_items(self, value: Optional[Sequence[QueryItem]]) -> None:
        self._query_items = list(value) if value is not None else None

    @property
    def circuit_parameters(self) -> Optional[CircuitParameters]:
        """Assigning parameters attaches a fresh circuit breaker; ``None`` removes it."""
        return self._circuit_parameters

    @circuit_parameters.setter
    def circuit_parameters(self, value: Optional[CircuitParameters]) -> None:
        self._circuit_parameters = value
        if value is None:
            self._breaker = None
            return

        def command(invocation: Invocation) -> None:
            _dispatcher.perform_protected(self.transport, invocation, value.timeout)

        self._breaker = CircuitBreaker(value, command)

    @property
    def circuit_breaker(self) -> Optional[CircuitBreaker]:
        return self._breaker

    # Request building

    def make_request(self, substitutions: TemplateParams = None) -> PreparedRequest:
        """Build the request to send from the current configuration.

        Placeholders are expanded only when `substitutions` is non-empty;
        otherwise the URL is parsed as it is.

        Args:
            substitutions (Optional[Mapping[str, str]]): Values for the
                ``{name}`` placeholders in the URL.

        Returns:
            PreparedRequest: An independent snapshot of this request.

        Raises:
            RestError: ``INVALID_URL`` if the URL (without substitution) or
                its query cannot be parsed, ``INVALID_SUBSTITUTION`` if the
                expanded URL is not valid.
        """
        if should_expand(self._url, substitutions):
            expanded = expand(self._url, substitutions)  # type: ignore[arg-type]
            try:
                url = parse_url(expanded)
            except RestError as e:
                raise RestError.invalid_substitution(expanded) from e
        else:
            url = parse_url(self._url)

        if self._query_items is not None:
            url = resolve_query(url, self._query_items)

        return PreparedRequest(
            method=self._method,
            url=url,
            headers=httpx.Headers(self._headers),
            body=self._body,
        )

    # Dispatch

    def _dispatch(
        self,
        completion_handler: CompletionHandler[RestResponse[T]],
        transform: Callable[[httpx.Response], T],
        template_params: TemplateParams,
        query_items: QueryItems,
    ) -> None:
        if query_items is not None:
            self.query_items = query_items

        try:
            request = self.make_request(template_params)
        except RestError as e:
            _dispatcher.deliver(completion_handler, Result.failure(e))
            return

        def on_result(result: Result[httpx.Response]) -> None:
            if result.error is not None:
                _dispatcher.deliver(completion_handler, result)
                return
            response = result.value
            try:
                body = transform(response)
            except RestError as e:
                _dispatcher.deliver(completion_handler, Result.failure(e))
                return
            except Exception as e:
                logger.debug(f"Could not transform response from {request.url}: {e!r}")
                _dispatcher.deliver(
                    completion_handler, Result.failure(RestError.other_error(e))
                )
                return
            _dispatcher.deliver(
                completion_handler,
                Result.success(RestResponse.from_transport(request, response, body)),
            )

        _dispatcher.send(self.transport, request, on_result, self._breaker)

    def response(
        self,
        completion_handler: CompletionHandler[RestResponse[bytes]],
        *,
        template_params: TemplateParams = None,
        query_items: QueryItems = None,
    ) -> None:
        """Send the request and deliver the raw body, which may be empty.

        Useful when only the status, headers or cookies matter.
        """
        self._dispatch(
            completion_handler, lambda r: r.content, template_params, query_items
        )

    def response_data(
        self,
        completion_handler: CompletionHandler[RestResponse[bytes]],
        *,
        template_params: TemplateParams = None,
        query_items: QueryItems = None,
    ) -> None:
        """Send the request and deliver the body bytes.

        Args:
            completion_handler: Called once with the `Result`.
            template_params (Optional[Mapping[str, str]]): Values for URL
                placeholders, used for this call only.
            query_items (Optional[Sequence[Tuple[str, Optional[str]]]]):
                Replace `query_items` for this and later calls.

        An empty body fails with ``NO_DATA``.
        """
        self._dispatch(completion_handler, _require_body, template_params, query_items)

    def response_object(
        self,
        model: Type[T],
        completion_handler: CompletionHandler[RestResponse[T]],
        *,
        path: Sequence[PathComponent] = (),
        template_params: TemplateParams = None,
        query_items: QueryItems = None,
    ) -> None:
        """Send the request and validate the JSON body into `model`.

        `model` is anything pydantic can validate: a `BaseModel`, a
        dataclass, ``List[int]``... `path` selects a nested value first.
        Parse or validation failures are ``DECODING_ERROR``.

        Examples:
            ```python
            class User(BaseModel):
                name: str

            request.response_object(User, handler, path=["data", 0])
            ```
        """

        def transform(response: httpx.Response) -> T:
            try:
                return _parse_json(response).decode(model, *path)
            except JSONError as e:
                raise RestError.decoding_error(e, response) from e

        self._dispatch(completion_handler, transform, template_params, query_items)

    def response_array(
        self,
        completion_handler: CompletionHandler[RestResponse[List[Any]]],
        *,
        path: Sequence[PathComponent] = (),
        template_params: TemplateParams = None,
        query_items: QueryItems = None,
    ) -> None:
        """Send the request and deliver the body as a JSON array.

        A body that is not JSON, or not an array at `path`, fails with
        ``SERIALIZATION_ERROR``.
        """
        self._dispatch(
            completion_handler,
            lambda r: _json_shape(r, JSONType.ARRAY, path),
            template_params,
            query_items,
        )

    def response_dictionary(
        self,
        completion_handler: CompletionHandler[RestResponse[Dict[str, Any]]],
        *,
        template_params: TemplateParams = None,
        query_items: QueryItems = None,
    ) -> None:
        """Send the request and deliver the body as a JSON object."""
        self._dispatch(
            completion_handler,
            lambda r: _json_shape(r, JSONType.OBJECT, ()),
            template_params,
            query_items,
        )

    def response_string(
        self,
        completion_handler: CompletionHandler[RestResponse[str]],
        *,
        template_params: TemplateParams = None,
        query_items: QueryItems = None,
    ) -> None:
        """Send the request and decode the body as text.

        The charset comes from the ``Content-Type`` response header and
        defaults to UTF-8. Undecodable bodies fail with
        ``SERIALIZATION_ERROR``.
        """
        self._dispatch(completion_handler, _decode_text, template_params, query_items)

    def response_void(
        self,
        completion_handler: CompletionHandler[RestResponse[None]],
        *,
        template_params: TemplateParams = None,
        query_items: QueryItems = None,
    ) -> None:
        """Send the request, ignoring the body; any 2xx response succeeds."""
        self._dispatch(completion_handler, lambda r: None, template_params, query_items)

    def download(
        self,
        destination: Union[str, Path],
        completion_handler: CompletionHandler[RestResponse[Path]],
        *,
        delegate: Optional[DownloadDelegate] = None,
        template_params: TemplateParams = None,
        query_items: QueryItems = None,
    ) -> None:
        """Stream the response body into `destination`.

        Args:
            destination (Union[str, Path]): File to write; replaced if it exists.
            completion_handler: Called once with the `Result`.
            delegate (Optional[DownloadDelegate]): Receives progress events.

        Downloads do not go through the circuit breaker.
        """
        if query_items is not None:
            self.query_items = query_items
        try:
            request = self.make_request(template_params)
        except RestError as e:
            _dispatcher.deliver(completion_handler, Result.failure(e))
            return
        _download.download(
            self.transport, request, Path(destination), completion_handler, delegate
        )


def _require_body(response: httpx.Response) -> bytes:
    if not response.content:
        raise RestError.no_data(response)
    return response.content


def _parse_json(response: httpx.Response) -> JSONValue:
    return JSONValue.from_bytes(_require_body(response))


def _json_shape(
    response: httpx.Response, expected: JSONType, path: Sequence[PathComponent]
) -> Any:
    try:
        value = _parse_json(response).get(*path)
    except JSONError as e:
        raise RestError.serialization_error(response, e) from e
    if value.type is not expected:
        raise RestError.serialization_error(response)
    return value.value


def _decode_text(response: httpx.Response) -> str:
    body = _require_body(response)
    encoding = encoding_from_content_type(response.headers.get(HEADER_CONTENT_TYPE))
    try:
        return body.decode(encoding)
    except (UnicodeDecodeError, LookupError) as e:
        raise RestError.serialization_error(response, e) from e
