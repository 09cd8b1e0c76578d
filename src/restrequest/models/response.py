from dataclasses import dataclass, field
from typing import Generic, List, Optional, TypeVar

import httpx

from .request import PreparedRequest

T = TypeVar("T")


@dataclass(frozen=True)
class HTTPCookie:
    """A cookie set by a response, with the attributes it declared."""

    name: str
    value: Optional[str]
    domain: str
    path: str
    expires: Optional[int] = None
    secure: bool = False
    http_only: bool = False


def parse_cookies(response: httpx.Response) -> List[HTTPCookie]:
    """Extract ``Set-Cookie`` headers from `response` into `HTTPCookie` records."""
    if "set-cookie" not in response.headers:
        return []
    cookies = httpx.Cookies()
    cookies.extract_cookies(response)
    return [
        HTTPCookie(
            name=cookie.name,
            value=cookie.value,
            domain=cookie.domain,
            path=cookie.path,
            expires=cookie.expires,
            secure=cookie.secure,
            http_only=cookie.has_nonstandard_attr("HttpOnly"),
        )
        for cookie in cookies.jar
    ]


@dataclass(frozen=True)
class RestResponse(Generic[T]):
    """A completed exchange whose body has been decoded into `T`.

    Attributes:
        host: Host the request was sent to.
        status_code: HTTP status code.
        headers: Response headers.
        request: The request that produced this response.
        body: The decoded body.
        raw: The underlying transport response.
    """

    host: str
    status_code: int
    headers: httpx.Headers
    request: PreparedRequest
    body: T
    raw: httpx.Response = field(repr=False, compare=False)

    @classmethod
    def from_transport(
        cls, request: PreparedRequest, response: httpx.Response, body: T
    ) -> "RestResponse[T]":
        return cls(
            host=request.host,
            status_code=response.status_code,
            headers=response.headers,
            request=request,
            body=body,
            raw=response,
        )

    @property
    def cookies(self) -> List[HTTPCookie]:
        return parse_cookies(self.raw)
