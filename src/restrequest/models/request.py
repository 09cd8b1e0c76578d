from dataclasses import dataclass, field
from typing import Optional

import httpx

from .http_method import HTTPMethod


@dataclass(frozen=True)
class PreparedRequest:
    """A fully resolved request, built fresh for every dispatch.

    Attributes:
        method: The HTTP verb.
        url: The absolute URL with template placeholders and query resolved.
        headers: A private copy of the headers at build time.
        body: The raw body, if any.
    """

    method: HTTPMethod
    url: httpx.URL
    headers: httpx.Headers = field(default_factory=httpx.Headers)
    body: Optional[bytes] = field(default=None, repr=False)

    @property
    def host(self) -> str:
        return self.url.host

    def to_httpx(self, timeout: Optional[httpx.Timeout] = None) -> httpx.Request:
        extensions = {}
        if timeout is not None:
            extensions["timeout"] = timeout.as_dict()
        return httpx.Request(
            self.method.value,
            self.url,
            headers=self.headers,
            content=self.body,
            extensions=extensions,
        )
