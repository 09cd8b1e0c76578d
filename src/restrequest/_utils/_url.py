import httpx

from ..models.errors import RestError

_FORBIDDEN = frozenset("{}<>\"\\^`| \t\r\n")


def parse_url(url: str) -> httpx.URL:
    """Parse an absolute http(s) URL.

    Strings carrying characters that are never valid unescaped in a URL
    (notably unresolved ``{placeholder}`` braces) are rejected.

    Raises:
        RestError: ``INVALID_URL`` if `url` is not a valid absolute URL.
    """
    if not url or any(c in _FORBIDDEN or ord(c) < 0x20 for c in url):
        raise RestError.invalid_url(url)
    try:
        parsed = httpx.URL(url)
    except (httpx.InvalidURL, TypeError) as e:
        raise RestError.invalid_url(url) from e
    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise RestError.invalid_url(url)
    return parsed
