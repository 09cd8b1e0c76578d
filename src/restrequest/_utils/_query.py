from typing import Optional, Sequence, Tuple
from urllib.parse import quote

import httpx

from ..models.errors import RestError

QueryItem = Tuple[str, Optional[str]]

# Characters permitted unescaped in a query component, minus the delimiters
# that separate items (``&``, ``=``) and the fragment marker.
_QUERY_SAFE = "!$'()*+,;:@/?"


def _encode_component(value: str) -> str:
    # ``+`` is legal in a query but servers commonly read it as a space.
    return quote(value, safe=_QUERY_SAFE).replace("+", "%2B")


def encode_query(query_items: Sequence[QueryItem]) -> str:
    parts = []
    for name, value in query_items:
        if value is None:
            parts.append(_encode_component(name))
        else:
            parts.append(f"{_encode_component(name)}={_encode_component(value)}")
    return "&".join(parts)


def resolve_query(url: httpx.URL, query_items: Sequence[QueryItem]) -> httpx.URL:
    """Replace the query string of `url` with `query_items`, in order.

    Raises:
        RestError: ``INVALID_URL`` if the URL cannot take a new query.
    """
    try:
        query = encode_query(query_items)
        return url.copy_with(query=query.encode("ascii") if query else None)
    except (httpx.InvalidURL, TypeError, ValueError) as e:
        raise RestError.invalid_url(str(url)) from e
