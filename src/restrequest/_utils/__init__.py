from ._charset import encoding_from_content_type
from ._errors import classify_transport_error, handle_transport_errors
from ._query import QueryItem, encode_query, resolve_query
from ._ssl_context import create_ssl_context
from ._url import parse_url
from ._url_template import expand, is_templated
from ._user_agent import generate_user_agent

__all__ = [
    "QueryItem",
    "classify_transport_error",
    "create_ssl_context",
    "encoding_from_content_type",
    "encode_query",
    "expand",
    "generate_user_agent",
    "handle_transport_errors",
    "is_templated",
    "parse_url",
    "resolve_query",
]
