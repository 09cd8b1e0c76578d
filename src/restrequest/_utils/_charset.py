import codecs
import re
from logging import getLogger
from typing import Optional

from .constants import LOGGER_NAME

logger = getLogger(LOGGER_NAME)

DEFAULT_ENCODING = "utf-8"

_CHARSET = re.compile(r"charset\s*=\s*([^;]*)", re.IGNORECASE)


def encoding_from_content_type(content_type: Optional[str]) -> str:
    """Pick the codec for a ``Content-Type`` header value.

    The ``charset`` parameter is matched case-insensitively and stripped of
    quotes and whitespace. A missing, unknown or non-text charset selects
    UTF-8.

        >>> encoding_from_content_type("text/plain; charset=ISO-8859-1")
        'iso8859-1'
    """
    if not content_type:
        return DEFAULT_ENCODING
    match = _CHARSET.search(content_type)
    if match is None:
        return DEFAULT_ENCODING
    charset = match.group(1).strip().strip("\"'").strip().lower()
    if not charset:
        return DEFAULT_ENCODING
    try:
        codec = codecs.lookup(charset)
    except LookupError:
        logger.debug(f"Unknown charset '{charset}', decoding as {DEFAULT_ENCODING}")
        return DEFAULT_ENCODING
    # bytes-to-bytes codecs such as base64 cannot decode text
    if not getattr(codec, "_is_text_encoding", True):
        logger.debug(f"Charset '{charset}' is not a text encoding")
        return DEFAULT_ENCODING
    return codec.name
