from enum import Enum
from typing import Any


class HTTPMethod(str, Enum):
    """HTTP request verbs.

    Unrecognised verbs are accepted and kept as raw members:

        >>> HTTPMethod("brew")
        <HTTPMethod.RAW: 'BREW'>
        >>> HTTPMethod("brew").is_raw
        True
    """

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    HEAD = "HEAD"
    DELETE = "DELETE"
    OPTIONS = "OPTIONS"
    TRACE = "TRACE"
    COPY = "COPY"
    LOCK = "LOCK"
    MKCOL = "MKCOL"
    MOVE = "MOVE"
    PURGE = "PURGE"
    PROPFIND = "PROPFIND"
    PROPPATCH = "PROPPATCH"
    UNLOCK = "UNLOCK"
    REPORT = "REPORT"
    MKACTIVITY = "MKACTIVITY"
    CHECKOUT = "CHECKOUT"
    MERGE = "MERGE"
    MSEARCH = "MSEARCH"
    NOTIFY = "NOTIFY"
    SUBSCRIBE = "SUBSCRIBE"
    UNSUBSCRIBE = "UNSUBSCRIBE"
    PATCH = "PATCH"
    SEARCH = "SEARCH"
    CONNECT = "CONNECT"
    ACL = "ACL"
    BIND = "BIND"
    UNBIND = "UNBIND"
    REBIND = "REBIND"
    LINK = "LINK"
    UNLINK = "UNLINK"
    SOURCE = "SOURCE"
    MKCALENDAR = "MKCALENDAR"

    @classmethod
    def _missing_(cls, value: Any) -> "HTTPMethod | None":
        if not isinstance(value, str) or not value.strip():
            return None
        verb = value.strip().upper()
        for member in cls:
            if member.value == verb:
                return member
        pseudo_member = str.__new__(cls, verb)
        pseudo_member._name_ = "RAW"
        pseudo_member._value_ = verb
        return pseudo_member

    @property
    def is_raw(self) -> bool:
        return self._name_ == "RAW"

    def __str__(self) -> str:
        return self.value
