"""Callback-based HTTP requests with URL templating and circuit breaking."""

from ._config import Timeout, TransportConfig
from ._rest_request import RestRequest
from ._services import (
    BreakerError,
    BreakerErrorKind,
    BreakerState,
    CircuitBreaker,
    DownloadDelegate,
    DownloadState,
    Transport,
    configure_global_transport,
    get_global_transport,
    shutdown_global_transport,
)
from .models import (
    BodyPart,
    CertificateError,
    CertificateErrorKind,
    CircuitParameters,
    ClientCertificate,
    Credentials,
    ErrorKind,
    HTTPCookie,
    HTTPMethod,
    JSONError,
    JSONErrorKind,
    JSONType,
    JSONValue,
    MultipartFormData,
    PreparedRequest,
    RestError,
    RestResponse,
    Result,
    TransportAlreadyConfiguredError,
)

__all__ = [
    "BodyPart",
    "BreakerError",
    "BreakerErrorKind",
    "BreakerState",
    "CertificateError",
    "CertificateErrorKind",
    "CircuitBreaker",
    "CircuitParameters",
    "ClientCertificate",
    "Credentials",
    "DownloadDelegate",
    "DownloadState",
    "ErrorKind",
    "HTTPCookie",
    "HTTPMethod",
    "JSONError",
    "JSONErrorKind",
    "JSONType",
    "JSONValue",
    "MultipartFormData",
    "PreparedRequest",
    "RestError",
    "RestRequest",
    "RestResponse",
    "Result",
    "Timeout",
    "Transport",
    "TransportAlreadyConfiguredError",
    "TransportConfig",
    "configure_global_transport",
    "get_global_transport",
    "shutdown_global_transport",
]
