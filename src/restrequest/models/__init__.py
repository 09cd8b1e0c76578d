from .circuit import CircuitParameters
from .client_certificate import ClientCertificate
from .credentials import Credentials
from .errors import (
    CertificateError,
    CertificateErrorKind,
    ErrorKind,
    RestError,
    TransportAlreadyConfiguredError,
)
from .http_method import HTTPMethod
from .json_value import JSONError, JSONErrorKind, JSONType, JSONValue
from .multipart import BodyPart, MultipartFormData
from .request import PreparedRequest
from .response import HTTPCookie, RestResponse
from .result import CompletionHandler, Result

__all__ = [
    "BodyPart",
    "CertificateError",
    "CertificateErrorKind",
    "CircuitParameters",
    "ClientCertificate",
    "CompletionHandler",
    "Credentials",
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
    "RestResponse",
    "Result",
    "TransportAlreadyConfiguredError",
]
