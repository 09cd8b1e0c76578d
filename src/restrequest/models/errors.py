from enum import Enum
from typing import Any, Optional

import httpx


class ErrorKind(str, Enum):
    """Closed set of failure kinds reported by request dispatch."""

    NO_DATA = "noData"
    SERIALIZATION_ERROR = "serializationError"
    ENCODING_ERROR = "encodingError"
    DECODING_ERROR = "decodingError"
    FILE_MANAGER_ERROR = "fileManagerError"
    INVALID_FILE = "invalidFile"
    INVALID_SUBSTITUTION = "invalidSubstitution"
    INVALID_URL = "invalidURL"
    DOWNLOAD_ERROR = "downloadError"
    ERROR_STATUS_CODE = "errorStatusCode"
    TRANSPORT_ERROR = "transportError"
    OTHER_ERROR = "otherError"


class RestError(Exception):
    """A failure raised or delivered by a `RestRequest` operation.

    Two errors compare equal when they share the same `kind`; the carried
    response and underlying error are diagnostics only. A `RestError` also
    compares equal to its `ErrorKind`, so callers can write
    ``error == ErrorKind.NO_DATA``.

    Attributes:
        kind: The failure kind.
        description: Human readable description.
        response: The HTTP response that triggered the error, if any.
        error: The underlying error, if any.
    """

    def __init__(
        self,
        kind: ErrorKind,
        description: str,
        response: Optional[httpx.Response] = None,
        error: Optional[BaseException] = None,
    ):
        self.kind = kind
        self.description = description
        self.response = response
        self.error = error
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.response is not None:
            return f"{self.description} - status: {self.response.status_code}"
        if self.error is not None:
            return f"{self.description} - underlying error: {self.error}"
        return self.description

    def __repr__(self) -> str:
        return f"RestError(kind={self.kind.value!r}, description={self.description!r})"

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, RestError):
            return self.kind == other.kind
        if isinstance(other, ErrorKind):
            return self.kind == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.kind)

    @property
    def status_code(self) -> Optional[int]:
        if self.response is None:
            return None
        return self.response.status_code

    @property
    def response_data(self) -> Optional[bytes]:
        """Raw body of the carried response, if one was received."""
        if self.response is None:
            return None
        try:
            return self.response.content
        except httpx.ResponseNotRead:
            return None

    @classmethod
    def no_data(cls, response: Optional[httpx.Response] = None) -> "RestError":
        return cls(ErrorKind.NO_DATA, "No Data", response=response)

    @classmethod
    def serialization_error(
        cls,
        response: Optional[httpx.Response] = None,
        error: Optional[BaseException] = None,
    ) -> "RestError":
        return cls(
            ErrorKind.SERIALIZATION_ERROR,
            "Serialization Error",
            response=response,
            error=error,
        )

    @classmethod
    def encoding_error(cls, error: Optional[BaseException] = None) -> "RestError":
        return cls(ErrorKind.ENCODING_ERROR, "Encoding Error", error=error)

    @classmethod
    def decoding_error(
        cls, error: BaseException, response: Optional[httpx.Response] = None
    ) -> "RestError":
        return cls(
            ErrorKind.DECODING_ERROR,
            f"Decoding failed with error: {error}",
            response=response,
            error=error,
        )

    @classmethod
    def file_manager_error(cls, error: Optional[BaseException] = None) -> "RestError":
        return cls(ErrorKind.FILE_MANAGER_ERROR, "File Manager Error", error=error)

    @classmethod
    def invalid_file(cls, error: Optional[BaseException] = None) -> "RestError":
        return cls(ErrorKind.INVALID_FILE, "Invalid File", error=error)

    @classmethod
    def invalid_substitution(cls, url: Optional[str] = None) -> "RestError":
        if url is None:
            return cls(ErrorKind.INVALID_SUBSTITUTION, "Invalid Data")
        return cls(
            ErrorKind.INVALID_SUBSTITUTION,
            f"Substitution produced an invalid URL: '{url}'",
        )

    @classmethod
    def invalid_url(cls, url: Optional[str] = None) -> "RestError":
        if url is None:
            return cls(ErrorKind.INVALID_URL, "Invalid URL")
        return cls(ErrorKind.INVALID_URL, f"'{url}' is not a valid URL")

    @classmethod
    def download_error(
        cls,
        response: Optional[httpx.Response] = None,
        error: Optional[BaseException] = None,
    ) -> "RestError":
        return cls(
            ErrorKind.DOWNLOAD_ERROR,
            "Failed to download file",
            response=response,
            error=error,
        )

    @classmethod
    def error_status_code(cls, response: httpx.Response) -> "RestError":
        return cls(
            ErrorKind.ERROR_STATUS_CODE,
            f"HTTP response code: {response.status_code}",
            response=response,
        )

    @classmethod
    def transport_error(cls, error: BaseException) -> "RestError":
        return cls(
            ErrorKind.TRANSPORT_ERROR,
            "An HTTP client error occurred",
            error=error,
        )

    @classmethod
    def other_error(cls, error: BaseException) -> "RestError":
        return cls(ErrorKind.OTHER_ERROR, "An error occurred", error=error)


class CertificateErrorKind(str, Enum):
    INVALID_PEM_STRING = "invalidPEMString"
    FILE_NOT_FOUND = "fileNotFound"
    FAILED_TO_LOAD_PRIVATE_KEY = "failedToLoadPrivateKey"


class CertificateError(Exception):
    """Raised when client certificate material cannot be read."""

    _DESCRIPTIONS = {
        CertificateErrorKind.INVALID_PEM_STRING: "Invalid PEM string",
        CertificateErrorKind.FILE_NOT_FOUND: "Specified PEM file was not found",
        CertificateErrorKind.FAILED_TO_LOAD_PRIVATE_KEY: "Failed to load private key",
    }

    def __init__(self, kind: CertificateErrorKind, detail: Optional[str] = None):
        self.kind = kind
        self.description = self._DESCRIPTIONS[kind]
        message = f"{self.description}: {detail}" if detail else self.description
        super().__init__(message)

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, CertificateError):
            return self.kind == other.kind
        if isinstance(other, CertificateErrorKind):
            return self.kind == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.kind)


class TransportAlreadyConfiguredError(Exception):
    def __init__(
        self,
        message="The shared transport is already in use and cannot be reconfigured. "
        "Call shutdown_global_transport() first.",
    ):
        self.message = message
        super().__init__(self.message)
