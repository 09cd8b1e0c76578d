from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional, Union

from .errors import RestError

BOUNDARY = "restrequest.boundary.bd0b4c6e3b9c2126"


@dataclass(frozen=True)
class BodyPart:
    """A single part of a multipart form."""

    key: str
    data: bytes
    mime_type: Optional[str] = None
    file_name: Optional[str] = None

    @classmethod
    def from_value(cls, key: str, value: Any) -> "BodyPart":
        """Build a text part from the string form of `value`."""
        try:
            data = str(value).encode("utf-8")
        except UnicodeEncodeError as e:
            raise RestError.encoding_error(e) from e
        return cls(key=key, data=data)

    @property
    def header(self) -> str:
        header = f'Content-Disposition: form-data; name="{self.key}"'
        if self.file_name is not None:
            header += f'; filename="{self.file_name}"'
        if self.mime_type is not None:
            header += f"\r\nContent-Type: {self.mime_type}"
        return header + "\r\n\r\n"

    def content(self) -> bytes:
        try:
            header = self.header.encode("utf-8")
        except UnicodeEncodeError as e:
            raise RestError.encoding_error(e) from e
        return header + self.data


class MultipartFormData:
    """Accumulates body parts and renders a ``multipart/form-data`` payload."""

    def __init__(self, boundary: str = BOUNDARY):
        self.boundary = boundary
        self._body_parts: List[BodyPart] = []

    @property
    def content_type(self) -> str:
        return f"multipart/form-data; boundary={self.boundary}"

    @property
    def body_parts(self) -> List[BodyPart]:
        return list(self._body_parts)

    def append(
        self,
        data: Union[bytes, str],
        name: str,
        mime_type: Optional[str] = None,
        file_name: Optional[str] = None,
    ) -> None:
        if isinstance(data, str):
            data = data.encode("utf-8")
        self._body_parts.append(
            BodyPart(key=name, data=data, mime_type=mime_type, file_name=file_name)
        )

    def append_file(
        self, path: Union[str, Path], name: str, mime_type: Optional[str] = None
    ) -> None:
        """Append the contents of a file, using its file name for the part.

        Raises:
            RestError: ``INVALID_FILE`` if the file cannot be read.
        """
        file_path = Path(path)
        try:
            data = file_path.read_bytes()
        except OSError as e:
            raise RestError.invalid_file(e) from e
        self.append(data, name, mime_type=mime_type, file_name=file_path.name)

    def append_part(self, part: BodyPart) -> None:
        self._body_parts.append(part)

    def to_bytes(self) -> bytes:
        initial_boundary = f"--{self.boundary}\r\n".encode("utf-8")
        encapsulated_boundary = f"\r\n--{self.boundary}\r\n".encode("utf-8")
        final_boundary = f"\r\n--{self.boundary}--\r\n".encode("utf-8")

        data = bytearray()
        for index, part in enumerate(self._body_parts):
            data += initial_boundary if index == 0 else encapsulated_boundary
            data += part.content()
        data += final_boundary
        return bytes(data)
