import base64
from dataclasses import dataclass, field


@dataclass(frozen=True)
class Credentials:
    """Authentication used to compute an ``Authorization`` header.

    Build instances with `bearer_authentication` or `basic_authentication`.
    """

    scheme: str
    token: str = field(repr=False)

    @property
    def authorization_header(self) -> str:
        return f"{self.scheme} {self.token}"

    @classmethod
    def bearer_authentication(cls, token: str) -> "Credentials":
        """A bearer token, for example a JWT."""
        return cls(scheme="Bearer", token=token)

    @classmethod
    def basic_authentication(cls, username: str, password: str) -> "Credentials":
        """Username/password credentials sent as ``Authorization: Basic``."""
        encoded = base64.b64encode(f"{username}:{password}".encode("utf-8"))
        return cls(scheme="Basic", token=encoded.decode("ascii"))
