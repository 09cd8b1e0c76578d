import os
import re
import ssl
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

from .errors import CertificateError, CertificateErrorKind

_PEM_BLOCK = re.compile(
    r"-----BEGIN (?P<label>[A-Z0-9 ]+)-----\r?\n.*?-----END (?P=label)-----",
    re.DOTALL,
)


@dataclass(frozen=True)
class ClientCertificate:
    """A client certificate and private key used for mutual TLS.

    The material is read from PEM data holding exactly one certificate and
    one private key. If the key is encrypted, supply its passphrase; without
    one an empty passphrase is tried, which fails with
    ``FAILED_TO_LOAD_PRIVATE_KEY``.
    """

    certificate_pem: str
    private_key_pem: str = field(repr=False)
    passphrase: Optional[bytes] = field(default=None, repr=False)

    @property
    def certificate_der(self) -> bytes:
        return ssl.PEM_cert_to_DER_cert(self.certificate_pem)

    @classmethod
    def from_pem_file(
        cls, path: Union[str, Path], passphrase: Optional[str] = None
    ) -> "ClientCertificate":
        pem_path = Path(path)
        if not pem_path.is_file() or not os.access(pem_path, os.R_OK):
            raise CertificateError(CertificateErrorKind.FILE_NOT_FOUND, str(pem_path))
        return cls.from_pem_bytes(pem_path.read_bytes(), passphrase=passphrase)

    @classmethod
    def from_pem_string(
        cls, pem: str, passphrase: Optional[str] = None
    ) -> "ClientCertificate":
        try:
            pem_bytes = pem.encode("utf-8")
        except UnicodeEncodeError as e:
            raise CertificateError(
                CertificateErrorKind.INVALID_PEM_STRING, str(e)
            ) from e
        return cls.from_pem_bytes(pem_bytes, passphrase=passphrase)

    @classmethod
    def from_pem_bytes(
        cls, pem: bytes, passphrase: Optional[str] = None
    ) -> "ClientCertificate":
        try:
            text = pem.decode("ascii")
        except UnicodeDecodeError as e:
            raise CertificateError(
                CertificateErrorKind.INVALID_PEM_STRING, str(e)
            ) from e

        certificates = []
        private_keys = []
        for match in _PEM_BLOCK.finditer(text):
            label = match.group("label")
            if label == "CERTIFICATE":
                certificates.append(match.group(0))
            elif label.endswith("PRIVATE KEY"):
                private_keys.append(match.group(0))

        if len(certificates) != 1 or len(private_keys) != 1:
            raise CertificateError(
                CertificateErrorKind.INVALID_PEM_STRING,
                f"expected one certificate and one private key, found "
                f"{len(certificates)} and {len(private_keys)}",
            )

        try:
            ssl.PEM_cert_to_DER_cert(certificates[0] + "\n")
        except ValueError as e:
            raise CertificateError(
                CertificateErrorKind.INVALID_PEM_STRING, str(e)
            ) from e

        client_certificate = cls(
            certificate_pem=certificates[0] + "\n",
            private_key_pem=private_keys[0] + "\n",
            passphrase=passphrase.encode("utf-8") if passphrase is not None else None,
        )
        # Fail now rather than on first handshake if the key cannot be used.
        client_certificate.load_into(ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT))
        return client_certificate

    def load_into(self, context: ssl.SSLContext) -> None:
        """Install the certificate chain into an SSL context.

        Raises:
            CertificateError: ``FAILED_TO_LOAD_PRIVATE_KEY`` if the key is
                encrypted and the passphrase is missing or wrong, or if the
                key does not match the certificate.
        """
        passphrase = self.passphrase or b""
        fd, pem_path = tempfile.mkstemp(suffix=".pem")
        try:
            with os.fdopen(fd, "w") as f:
                f.write(self.certificate_pem)
                f.write(self.private_key_pem)
            context.load_cert_chain(pem_path, password=lambda: passphrase)
        except ssl.SSLError as e:
            raise CertificateError(
                CertificateErrorKind.FAILED_TO_LOAD_PRIVATE_KEY, str(e)
            ) from e
        finally:
            os.unlink(pem_path)
