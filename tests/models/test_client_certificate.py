import ssl
from pathlib import Path

import pytest

from restrequest import CertificateError, CertificateErrorKind, ClientCertificate


class TestClientCertificate:
    def test_from_pem_file(self, fixtures_dir: Path) -> None:
        certificate = ClientCertificate.from_pem_file(fixtures_dir / "client.pem")

        assert certificate.certificate_pem.startswith("-----BEGIN CERTIFICATE-----")
        assert "PRIVATE KEY" in certificate.private_key_pem
        assert len(certificate.certificate_der) > 0

    def test_from_pem_string(self, fixtures_dir: Path) -> None:
        pem = (fixtures_dir / "client.pem").read_text()

        certificate = ClientCertificate.from_pem_string(pem)

        assert certificate.passphrase is None

    def test_encrypted_key_with_passphrase(self, fixtures_dir: Path) -> None:
        certificate = ClientCertificate.from_pem_file(
            fixtures_dir / "client_encrypted.pem", passphrase="secret"
        )

        assert certificate.passphrase == b"secret"

    @pytest.mark.parametrize("passphrase", [None, "wrong"])
    def test_encrypted_key_without_correct_passphrase(
        self, fixtures_dir: Path, passphrase
    ) -> None:
        with pytest.raises(CertificateError) as exc_info:
            ClientCertificate.from_pem_file(
                fixtures_dir / "client_encrypted.pem", passphrase=passphrase
            )

        assert exc_info.value.kind is CertificateErrorKind.FAILED_TO_LOAD_PRIVATE_KEY

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(CertificateError) as exc_info:
            ClientCertificate.from_pem_file(tmp_path / "missing.pem")

        assert exc_info.value.kind is CertificateErrorKind.FILE_NOT_FOUND

    def test_certificate_without_key(self, fixtures_dir: Path) -> None:
        with pytest.raises(CertificateError) as exc_info:
            ClientCertificate.from_pem_file(fixtures_dir / "cert.pem")

        assert exc_info.value.kind is CertificateErrorKind.INVALID_PEM_STRING

    def test_non_ascii_pem(self) -> None:
        with pytest.raises(CertificateError) as exc_info:
            ClientCertificate.from_pem_bytes("-----BEGIN CERTIFICATE----- é".encode())

        assert exc_info.value.kind is CertificateErrorKind.INVALID_PEM_STRING

    def test_load_into_context(self, fixtures_dir: Path) -> None:
        certificate = ClientCertificate.from_pem_file(fixtures_dir / "client.pem")
        context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)

        certificate.load_into(context)
