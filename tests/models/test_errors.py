import httpx

from restrequest import CertificateError, CertificateErrorKind, ErrorKind, RestError


def make_response(status_code: int, content: bytes = b"") -> httpx.Response:
    return httpx.Response(
        status_code,
        content=content,
        request=httpx.Request("GET", "https://test.example.com/"),
    )


class TestRestError:
    def test_equality_is_by_kind(self) -> None:
        first = RestError.error_status_code(make_response(404))
        second = RestError.error_status_code(make_response(500))

        assert first == second
        assert first == ErrorKind.ERROR_STATUS_CODE
        assert first != RestError.no_data()
        assert len({first, second}) == 1

    def test_carries_response(self) -> None:
        error = RestError.error_status_code(make_response(503, b"unavailable"))

        assert error.status_code == 503
        assert error.response_data == b"unavailable"
        assert str(error) == "HTTP response code: 503 - status: 503"

    def test_without_response(self) -> None:
        error = RestError.transport_error(httpx.ConnectError("refused"))

        assert error.status_code is None
        assert error.response_data is None
        assert "refused" in str(error)

    def test_invalid_url_description(self) -> None:
        assert RestError.invalid_url("nope").description == "'nope' is not a valid URL"
        assert RestError.invalid_url().description == "Invalid URL"

    def test_is_raisable(self) -> None:
        try:
            raise RestError.no_data()
        except RestError as e:
            assert e.kind is ErrorKind.NO_DATA


class TestCertificateError:
    def test_equality_is_by_kind(self) -> None:
        error = CertificateError(CertificateErrorKind.FILE_NOT_FOUND, "/tmp/x.pem")

        assert error == CertificateError(CertificateErrorKind.FILE_NOT_FOUND)
        assert error == CertificateErrorKind.FILE_NOT_FOUND
        assert str(error) == "Specified PEM file was not found: /tmp/x.pem"
