import httpx

from restrequest import HTTPMethod, PreparedRequest, RestResponse
from restrequest.models.response import parse_cookies


def make_response(headers) -> httpx.Response:
    return httpx.Response(
        200,
        headers=headers,
        request=httpx.Request("GET", "https://test.example.com/cookies"),
    )


class TestParseCookies:
    def test_no_cookies(self) -> None:
        assert parse_cookies(make_response({})) == []

    def test_attributes(self) -> None:
        response = make_response(
            [
                (
                    "Set-Cookie",
                    "session=abc; Domain=test.example.com; Path=/app; Secure; HttpOnly",
                ),
            ]
        )

        (cookie,) = parse_cookies(response)

        assert cookie.name == "session"
        assert cookie.value == "abc"
        assert cookie.path == "/app"
        assert cookie.domain.endswith("test.example.com")
        assert cookie.secure
        assert cookie.http_only
        assert cookie.expires is None

    def test_rest_response_cookies(self) -> None:
        response = make_response([("Set-Cookie", "name0=value0")])
        request = PreparedRequest(
            method=HTTPMethod.GET, url=httpx.URL("https://test.example.com/cookies")
        )

        rest_response = RestResponse.from_transport(request, response, b"")

        assert [(c.name, c.value) for c in rest_response.cookies] == [
            ("name0", "value0")
        ]
