import pytest

from restrequest._utils import encoding_from_content_type


class TestEncodingFromContentType:
    @pytest.mark.parametrize(
        "content_type, expected",
        [
            (None, "utf-8"),
            ("", "utf-8"),
            ("application/json", "utf-8"),
            ("text/plain; charset=utf-8", "utf-8"),
            ("text/plain; CHARSET=ISO-8859-1", "iso8859-1"),
            ('text/html; charset="windows-1252"', "cp1252"),
            ("text/plain; charset=utf-16; format=flowed", "utf-16"),
            ("text/plain; charset=", "utf-8"),
            ("text/plain; charset=no-such-codec", "utf-8"),
            ("text/plain; charset=base64", "utf-8"),
            ("text/plain; charset=rot13", "utf-8"),
            ("text/plain; charset=hex", "utf-8"),
        ],
    )
    def test_encoding(self, content_type, expected: str) -> None:
        assert encoding_from_content_type(content_type) == expected
