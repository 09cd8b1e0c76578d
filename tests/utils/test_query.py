import httpx
import pytest

from restrequest._utils import encode_query, resolve_query


class TestEncodeQuery:
    @pytest.mark.parametrize(
        "items, expected",
        [
            ([("a", "1"), ("b", "2")], "a=1&b=2"),
            ([("flag", None)], "flag"),
            ([("q", "hello world")], "q=hello%20world"),
            ([("sum", "1+1")], "sum=1%2B1"),
            ([("k", "a&b=c")], "k=a%26b%3Dc"),
            ([("path", "/x?y")], "path=/x?y"),
            ([("a", "1"), ("a", "2")], "a=1&a=2"),
            ([], ""),
        ],
    )
    def test_encode(self, items, expected: str) -> None:
        assert encode_query(items) == expected


class TestResolveQuery:
    def test_replaces_existing_query(self) -> None:
        url = httpx.URL("https://example.com/search?old=1")

        resolved = resolve_query(url, [("new", "2")])

        assert str(resolved) == "https://example.com/search?new=2"

    def test_empty_items_remove_query(self) -> None:
        url = httpx.URL("https://example.com/search?old=1")

        assert str(resolve_query(url, [])) == "https://example.com/search"

    def test_preserves_order(self) -> None:
        url = httpx.URL("https://example.com/")

        resolved = resolve_query(url, [("z", "1"), ("a", "2"), ("m", None)])

        assert resolved.query == b"z=1&a=2&m"
