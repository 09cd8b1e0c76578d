import pytest

from restrequest import ErrorKind, RestError, Result


class TestResult:
    def test_success(self) -> None:
        result = Result.success(42)

        assert result.is_success
        assert not result.is_failure
        assert result.unwrap() == 42

    def test_failure_unwrap_raises(self) -> None:
        result = Result.failure(RestError.no_data())

        assert result.is_failure
        with pytest.raises(RestError) as exc_info:
            result.unwrap()
        assert exc_info.value.kind is ErrorKind.NO_DATA

    def test_failures_compare_equal(self) -> None:
        assert Result.failure(RestError.no_data()) == Result.failure(
            RestError.invalid_url()
        )

    def test_successes_compare_by_value(self) -> None:
        assert Result.success(b"a") == Result.success(b"a")
        assert Result.success(b"a") != Result.success(b"b")
        assert Result.success(None) != Result.failure(RestError.no_data())
