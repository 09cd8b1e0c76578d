import click
import pytest

from restrequest import Result, Timeout, TransportConfig
from restrequest._cli._utils._common import (
    RESULT_WAIT_MARGIN,
    result_timeout,
    wait_for_result,
)


class TestWaitForResult:
    def test_returns_delivered_result(self) -> None:
        result = wait_for_result(lambda handler: handler(Result.success(1)), 1)

        assert result == Result.success(1)

    def test_handler_never_called(self) -> None:
        with pytest.raises(click.ClickException) as exc_info:
            wait_for_result(lambda handler: None, 0.05)

        assert "No response within 0.05 seconds" in exc_info.value.message


class TestResultTimeout:
    def test_unbounded_without_timeouts(self) -> None:
        assert result_timeout(TransportConfig()) is None
        assert result_timeout(TransportConfig(timeout=Timeout(connect=5))) is None

    def test_covers_every_attempt(self) -> None:
        config = TransportConfig(timeout=Timeout(connect=2, read=3), max_retries=2)

        assert result_timeout(config) == (5 + RESULT_WAIT_MARGIN) * 3
