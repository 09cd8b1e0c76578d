import logging

import httpx
import pytest

from restrequest import ErrorKind, Result
from restrequest._services._breaker import Invocation
from restrequest._services._dispatcher import (
    classify_response,
    deliver,
    perform_protected,
)
from restrequest._services._transport import Transport


def make_response(status_code: int) -> httpx.Response:
    return httpx.Response(
        status_code, request=httpx.Request("GET", "https://test.example.com/")
    )


class TestClassifyResponse:
    @pytest.mark.parametrize("status_code", [200, 202, 250, 299])
    def test_success_range(self, status_code: int) -> None:
        response = make_response(status_code)

        assert classify_response(response) == Result.success(response)

    @pytest.mark.parametrize("status_code", [199, 300, 302, 401, 418, 502])
    def test_error_status_code(self, status_code: int) -> None:
        result = classify_response(make_response(status_code))

        assert result.error.kind is ErrorKind.ERROR_STATUS_CODE
        assert result.error.status_code == status_code


class TestDeliver:
    def test_passes_result(self, collector) -> None:
        deliver(collector, Result.success(1))

        assert collector.get() == Result.success(1)

    def test_logs_handler_errors(self, caplog: pytest.LogCaptureFixture) -> None:
        def handler(result: Result) -> None:
            raise KeyError("missing")

        with caplog.at_level(logging.ERROR, logger="restrequest"):
            deliver(handler, Result.success(1))

        assert "Unhandled error in completion handler" in caplog.text


class TestPerformProtected:
    @pytest.fixture
    def outcomes(self) -> list:
        return []

    def make_invocation(self, collector, outcomes: list) -> Invocation:
        return Invocation(
            (object(), collector), on_outcome=lambda inv: outcomes.append(inv.failed)
        )

    def test_transport_error_is_reported_and_delivered(
        self, mocker, collector, outcomes
    ) -> None:
        transport = mocker.Mock(spec=Transport)
        transport.perform.side_effect = httpx.ConnectError("refused")

        perform_protected(transport, self.make_invocation(collector, outcomes), 1000)
        error = collector.get().error

        assert outcomes == [True]
        assert error.kind is ErrorKind.TRANSPORT_ERROR
        assert isinstance(error.error, httpx.ConnectError)

    def test_unexpected_error_is_other_error(
        self, mocker, collector, outcomes
    ) -> None:
        transport = mocker.Mock(spec=Transport)
        transport.perform.side_effect = ValueError("broken")

        perform_protected(transport, self.make_invocation(collector, outcomes), 1000)

        assert outcomes == [True]
        assert collector.get().error.kind is ErrorKind.OTHER_ERROR

    def test_error_status_counts_as_success(
        self, mocker, collector, outcomes
    ) -> None:
        transport = mocker.Mock(spec=Transport)
        transport.perform.return_value = make_response(503)

        perform_protected(transport, self.make_invocation(collector, outcomes), 1000)

        assert outcomes == [False]
        assert collector.get().error.kind is ErrorKind.ERROR_STATUS_CODE
