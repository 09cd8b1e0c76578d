from pathlib import Path
from typing import List, Optional, Tuple

import httpx
import pytest
from pytest_httpx import HTTPXMock

from restrequest import DownloadState, ErrorKind, RestError, RestRequest, Transport
from restrequest._services._download import Download


class RecordingDelegate:
    def __init__(self) -> None:
        self.events: List[Tuple[str, object]] = []

    def on_header(self, response: httpx.Response) -> None:
        self.events.append(("header", response.status_code))

    def on_chunk(self, chunk: bytes, received: int, total: Optional[int]) -> None:
        self.events.append(("chunk", (received, total)))

    def on_complete(self, destination: Path) -> None:
        self.events.append(("complete", destination))

    def on_error(self, error: RestError) -> None:
        self.events.append(("error", error.kind))


@pytest.fixture
def request_(transport: Transport, base_url: str) -> RestRequest:
    return RestRequest(f"{base_url}/files/{{name}}", transport=transport)


class TestDownload:
    def test_writes_body_to_destination(
        self, httpx_mock: HTTPXMock, request_: RestRequest, tmp_path: Path, collector
    ) -> None:
        payload = b"0123456789" * 20000
        httpx_mock.add_response(
            url="https://test.example.com/files/data.bin", content=payload
        )
        destination = tmp_path / "data.bin"
        delegate = RecordingDelegate()

        request_.download(
            destination,
            collector,
            delegate=delegate,
            template_params={"name": "data.bin"},
        )
        response = collector.get().unwrap()

        assert response.body == destination
        assert response.status_code == 200
        assert destination.read_bytes() == payload
        assert delegate.events[0] == ("header", 200)
        assert delegate.events[-1] == ("complete", destination)
        chunks = [value for name, value in delegate.events if name == "chunk"]
        assert chunks[-1] == (len(payload), len(payload))
        assert list(tmp_path.iterdir()) == [destination]

    def test_replaces_existing_file(
        self, httpx_mock: HTTPXMock, request_: RestRequest, tmp_path: Path, collector
    ) -> None:
        httpx_mock.add_response(content=b"new")
        destination = tmp_path / "data.bin"
        destination.write_bytes(b"old contents")

        request_.download(destination, collector, template_params={"name": "x"})
        collector.get().unwrap()

        assert destination.read_bytes() == b"new"

    def test_error_status_is_download_error(
        self, httpx_mock: HTTPXMock, request_: RestRequest, tmp_path: Path, collector
    ) -> None:
        httpx_mock.add_response(status_code=404, content=b"not found")
        destination = tmp_path / "data.bin"
        delegate = RecordingDelegate()

        request_.download(
            destination, collector, delegate=delegate, template_params={"name": "x"}
        )
        error = collector.get().error

        assert error.kind is ErrorKind.DOWNLOAD_ERROR
        assert error.status_code == 404
        assert error.response_data == b"not found"
        assert not destination.exists()
        assert delegate.events == [
            ("header", 404),
            ("error", ErrorKind.DOWNLOAD_ERROR),
        ]

    def test_transport_failure_is_download_error(
        self, httpx_mock: HTTPXMock, request_: RestRequest, tmp_path: Path, collector
    ) -> None:
        httpx_mock.add_exception(httpx.ConnectError("Connection refused"))

        request_.download(
            tmp_path / "data.bin", collector, template_params={"name": "x"}
        )
        error = collector.get().error

        assert error.kind is ErrorKind.DOWNLOAD_ERROR
        assert isinstance(error.error, httpx.ConnectError)

    def test_directory_destination_is_invalid_file(
        self, httpx_mock: HTTPXMock, request_: RestRequest, tmp_path: Path, collector
    ) -> None:
        request_.download(tmp_path, collector, template_params={"name": "x"})

        assert collector.get().error.kind is ErrorKind.INVALID_FILE
        assert httpx_mock.get_requests() == []

    def test_missing_directory_is_file_manager_error(
        self, httpx_mock: HTTPXMock, request_: RestRequest, tmp_path: Path, collector
    ) -> None:
        httpx_mock.add_response(content=b"data")

        request_.download(
            tmp_path / "missing" / "data.bin",
            collector,
            template_params={"name": "x"},
        )

        assert collector.get().error.kind is ErrorKind.FILE_MANAGER_ERROR

    def test_unexpanded_template_is_delivered(
        self, request_: RestRequest, tmp_path: Path, collector
    ) -> None:
        request_.download(tmp_path / "data.bin", collector)

        assert collector.get().error.kind is ErrorKind.INVALID_URL


class TestDownloadStateMachine:
    def test_finishes_through_states(
        self, httpx_mock: HTTPXMock, transport: Transport, base_url: str, tmp_path: Path
    ) -> None:
        httpx_mock.add_response(content=b"data")
        request = RestRequest(f"{base_url}/file", transport=transport).make_request()
        job = Download(transport, request, tmp_path / "file")

        assert job.state is DownloadState.STARTED
        result = job.run()

        assert result.is_success
        assert job.state is DownloadState.FINISHED
        assert job.received == 4

    def test_empty_body_finishes_without_chunks(
        self, httpx_mock: HTTPXMock, transport: Transport, base_url: str, tmp_path: Path
    ) -> None:
        httpx_mock.add_response(content=b"")
        request = RestRequest(f"{base_url}/file", transport=transport).make_request()
        delegate = RecordingDelegate()
        job = Download(transport, request, tmp_path / "file", delegate)

        job.run()

        assert job.state is DownloadState.FINISHED
        assert [name for name, _ in delegate.events] == ["header", "complete"]
        assert (tmp_path / "file").read_bytes() == b""

    def test_failed_download_cannot_finish(
        self, transport: Transport, base_url: str, tmp_path: Path
    ) -> None:
        request = RestRequest(f"{base_url}/file", transport=transport).make_request()
        job = Download(transport, request, tmp_path)

        assert job.run().is_failure
        assert job.state is DownloadState.FAILED
        with pytest.raises(RuntimeError):
            job._transition(DownloadState.FINISHED)

    def test_delegate_errors_do_not_fail_download(
        self, httpx_mock: HTTPXMock, transport: Transport, base_url: str, tmp_path: Path
    ) -> None:
        class BrokenDelegate(RecordingDelegate):
            def on_chunk(self, chunk, received, total) -> None:
                raise ValueError("broken")

        httpx_mock.add_response(content=b"data")
        request = RestRequest(f"{base_url}/file", transport=transport).make_request()

        result = Download(transport, request, tmp_path / "file", BrokenDelegate()).run()

        assert result.is_success
