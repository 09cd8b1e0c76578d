import queue
from pathlib import Path
from typing import Any, Generator, List

import pytest
from click.testing import CliRunner

from restrequest import Transport, TransportConfig, shutdown_global_transport

FIXTURES: Path = Path(__file__).resolve().parent / "fixtures"


class Collector:
    """Completion handler that hands results back to the test thread."""

    def __init__(self) -> None:
        self._queue: "queue.Queue[Any]" = queue.Queue()

    def __call__(self, *args: Any) -> None:
        self._queue.put(args[0] if len(args) == 1 else args)

    def get(self, timeout: float = 5.0) -> Any:
        return self._queue.get(timeout=timeout)

    def get_all(self, count: int, timeout: float = 5.0) -> List[Any]:
        return [self.get(timeout) for _ in range(count)]

    def empty(self) -> bool:
        return self._queue.empty()


@pytest.fixture
def base_url() -> str:
    return "https://test.example.com"


@pytest.fixture
def collector() -> Collector:
    return Collector()


@pytest.fixture
def fallback() -> Collector:
    return Collector()


@pytest.fixture
def transport() -> Generator[Transport, None, None]:
    with Transport(TransportConfig(max_workers=4)) as transport:
        yield transport


@pytest.fixture
def runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Clean environment variables and the shared transport around each test."""
    for name in (
        "RESTREQUEST_CONNECT_TIMEOUT",
        "RESTREQUEST_READ_TIMEOUT",
        "RESTREQUEST_MAX_WORKERS",
        "RESTREQUEST_MAX_RETRIES",
        "RESTREQUEST_INSECURE",
        "RESTREQUEST_PROXY",
    ):
        monkeypatch.delenv(name, raising=False)
    yield
    shutdown_global_transport()
