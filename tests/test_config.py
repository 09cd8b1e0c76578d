import httpx
import pytest
from pydantic import ValidationError

from restrequest import Timeout, TransportConfig


class TestTimeout:
    def test_to_httpx(self) -> None:
        timeout = Timeout(connect=1.0, read=5.0).to_httpx()

        assert timeout == httpx.Timeout(None, connect=1.0, read=5.0)

    def test_default_waits_indefinitely(self) -> None:
        assert Timeout().to_httpx() == httpx.Timeout(None)

    @pytest.mark.parametrize("value", [0, -1])
    def test_rejects_non_positive(self, value: float) -> None:
        with pytest.raises(ValidationError):
            Timeout(connect=value)


class TestTransportConfig:
    def test_defaults(self) -> None:
        config = TransportConfig.from_env()

        assert config == TransportConfig()
        assert config.max_workers == 8
        assert config.max_retries == 0
        assert config.follow_redirects
        assert not config.insecure

    def test_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("RESTREQUEST_CONNECT_TIMEOUT", "2.5")
        monkeypatch.setenv("RESTREQUEST_READ_TIMEOUT", "10")
        monkeypatch.setenv("RESTREQUEST_MAX_WORKERS", "2")
        monkeypatch.setenv("RESTREQUEST_MAX_RETRIES", "3")
        monkeypatch.setenv("RESTREQUEST_INSECURE", "True")
        monkeypatch.setenv("RESTREQUEST_PROXY", "http://proxy.local:3128")

        config = TransportConfig.from_env()

        assert config.timeout == Timeout(connect=2.5, read=10.0)
        assert config.max_workers == 2
        assert config.max_retries == 3
        assert config.insecure
        assert config.proxy == "http://proxy.local:3128"

    def test_only_read_timeout(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("RESTREQUEST_READ_TIMEOUT", "4")

        assert TransportConfig.from_env().timeout == Timeout(read=4.0)

    @pytest.mark.parametrize("value", ["0", "false", "no"])
    def test_insecure_falsy_values(
        self, monkeypatch: pytest.MonkeyPatch, value: str
    ) -> None:
        monkeypatch.setenv("RESTREQUEST_INSECURE", value)

        assert not TransportConfig.from_env().insecure

    def test_invalid_workers(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("RESTREQUEST_MAX_WORKERS", "0")

        with pytest.raises(ValidationError):
            TransportConfig.from_env()

    def test_is_frozen(self) -> None:
        with pytest.raises(ValidationError):
            TransportConfig().max_workers = 3  # type: ignore[misc]
