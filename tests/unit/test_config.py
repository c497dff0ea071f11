import pytest

from src.config.settings import Config


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "MYAPP_API_BASE_URL",
        "MYAPP_RELAY_SERVICE",
        "MYAPP_RELAY_ENABLED",
        "MYAPP_REQUEST_TIMEOUT_MS",
        "HTTP_READ_TIMEOUT",
        "HTTP_MAX_CONNECTIONS",
        "HTTP_VERIFY_SSL",
    ):
        monkeypatch.delenv(name, raising=False)

    cfg = Config()

    assert cfg.api_base_url == "http://localhost:8000/myapp-api"
    assert cfg.relay_service_name == "myapp-api"
    assert cfg.relay_enabled is True
    assert cfg.default_timeout_ms is None
    assert cfg.http_read_timeout == 60.0
    assert cfg.http_max_connections == 100
    assert cfg.http_verify_ssl is True


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MYAPP_API_BASE_URL", "https://api.example.com/v1/")
    monkeypatch.setenv("MYAPP_RELAY_ENABLED", "false")
    monkeypatch.setenv("MYAPP_REQUEST_TIMEOUT_MS", "15000")
    monkeypatch.setenv("HTTP_CONNECT_TIMEOUT", "2.5")
    monkeypatch.setenv("HTTP_VERIFY_SSL", "0")

    cfg = Config()

    assert cfg.api_base_url == "https://api.example.com/v1"
    assert cfg.relay_enabled is False
    assert cfg.default_timeout_ms == 15000
    assert cfg.http_connect_timeout == 2.5
    assert cfg.http_verify_ssl is False


def test_blank_values_fall_back_to_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MYAPP_RELAY_ENABLED", "  ")
    monkeypatch.setenv("MYAPP_REQUEST_TIMEOUT_MS", "")

    cfg = Config()

    assert cfg.relay_enabled is True
    assert cfg.default_timeout_ms is None


def test_invalid_number_names_the_variable(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HTTP_READ_TIMEOUT", "soon")

    with pytest.raises(ValueError, match="HTTP_READ_TIMEOUT"):
        Config()
