"""Settings: defaults and environment overrides."""

from budget_gateway.config import Settings


def test_defaults(monkeypatch):
    for name in ("ACTUAL_DATA_DIR", "ACTUAL_SERVER_URL", "BUDGET_ID", "LOG_FORMAT", "PORT"):
        monkeypatch.delenv(name, raising=False)
    settings = Settings(_env_file=None)
    assert settings.port == 3001
    assert settings.actual_data_dir == "./actual-data"
    assert settings.actual_server_url is None
    assert settings.budget_id is None
    assert settings.log_format == "json"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("ACTUAL_SERVER_URL", "https://actual.example.com/")
    monkeypatch.setenv("BUDGET_ID", "abc-123")
    settings = Settings(_env_file=None)
    assert settings.port == 8080
    assert settings.actual_server_url == "https://actual.example.com"
    assert settings.budget_id == "abc-123"


def test_blank_values_count_as_unset(monkeypatch):
    monkeypatch.setenv("BUDGET_ID", "   ")
    monkeypatch.setenv("ACTUAL_PASSWORD", "")
    settings = Settings(_env_file=None)
    assert settings.budget_id is None
    assert settings.actual_password is None
