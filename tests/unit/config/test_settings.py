from __future__ import annotations

import pytest

from edgar_relay.config.settings import Environment, Settings, get_settings
from edgar_relay.domain.exceptions.errors import FatalConfigError


@pytest.mark.usefixtures("relay_env")
def test_settings_load_from_env_with_defaults() -> None:
    settings = get_settings()

    assert settings.user_agent == "Example Research ops@example.com"
    assert settings.port == 4000
    assert settings.edgar_base_url == "https://data.sec.gov"
    assert settings.max_payload_bytes == 100_000
    assert settings.api_key is None
    assert settings.cors_allow_origins == []
    assert get_settings() is settings


@pytest.mark.usefixtures("relay_env")
def test_missing_contact_identity_is_fatal(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("SEC_API_MAIL")

    with pytest.raises(FatalConfigError) as excinfo:
        get_settings()

    assert excinfo.value.kind == "FATAL"
    assert any("sec_api_mail" in field.lower() for field in excinfo.value.details["fields"])


@pytest.mark.usefixtures("relay_env")
def test_env_overrides_and_secret(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PORT", "8081")
    monkeypatch.setenv("MCP_API_KEY", "s3cret")
    monkeypatch.setenv("ALLOWED_ORIGINS", "https://a.example, https://b.example")
    monkeypatch.setenv("ENVIRONMENT", "production")

    settings = get_settings()

    assert settings.port == 8081
    assert settings.api_key == "s3cret"  # noqa: S105
    assert "s3cret" not in repr(settings)
    assert settings.environment is Environment.PRODUCTION
    assert settings.cors_allow_origins == ["https://a.example", "https://b.example"]


@pytest.mark.usefixtures("relay_env")
def test_wildcard_cors_rejected_in_production(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ALLOWED_ORIGINS", "*")
    monkeypatch.setenv("ENVIRONMENT", "production")

    with pytest.raises(FatalConfigError):
        get_settings()


def test_wildcard_cors_allowed_in_development() -> None:
    settings = Settings(
        _env_file=None,
        environment="development",
        sec_api_mail="ops@example.com",
        sec_api_company="Example Research",
        cors_allow_origins_raw="*",
    )
    assert settings.cors_allow_origins == ["*"]
