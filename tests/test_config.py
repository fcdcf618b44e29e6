"""Settings resolution from the environment and the user .env."""

import pytest
from pydantic import ValidationError

from core.config import AppSettings, get_user_env_file, write_user_env_vars
from core.domain.provider import GeoProvider


class TestAppSettings:
    def test_defaults(self, make_settings):
        settings = make_settings()

        assert settings.provider is GeoProvider.IP_API
        assert settings.request_delay_ms == 1500
        assert settings.execution_ceiling_ms == 50_000
        assert settings.http_timeout_seconds == 5.0
        assert settings.credential() is None
        assert settings.resolved_endpoint() == "http://ip-api.com/json/{address}"

    def test_prefixed_env_vars(self, monkeypatch):
        monkeypatch.setenv("NODEGEO_PROVIDER", "ipinfo")
        monkeypatch.setenv("NODEGEO_REQUEST_DELAY_MS", "2000")
        monkeypatch.setenv("NODEGEO_IPINFO_TOKEN", "abc")

        settings = AppSettings(_env_file=None)

        assert settings.provider is GeoProvider.IPINFO
        assert settings.request_delay_ms == 2000
        assert settings.credential() == "abc"
        assert settings.resolved_endpoint() == "https://ipinfo.io/{address}/json"

    def test_legacy_token_variable(self, monkeypatch):
        monkeypatch.setenv("IPINFO_TOKEN", "legacy")

        assert AppSettings(_env_file=None).credential() == "legacy"

    def test_blank_token_counts_as_missing(self, make_settings):
        assert make_settings(ipinfo_token="   ").credential() is None

    def test_token_is_masked_in_repr(self, make_settings):
        settings = make_settings(ipinfo_token="hidden-value")

        assert "hidden-value" not in repr(settings)
        assert "hidden-value" not in str(settings.model_dump())

    def test_endpoint_override(self, make_settings):
        settings = make_settings(endpoint="https://geo.example.com/{address}")

        assert settings.resolved_endpoint() == "https://geo.example.com/{address}"

    @pytest.mark.parametrize(
        "overrides",
        [
            {"request_delay_ms": 0},
            {"http_timeout_seconds": 0},
            {"execution_ceiling_ms": -1},
            {"provider": "maxmind"},
        ],
    )
    def test_invalid_values_rejected(self, make_settings, overrides):
        with pytest.raises(ValidationError):
            make_settings(**overrides)

    def test_log_level_is_normalized(self, make_settings):
        assert make_settings(log_level="debug").log_level == "DEBUG"

    def test_unknown_log_level_rejected(self, monkeypatch):
        monkeypatch.setenv("NODEGEO_LOG_LEVEL", "verbose")

        with pytest.raises(ValidationError):
            AppSettings(_env_file=None)

    def test_dotenv_in_working_directory(self, tmp_path):
        (tmp_path / ".env").write_text("NODEGEO_REQUEST_DELAY_MS=900\n", encoding="utf-8")

        assert AppSettings().request_delay_ms == 900


class TestUserEnvFile:
    def test_write_and_merge(self):
        write_user_env_vars({"NODEGEO_PROVIDER": "ipinfo"})
        path = write_user_env_vars({"NODEGEO_IPINFO_TOKEN": "tok"})

        assert path == get_user_env_file()
        text = path.read_text(encoding="utf-8")
        assert "NODEGEO_PROVIDER=ipinfo" in text
        assert "NODEGEO_IPINFO_TOKEN=tok" in text
