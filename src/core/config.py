"""Core configuration.

Why here:
- Centralizes environment variables (pydantic-settings) away from the CLI.
- Lets adapters (HTTP lookups) and the scheduler read config consistently.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.domain.provider import GeoProvider


def get_user_config_dir() -> Path:
    """Per-user config directory (cross-platform, no extra dependencies)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "node-geo-filter"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "node-geo-filter"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "node-geo-filter"
    return Path.home() / ".config" / "node-geo-filter"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str]) -> Path:
    """Write or update variables in the user's global .env."""

    env_path = get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# node-geo-filter user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Central application settings.

    Resolved once per invocation and read-only afterwards. The lookup
    credential lives here and is handed to the lookup client explicitly.
    """

    model_config = SettingsConfigDict(
        env_prefix="NODEGEO_",
        extra="ignore",
        case_sensitive=False,
        # Project .env first (dev), then the user's global config.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
        populate_by_name=True,
    )

    provider: GeoProvider = Field(
        default=GeoProvider.IP_API,
        description="Geolocation provider contract (ip-api | ipinfo).",
    )
    endpoint: str | None = Field(
        default=None,
        min_length=8,
        description="Endpoint template override; must contain '{address}'.",
    )
    ipinfo_token: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices("NODEGEO_IPINFO_TOKEN", "IPINFO_TOKEN", "ipinfo_token"),
        description="Credential for providers that require one (ipinfo).",
    )

    http_timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        description="Timeout per lookup request (seconds).",
    )
    user_agent: str = Field(
        default="node-geo-filter/0.1",
        min_length=1,
        description="User-Agent sent with lookups.",
    )

    request_delay_ms: int = Field(
        default=1500,
        gt=0,
        description="Pause between two consecutive lookups (milliseconds).",
    )
    reference_limit_per_minute: int = Field(
        default=45,
        gt=0,
        description="Documented provider limit (informational only).",
    )
    execution_ceiling_ms: int = Field(
        default=50_000,
        gt=0,
        description="Host execution-time ceiling used for the overflow advisory.",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Root log level (DEBUG, INFO, WARNING, ...).",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, value: object) -> object:
        return value.strip().upper() if isinstance(value, str) else value

    def resolved_endpoint(self) -> str:
        """Endpoint template in effect (override or provider default)."""

        return self.endpoint or self.provider.default_endpoint

    def credential(self) -> str | None:
        if self.ipinfo_token is None:
            return None
        value = self.ipinfo_token.get_secret_value().strip()
        return value or None
