"""Core configuration.

Why here:
- Centralizes environment variables (pydantic-settings) without polluting the CLI.
- Lets adapters (HTTP, state file) read config consistently.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from dotenv import dotenv_values
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from spec_sync.core.errors import ConfigurationError


def get_user_config_dir() -> Path:
    """Per-user config directory (cross-platform, no extra dependencies)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "postman-spec-sync"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "postman-spec-sync"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "postman-spec-sync"
    return Path.home() / ".config" / "postman-spec-sync"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def write_user_env_vars(values: dict[str, str], *, env_path: Path | None = None) -> Path:
    """Write/update variables in the user's global .env."""

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = {k: v for k, v in dotenv_values(env_path).items() if v is not None}
    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# postman-spec-sync user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Central application configuration.

    Credentials are optional at load time so that `doctor` can report them as
    missing; commands that talk to Postman call `require_credentials()` first.
    """

    model_config = SettingsConfigDict(
        env_prefix="POSTMAN_",
        extra="ignore",
        case_sensitive=False,
        # Project first (dev), then the user's global config.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    api_key: str | None = Field(
        default=None,
        description="Postman API key, sent as the `x-api-key` header.",
    )
    workspace_id: str | None = Field(
        default=None,
        description="Workspace that owns the specs and collections.",
    )
    api_base_url: str = Field(
        default="https://api.getpostman.com",
        min_length=8,
        description="Base URL of the Postman REST API.",
    )

    http_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Per-request timeout (seconds).",
    )
    user_agent: str = Field(
        default="postman-spec-sync/0.1",
        min_length=1,
        description="User-Agent sent with every request.",
    )

    poll_interval_seconds: float = Field(
        default=3.0,
        gt=0,
        description="Delay between two task status fetches.",
    )
    poll_timeout_seconds: float = Field(
        default=180.0,
        ge=0,
        description="Overall budget for polling an async task.",
    )

    max_openapi_bytes: int = Field(
        default=10 * 1024 * 1024,
        gt=0,
        description="Upper bound for the OpenAPI input file.",
    )
    default_state_file: Path = Field(
        default=Path("state/postman-ingestion-state.json"),
        description="State file used when --state-file is not given.",
    )

    name_prefix: str = Field(
        default="[DEMO]",
        description="Prefix of generated spec/collection names.",
    )
    name_suffix: str = Field(
        default="#main",
        description="Suffix of generated spec/collection names.",
    )

    def missing_credentials(self) -> list[str]:
        missing: list[str] = []
        if not self.api_key:
            missing.append("POSTMAN_API_KEY")
        if not self.workspace_id:
            missing.append("POSTMAN_WORKSPACE_ID")
        return missing

    def require_credentials(self) -> tuple[str, str]:
        """Return `(api_key, workspace_id)` or raise `ConfigurationError`."""

        api_key, workspace_id = self.api_key, self.workspace_id
        if not api_key or not workspace_id:
            missing = self.missing_credentials()
            raise ConfigurationError(f"Missing required env: {', '.join(missing)}")
        return api_key, workspace_id
