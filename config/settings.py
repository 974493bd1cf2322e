"""notesync global settings: loaded from environment variables via .env file."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from notesync.core.constants import DEFAULT_API_BASE_URL, DEFAULT_HTTP_TIMEOUT

PROJECT_ROOT = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """All configuration flows through this class. Never read env vars directly."""

    model_config = SettingsConfigDict(
        env_file=PROJECT_ROOT / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ── Environment ──────────────────────────────────────────────
    notes_env: Literal["dev", "prod"] = "dev"

    # ── Backend ──────────────────────────────────────────────────
    notes_api_base_url: str = DEFAULT_API_BASE_URL
    notes_http_timeout: float = DEFAULT_HTTP_TIMEOUT

    # ── Session persistence ──────────────────────────────────────
    notes_token_path: Path = Path.home() / ".notesync" / "session.json"

    # ── Logging ──────────────────────────────────────────────────
    notes_log_level: str = "WARNING"
    notes_log_json: bool = False

    @model_validator(mode="after")
    def _check_prod_transport(self) -> "Settings":
        """Bearer tokens must not travel over plain HTTP in production."""
        if self.notes_env == "prod" and not self.notes_api_base_url.startswith("https://"):
            msg = (
                "NOTES_API_BASE_URL must use https:// in production, "
                f"got {self.notes_api_base_url!r}"
            )
            raise ValueError(msg)
        if self.notes_http_timeout <= 0:
            msg = f"NOTES_HTTP_TIMEOUT must be positive, got {self.notes_http_timeout}"
            raise ValueError(msg)
        return self


_settings_instance: Settings | None = None


def get_settings() -> Settings:
    """Singleton settings loader: reads .env once, reuses thereafter."""
    global _settings_instance  # noqa: PLW0603
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
