from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    App settings.

    Notes:
    - Defaults are local and deterministic so the service starts without setup.
    - Every field can be overridden with an ``OUTAGE_``-prefixed env var.
    """

    model_config = SettingsConfigDict(env_prefix="OUTAGE_", extra="ignore")

    db_url: str | None = None
    security_config_path: str | None = None
    log_level: str = "INFO"

    # No default: startup fails until OUTAGE_SESSION_SECRET is set.
    session_secret: str | None = None
    session_algorithm: str = "HS256"
    session_ttl_minutes: int = 480

    bcrypt_rounds: int = 12

    pdf_service_url: str | None = None
    pdf_timeout_seconds: float = 30.0

    timezone: str = "Asia/Bangkok"
    # Minimum number of days between today and a new outage date.
    min_lead_days: int = 10

    def resolved_db_url(self) -> str:
        if self.db_url:
            return self.db_url

        repo_root = Path(__file__).resolve().parents[1]
        db_path = repo_root / "outage.db"
        return f"sqlite:///{db_path}"

    def resolved_security_config_path(self) -> Path:
        if self.security_config_path:
            return Path(self.security_config_path)

        repo_root = Path(__file__).resolve().parents[1]
        return repo_root / "config" / "security_config.yaml"


@lru_cache
def get_settings() -> Settings:
    return Settings()
