"""Application configuration."""

import os
from datetime import date, datetime
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    asken_email: str | None = None
    asken_password: str | None = None
    headless: bool = False
    base_url: str = "https://www.asken.jp"
    secrets_dir: Path = Path("secrets")
    state_file_name: str = "asken-state.json"
    session_max_age_hours: float = 24
    navigation_timeout_ms: int = 30000
    render_timeout_ms: int = 10000
    login_timeout_ms: int = 30000
    day_boundary_hour: int = 5
    timezone: str = "Asia/Tokyo"
    batch_width: int = 5
    batch_process_timeout_seconds: float = 300
    scrape_exercise: bool = True
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    sync_secret: str | None = None
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def state_path(self) -> Path:
        """Location of the persisted browser session."""
        return self.secrets_dir / self.state_file_name

    @property
    def error_screenshot_path(self) -> Path:
        return self.secrets_dir / "asken-error.png"

    @property
    def error_html_path(self) -> Path:
        return self.secrets_dir / "asken-error.html"

    @property
    def supabase_enabled(self) -> bool:
        return bool(self.supabase_url and self.supabase_service_key)

    def output_path(self, day: date) -> Path:
        """Per-date output file for a scraped day."""
        return self.secrets_dir / f"asken-day-{day.isoformat()}.json"


def parse_date_arg(raw: str) -> date:
    """Parse a YYYY-MM-DD command line argument."""
    cleaned = raw.strip()
    try:
        return datetime.strptime(cleaned, "%Y-%m-%d").date()
    except ValueError as exc:
        raise ValueError(f"Invalid date {raw!r}, expected YYYY-MM-DD") from exc
