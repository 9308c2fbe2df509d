"""Application configuration via environment variables."""

from pathlib import Path
from pydantic_settings import BaseSettings

PROJECT_ROOT = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    database_url: str = f"sqlite:///{PROJECT_ROOT / 'data' / 'journal.db'}"
    log_level: str = "INFO"
    cors_origins: list[str] = ["http://localhost:5173"]  # Vite dev server

    # Calendar-day comparisons (0DTE, weekdays, days passed) use this zone
    timezone: str = "America/New_York"

    # Uploaded trade screenshots, served at /uploads
    upload_dir: str = str(PROJECT_ROOT / "uploads")

    # Loss applied when a trade has no eligible highs (percent of cost)
    default_loss_modifier_pct: float = 100.0

    host: str = "127.0.0.1"
    port: int = 3000

    model_config = {"env_prefix": "TJ_", "env_file": ".env"}


settings = Settings()
