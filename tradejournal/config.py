"""Application configuration via environment variables."""

from pathlib import Path
from pydantic_settings import BaseSettings

PROJECT_ROOT = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    database_url: str = f"sqlite:///{PROJECT_ROOT / 'tradejournal.db'}"
    log_level: str = "INFO"
    cors_origins: list[str] = ["http://localhost:5173"]  # Vite dev server
    host: str = "127.0.0.1"
    port: int = 8000

    # Auth
    jwt_secret: str = "change-me-in-production"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 1440  # 24 hours

    # Analytics
    setup_min_trades: int = 3  # setups with fewer closed trades are hidden
    time_performance_months: int = 12

    # Trade listing
    default_page_size: int = 50
    max_page_size: int = 100

    model_config = {"env_prefix": "TJ_", "env_file": ".env"}


settings = Settings()
