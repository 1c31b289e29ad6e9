"""Application configuration from environment variables."""

import logging
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Default data directory
DATA_DIR = Path.home() / ".fittrack"


class Settings(BaseSettings):
    """Settings loaded from environment (and .env file)."""

    model_config = SettingsConfigDict(
        env_prefix="FITTRACK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    data_dir: Path = DATA_DIR
    database_name: str = "fittrack.db"
    preferences_name: str = "preferences.db"

    # Used when no language has been chosen yet
    default_language: str = "de"

    seed_on_startup: bool = True
    log_level: str = "WARNING"

    @property
    def db_path(self) -> Path:
        return get_db_path(self.data_dir, self.database_name)

    @property
    def preferences_path(self) -> Path:
        return get_preferences_path(self.data_dir, self.preferences_name)


def get_db_path(data_dir: Path | None = None, name: str = "fittrack.db") -> Path:
    """Get the database file path."""
    if data_dir is None:
        data_dir = DATA_DIR
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir / name


def get_preferences_path(
    data_dir: Path | None = None, name: str = "preferences.db"
) -> Path:
    """Get the preference store file path."""
    if data_dir is None:
        data_dir = DATA_DIR
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir / name


def configure_logging(level: str | int = logging.WARNING) -> None:
    """Configure root logging for the CLI and the web server."""
    logging.basicConfig(
        level=level if isinstance(level, int) else level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
