# backend/config.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional
from pathlib import Path

# Resolve absolute path to the .env file for reliable loading
env_path = Path(__file__).parent.parent / ".env"

class Settings(BaseSettings):
    PROJECT_NAME: str = "POS Inventory API"
    VERSION: str = "1.0.0"

    DATABASE_URL: str = "sqlite:///./pos_inventory.db"
    # Seconds a SQLite writer waits for the database lock before failing
    SQLITE_BUSY_TIMEOUT: float = 15.0
    SQL_ECHO: bool = False

    LOG_LEVEL: str = "INFO"

    # Extra CORS origin for a deployed frontend
    FRONTEND_URL: Optional[str] = None

    model_config = SettingsConfigDict(env_file=str(env_path), extra="ignore")

settings = Settings()
