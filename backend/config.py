# backend/config.py
from pydantic_settings import BaseSettings
from typing import ClassVar, Optional
from pathlib import Path

# Resolve absolute path to the .env file for reliable loading
env_path = Path(__file__).parent.parent / ".env"

class Settings(BaseSettings):
    APP_NAME: str = "Catalog & Orders API"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    DATABASE_URL: str = "sqlite:///./catalog_orders.db"

    # Extra origin allowed by CORS (e.g. the deployed frontend)
    FRONTEND_URL: Optional[str] = None

    # Default threshold for the low-stock listing
    LOW_STOCK_THRESHOLD: int = 10

    class Config:
        env_file: ClassVar[str] = str(env_path)
        extra: ClassVar[str] = "ignore"

settings = Settings()
