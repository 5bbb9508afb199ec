from pydantic_settings import BaseSettings
from typing import List

class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./dev.db"
    APP_HOST: str = "127.0.0.1"
    APP_PORT: int = 8000
    FRONTEND_ORIGINS: List[str] = ["http://localhost:3000"]
    LOG_LEVEL: str = "INFO"
    RESET_DB: bool = False

    # vendor catalog API; the remote id is appended as the last path segment
    VENDOR_BASE_URL: str = "https://portal.panelo.co/paneloresto/api/productlist"
    VENDOR_TIMEOUT_SECONDS: float = 30.0

    INGEST_LOCK_ENABLED: bool = True
    INGEST_LOCK_TIMEOUT_SECONDS: int = 60

    # periodic re-ingestion, disabled while empty
    SYNC_REMOTE_IDS: List[str] = []
    SYNC_INTERVAL_SECONDS: int = 3600

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

settings = Settings()
