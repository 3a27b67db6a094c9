from pydantic_settings import BaseSettings
from typing import List, Optional
import os

PACKAGE_DATA_DIR = os.path.join(os.path.dirname(__file__), "data")

class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite://"
    DATA_DIR: str = PACKAGE_DATA_DIR
    SEED_ON_STARTUP: bool = True

    # Application
    PROJECT_NAME: str = "Kathmandu Valley Bus Transit"
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:5173"]

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[str] = None

    # Real-time mock
    SIMULATE_LATENCY: bool = True
    REALTIME_UPDATE_INTERVAL_SECONDS: int = 30

    class Config:
        env_file = ".env"
        case_sensitive = True

settings = Settings()
