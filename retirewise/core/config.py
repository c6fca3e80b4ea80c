from typing import List, Optional
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from pydantic_settings import BaseSettings, SettingsConfigDict


# =====================================================================
# SETTINGS
# =====================================================================


class Settings(BaseSettings):
    # App
    APP_NAME: str = "RetireWise API"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # Local store (on-device database)
    LOCAL_DATABASE_URL: str = "sqlite:///./retirewise_local.db"

    # Remote store (cloud document API, scoped per user)
    REMOTE_STORE_URL: str = "http://localhost:8080/v1"
    REMOTE_STORE_TOKEN: Optional[str] = None
    REMOTE_STORE_TIMEOUT: float = 30.0
    REMOTE_SUBSCRIBE_INTERVAL: float = 5.0

    # Migration
    MIGRATION_RECORD_TIMEOUT: float = 30.0

    # Chat relay
    ANTHROPIC_API_KEY: Optional[str] = None
    ANTHROPIC_API_URL: str = "https://api.anthropic.com/v1/messages"
    ANTHROPIC_VERSION: str = "2023-06-01"
    CHAT_MODEL: str = "claude-sonnet-4-20250514"
    CHAT_MAX_TOKENS: int = 1024
    CHAT_TIMEOUT: float = 60.0

    CORS_ORIGINS: List[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
        "http://127.0.0.1:5173",
        "http://127.0.0.1:3000",
    ]

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = Settings()


# =====================================================================
# LOCAL DATABASE
# =====================================================================


def build_engine(url: str):
    """Create an engine; SQLite connections are shared with worker threads."""
    return create_engine(
        url,
        connect_args={"check_same_thread": False} if "sqlite" in url else {},
    )


engine = build_engine(settings.LOCAL_DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()
