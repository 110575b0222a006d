from pathlib import Path
from datetime import date
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    PROJECT_NAME: str = "FinMate API"
    VERSION: str = "1.0.0"
    API_PREFIX: str = "/api"

    DATA_DIR: Path = BASE_DIR / "data"
    MEDIA_DIR: Path = BASE_DIR / "data" / "media"
    DATABASE_URL: str = f"sqlite+aiosqlite:///{BASE_DIR}/data/finmate.db"

    BACKEND_CORS_ORIGINS: list[str] = ["*"]
    LOG_LEVEL: str = "INFO"

    JWT_SECRET: str = "dev-insecure-secret-change-me-before-deploying"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    RECURRING_SCHEDULER_ENABLED: bool = True
    RECURRING_RUN_HOUR: int = 0

    # Pins the service clock to a fixed date (demo data, tests)
    FROZEN_TODAY: Optional[date] = None

    GROQ_API_KEY: Optional[str] = None
    GROQ_API_URL: str = "https://api.groq.com/openai/v1/chat/completions"
    GROQ_MODEL: str = "openai/gpt-oss-120b"

    OCR_API_URL: str = "https://api.ocr.space/parse/image"
    OCR_API_KEY: Optional[str] = None
    OCR_LANGUAGE: str = "eng"

    EXTERNAL_TIMEOUT_SECONDS: float = 20.0

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True)


settings = Settings()
