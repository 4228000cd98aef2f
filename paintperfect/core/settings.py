# paintperfect/core/settings.py
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    APP_NAME: str = "PaintPerfect"
    PUBLIC_BASE_URL: str = "http://localhost:8000"

    # --- Database ---
    DATABASE_URL: str = "sqlite:///./paintperfect.db"

    # --- Auth ---
    JWT_SECRET: str = "change-me"
    JWT_EXP_HOURS: int = 24
    COOKIE_SECURE: bool = False
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_AUTH: str = "10/minute"

    ALLOWED_ORIGINS: list[str] = ["http://localhost:8000"]

    # --- Storage ---
    STORAGE_BACKEND: str = "local"  # local | s3
    LOCAL_STORAGE_ROOT: str = "./.local_storage"
    S3_BUCKET_PREFIX: str = "paintperfect"
    S3_REGION: str = "eu-west-1"

    allowed_mimes: list[str] = ["image/jpeg", "image/png", "image/webp"]
    max_upload_mb: int = 10

    # --- Estimation ---
    # fallback side length (ft) when a room dimension is missing
    DEFAULT_SIDE_FT: float = 10.0

    SENTRY_DSN: Optional[str] = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()  # reads .env
