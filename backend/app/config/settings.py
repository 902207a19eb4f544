import os
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import AnyUrl, Field
from typing import List

env = os.getenv("APP_ENV", "development")
env_file = f".env.{env}"

class Settings(BaseSettings):
    database_url: AnyUrl
    # CORS origins can be overridden via CORS_ORIGINS env var (JSON list or comma-separated)
    cors_origins: List[str] = Field(default=["http://localhost:5173"])
    # JWT configuration
    secret_key: str
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60
    # lifetime used instead when the client logs in with "remember me"
    remember_me_expire_days: int = 7

    # Uploaded documents and profile pictures
    upload_dir: str = "./uploads"
    max_upload_bytes: int = Field(default=10 * 1024 * 1024, ge=1024)

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=env_file,
        env_file_encoding="utf-8",
        extra="ignore",
    )

settings = Settings()
