"""Application configuration from environment variables."""
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """All config comes from env vars or .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    DATABASE_URL: str = "sqlite+aiosqlite:///./database.sqlite"
    FILE_STORAGE_PATH: str = "./uploads"
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 5000
    CORS_ORIGINS: str = "*"
    LOG_LEVEL: str = "INFO"

    # Bytes read per chunk while spooling a multipart upload to disk
    UPLOAD_CHUNK_SIZE: int = 64 * 1024


settings = Settings()
