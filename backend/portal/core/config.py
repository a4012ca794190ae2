from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App
    app_name: str = "Client Project Portal"
    debug: bool = False

    # API
    frontend_url: str = "http://localhost:3000"

    # Database
    database_url: str = "sqlite+aiosqlite:///./portal.db"
    redis_url: str = "redis://localhost:6379"

    # Admin sessions
    admin_session_ttl_minutes: int = 12 * 60
    # Bootstrap admin, created at startup when both are set and the email is not yet registered
    admin_email: str = ""
    admin_password: str = ""

    # Object storage
    storage_backend: Literal["s3", "memory"] = "memory"
    s3_region: str = "us-east-1"
    s3_endpoint_url: str = ""  # env: S3_ENDPOINT_URL, for S3-compatible stores (MinIO, R2, Supabase)
    storage_public_base_url: str = ""  # env: STORAGE_PUBLIC_BASE_URL, CDN in front of the buckets
    project_files_bucket: str = "project-files"
    onboarding_assets_bucket: str = "onboarding-assets"
    max_upload_bytes: int = 50 * 1024 * 1024


@lru_cache
def get_settings() -> Settings:
    return Settings()
