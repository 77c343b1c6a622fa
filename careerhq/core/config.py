"""
Configuration module - loads all env vars using pydantic-settings.
This is the SINGLE SOURCE OF TRUTH for all config values.
"""

from functools import lru_cache
from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # MongoDB
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_db: str = "careerhq"

    # Cloudinary (image hosting)
    cloudinary_cloud_name: str = ""
    cloudinary_api_key: str = ""
    cloudinary_api_secret: str = ""
    max_image_size_mb: int = 5

    # Lead automation endpoint (CRM)
    automation_api_url: str = "https://admin.isuite.io/api/automations/68d2868a9cd57/execute"
    automation_api_token: str = ""
    automation_timeout_seconds: float = 10.0
    lead_phone_prefix: str = "+91"

    # JWT Auth (single admin account)
    jwt_secret_key: str = "change-this-secret"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 1440
    admin_email: str = "admin@careerhq.in"
    admin_password_hash: str = ""

    # CORS
    allowed_origins: List[str] = [
        "https://careerhq.in",
        "https://www.careerhq.in",
        "http://localhost:3000",
    ]

    # App
    debug: bool = False
    log_level: str = "INFO"

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
