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
    mongodb_db: str = "careerhub"
    mongodb_timeout_ms: int = 5000

    # JWT Auth (tokens from the identity provider or /auth/login)
    jwt_secret_key: str = "change-this-secret"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 1440

    # Comma separated list of administrator emails
    admin_emails: str = ""

    # Reject job applications from students outside the eligible batches
    enforce_eligibility: bool = True

    # Media host (signed direct uploads)
    media_cloud_name: str = ""
    media_api_key: str = ""
    media_api_secret: str = ""
    media_folders: str = "resumes,postings"

    # App
    cors_origins: str = "*"
    log_level: str = "INFO"
    debug: bool = False

    @property
    def admin_email_list(self) -> List[str]:
        """Admin emails, lowercased."""
        return [e.strip().lower() for e in self.admin_emails.split(",") if e.strip()]

    @property
    def media_folder_list(self) -> List[str]:
        return [f.strip() for f in self.media_folders.split(",") if f.strip()]

    @property
    def cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
