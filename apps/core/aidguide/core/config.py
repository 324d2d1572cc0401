"""Application configuration."""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

IDENTITY_TOOLKIT_URL = "https://identitytoolkit.googleapis.com/v1"


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables."""

    identity_provider: Literal["mock", "firebase"] = "firebase"
    store_backend: Literal["memory", "firestore"] = "firestore"
    firebase_api_key: str | None = None
    firebase_project_id: str | None = None
    firebase_credentials_path: str | None = None
    identity_toolkit_url: str = IDENTITY_TOOLKIT_URL
    seed_on_startup: bool = True
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="AIDGUIDE_", extra="ignore")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
