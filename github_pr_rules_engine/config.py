"""
Application configuration management
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # GitHub API Configuration
    github_token: Optional[str] = Field(None)
    github_api_base_url: str = Field("https://api.github.com")

    # Application Configuration
    app_name: str = Field("GitHub PR Rules Engine")
    app_version: str = Field("1.0.0")

    # Logging Configuration
    log_level: str = Field("INFO")
    log_format: str = Field("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    # Request Configuration
    request_delay: float = Field(0.1, ge=0)
    request_timeout: float = Field(30.0, gt=0)

    # Interpreter Configuration
    group_filter_max_workers: int = Field(4, ge=1)
    report_mode: str = Field("verbose", pattern="^(silent|verbose)$")


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


def get_github_headers(token: Optional[str] = None) -> dict:
    """Get GitHub API headers with authentication"""
    settings = get_settings()
    headers = {
        "Accept": "application/vnd.github.v3+json",
        "User-Agent": f"{settings.app_name}/{settings.app_version}",
    }
    token = token or settings.github_token
    if token:
        headers["Authorization"] = f"token {token}"
    return headers
