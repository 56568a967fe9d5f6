"""
Application configuration management.
"""

from typing import List, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # GitHub credentials
    github_user: str
    github_token: str

    # GitHub API
    github_api_url: str = "https://api.github.com"
    github_media_type: str = "application/vnd.github.polaris-preview+json"
    http_timeout_seconds: float = 30.0

    # Merge behaviour
    squash_merges: bool = False
    delete_branches: bool = False
    trusted_identities: List[str] = ["https://github.com/greenkeeperio-bot"]

    # Mergeability polling
    poll_interval_seconds: float = 60.0
    pending_timeout_seconds: float = 24 * 60 * 60.0

    # Webhook
    webhook_secret: Optional[str] = None  # Signature check is skipped when unset

    # Application
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 3000

    class Config:
        env_file = ".env"
        case_sensitive = False


# Global settings instance
settings = Settings()
