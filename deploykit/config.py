"""Application configuration using pydantic-settings."""

from functools import lru_cache
from typing import Literal

from dotenv import load_dotenv
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env file without clobbering variables already exported by CI
load_dotenv(override=False)


class Settings(BaseSettings):
    """Settings loaded from environment variables.

    Credentials keep the variable names the hosting and CI accounts already
    export; tuning knobs use the ``DEPLOYKIT_`` prefix.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="DEPLOYKIT_",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Acquia Cloud API
    acquia_key: str = Field(default="", validation_alias=AliasChoices("AC_API2_KEY", "acquia_key"))
    acquia_secret: str = Field(default="", validation_alias=AliasChoices("AC_API2_SECRET", "acquia_secret"))
    acquia_base_uri: str = "https://cloud.acquia.com/api"
    acquia_token_url: str = "https://accounts.acquia.com/api/auth/oauth/token"
    database_name: str = "massgov"

    # Backups are served from the platform hostname; operators download them
    # through the public edit hostname.
    backup_platform_host: str = "massgov.prod.acquia-sites.com"
    backup_public_host: str = "edit.mass.gov"
    backup_tmp_dir: str = "/mnt/tmp"

    # CircleCI
    circleci_token: str = Field(
        default="",
        validation_alias=AliasChoices("CIRCLECI_PERSONAL_API_TOKEN", "circleci_token"),
    )
    circleci_pipeline_uri: str = "https://circleci.com/api/v2/project/github/massgov/openmass/pipeline"
    circleci_project_url: str = "https://circleci.com/gh/massgov/openmass"

    # Tugboat
    tugboat_token: str = Field(
        default="",
        validation_alias=AliasChoices("TUGBOAT_ACCESS_TOKEN", "tugboat_token"),
    )
    tugboat_api: str = "https://api.tugboat.qa/v3"
    tugboat_repo: str = "612e50fcbaa70da92493eef8"

    # New Relic
    newrelic_user: str = Field(default="", validation_alias=AliasChoices("AC_API_USER", "newrelic_user"))
    newrelic_application: str = Field(
        default="",
        validation_alias=AliasChoices("MASS_NEWRELIC_APPLICATION", "newrelic_application"),
    )
    newrelic_key: str = Field(default="", validation_alias=AliasChoices("MASS_NEWRELIC_KEY", "newrelic_key"))
    newrelic_api: str = "https://api.newrelic.com/v2"

    # Deployment
    site_aliases_file: str = "drush/sites/aliases.json"
    php_version: str = "8.2"
    drush_binary: str = "../vendor/bin/drush"
    poll_interval: float = 5.0
    notification_timeout: float = Field(default=3600.0, description="Seconds to wait on a cloud task")
    purge_paths: list[str] = Field(
        default_factory=lambda: ["", "/orgs/office-of-the-governor", "/media/1268726"]
    )
    lock_dir: str = "/tmp/deploykit-locks"
    lock_ttl_minutes: int = 120
    http_timeout: float = 60.0

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["console", "json"] = "console"
    log_file: str | None = None

    @property
    def notification_max_attempts(self) -> int:
        """Number of polls that fit into the notification timeout."""
        if self.poll_interval <= 0:
            return max(int(self.notification_timeout), 1)
        return max(int(self.notification_timeout // self.poll_interval), 1)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
