import logging
import os
from typing import Mapping, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


class Settings(BaseModel):
    """
    Runtime configuration, read once from the environment and passed
    explicitly into clients and services.
    """
    model_config = ConfigDict(frozen=True)

    database_url: Optional[str] = Field(default=None, description="SQLAlchemy async database URL")
    github_token: Optional[str] = Field(default=None, description="Optional GitHub bearer token")
    packages_dir: str = Field(default="data/packages", description="Directory of <name>.yml package files")
    registry_url: str = Field(default="https://package.openupm.com")
    github_api_url: str = Field(default="https://api.github.com")
    github_web_url: str = Field(default="https://github.com")
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        # Unknown level names fall back to INFO
        level = value.strip().upper()
        return level if isinstance(logging.getLevelName(level), int) else "INFO"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] = None) -> "Settings":
        """
        Builds settings from environment variables. Unset or empty variables
        fall back to the field defaults.
        """
        environ = os.environ if environ is None else environ
        mapping = {
            'database_url': 'DATABASE_URL',
            'github_token': 'GITHUB_TOKEN',
            'packages_dir': 'PACKAGES_DIR',
            'registry_url': 'REGISTRY_URL',
            'github_api_url': 'GITHUB_API_URL',
            'github_web_url': 'GITHUB_WEB_URL',
            'log_level': 'LOG_LEVEL',
        }
        values = {field: environ[var] for field, var in mapping.items() if environ.get(var)}
        return cls(**values)
