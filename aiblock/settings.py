"""Environment settings for aiblock."""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Settings loaded from AIBLOCK_* environment variables.

    - AIBLOCK_LOG_LEVEL: Log level for the CLI (default WARNING)
    - AIBLOCK_CONFIG_FILE: YAML file merged over the default render config,
      used instead of the project's .aiblock/render.yaml
    """

    log_level: str = "WARNING"
    config_file: Optional[str] = None

    class Config:
        env_prefix = "AIBLOCK_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
