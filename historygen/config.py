import logging

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, ValidationError, field_validator

from historygen.constants import COMMIT_HOUR, SCRATCH_FILE_NAME


class RuntimeSettings(BaseSettings):
    """
    Environment-level settings (HISTORYGEN_* variables or a .env file).
    """

    repo_path: str = "."
    scratch_file: str = SCRATCH_FILE_NAME
    remote: str = "origin"
    commit_hour: int = Field(default=COMMIT_HOUR, ge=0, le=23)
    # Unset means a fresh random schedule on every run
    seed: int | None = None
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="HISTORYGEN_", env_file=".env", extra="ignore"
    )

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        value = value.strip().upper()
        if not isinstance(logging.getLevelName(value), int):
            raise ValueError(f"Unknown log level '{value}'")
        return value


def load_settings():
    try:
        return RuntimeSettings()
    except ValidationError as e:
        print(f"Configuration Error: {e}")
        return RuntimeSettings.model_construct()  # Defaults without re-reading env
