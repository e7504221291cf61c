"""
Watchrun Configuration Module.

Centralizes all configuration settings using Pydantic Settings.
Requires Python 3.11+.
"""

from functools import lru_cache
from typing import Annotated, Literal

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from watchrun import __version__

# Load .env into os.environ so nested settings see the values too
load_dotenv()


ExecutionMode = Literal["concurrent", "serial"]


def split_extensions(value: str | list[str]) -> list[str]:
    """
    Normalize a comma-separated extension list.

    Leading dots are added where missing and blanks are dropped,
    so "go, .py,,txt" becomes [".go", ".py", ".txt"].
    """
    if isinstance(value, str):
        value = value.split(",")

    extensions = []
    for ext in value:
        ext = ext.strip()
        if not ext:
            continue
        extensions.append(ext if ext.startswith(".") else f".{ext}")
    return extensions


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    model_config = SettingsConfigDict(env_prefix="WATCHRUN_LOG_", frozen=True)

    level: str = Field(default="INFO")
    format: Literal["console", "json"] = Field(default="console")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Only accept the standard library level names."""
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"unknown log level: {v}")
        return level


class Settings(BaseSettings):
    """
    Watchrun settings.

    Built once at startup and passed explicitly to every component.
    Instances are frozen.
    """

    model_config = SettingsConfigDict(
        env_prefix="WATCHRUN_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # Application metadata
    app_name: str = Field(default="watchrun")
    app_version: str = Field(default=__version__)

    path: str = Field(default=".", description="Root directory or file to watch")
    types: Annotated[list[str], NoDecode] = Field(
        default=[".go"],
        description="File extensions to watch",
    )
    command: str = Field(default="", description="Shell command to run on change")
    poll_interval_ms: int = Field(
        default=0,
        ge=0,
        description="Poll period; 0 selects OS change notifications",
    )
    delay_ms: int = Field(default=0, ge=0, description="Delay before each execution")
    verbose: bool = Field(default=False)
    execution_mode: ExecutionMode = Field(default="concurrent")

    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @field_validator("types", mode="before")
    @classmethod
    def parse_types(cls, v: str | list[str]) -> list[str]:
        """Parse extensions from comma-separated string or list."""
        return split_extensions(v)

    @property
    def poll_mode(self) -> bool:
        """Check if polling is selected instead of notifications."""
        return self.poll_interval_ms > 0

    @property
    def poll_interval(self) -> float:
        """Poll period in seconds."""
        return self.poll_interval_ms / 1000.0

    @property
    def delay(self) -> float:
        """Execution delay in seconds."""
        return self.delay_ms / 1000.0


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get cached settings read from the environment.

    The CLI builds its own instance with flag overrides instead.
    """
    return Settings()
