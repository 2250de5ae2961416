"""Configuration loading for the docrun doctest runner.

This module provides centralized configuration management:
- Load settings from environment variables and .env files
- Validate configuration using pydantic
- Provide typed access to all settings
"""

import shlex
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment.

    Uses pydantic-settings for environment variable handling with
    .env file support via python-dotenv.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Project configuration
    project_path: str = Field(
        default="./",
        description="Project to doctest when no path is given on the command line",
    )

    # Program loading configuration
    program_backend: Literal["linked_json", "command"] = Field(
        default="linked_json",
        description="How the linked documentation is obtained",
    )
    tsconfig_name: str = Field(
        default="tsconfig.json",
        description="Project configuration file, relative to the project",
    )
    linked_data_file: str = Field(
        default="code-to-json.linked.json",
        description="Linked code-to-json document, relative to the project",
    )
    program_command: str = Field(
        default="",
        description="Command printing the linked document (project path is appended)",
    )

    # Runner configuration
    runner_command: str = Field(
        default="node --input-type=module",
        description="Evaluator command; each doctest is piped to it on stdin",
    )

    # Logging configuration
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING",
        description="Log level",
    )
    log_format: Literal["json", "text"] = Field(
        default="text",
        description="Log format",
    )

    # Development
    debug: bool = Field(
        default=False,
        description="Enable debug mode with verbose logging",
    )

    @field_validator("runner_command")
    @classmethod
    def validate_runner_command(cls, v: str) -> str:
        """Ensure the runner command is not blank."""
        if not shlex.split(v):
            raise ValueError("runner_command must not be empty")
        return v

    @field_validator("tsconfig_name", "linked_data_file")
    @classmethod
    def validate_file_name(cls, v: str) -> str:
        """Ensure file names are not blank."""
        if not v.strip():
            raise ValueError("file name must not be empty")
        return v

    @model_validator(mode="after")
    def validate_program_command(self) -> "Settings":
        """The command backend needs a command to run."""
        if self.program_backend == "command" and not shlex.split(self.program_command):
            raise ValueError("program_command is required when program_backend is 'command'")
        return self

    @property
    def runner_args(self) -> list[str]:
        return shlex.split(self.runner_command)

    @property
    def program_args(self) -> list[str]:
        return shlex.split(self.program_command)


def load_settings(env_file: str | None = None) -> Settings:
    """Load application settings from environment.

    Args:
        env_file: Optional path to .env file. If not provided,
                 uses the default .env in the current directory.

    Returns:
        Validated Settings instance.

    Raises:
        ValidationError: If settings validation fails.
    """
    if env_file:
        return Settings(_env_file=env_file)  # type: ignore[call-arg]
    return Settings()


__all__ = ["Settings", "load_settings"]
