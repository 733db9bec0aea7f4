"""Configuration settings for go_lambda_builder.

Uses pydantic-settings for config parsing from environment variables
and defaults. Configuration precedence: CLI flags > env vars > defaults.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from go_lambda_builder.builds.packager import BUILDER_CONFIG


class Settings(BaseSettings):
    """Application settings.

    Settings are loaded from environment variables with the GO_LAMBDA_ prefix.
    CLI flags can override these at runtime.
    """

    model_config = SettingsConfigDict(
        env_prefix="GO_LAMBDA_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Tools
    go_bin: str = Field(
        default="go",
        description="Go toolchain executable",
    )
    analyzer_bin: str = Field(
        default="get-exported-function-name",
        description="Executable printing '<function>,<package>' for a Go file",
    )

    # Target platform
    goos: str = Field(default="linux", description="Target GOOS")
    goarch: str = Field(default="amd64", description="Target GOARCH")
    ldflags: str = Field(
        default="-s -w",
        description="Linker flags passed to go build",
    )

    # Paths
    tmp_dir: Path | None = Field(
        default=None,
        description="Temporary directory for builds (uses system default if not set)",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )

    # Timeouts (in seconds)
    analyze_timeout: int = Field(
        default=60,
        ge=1,
        description="Timeout for the source analyzer",
    )
    build_timeout: int = Field(
        default=600,
        ge=10,
        description="Timeout for each Go toolchain invocation",
    )
    download_timeout: int = Field(
        default=300,
        ge=1,
        description="Timeout for fetching remote user files",
    )

    # Packaging
    max_lambda_size: str = Field(
        default=BUILDER_CONFIG["max_lambda_size"],
        description="Maximum zipped Lambda size",
    )


def get_settings() -> Settings:
    """Get the application settings singleton.

    Returns:
        Settings instance loaded from environment.
    """
    return Settings()


def print_settings_json(settings: Settings | None = None) -> str:
    """Render effective settings as JSON.

    Args:
        settings: Optional settings instance; uses default if not provided.

    Returns:
        JSON string of effective settings.
    """
    if settings is None:
        settings = get_settings()
    return settings.model_dump_json(indent=2)


__all__ = ["Settings", "get_settings", "print_settings_json"]
