"""Application settings management using Pydantic Settings."""

from pathlib import Path
from typing import Self

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SUPPORTED_TYPES = [
    "config",
    "index-pattern",
    "visualization",
    "dashboard",
    "search",
    "query",
    "url",
    "augment-vis",
    "visualization-visbuilder",
]


def _get_default_db_path() -> str:
    """Get default database path in the working directory."""
    return str(Path.cwd() / "data" / "saved_objects.db")


class Settings(BaseSettings):
    """Application configuration settings.

    All settings can be configured via environment variables with the
    prefix `SAVED_OBJECTS_`. For example, `SAVED_OBJECTS_DATABASE_PATH`.
    """

    # Database
    database_path: str = Field(
        default_factory=_get_default_db_path,
        description="SQLite database file path",
    )

    # Types
    supported_types: list[str] = Field(
        default_factory=lambda: list(DEFAULT_SUPPORTED_TYPES),
        description="Saved object types accepted by export, import and find",
    )

    # Import
    import_file_extensions: list[str] = Field(
        default_factory=lambda: [".ndjson"],
        description="Accepted file extensions for import uploads",
    )
    import_content_types: list[str] = Field(
        default_factory=lambda: [
            "application/ndjson",
            "application/x-ndjson",
            "application/octet-stream",
            "text/plain",
        ],
        description="Accepted content types for import uploads",
    )
    import_max_objects: int = Field(
        default=10_000,
        ge=1,
        description="Maximum number of records in a single import",
    )

    # Export
    export_max_size: int = Field(
        default=10_000,
        ge=1,
        description="Maximum number of objects selected by a type filter export",
    )

    # Find
    find_default_per_page: int = Field(
        default=20,
        ge=1,
        description="Default page size for find",
    )
    find_max_per_page: int = Field(
        default=1000,
        ge=1,
        description="Maximum page size for find",
    )

    # HTTP API
    api_host: str = Field(default="127.0.0.1", description="HTTP bind host")
    api_port: int = Field(default=5601, ge=1, le=65535, description="HTTP bind port")
    xsrf_header: str = Field(
        default="osd-xsrf", description="Header required on mutating HTTP requests"
    )
    require_xsrf_header: bool = Field(
        default=True, description="Reject mutating requests without the XSRF header"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_file: str | None = Field(default=None, description="Optional log file path")

    model_config = SettingsConfigDict(
        env_prefix="SAVED_OBJECTS_", env_file=".env", env_file_encoding="utf-8"
    )

    @model_validator(mode="after")
    def validate_limits(self) -> Self:
        """Validate cross-field configuration."""
        if not self.supported_types:
            raise ValueError("supported_types must contain at least one type")
        if self.find_default_per_page > self.find_max_per_page:
            raise ValueError(
                f"find_default_per_page ({self.find_default_per_page}) "
                f"must be <= find_max_per_page ({self.find_max_per_page})"
            )
        return self
