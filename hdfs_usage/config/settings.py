"""
Application settings using Pydantic Settings v2.

Environment variables are loaded from .env file and can be overridden
by actual environment variables.

The module-level ``settings`` instance is only read at composition points
(app lifespan, CLI). Services receive the values they need as constructor
arguments.
"""

from pathlib import Path
from typing import Annotated

from pydantic import AliasChoices, Field, computed_field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def find_env_file() -> str:
    """
    Find .env file in current directory or parent directory.

    Returns:
        Path to .env file (current dir, parent dir, or default ".env")
    """
    current = Path.cwd() / ".env"
    parent = Path.cwd().parent / ".env"

    if current.exists():
        return str(current)
    elif parent.exists():
        return str(parent)
    else:
        # Fallback to default (will use environment variables only)
        return ".env"


class StoreSettings(BaseSettings):
    """Ordered key-value store configuration for the HDFS usage table"""

    db_path: Annotated[
        str,
        Field(
            default="../.dbdata/hdfs_usage.db",
            description="Path to the SQLite file backing the HDFS usage table",
            validation_alias="HDFS_STATS_DB_PATH",
        ),
    ]
    default_scan_batch_size: Annotated[
        int,
        Field(
            default=100,
            ge=1,
            le=10000,
            description="Rows fetched per round trip when scanning the usage table",
            validation_alias="HDFS_STATS_SCAN_BATCH_SIZE",
        ),
    ]

    @computed_field  # type: ignore[prop-decorator]
    @property
    def db_path_resolved(self) -> str:
        """Resolved absolute path for the store file.

        Returns:
            Absolute path to the SQLite database file.
        """
        abs_path = Path(self.db_path).resolve()
        return str(abs_path)

    model_config = SettingsConfigDict(
        env_file=find_env_file(),
        env_file_encoding="utf-8",
        extra="ignore",
    )


class AppSettings(BaseSettings):
    """Main application settings"""

    # Environment
    env: Annotated[
        str,
        Field(
            default="development",
            description="Environment (development/production)",
            validation_alias="HDFS_USAGE_ENV",
        ),
    ]

    # Server
    port: Annotated[
        int,
        Field(
            default=1400,
            ge=1,
            le=65535,
            description="HTTP server port",
            validation_alias="HDFS_USAGE_PORT",
        ),
    ]

    # Logging
    log_level: Annotated[
        str,
        Field(
            default="info",
            description="Log level: debug, info, warning, error",
            validation_alias="HDFS_USAGE_LOG_LEVEL",
        ),
    ]
    log_format: Annotated[
        str,
        Field(
            default="json",
            description="Log format: json, text",
            validation_alias="HDFS_USAGE_LOG_FORMAT",
        ),
    ]

    # CORS
    # Note: Type is str | list[str] to prevent Pydantic Settings from trying
    # to JSON-parse the env var. The validator converts comma-separated strings to list.
    cors_origins: Annotated[
        str | list[str],
        Field(
            default=["http://localhost:5151"],
            description="Allowed CORS origins (comma-separated string or list)",
            validation_alias=AliasChoices("hdfs_usage_allow_origins", "cors_origins"),
        ),
    ]

    # Nested settings
    store: Annotated[
        StoreSettings, Field(default_factory=StoreSettings, description="Usage table store settings")
    ]

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: str | list[str]) -> list[str]:
        """Parse CORS origins from string or list.

        Args:
            v: Either a JSON string, comma-separated string, or list of origin URLs.

        Returns:
            List of CORS origin URLs.
        """
        if isinstance(v, str):
            # Handle JSON array string from env var
            import json

            try:
                return json.loads(v)
            except json.JSONDecodeError:
                # Fallback to comma-separated
                return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @field_validator("log_format", mode="after")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        if v.lower() not in ("json", "text"):
            raise ValueError(f"HDFS_USAGE_LOG_FORMAT must be 'json' or 'text'. Got: {v}")
        return v.lower()

    @model_validator(mode="after")
    def validate_production_configuration(self) -> "AppSettings":
        """Reject wildcard CORS in production."""
        if self.env != "production":
            return self

        if "*" in self.cors_origins:
            raise ValueError(
                "Wildcard CORS origin is not allowed when HDFS_USAGE_ENV=production. "
                "Set HDFS_USAGE_ALLOW_ORIGINS to the reporting UI URL."
            )

        return self

    model_config = SettingsConfigDict(
        env_file=find_env_file(),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


# Global settings instance (singleton, loaded once at import)
settings = AppSettings()
