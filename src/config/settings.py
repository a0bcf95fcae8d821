"""Application settings with Pydantic Settings validation.

Values come from environment variables (and an optional .env file), with
non-sensitive defaults loaded from config/main.yaml. The YAML file is
validated against config/schemas/main.schema.json when that schema exists.
"""

import json
from pathlib import Path
from typing import Any, Final, Literal, cast

import yaml
from jsonschema import ValidationError as JSONSchemaValidationError
from jsonschema import validate
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.config.logging_config import get_logger

DB_PATH_DEFAULT: Final[str] = "data/build_metadata.sqlite"
CONFIG_DIR: Final[Path] = Path("config")
SCHEMA_DIR: Final[Path] = CONFIG_DIR / "schemas"

logger = cast(Any, get_logger(__name__))


def load_schema(schema_name: str) -> dict[str, Any]:
    """Load JSON Schema from config/schemas/.

    Args:
        schema_name: Schema name without extension (e.g., "main")

    Returns:
        JSON Schema dictionary or empty dict if not found
    """
    schema_path = SCHEMA_DIR / f"{schema_name}.schema.json"
    if not schema_path.exists():
        return {}

    try:
        with open(schema_path, encoding="utf-8") as f:
            return json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        logger.warning(
            "config_schema_load_failed",
            schema=schema_name,
            error=str(e),
        )
        return {}


def validate_config_section(
    config: dict[str, Any], schema_name: str, file_path: str = ""
) -> None:
    """Validate a config section against its JSON Schema, if one exists.

    Raises:
        ValueError: If validation fails
    """
    schema = load_schema(schema_name)
    if not schema:
        return

    try:
        validate(instance=config, schema=schema)
        logger.debug("config_validation_succeeded", schema=schema_name)
    except JSONSchemaValidationError as e:
        error_msg = f"Config validation failed for {schema_name}"
        if file_path:
            error_msg += f" (file: {file_path})"
        error_msg += f": {e.message}"
        raise ValueError(error_msg) from e


def load_main_config(config_dir: Path = CONFIG_DIR) -> dict[str, Any]:
    """Load config/main.yaml, returning an empty dict when it is absent.

    Raises:
        ValueError: If the file does not match its schema
    """
    main_path = config_dir / "main.yaml"
    if not main_path.exists():
        return {}

    try:
        with open(main_path, encoding="utf-8") as f:
            config = yaml.safe_load(f) or {}
    except (yaml.YAMLError, OSError) as e:
        logger.warning("config_file_load_failed", path=str(main_path), error=str(e))
        return {}

    validate_config_section(config, "main", str(main_path))
    logger.debug("config_file_loaded", path=str(main_path))
    return cast(dict[str, Any], config)


class Settings(BaseSettings):
    """Application settings.

    Environment variables take precedence over config/main.yaml, which takes
    precedence over the field defaults.
    """

    model_config = SettingsConfigDict(
        env_file=".env" if Path(".env").exists() else None,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    db_path: str = Field(
        default=DB_PATH_DEFAULT, description="SQLite database file for build metadata"
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )
    json_logs: bool = Field(default=False, description="Emit JSON log lines")
    default_project_timeout_seconds: int | None = Field(
        default=None,
        description="Project build timeout used when a caller supplies none",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.upper()
        return value

    @field_validator("default_project_timeout_seconds")
    @classmethod
    def _positive_timeout(cls, value: int | None) -> int | None:
        if value is not None and value <= 0:
            raise ValueError("default_project_timeout_seconds must be positive")
        return value

    def __init__(self, **data: Any):
        """Initialize settings, then fill unset fields from config/main.yaml."""
        config = load_main_config()

        super().__init__(**data)
        self._apply_yaml_defaults(config)

    def _apply_yaml_defaults(self, config: dict[str, Any]) -> None:
        """Apply YAML-sourced defaults without overriding env-provided values."""

        fields_from_env = set(self.model_fields_set)

        def _assign(field_name: str, value: Any) -> None:
            if value is None:
                return
            if field_name in fields_from_env:
                return

            object.__setattr__(self, field_name, value)
            self.model_fields_set.add(field_name)

        database_config = config.get("database") or {}
        _assign("db_path", database_config.get("path"))

        logging_config = config.get("logging") or {}
        level = logging_config.get("level")
        _assign("log_level", level.upper() if isinstance(level, str) else None)
        _assign("json_logs", logging_config.get("json"))

        timeouts_config = config.get("timeouts") or {}
        _assign(
            "default_project_timeout_seconds",
            timeouts_config.get("default_project_timeout_seconds"),
        )


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create global settings instance.

    Returns:
        Settings instance
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
