import logging
import os
import sys
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource


# =============================================================================
# Handler Configuration
# =============================================================================


class HandlerConfig(BaseModel):
    """A declarative handler (no hooks; those are registered in code)."""

    message: str = ""
    silent: bool = False
    notify: dict[str, Any] = {}  # Extra notifier options, e.g. {"hint": "..."}


class HttpConfig(BaseModel):
    """HTTP client settings for the CLI (nested in Config, uses env_nested_delimiter)."""

    timeout: float = 10.0  # Seconds


# =============================================================================
# Application Configuration
# =============================================================================


class YamlConfigSettingsSource(PydanticBaseSettingsSource):
    """Load settings from YAML file specified by REMEDY_CONFIG_FILE env var."""

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Get the value for a field from the YAML config."""
        yaml_data = self._load_yaml_config()
        field_value = yaml_data.get(field_name)
        return field_value, field_name, False

    def __call__(self) -> dict[str, Any]:
        """Return all settings from YAML file."""
        return self._load_yaml_config()

    def _load_yaml_config(self) -> dict[str, Any]:
        """Load config from YAML file if specified."""
        config_file = os.environ.get("REMEDY_CONFIG_FILE")
        if config_file:
            path = Path(config_file).expanduser()
            if path.exists():
                return yaml.safe_load(path.read_text()) or {}
        return {}


class LoggingConfig(BaseModel):
    """Logging configuration (nested in Config, uses env_nested_delimiter)."""

    level: str = "WARNING"
    format: str = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"

    @property
    def file(self) -> str | None:
        """Get log file path from REMEDY_LOG_FILE env var."""
        return os.environ.get("REMEDY_LOG_FILE")


class Config(BaseSettings):
    logging: LoggingConfig = LoggingConfig()
    http: HttpConfig = HttpConfig()
    # Global handlers by key: a message string or a HandlerConfig mapping
    handlers: dict[str, str | HandlerConfig] = Field(default_factory=dict)

    model_config = {
        "env_prefix": "REMEDY_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_nested_delimiter": "__",  # Allows REMEDY_LOGGING__LEVEL override
    }

    @field_validator("handlers", mode="before")
    @classmethod
    def stringify_handler_keys(cls, value: Any) -> Any:
        """YAML reads status keys such as 404 as integers."""
        if isinstance(value, dict):
            return {str(key): handler for key, handler in value.items()}
        return value

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize settings sources to include YAML config.

        Priority (highest to lowest):
        1. init_settings - values passed to Config()
        2. env_settings - environment variables
        3. dotenv_settings - .env file
        4. yaml_settings - REMEDY_CONFIG_FILE yaml
        5. file_secret_settings - secrets from files
        """
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )


def configure_logging(config: LoggingConfig) -> None:
    """Configure Python logging based on config.

    Should be called once at startup by entry points (the CLI); library
    users configure logging themselves.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(config.level)

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = logging.Formatter(config.format, datefmt=config.date_format)

    if config.file:
        log_path = Path(config.file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(config.level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)
    else:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(config.level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    logging.debug("Logging configured: level=%s, file=%s", config.level, config.file)
