"""Configuration management for botbrowser.

Loads settings from a YAML configuration file with environment variable
overrides (``BOTBROWSER_`` prefix, ``__`` for nested keys). Supports
.env files.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from dotenv import dotenv_values
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config/botbrowser.yaml")


class BrowserConfig(BaseModel):
    default_url: str = Field(default="https://darkorbit.com")
    user_agent: str = Field(default="BigpointClient/1.6.7")
    width: int = Field(default=1400, gt=0)
    height: int = Field(default=900, gt=0)
    title: str = Field(default="DarkBot Browser")
    session_cookie: str = Field(default="dosid", min_length=1)
    headless: bool = Field(default=False)
    chromium_args: list[str] = Field(default_factory=list)


class ControlConfig(BaseModel):
    socket_dir: str = Field(default="/tmp")
    socket_prefix: str = Field(default="darkbot_ipc_")
    type_delay: float = Field(default=0.01, ge=0)
    serialize_input: bool = Field(default=False)
    client_timeout: float = Field(default=5.0, gt=0)


class LoggingConfig(BaseModel):
    level: str = Field(default="INFO")
    format: str = Field(
        default="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    file: str | None = Field(default=None)


class Settings(BaseSettings):
    """Root configuration for botbrowser.

    Loads from YAML file and supports environment variable overrides.
    Reads .env files automatically.
    """

    model_config = {
        "env_prefix": "BOTBROWSER_",
        "env_nested_delimiter": "__",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    browser: BrowserConfig = Field(default_factory=BrowserConfig)
    control: ControlConfig = Field(default_factory=ControlConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_settings(config_path: Path | str | None = None) -> Settings:
    """Load settings from YAML + .env + environment variables.

    Priority: env vars > .env file > YAML file > defaults
    """
    path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH

    yaml_data = {}
    if path.exists():
        with open(path) as f:
            yaml_data = yaml.safe_load(f) or {}
        logger.info("Loaded configuration from %s", path)
    else:
        logger.warning("Config file %s not found, using defaults + env vars", path)

    _drop_overridden(yaml_data, [*os.environ, *_dotenv_names()])

    return Settings(**yaml_data)


def _dotenv_names() -> list[str]:
    """Variable names set by the .env file, if there is one."""
    env_path = Path(Settings.model_config["env_file"])
    if not env_path.exists():
        return []
    return list(dotenv_values(env_path))


def _drop_overridden(yaml_data: dict, names: list[str]) -> None:
    """Remove YAML values that an environment or .env variable overrides.

    Init kwargs beat both sources in pydantic-settings, so YAML values
    must be dropped for them to win.
    """
    prefix = Settings.model_config["env_prefix"]
    delimiter = Settings.model_config["env_nested_delimiter"]
    for name in names:
        if not name.upper().startswith(prefix):
            continue
        parts = name[len(prefix):].lower().split(delimiter)
        section = yaml_data
        for part in parts[:-1]:
            section = section.get(part)
            if not isinstance(section, dict):
                break
        else:
            section.pop(parts[-1], None)
