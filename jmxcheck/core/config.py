"""
Configuration Management.

Loads secrets from the environment (or config/.env) and settings from
config/settings/*.yaml. No hardcoded values in code — all configuration
comes from these sources.

Settings directory lookup order:
    1. JMXCHECK_CONFIG_DIR environment variable
    2. config/settings under the nearest directory holding .project_root
    3. Defaults bundled with the package (jmxcheck/config/settings)

Secrets (environment / .env):
    JMXCHECK_USERNAME, JMXCHECK_PASSWORD

Settings (YAML):
    probe.yaml    - Probe identity, exit codes, connection settings
    logging.yaml  - Logging configuration
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from jmxcheck.core.config_schema import LoggingSchema, ProbeSchema

CONFIG_DIR_ENV = "JMXCHECK_CONFIG_DIR"
BUNDLED_SETTINGS_DIR = Path(__file__).resolve().parent.parent / "config" / "settings"


def find_project_root() -> Path | None:
    """Find project root by looking for .project_root marker file."""
    current = Path.cwd()
    while current != current.parent:
        if (current / ".project_root").exists():
            return current
        current = current.parent
    return None


def find_settings_dir() -> Path:
    """Resolve the directory the YAML settings are read from."""
    override = os.environ.get(CONFIG_DIR_ENV)
    if override:
        return Path(override)

    project_root = find_project_root()
    if project_root is not None:
        candidate = project_root / "config" / "settings"
        if candidate.is_dir():
            return candidate

    return BUNDLED_SETTINGS_DIR


def load_yaml_config(filename: str) -> dict[str, Any]:
    """Load a YAML configuration file from the settings directory."""
    config_path = find_settings_dir() / filename

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path) as f:
        try:
            return yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {config_path}: {e}") from e


class Settings(BaseSettings):
    """Secrets loaded from the environment or config/.env. Only credentials."""

    username: str | None = None
    password: str | None = None

    model_config = SettingsConfigDict(
        env_prefix="JMXCHECK_",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


def _load_validated(schema_cls: type, filename: str) -> Any:
    """Load YAML and validate against schema. Returns typed model instance."""
    raw = load_yaml_config(filename)
    try:
        return schema_cls(**raw)
    except ValidationError as e:
        raise ValueError(
            f"Invalid configuration in {filename}:\n{e}"
        ) from e


class AppConfig:
    """
    Probe configuration loaded from YAML files.

    Each YAML file is validated against its Pydantic schema at load time.
    Properties return typed Pydantic model instances with attribute access.
    """

    def __init__(self) -> None:
        self._probe = _load_validated(ProbeSchema, "probe.yaml")
        self._logging = _load_validated(LoggingSchema, "logging.yaml")

    @property
    def probe(self) -> ProbeSchema:
        """Probe settings (exit codes, connection)."""
        return self._probe

    @property
    def logging(self) -> LoggingSchema:
        """Logging settings."""
        return self._logging


@lru_cache
def get_settings() -> Settings:
    """Get cached secrets instance. Reads config/.env when a project root exists."""
    project_root = find_project_root()
    if project_root is not None:
        env_path = project_root / "config" / ".env"
        if env_path.is_file():
            return Settings(_env_file=str(env_path))
    return Settings()


@lru_cache
def get_app_config() -> AppConfig:
    """Get cached application configuration."""
    return AppConfig()
