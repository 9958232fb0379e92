"""
Configuration loader for gomorph.

Loading never fails the run: a missing file, unreadable file, malformed YAML
or a document that does not validate all fall back to the defaults.
"""

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .models import DEFAULT_CONFIG_FILENAME, MigrationConfig

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Raised when a configuration document is invalid."""

    pass


def parse_config(raw_config: Any) -> MigrationConfig:
    """Validate an already-decoded YAML document."""
    if raw_config is None:
        raise ConfigurationError("Configuration file is empty")
    if not isinstance(raw_config, dict):
        raise ConfigurationError("Configuration root must be a mapping")

    try:
        config = MigrationConfig(**raw_config)
    except ValidationError as e:
        raise ConfigurationError(f"Configuration validation failed:\n{e}")

    if not config.package_name.strip():
        config.package_name = MigrationConfig().package_name
    config.license_header = config.license_header.replace("\r\n", "\n").replace("\r", "\n")
    return config


def load_config_from_yaml(config_path: Path) -> MigrationConfig:
    """Load configuration from a YAML file, raising ``ConfigurationError`` on any problem."""
    if not config_path.exists():
        raise ConfigurationError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, encoding="utf-8") as f:
            try:
                raw_config = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Invalid YAML in configuration file: {e}")
    except OSError as e:
        raise ConfigurationError(f"Cannot read configuration file {config_path}: {e}")

    return parse_config(raw_config)


def load_config(config_path: Path | None = None) -> MigrationConfig:
    """
    Load settings, falling back to defaults silently.

    Args:
        config_path: Explicit file. When omitted, ``gomorph.yaml`` in the
            current working directory is used if it exists.

    Returns:
        The loaded configuration, or the defaults.
    """
    path = config_path or Path.cwd() / DEFAULT_CONFIG_FILENAME
    try:
        return load_config_from_yaml(path)
    except ConfigurationError as e:
        logger.debug(f"Using default configuration: {e}")
        return MigrationConfig()


def generate_default_config(output_path: Path) -> None:
    """Generate a default configuration file."""
    default_config = {
        "package_name": "converted",
        "license_header": "",
        "type_mappings": {
            "BigDecimal": "float64",
        },
        "strip_type_prefixes": ["Abstract", "LexerTerminals"],
        "internal_type_prefixes": {"ST": "internal"},
    }

    with open(output_path, "w", encoding="utf-8") as f:
        yaml.dump(default_config, f, default_flow_style=False, sort_keys=False)
