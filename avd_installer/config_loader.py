# avd_installer/config_loader.py
# -*- coding: utf-8 -*-
"""
Configuration loader for the image build.

Handles loading settings from Pydantic model defaults, environment
variables, a YAML file, and command-line arguments, applying a specific
order of precedence:
1. Pydantic Model Defaults
2. Environment Variables (AVD_ prefix, ``__`` between nested names)
3. YAML Configuration File
4. Command-Line Arguments
"""

import argparse
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import ValidationError

from .config_models import AppSettings

module_logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "config.yaml"


def _deep_update(
    source: Dict[str, Any], overrides: Dict[str, Any]
) -> Dict[str, Any]:
    """
    Recursively updates a dictionary `source` with values from another dictionary
    `overrides`. If a key exists in both dictionaries and its corresponding value
    is a dictionary, the function updates the nested dictionary recursively.
    Otherwise, it replaces or adds the value for the key in the `source` with the
    value from `overrides`. ``None`` values in `overrides` never replace an
    existing value.

    Parameters:
        source: Dict[str, Any]
            The dictionary to be updated. This dictionary gets modified in place.
        overrides: Dict[str, Any]
            The dictionary containing values to update or add to the `source`.

    Returns:
        Dict[str, Any]:
            The updated dictionary after applying all `overrides` to the input `source`.
    """
    for key, value in overrides.items():
        if (
            isinstance(value, dict)
            and key in source
            and isinstance(source[key], dict)
        ):
            source[key] = _deep_update(source[key], value)
        elif value is not None:
            source[key] = value
        elif key not in source:
            source[key] = value
    return source


def load_yaml_config(
    config_file_path: Union[str, Path],
    current_logger: Optional[logging.Logger] = None,
) -> Dict[str, Any]:
    """
    Reads a YAML configuration file.

    A missing, unreadable or malformed file is logged and treated as empty,
    so the build falls back to defaults and environment variables.
    """
    logger_to_use = current_logger if current_logger else module_logger
    yaml_config_path = Path(config_file_path)
    if not yaml_config_path.is_file():
        logger_to_use.info(
            f"Configuration file '{yaml_config_path}' not found. Using defaults, environment variables, and CLI args."
        )
        return {}
    try:
        with open(yaml_config_path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger_to_use.warning(
            f"Could not parse YAML config file '{yaml_config_path}': {e}. Using defaults and environment variables."
        )
        return {}
    except IOError as e:
        logger_to_use.warning(
            f"Could not read config file '{yaml_config_path}': {e}. Using defaults and environment variables."
        )
        return {}
    if yaml_data is None:
        return {}
    if not isinstance(yaml_data, dict):
        logger_to_use.warning(
            f"Config file '{yaml_config_path}' does not contain a valid YAML dictionary. Ignoring."
        )
        return {}
    logger_to_use.info(f"Loaded configuration from {yaml_config_path}")
    return yaml_data


def _cli_overrides(cli_args: argparse.Namespace) -> Dict[str, Any]:
    cli_arg_dict = vars(cli_args)
    overrides: Dict[str, Any] = {}
    system_values: Dict[str, Any] = {}

    for cli_key, cli_value in cli_arg_dict.items():
        if cli_value is None:
            continue
        if cli_key == "work_dir":
            overrides["work_dir"] = str(cli_value)
        elif cli_key == "skip_steps" and cli_value:
            overrides["skip_steps"] = list(cli_value)
        elif cli_key == "install_sequence" and cli_value:
            overrides["install_sequence"] = list(cli_value)
        elif cli_key == "timezone":
            system_values["timezone"] = cli_value

    if system_values:
        overrides["system"] = system_values
    return overrides


def load_app_settings(
    cli_args: Optional[argparse.Namespace] = None,
    config_file_path: Union[str, Path] = DEFAULT_CONFIG_FILE,
    current_logger: Optional[logging.Logger] = None,
) -> AppSettings:
    """
    Loads application settings with the following precedence:
    1. Pydantic Model Defaults.
    2. Environment Variables (Pydantic BaseSettings loads these first).
    3. Values from the YAML configuration file (override env and defaults).
    4. Command-Line Arguments (highest precedence, overrides all else).

    Args:
        cli_args: Parsed command-line arguments (from argparse).
        config_file_path: Path to the YAML configuration file.
        current_logger: Optional logger to use instead of the module logger.

    Returns:
        An instance of AppSettings with the fully resolved configuration.

    Raises:
        SystemExit: If the merged configuration fails validation.
    """
    logger_to_use = current_logger if current_logger else module_logger

    try:
        settings_after_env_and_defaults = AppSettings()
    except ValidationError as e:
        logger_to_use.error(f"Environment configuration is invalid: {e}")
        raise SystemExit(f"Configuration error: {e}") from e
    current_values_dict = settings_after_env_and_defaults.model_dump(
        exclude_defaults=False
    )

    current_values_dict = _deep_update(
        current_values_dict, load_yaml_config(config_file_path, logger_to_use)
    )

    if cli_args:
        current_values_dict = _deep_update(
            current_values_dict, _cli_overrides(cli_args)
        )

    try:
        final_settings = AppSettings(**current_values_dict)
    except ValidationError as e:
        logger_to_use.error(f"Configuration validation failed: {e}")
        raise SystemExit(f"Configuration error: {e}") from e

    logger_to_use.info(
        "Successfully loaded and validated application settings"
    )
    return final_settings
