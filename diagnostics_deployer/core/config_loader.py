"""
Configuration loading utilities.

This module builds the RunConfig from an optional JSON file and the
environment.

Loading Order (later wins):
    1. Defaults from constants.py
    2. config.json (optional, only when a path is given)
    3. AZURE_SUBSCRIPTION_ID, AZURE_TENANT_ID, AZURE_CLIENT_ID,
       AZURE_CLIENT_SECRET, AZURE_REGION environment variables

Usage:
    from diagnostics_deployer.core.config_loader import load_run_config

    config = load_run_config(Path("config.json"))
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from diagnostics_deployer import constants as CONSTANTS
from .context import RunConfig
from .exceptions import InvalidConfiguration

# Environment variable -> RunConfig field
ENV_OVERRIDES = {
    CONSTANTS.ENV_SUBSCRIPTION_ID: "subscription_id",
    CONSTANTS.ENV_TENANT_ID: "tenant_id",
    CONSTANTS.ENV_CLIENT_ID: "client_id",
    CONSTANTS.ENV_CLIENT_SECRET: "client_secret",
    CONSTANTS.ENV_REGION: "region",
}


def _load_json_file(file_path: Path) -> Dict[str, Any]:
    """
    Load a JSON file and return its contents as a dictionary.

    Args:
        file_path: Path to the JSON file

    Returns:
        Parsed JSON content as dictionary

    Raises:
        InvalidConfiguration: If the file is missing, unreadable, not
            UTF-8, has invalid JSON or does not contain a JSON object
    """
    if not file_path.exists():
        raise InvalidConfiguration(
            f"Configuration file not found: {file_path.name}",
            config_file=str(file_path)
        )
    if not file_path.is_file():
        raise InvalidConfiguration(
            f"Configuration path is not a file: {file_path.name}",
            config_file=str(file_path)
        )

    try:
        with open(file_path, "r", encoding="utf-8") as f:
            content = json.load(f)
    except json.JSONDecodeError as e:
        raise InvalidConfiguration(
            f"Invalid JSON in configuration file: {e}",
            config_file=str(file_path)
        )
    except UnicodeDecodeError as e:
        raise InvalidConfiguration(
            f"Configuration file is not valid UTF-8: {e}",
            config_file=str(file_path)
        )
    except OSError as e:
        raise InvalidConfiguration(
            f"Cannot read configuration file: {e.strerror or e}",
            config_file=str(file_path)
        )

    if not isinstance(content, dict):
        raise InvalidConfiguration(
            "Configuration file must contain a JSON object",
            config_file=str(file_path)
        )
    return content


def _validate_cosmos_locations(locations: Any, config_file: Optional[str]) -> list[dict]:
    if not isinstance(locations, list) or not locations:
        raise InvalidConfiguration(
            "'cosmos_locations' must be a non-empty list",
            config_file=config_file
        )
    for index, location in enumerate(locations):
        if not isinstance(location, dict) or "location_name" not in location:
            raise InvalidConfiguration(
                f"'cosmos_locations[{index}]' must be an object with 'location_name'",
                config_file=config_file
            )
    return [dict(loc) for loc in locations]


def load_run_config(
    config_path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None
) -> RunConfig:
    """
    Load the run configuration.

    Args:
        config_path: Optional path to a JSON config file
        environ: Environment mapping (defaults to os.environ)

    Returns:
        RunConfig with defaults, file values and environment overrides applied

    Raises:
        InvalidConfiguration: If the file is invalid, contains unknown keys,
            or no subscription id is available

    Example:
        config = load_run_config(Path("config.json"))
        print(config.region)  # "eastus"
    """
    environ = os.environ if environ is None else environ
    config_file = str(config_path) if config_path is not None else None

    values: Dict[str, Any] = {}
    if config_path is not None:
        values = _load_json_file(Path(config_path))
        unknown = sorted(set(values) - set(CONSTANTS.CONFIG_KEYS))
        if unknown:
            raise InvalidConfiguration(
                f"Unknown configuration keys: {unknown}",
                config_file=config_file
            )

    for env_name, field_name in ENV_OVERRIDES.items():
        if environ.get(env_name):
            values[field_name] = environ[env_name]

    if not values.get("subscription_id"):
        raise InvalidConfiguration(
            f"Missing Azure subscription id. Set {CONSTANTS.ENV_SUBSCRIPTION_ID} "
            f"or 'subscription_id' in {CONSTANTS.CONFIG_FILE}.",
            config_file=config_file
        )

    if "cosmos_locations" in values:
        values["cosmos_locations"] = _validate_cosmos_locations(
            values["cosmos_locations"], config_file
        )

    for key, value in values.items():
        if key != "cosmos_locations" and value is not None and not isinstance(value, str):
            raise InvalidConfiguration(
                f"Configuration key '{key}' must be a string",
                config_file=config_file
            )

    return RunConfig(**values)
