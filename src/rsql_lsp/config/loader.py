"""
Configuration loader for rsql-lsp.

The configuration is a YAML file whose structure mirrors ServerConfigModel:

    detection:
      sql_functions: [dbGetQuery, dbExecute]
      statement_parameters: [statement, sql]
      limits:
        context_line_lookback: 200
    formatting:
      keyword_case: upper
"""

import os
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from ..errors import ConfigError
from .models import ServerConfigModel

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "RSQL_LSP_CONFIG"


def _candidate_paths() -> list[Path]:
    return [
        Path.cwd() / "rsql-lsp.yml",
        Path.home() / ".rsql-lsp" / "config.yml",
    ]


def find_config_file(config_path: Optional[Path] = None) -> Optional[Path]:
    """
    Resolve which configuration file to use.

    Looks for, in order:
        1. The explicit ``config_path``
        2. The RSQL_LSP_CONFIG environment variable
        3. ./rsql-lsp.yml
        4. ~/.rsql-lsp/config.yml

    Raises:
        ConfigError: If an explicitly requested file does not exist
    """
    if config_path is None:
        env_path = os.environ.get(CONFIG_ENV_VAR)
        if env_path:
            config_path = Path(env_path)

    if config_path is not None:
        if not config_path.exists():
            raise ConfigError(f"Config file not found at {config_path}", str(config_path))
        return config_path

    for candidate in _candidate_paths():
        if candidate.exists():
            return candidate
    return None


def parse_config(raw_config: Optional[Dict[str, Any]], source: str = "<config>") -> ServerConfigModel:
    """Validate a raw mapping into a ServerConfigModel."""
    if not raw_config:
        return ServerConfigModel()
    if not isinstance(raw_config, dict):
        raise ConfigError(f"Config in {source} must be a mapping", source)

    try:
        return ServerConfigModel.model_validate(raw_config)
    except ValidationError as e:
        raise ConfigError(f"Invalid config in {source}: {e}", source) from e


def load_config(config_path: Optional[Path] = None) -> ServerConfigModel:
    """
    Load the server configuration.

    Args:
        config_path: Optional explicit path to a YAML config file

    Returns:
        ServerConfigModel; defaults when no config file is found

    Raises:
        ConfigError: If the file is missing, unreadable or invalid
    """
    path = find_config_file(config_path)
    if path is None:
        logger.info("No config file found, using defaults")
        return ServerConfigModel()

    logger.debug(f"Loading config from: {path}")
    try:
        with open(path, "r") as f:
            raw_config = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to parse YAML config file {path}: {e}", str(path)) from e

    return parse_config(raw_config, str(path))


def merge_overrides(config: ServerConfigModel, overrides: Optional[Dict[str, Any]]) -> ServerConfigModel:
    """
    Apply overrides (e.g. LSP initializationOptions) on top of a config.

    Nested mappings are merged key by key; everything else replaces the
    loaded value.
    """
    if not overrides:
        return config

    merged = _deep_merge(config.model_dump(), overrides)
    return parse_config(merged, "initializationOptions")


def _deep_merge(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    result = dict(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result
