"""
Configuration loading utilities for LODS data processing.

This module provides functions to load configuration from JSON or YAML files
so that table loading and score calculation use the same data location and
scoring parameters.
"""

import os
import json
from typing import Dict, Any, Optional

import yaml

from .logging_config import get_logger

logger = get_logger('utils.config')

REQUIRED_FIELDS = ['data_directory', 'filetype']
SUPPORTED_FILETYPES = ['csv', 'parquet']
DEFAULT_CONFIG_NAMES = ['lods_config.json', 'lods_config.yaml', 'lods_config.yml']


def _read_config_file(config_path: str) -> Dict[str, Any]:
    """Parse a JSON or YAML config file into a dict."""
    _, ext = os.path.splitext(config_path)
    with open(config_path, 'r') as f:
        if ext.lower() in ('.yaml', '.yml'):
            try:
                config = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML in configuration file {config_path}: {e}") from e
        else:
            try:
                config = json.load(f)
            except json.JSONDecodeError as e:
                raise json.JSONDecodeError(
                    f"Invalid JSON in configuration file {config_path}: {str(e)}",
                    e.doc, e.pos
                )

    if not isinstance(config, dict):
        raise ValueError(f"Configuration file {config_path} must contain a mapping at top level")
    return config


def _find_default_config() -> Optional[str]:
    for name in DEFAULT_CONFIG_NAMES:
        candidate = os.path.join(os.getcwd(), name)
        if os.path.exists(candidate):
            return candidate
    return None


def _validate_config(config: Dict[str, Any], source: str) -> None:
    missing_fields = [field for field in REQUIRED_FIELDS if field not in config]
    if missing_fields:
        raise ValueError(
            f"Missing required fields in configuration {source}: {missing_fields}\n"
            f"Required fields are: {REQUIRED_FIELDS}"
        )

    data_dir = config['data_directory']
    if not os.path.exists(data_dir):
        raise ValueError(
            f"Data directory specified in config does not exist: {data_dir}\n"
            f"Please check the 'data_directory' path in {source}"
        )

    if config['filetype'] not in SUPPORTED_FILETYPES:
        raise ValueError(
            f"Unsupported filetype '{config['filetype']}' in {source}\n"
            f"Supported filetypes are: {SUPPORTED_FILETYPES}"
        )

    tables = config.get('tables')
    if tables is not None and not isinstance(tables, dict):
        raise ValueError(f"'tables' in {source} must map table names to file stems")

    lods_section = config.get('lods')
    if lods_section is not None and not isinstance(lods_section, dict):
        raise ValueError(f"'lods' in {source} must be a mapping of LODSConfig fields")


def load_lods_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load LODS configuration from a JSON or YAML file.

    Parameters
    ----------
    config_path : str, optional
        Path to the configuration file.
        If None, looks for 'lods_config.json' (or '.yaml'/'.yml') in the
        current directory.

    Returns
    -------
    dict
        Configuration dictionary with required fields validated

    Raises
    ------
    FileNotFoundError
        If config file doesn't exist
    ValueError
        If required fields are missing or invalid
    json.JSONDecodeError
        If a JSON config file is not valid JSON
    """
    if config_path is None:
        config_path = _find_default_config() or os.path.join(os.getcwd(), DEFAULT_CONFIG_NAMES[0])

    if not os.path.exists(config_path):
        raise FileNotFoundError(
            f"Configuration file not found: {config_path}\n"
            "Please either:\n"
            "  1. Create a lods_config.json file in the current directory\n"
            "  2. Provide config_path parameter pointing to your config file\n"
            "  3. Provide data_directory and filetype parameters directly"
        )

    config = _read_config_file(config_path)
    _validate_config(config, config_path)

    logger.info(f"Configuration loaded successfully from {config_path}")
    return config


def get_config_or_params(
    config_path: Optional[str] = None,
    data_directory: Optional[str] = None,
    filetype: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Get configuration from either config file or direct parameters.

    Loading priority:
    1. If all required params provided directly → use them
    2. If config_path provided → load from that path, allow param overrides
    3. If no params and no config_path → auto-detect lods_config.json
    4. Parameters override config file values when both are provided

    Parameters
    ----------
    config_path : str, optional
        Path to configuration file
    data_directory : str, optional
        Direct parameter
    filetype : str, optional
        Direct parameter

    Returns
    -------
    dict
        Final configuration dictionary

    Raises
    ------
    ValueError
        If neither config nor required params are provided
    """
    if data_directory is not None and filetype is not None and config_path is None:
        config = {'data_directory': data_directory, 'filetype': filetype}
        _validate_config(config, 'parameters')
        logger.info("Using directly provided parameters")
        return config

    try:
        config = load_lods_config(config_path)
    except FileNotFoundError:
        if data_directory is not None or filetype is not None:
            missing = [
                name for name, value in
                (('data_directory', data_directory), ('filetype', filetype))
                if value is None
            ]
            raise ValueError(
                f"Incomplete parameters provided. Missing: {missing}\n"
                "Please either:\n"
                "  1. Provide all required parameters (data_directory, filetype)\n"
                "  2. Create a lods_config.json file\n"
                "  3. Provide a config_path parameter"
            )
        raise

    if data_directory is not None:
        config['data_directory'] = data_directory
        logger.info(f"Overriding data_directory from config with: {data_directory}")

    if filetype is not None:
        config['filetype'] = filetype
        logger.info(f"Overriding filetype from config with: {filetype}")

    _validate_config(config, config_path or 'parameters')
    return config


def create_example_config(
    data_directory: str = "./data",
    filetype: str = "parquet",
    config_path: str = "./lods_config.json"
) -> None:
    """
    Create an example configuration file.

    Parameters
    ----------
    data_directory : str
        Path to data directory
    filetype : str
        File type (csv or parquet)
    config_path : str
        Where to save the config file
    """
    config = {
        "data_directory": data_directory,
        "filetype": filetype,
        "lods": {
            "cpap_start_offset_hours": 1.0,
            "cpap_end_offset_hours": 4.0,
        },
    }

    with open(config_path, 'w') as f:
        json.dump(config, f, indent=2)

    logger.info(f"Example configuration file created at: {config_path}")
