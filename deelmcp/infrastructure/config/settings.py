"""Provides functions for loading and accessing configuration settings.

Supports loading from .env files, environment variables, and an optional
YAML configuration file (~/.deelmcp/config.yaml).
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml
from dotenv import load_dotenv

from deelmcp.domain.errors import ConfigurationError
from deelmcp.infrastructure.cache.caching_service import DEFAULT_TTL_SECONDS
from deelmcp.infrastructure.http.deel_client import (
    DEFAULT_BASE_URL,
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_TIMEOUT_SECONDS,
)
from deelmcp.infrastructure.resilience.rate_limiter import (
    DEFAULT_MAX_REQUESTS,
    DEFAULT_TIME_WINDOW_SECONDS,
)

logger = logging.getLogger(__name__)

# --- Configuration Constants ---
DEFAULT_CONFIG_DIR = Path.home() / ".deelmcp"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.yaml"
ENV_FILE_NAME = ".env"

MISSING_TOKEN_MESSAGE = (
    "DEEL_API_TOKEN environment variable is required. "
    "Generate one at Deel → More → Developer → Access Tokens."
)

# --- Global Configuration Store ---
_config: Dict[str, Any] = {}
_test_config: Dict[str, Any] = {}
_loaded = False

def load_configuration(config_file: Path = DEFAULT_CONFIG_FILE, env_file: Optional[Path] = None) -> None:
    """Loads configuration from environment, .env file, and YAML file.

    Priority order (highest to lowest):
    1. Environment Variables
    2. .env file
    3. YAML configuration file
    4. Default values passed to get_config

    Args:
        config_file: Path to the YAML configuration file.
        env_file: Path to the .env file (searches upwards from cwd if None).
    """
    global _config, _loaded
    if _loaded:
        logger.debug("Configuration already loaded.")
        return

    _config = {}

    # 1. YAML file (lowest priority)
    if config_file.exists():
        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                yaml_config = yaml.safe_load(f)
            if isinstance(yaml_config, dict):
                _config.update({str(k).lower(): v for k, v in yaml_config.items()})
                logger.info(f"Loaded configuration from YAML: {config_file}")
            elif yaml_config is not None:
                logger.warning(f"YAML config file {config_file} did not contain a mapping.")
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to load or parse YAML config {config_file}: {e}")
    else:
        logger.debug(f"YAML config file not found: {config_file}")

    # 2. .env file; override=False so real environment variables win
    dotenv_path = env_file or find_dotenv_path()
    if dotenv_path:
        if load_dotenv(dotenv_path=dotenv_path, override=False):
            logger.info(f"Loaded environment variables from: {dotenv_path}")
    else:
        logger.debug("No .env file found at or above the current directory.")

    _loaded = True

def reset_configuration() -> None:
    """Forgets loaded configuration so the next load_configuration re-reads sources."""
    global _config, _loaded
    _config = {}
    _loaded = False

def _coerce(value: str) -> Any:
    lowered = value.lower()
    if lowered == 'true':
        return True
    if lowered == 'false':
        return False
    try:
        if '.' in value:
            return float(value)
        return int(value)
    except ValueError:
        return value

def get_config(key: str, default: Any = None) -> Any:
    """Get a configuration value by key.

    Priority:
    1. Test configuration (if in testing mode)
    2. Environment variable (the key upper-cased, e.g. DEEL_API_TOKEN)
    3. YAML config
    4. Default value

    Args:
        key: The configuration key, e.g. 'deel_api_token'.
        default: Default value if the key is not found.

    Returns:
        The configuration value, with 'true'/'false' and numeric strings converted.
    """
    key = key.lower()
    if key in _test_config:
        return _test_config[key]

    env_value = os.environ.get(key.upper())
    if env_value is not None and env_value != "":
        return _coerce(env_value)

    if key in _config:
        return _config[key]

    return default

def find_dotenv_path() -> Optional[Path]:
    """Searches for the .env file upwards from the current directory."""
    cwd = Path.cwd()
    for path in [cwd] + list(cwd.parents):
        env_path = path / ENV_FILE_NAME
        if env_path.is_file():
            return env_path
    return None

# --- Convenience Functions ---

def get_api_token() -> str:
    """Returns the Deel bearer token.

    Raises:
        ConfigurationError: If no token is configured.
    """
    token = get_config('deel_api_token')
    if token is None or str(token).strip() == "":
        raise ConfigurationError(MISSING_TOKEN_MESSAGE)
    return str(token).strip()

def get_base_url() -> str:
    return str(get_config('deel_api_base_url', DEFAULT_BASE_URL))

def get_cache_ttl_seconds() -> float:
    return float(get_config('deel_cache_ttl_seconds', DEFAULT_TTL_SECONDS))

def get_rate_limit() -> Tuple[int, float]:
    """Returns (max_requests, time_window_seconds) for the shared rate limiter."""
    max_requests = int(get_config('deel_rate_limit_max_requests', DEFAULT_MAX_REQUESTS))
    window = float(get_config('deel_rate_limit_window_seconds', DEFAULT_TIME_WINDOW_SECONDS))
    return max_requests, window

def get_max_attempts() -> int:
    return int(get_config('deel_max_attempts', DEFAULT_MAX_ATTEMPTS))

def get_http_timeout_seconds() -> float:
    return float(get_config('deel_http_timeout_seconds', DEFAULT_TIMEOUT_SECONDS))

def set_config_for_testing(config_dict: Dict[str, Any]) -> None:
    """
    Set configuration values for testing purposes.
    These values will override any existing configuration.

    Args:
        config_dict: Dictionary of configuration values to set
    """
    _test_config.update({k.lower(): v for k, v in config_dict.items()})
    logger.debug(f"Set testing configuration: {sorted(config_dict)}")

def clear_test_config() -> None:
    """Clear all testing configuration values."""
    _test_config.clear()
    logger.debug("Cleared testing configuration")
