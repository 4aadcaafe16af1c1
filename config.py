# config.py

import os
import logging
from typing import Optional

import yaml
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

# Environment variables that override values from the YAML file.
ENV_OVERRIDES = {
    "host": "WEBHOOK_HOST",
    "port": "WEBHOOK_PORT",
    "debug_mode": "DEBUG_MODE",
    "working_dir": "WEBHOOK_WORKING_DIR",
    "command_timeout": "WEBHOOK_COMMAND_TIMEOUT",
    "max_request_bytes": "WEBHOOK_MAX_REQUEST_BYTES",
    "limit_concurrency": "WEBHOOK_LIMIT_CONCURRENCY",
    "backlog": "WEBHOOK_BACKLOG",
}


class Settings(BaseModel):
    host: str = "127.0.0.1"
    port: int = Field(3000, ge=1, le=65535)
    debug_mode: bool = False
    working_dir: Optional[str] = None
    command_timeout: Optional[float] = Field(None, gt=0)
    max_request_bytes: int = Field(4096, gt=0)
    limit_concurrency: Optional[int] = Field(8, gt=0)
    backlog: int = Field(1, ge=1)


def load_config(path: Optional[str] = None) -> dict:
    """
    Load configuration from the YAML file specified by CONFIG_PATH environment variable or the default path.

    A missing file is not an error: the listener runs on defaults and environment overrides.

    Returns:
        dict: Parsed configuration dictionary.
    """
    config_path = path or os.getenv("CONFIG_PATH", "config.yaml")

    if not os.path.exists(config_path):
        logger.info(f"Configuration file '{config_path}' not found. Using defaults.")
        return {}

    try:
        with open(config_path, 'r') as f:
            config = yaml.safe_load(f) or {}
            logger.info(f"Configuration loaded successfully from '{config_path}'.")
    except yaml.YAMLError as e:
        logger.error(f"Error parsing YAML file '{config_path}': {e}")
        raise

    if not isinstance(config, dict):
        raise ValueError(f"Configuration file '{config_path}' must contain a mapping.")
    return config


def load_settings(path: Optional[str] = None, environ=None) -> Settings:
    """
    Build Settings from the YAML config, with environment variables taking precedence.
    """
    environ = os.environ if environ is None else environ
    values = load_config(path)

    for key, env_name in ENV_OVERRIDES.items():
        if env_name in environ and environ[env_name] != "":
            values[key] = environ[env_name]

    settings = Settings(**values)

    # Log summary of key settings
    logger.info(f"Listening address: {settings.host}:{settings.port}")
    logger.info(f"Working directory: {settings.working_dir or os.getcwd()}")
    if settings.command_timeout is None:
        logger.warning("No command timeout configured. A hung command blocks deployments indefinitely.")
    else:
        logger.info(f"Command timeout: {settings.command_timeout}s")
    return settings
