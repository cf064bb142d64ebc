from __future__ import annotations

import logging
import os
from typing import Any, Dict

from dotenv import load_dotenv

from shared.protocol.errors import ConfigError

DEFAULT_CONFIG: Dict[str, Any] = {
    "server_host": "localhost",
    "connect_timeout": 0.0,  # seconds, 0 waits for the OS
    "log_level": "WARNING",
}

CLIENT_CONFIG: Dict[str, Any] = DEFAULT_CONFIG.copy()


def load_config(env_path: str = ".env") -> Dict[str, Any]:
    """Load client configuration from env file/environment variables."""
    if os.path.exists(env_path):
        load_dotenv(env_path)

    for key, default_value in DEFAULT_CONFIG.items():
        env_key = f"CLIENT_{key.upper()}"
        value = os.getenv(env_key, default_value)
        CLIENT_CONFIG[key] = _coerce_type(value, type(default_value))

    _validate_config()
    logging.getLogger().setLevel(CLIENT_CONFIG["log_level"])
    return CLIENT_CONFIG


def _coerce_type(value: Any, target_type: type) -> Any:
    if isinstance(value, target_type):
        return value
    try:
        return target_type(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Cannot convert {value} to {target_type}") from exc


def _validate_config() -> None:
    if not CLIENT_CONFIG["server_host"]:
        raise ConfigError("server_host must not be empty")
    if CLIENT_CONFIG["connect_timeout"] < 0:
        raise ConfigError("connect_timeout must not be negative")
    level = str(CLIENT_CONFIG["log_level"]).upper()
    if level not in logging.getLevelNamesMapping():
        raise ConfigError(f"unknown log_level {CLIENT_CONFIG['log_level']}")
    CLIENT_CONFIG["log_level"] = level


__all__ = ["CLIENT_CONFIG", "DEFAULT_CONFIG", "ConfigError", "load_config"]
