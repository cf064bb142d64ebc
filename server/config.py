from __future__ import annotations

import logging
import os
from typing import Any, Dict

from dotenv import load_dotenv

from shared.protocol.constants import LISTEN_BACKLOG, MAX_PAYLOAD_SIZE
from shared.protocol.errors import ConfigError

DEFAULT_SERVER_CONFIG: Dict[str, Any] = {
    "host": "0.0.0.0",
    "backlog": LISTEN_BACKLOG,
    "log_level": "INFO",
    "session_timeout": 0.0,  # seconds, 0 disables
    "max_payload": MAX_PAYLOAD_SIZE,  # per text or key frame
}

SERVER_CONFIG = DEFAULT_SERVER_CONFIG.copy()


def load_server_config(env_path: str = ".env") -> Dict[str, Any]:
    """Read SERVER_* variables (and an optional .env) over the defaults."""
    if os.path.exists(env_path):
        load_dotenv(env_path)

    loaded: Dict[str, Any] = {}
    for key, default_value in DEFAULT_SERVER_CONFIG.items():
        value = os.getenv(f"SERVER_{key.upper()}", default_value)
        loaded[key] = _coerce_type(key, value, type(default_value))

    _validate_config(loaded)
    SERVER_CONFIG.update(loaded)
    return SERVER_CONFIG


def _coerce_type(key: str, value: Any, target_type: type) -> Any:
    if isinstance(value, target_type):
        return value
    try:
        return target_type(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Cannot convert {key}={value!r} to {target_type.__name__}") from exc


def _validate_config(config: Dict[str, Any]) -> None:
    if not config["host"]:
        raise ConfigError("host must not be empty")
    if config["backlog"] < 1:
        raise ConfigError("backlog must be at least 1")
    if config["session_timeout"] < 0:
        raise ConfigError("session_timeout must not be negative")
    if not (0 < config["max_payload"] <= MAX_PAYLOAD_SIZE):
        raise ConfigError(f"max_payload must be between 1 and {MAX_PAYLOAD_SIZE}")
    level = str(config["log_level"]).upper()
    if level not in logging.getLevelNamesMapping():
        raise ConfigError(f"unknown log_level {config['log_level']}")
    config["log_level"] = level


__all__ = ["DEFAULT_SERVER_CONFIG", "SERVER_CONFIG", "load_server_config"]
