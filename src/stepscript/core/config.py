from __future__ import annotations

import os
from pathlib import Path
import tomllib

_CONFIG_CACHE: dict | None = None

DEFAULT_LOG_LEVEL = "WARNING"


def config_path() -> Path:
    override = os.environ.get("STEPSCRIPT_CONFIG_PATH")
    if override:
        return Path(override).expanduser()
    base = os.environ.get("XDG_CONFIG_HOME")
    root = Path(base).expanduser() if base else (Path.home() / ".config")
    return root / "stepscript" / "config.toml"


def load_config() -> dict:
    path = config_path()
    if not path.exists():
        return {}
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ValueError(f"Invalid config file: {path}") from exc
    if not isinstance(data, dict):
        raise ValueError(f"Invalid config file structure: {path}")
    return data


def get_config() -> dict:
    global _CONFIG_CACHE
    if _CONFIG_CACHE is None:
        _CONFIG_CACHE = load_config()
    return _CONFIG_CACHE


def reset_config_cache() -> None:
    global _CONFIG_CACHE
    _CONFIG_CACHE = None


def get_config_value(*keys: str) -> object | None:
    current: object = get_config()
    for key in keys:
        if not isinstance(current, dict) or key not in current:
            return None
        current = current[key]
    return current


def _resolve(cli_value: str | None, keys: tuple[str, ...], env_key: str) -> str | None:
    if cli_value:
        return cli_value
    value = get_config_value(*keys)
    if isinstance(value, str) and value.strip():
        return value
    return os.environ.get(env_key) or None


def log_level(cli_value: str | None = None) -> str:
    return (_resolve(cli_value, ("logging", "level"), "STEPSCRIPT_LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper()


def trace_output(cli_value: str | None = None) -> Path | None:
    """Where trace lines go; None means standard error."""
    value = _resolve(cli_value, ("trace", "output"), "STEPSCRIPT_TRACE_OUTPUT")
    return Path(value).expanduser() if value else None
