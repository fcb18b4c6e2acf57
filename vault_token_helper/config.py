"""
Configuration — loads settings from a YAML config file, environment
variables, and built-in defaults (in that priority order: CLI args > env >
YAML > defaults).
"""

from __future__ import annotations

import os

import yaml


_DEFAULTS = {
    "vault_addr": "https://127.0.0.1:8200",
    "log_level": "info",
    "db_filename": "vault-token-helper.db",
}

_APP_NAME = "vault-token-helper"


def _config_search_paths() -> list[str]:
    xdg = os.environ.get("XDG_CONFIG_HOME") or os.path.join(
        os.path.expanduser("~"), ".config")
    return [
        os.path.join(xdg, _APP_NAME, "config.yaml"),
        os.path.join(os.path.expanduser("~"), f".{_APP_NAME}.yaml"),
    ]


def _find_config_file(explicit_path: str | None = None) -> str | None:
    """Find the config file. Checks explicit path, XDG config dir, then home."""
    if explicit_path:
        if os.path.isfile(explicit_path):
            return explicit_path
        return None

    for path in _config_search_paths():
        if os.path.isfile(path):
            return path
    return None


def _load_yaml(path: str) -> dict:
    """Load YAML file, returns empty dict on failure."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return data if isinstance(data, dict) else {}
    except (OSError, yaml.YAMLError):
        return {}


def default_db_path() -> str:
    """Return the default database file path.

    Follows XDG_DATA_HOME, falling back to ``~/.local/share``.
    """
    data_home = os.environ.get("XDG_DATA_HOME") or os.path.join(
        os.path.expanduser("~"), ".local", "share")
    return os.path.join(data_home, _DEFAULTS["db_filename"])


class Config:
    """Application configuration.

    Settings are resolved in priority order:
    1. CLI arguments (handled by caller)
    2. Environment variables
    3. YAML config file
    4. Built-in defaults
    """

    def __init__(self, yaml_data: dict | None = None):
        yd = yaml_data or {}

        # Helper: env var > yaml > default
        def _get(env_key: str, yaml_key: str, default):
            env_val = os.getenv(env_key)
            if env_val:
                return env_val
            yaml_val = yd.get(yaml_key)
            if yaml_val is not None:
                return str(yaml_val)
            return default

        self.VAULT_ADDR = _get("VAULT_ADDR", "vault_addr",
                               _DEFAULTS["vault_addr"])
        self.DB_PATH: str | None = _get("VAULT_TOKEN_HELPER_DB", "db_path",
                                        None)
        self.LOG_LEVEL = _get("VAULT_TOKEN_HELPER_LOG_LEVEL", "log_level",
                              _DEFAULTS["log_level"])

    def resolve_db_path(self) -> str:
        """Return the configured database path, or the per-user default."""
        if self.DB_PATH:
            return os.path.expanduser(self.DB_PATH)
        return default_db_path()

    @classmethod
    def load(cls, config_path: str | None = None) -> "Config":
        """Load config from YAML file (if found) + env vars + defaults."""
        path = _find_config_file(config_path)
        yaml_data = _load_yaml(path) if path else {}
        return cls(yaml_data)
