"""
Configuration — loads settings from .draftpatch.yaml, environment variables,
and built-in defaults (in that priority order: CLI args > env > YAML > defaults).
"""

import os

import yaml

from .editing.patch_applier import (
    DEFAULT_SEARCH_AFTER, DEFAULT_SEARCH_BEFORE, PatchApplier,
)


_DEFAULTS = {
    "search_before": DEFAULT_SEARCH_BEFORE,
    "search_after": DEFAULT_SEARCH_AFTER,
    "color": True,
    "log_dir": ".draftpatch/logs",
}

# Config file search locations
_CONFIG_FILENAMES = [".draftpatch.yaml", ".draftpatch.yml"]


def _find_config_file(explicit_path: str | None = None) -> str | None:
    """Find the config file. Checks explicit path, CWD, then user home."""
    if explicit_path:
        if os.path.isfile(explicit_path):
            return explicit_path
        return None

    search_dirs = [os.getcwd(), os.path.expanduser("~")]
    for d in search_dirs:
        for name in _CONFIG_FILENAMES:
            path = os.path.join(d, name)
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


class Config:
    """Application configuration.

    Settings are resolved in priority order:
    1. CLI arguments (handled by caller)
    2. Environment variables
    3. .draftpatch.yaml config file
    4. Built-in defaults
    """

    def __init__(self, yaml_data: dict | None = None):
        yd = yaml_data or {}

        # Helper: env var > yaml > default
        def _get(env_key: str, yaml_key: str, default, cast=str):
            env_val = os.getenv(env_key)
            if env_val is not None:
                return cast(env_val)
            yaml_val = yd.get(yaml_key)
            if yaml_val is not None:
                return cast(yaml_val)
            return default

        def _get_bool(env_key: str, yaml_key: str, default: bool) -> bool:
            env_val = os.getenv(env_key)
            if env_val is not None:
                return env_val.lower() == "true"
            yaml_val = yd.get(yaml_key)
            if yaml_val is not None:
                return bool(yaml_val)
            return default

        # Fuzzy search window around a hunk's expected line
        self.SEARCH_BEFORE = _get("DRAFTPATCH_SEARCH_BEFORE", "search_before",
                                  _DEFAULTS["search_before"], cast=int)
        self.SEARCH_AFTER = _get("DRAFTPATCH_SEARCH_AFTER", "search_after",
                                 _DEFAULTS["search_after"], cast=int)

        self.COLOR = _get_bool("DRAFTPATCH_COLOR", "color", _DEFAULTS["color"])
        self.LOG_DIR = _get("DRAFTPATCH_LOG_DIR", "log_dir", _DEFAULTS["log_dir"])

    def make_applier(self) -> PatchApplier:
        """Build a PatchApplier using the configured search window."""
        return PatchApplier(
            search_before=self.SEARCH_BEFORE,
            search_after=self.SEARCH_AFTER,
        )

    @classmethod
    def load(cls, config_path: str | None = None) -> "Config":
        """Load config from YAML file (if found) + env vars + defaults."""
        path = _find_config_file(config_path)
        yaml_data = _load_yaml(path) if path else {}
        return cls(yaml_data)
