"""Configuration management for Company Search."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .logging import get_logger

logger = get_logger(__name__)

CONFIG_ENV_VAR = "COMPANY_SEARCH_CONFIG"


class Config:
    """Configuration manager for Company Search."""

    def __init__(self, config_dict: Optional[Dict[str, Any]] = None):
        """Initialize configuration.

        Args:
            config_dict: Configuration dictionary. If None, uses defaults.
        """
        self._config = config_dict or self._get_default_config()

    @staticmethod
    def _get_default_config() -> Dict[str, Any]:
        """Get default configuration."""
        return {
            "data": {
                "corpus_dir": "./data",
                "snapshot_path": "./data/search-index.json",
            },
            "index": {
                "write_snapshot": True,  # Persist the index after a fallback scan
                "show_progress": False,
                "warm_on_startup": False,  # Build/load the index when the API starts
            },
            "search": {
                "max_results": 50,
                "min_query_length": 2,
            },
            "rate_limit": {
                "max_queries": 10,
                "window_seconds": 24 * 60 * 60,
                "default_identity": "127.0.0.1",
            },
            "access": {
                "session_cookie": "premium_session",
                "privileged_value": "true",
            },
            "fields": {
                # Exact column labels, checked case-insensitively in order
                "candidates": {
                    "name": ["CompanyName", "Company Name", "Name"],
                    "identifier": ["CIN"],
                    "region": ["CompanyStateCode", "State"],
                    "status": ["CompanyStatus", "Status"],
                },
                # Header patterns for the delimited-text backend
                "patterns": {
                    "name": r"Company.*Name|Name",
                    "identifier": r"CIN",
                    "region": r"State|CompanyStateCode",
                    "status": r"Status|CompanyStatus",
                },
            },
        }


    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> Config:
        """Load a YAML file layered over the defaults.

        Keys missing from the file keep their default values, so a config
        file only needs the settings it changes.

        Args:
            yaml_path: Path to YAML configuration file

        Returns:
            Config instance

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If the file does not hold a mapping

        Example:
            >>> config = Config.from_yaml("config.yml")
            >>> config.get("data.corpus_dir")
            './data'
        """
        yaml_path = Path(yaml_path)
        if not yaml_path.is_file():
            raise FileNotFoundError(f"Config file not found: {yaml_path}")

        logger.info(f"Loading config from {yaml_path}")
        with open(yaml_path, "r", encoding="utf-8") as f:
            overrides = yaml.safe_load(f) or {}

        if not isinstance(overrides, dict):
            raise ValueError(
                f"{yaml_path} must contain a mapping, got {type(overrides).__name__}"
            )

        return cls(_deep_merge(cls._get_default_config(), overrides))

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a dotted key such as ``"rate_limit.max_queries"``.

        Returns ``default`` as soon as a path segment is missing or the
        value at that point is not a section.
        """
        node: Any = self._config
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    def set(self, key: str, value: Any) -> None:
        """Assign a dotted key, creating intermediate sections as needed."""
        *sections, leaf = key.split(".")
        node = self._config
        for part in sections:
            node = node.setdefault(part, {})
        node[leaf] = value

    def __repr__(self) -> str:
        return f"Config({self._config})"


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Overlay ``override`` on ``base``; nested sections merge key by key."""
    merged = dict(base)
    for key, value in override.items():
        if isinstance(merged.get(key), dict) and isinstance(value, dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _discover_config_path() -> Optional[Path]:
    """Find the config file to use: $COMPANY_SEARCH_CONFIG, then ./config.yml."""
    env_path = os.getenv(CONFIG_ENV_VAR)
    if env_path:
        path = Path(env_path)
        if path.is_file():
            return path
        logger.warning(f"{CONFIG_ENV_VAR} points to missing file {path}; ignoring it")

    local = Path("config.yml")
    return local if local.is_file() else None


# Process-wide config, loaded on first use
_global_config: Optional[Config] = None


def get_config() -> Config:
    """Get the process-wide configuration.

    Loaded lazily from the first config file found, falling back to the
    defaults when none exists or the file cannot be parsed.

    Returns:
        Global Config instance
    """
    global _global_config
    if _global_config is None:
        path = _discover_config_path()
        if path is None:
            _global_config = Config()
        else:
            try:
                _global_config = Config.from_yaml(path)
            except (OSError, ValueError, yaml.YAMLError) as e:
                logger.warning(f"Failed to load config from {path}: {e}; using defaults")
                _global_config = Config()
    return _global_config


def set_config(config: Optional[Config]) -> None:
    """Replace the process-wide configuration (None forces a reload)."""
    global _global_config
    _global_config = config


def load_config(yaml_path: str | Path) -> Config:
    """Load a YAML config and make it the process-wide configuration."""
    config = Config.from_yaml(yaml_path)
    set_config(config)
    return config
