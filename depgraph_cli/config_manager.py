"""Configuration manager for DepGraph CLI using TOML files."""

from __future__ import annotations

import logging
from dataclasses import fields
from pathlib import Path
from typing import Any, Dict, Optional

import toml

from .config import BASE_DIR, AnalysisConfig, ConfigError, compile_patterns
from .extractor import EXTRACTORS

logger = logging.getLogger(__name__)

CONFIG_FILE = BASE_DIR / "config.toml"

# TOML section -> AnalysisConfig field names stored in it
SECTIONS: Dict[str, tuple] = {
    "resolver": ("aliases", "resolve_extensions", "index_files", "code_extensions"),
    "discovery": ("feature_patterns", "excluded_patterns", "entry_patterns"),
    "builder": ("extractor", "max_workers"),
}


def _config_path(path: Optional[Path]) -> Path:
    return path if path is not None else CONFIG_FILE


def load_full_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """Load the entire TOML config (all sections).

    Returns an empty dict when the file is missing or cannot be parsed.
    """
    config_path = _config_path(path)
    if not config_path.exists():
        return {}
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            return toml.load(f)
    except (toml.TomlDecodeError, OSError) as exc:
        logger.warning("Ignoring unreadable config file %s: %s", config_path, exc)
        return {}


def load_analysis_config(path: Optional[Path] = None) -> AnalysisConfig:
    """Build an :class:`AnalysisConfig` from defaults merged with the TOML file.

    Args:
        path: Explicit config file. Defaults to ``$DEPGRAPH_HOME/config.toml``.

    Raises:
        ConfigError: If a value has the wrong shape or a pattern is not a
            valid regular expression.
    """
    raw = load_full_config(path)
    config = AnalysisConfig()
    known = {f.name for f in fields(AnalysisConfig)}

    for section, names in SECTIONS.items():
        values = raw.get(section, {})
        if not isinstance(values, dict):
            raise ConfigError(f"[{section}] must be a table")
        for key, value in values.items():
            if key not in names or key not in known:
                logger.warning("Unknown config key [%s].%s ignored", section, key)
                continue
            setattr(config, key, _coerce(key, value, getattr(config, key)))

    _validate(config)
    return config


def _coerce(key: str, value: Any, default: Any) -> Any:
    if isinstance(default, dict):
        if not isinstance(value, dict) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in value.items()
        ):
            raise ConfigError(f"'{key}' must map strings to strings")
        return dict(value)
    if isinstance(default, list):
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise ConfigError(f"'{key}' must be a list of strings")
        return list(value)
    if isinstance(value, bool) or not isinstance(value, type(default)):
        raise ConfigError(f"'{key}' must be of type {type(default).__name__}")
    return value


def _validate(config: AnalysisConfig) -> None:
    compile_patterns(config.feature_patterns, "feature pattern")
    compile_patterns(config.excluded_patterns, "excluded pattern")
    compile_patterns(config.entry_patterns, "entry pattern")
    if config.max_workers < 1:
        raise ConfigError("'max_workers' must be at least 1")
    if config.extractor not in EXTRACTORS:
        raise ConfigError(
            f"Unknown extractor '{config.extractor}'. Choose one of: {', '.join(sorted(EXTRACTORS))}"
        )


def config_to_dict(config: AnalysisConfig) -> Dict[str, Dict[str, Any]]:
    """Group config fields into their TOML sections."""
    return {
        section: {name: getattr(config, name) for name in names}
        for section, names in SECTIONS.items()
    }


def save_analysis_config(config: AnalysisConfig, path: Optional[Path] = None) -> bool:
    """Write *config* to TOML, preserving unrelated sections in the file.

    Returns:
        True if saved successfully, False otherwise
    """
    config_path = _config_path(path)
    payload = load_full_config(config_path)
    payload.update(config_to_dict(config))
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w", encoding="utf-8") as f:
            toml.dump(payload, f)
        return True
    except OSError as exc:
        logger.warning("Could not write config file %s: %s", config_path, exc)
        return False
