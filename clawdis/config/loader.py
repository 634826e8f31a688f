"""
Configuration loader for the Clawdis debug panel.

Handles loading configuration from JSON/YAML files and converting
to the typed ``ClawdisConfig`` dataclass.
"""

from __future__ import annotations

import json
import os
import yaml
from pathlib import Path
from typing import Dict, Any, Optional
from dotenv import load_dotenv

from .models import ClawdisConfig


ENV_OVERRIDES = {
    "CLAWDIS_LOG_DIR": "log_dir",
    "CLAWDIS_MODEL_CATALOG": "model_catalog_default",
    "CLAWDIS_RELAY_ROOT": "relay_root_default",
}

_PATH_FIELDS = (
    "config_folder",
    "preferences_path",
    "log_dir",
    "legacy_log_path",
    "model_catalog_default",
    "relay_root_default",
)


def load_raw_config(path: Path) -> Dict[str, Any]:
    """
    Load raw configuration from JSON or YAML file.

    Also loads environment variables from .env file if present.

    Args:
        path: Path to config file (.json, .yaml, or .yml)

    Returns:
        Dictionary with raw configuration

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If file format is unsupported
        json.JSONDecodeError: If JSON is invalid
        yaml.YAMLError: If YAML is invalid
    """
    load_dotenv()

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    suffix = path.suffix.lower()
    content = path.read_text(encoding="utf-8")

    if suffix in {".yaml", ".yml"}:
        config = yaml.safe_load(content) or {}
    elif suffix == ".json":
        config = json.loads(content) if content.strip() else {}
    else:
        raise ValueError(
            f"Unsupported config format: {suffix}. "
            f"Use .json, .yaml, or .yml"
        )

    if not isinstance(config, dict):
        raise ValueError(f"Config root must be a mapping, got {type(config).__name__}")
    return config


def _apply_env_overrides(raw: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(raw)
    for env_name, key in ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if value:
            merged[key] = value
    return merged


def build_config_from_raw(raw: Dict[str, Any], path: Optional[Path] = None) -> ClawdisConfig:
    """
    Build a validated ``ClawdisConfig`` from raw mapping values.

    Unknown keys are ignored. Environment overrides win over file values.
    """
    merged = _apply_env_overrides(raw)
    kwargs: Dict[str, Any] = {}

    for key in _PATH_FIELDS:
        value = merged.get(key)
        if value:
            kwargs[key] = Path(str(value)).expanduser()

    for key in ("catalog_extension", "notification_title", "notification_body", "log_level"):
        if key in merged and merged[key] is not None:
            kwargs[key] = str(merged[key])

    if merged.get("relay_log_limit") is not None:
        kwargs["relay_log_limit"] = int(merged["relay_log_limit"])

    config = ClawdisConfig(config_path=path, **kwargs)
    config.validate()
    return config


def load_config_from_file(path: Path | str) -> ClawdisConfig:
    """
    Load and validate configuration from a JSON/YAML file.
    """
    if isinstance(path, str):
        path = Path(path)
    path = path.expanduser().resolve()
    raw = load_raw_config(path)
    return build_config_from_raw(raw, path)


def default_config() -> ClawdisConfig:
    """
    Build a config from built-in defaults plus environment overrides.
    """
    load_dotenv()
    return build_config_from_raw({})


def config_to_raw(config: ClawdisConfig) -> Dict[str, Any]:
    """
    Serialize ClawdisConfig into a JSON/YAML-friendly dict.
    """
    return {
        "config_folder": str(config.config_folder),
        "preferences_path": str(config.preferences_path),
        "log_dir": str(config.log_dir),
        "legacy_log_path": str(config.legacy_log_path),
        "model_catalog_default": str(config.model_catalog_default),
        "relay_root_default": str(config.relay_root_default),
        "catalog_extension": config.catalog_extension,
        "notification_title": config.notification_title,
        "notification_body": config.notification_body,
        "relay_log_limit": config.relay_log_limit,
        "log_level": config.log_level,
    }


def save_config_to_file(config: ClawdisConfig, path: Path | str) -> None:
    """
    Serialize and save configuration to JSON/YAML file.

    Args:
        config: ClawdisConfig instance to save
        path: Destination config file path
    """
    if isinstance(path, str):
        path = Path(path)

    path = path.expanduser().resolve()
    raw = config_to_raw(config)

    suffix = path.suffix.lower()
    if suffix == ".json":
        path.write_text(json.dumps(raw, indent=2), encoding="utf-8")
    elif suffix in {".yaml", ".yml"}:
        path.write_text(yaml.safe_dump(raw, sort_keys=False), encoding="utf-8")
    else:
        raise ValueError(
            f"Unsupported config format: {suffix}. "
            f"Use .json, .yaml, or .yml"
        )
