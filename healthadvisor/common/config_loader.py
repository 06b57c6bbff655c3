"""Configuration loading and validation."""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any

import yaml

from healthadvisor.common.constants import DOCUMENT_TYPE, INDEX_NAME
from healthadvisor.common.errors import ConfigError
from healthadvisor.common.fs import read_yaml
from healthadvisor.common.http import RetryConfig, TimeoutConfig
from healthadvisor.common.schema import validate_app_config

DEFAULT_CONFIG: dict[str, Any] = {
    "search": {
        "index_name": INDEX_NAME,
        "document_type": DOCUMENT_TYPE,
        "scheme": "http",
    },
    "geocoder": {
        "endpoint": "https://maps.googleapis.com/maps/api/geocode/json",
        "api_key": None,
    },
    "http": {
        "connect_timeout": 10,
        "read_timeout": 30,
        "max_attempts": 1,
    },
}


def _deep_merge(base: Any, overlay: Any) -> Any:
    if isinstance(base, dict) and isinstance(overlay, dict):
        merged = dict(base)
        for key, value in overlay.items():
            if key in merged:
                merged[key] = _deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged
    return overlay


def _read_config_file(path: Path) -> dict:
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")
    try:
        loaded = read_yaml(path)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Could not read config file {path}: {exc}") from exc
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"Config file must contain a mapping: {path}")
    return loaded


def load_app_config(
    config_path: Path | None = None,
    *,
    overlay_path: Path | None = None,
    allow_unknown: bool = False,
) -> dict:
    cfg = copy.deepcopy(DEFAULT_CONFIG)
    if config_path is not None:
        cfg = _deep_merge(cfg, _read_config_file(config_path))
    if overlay_path is not None and overlay_path.exists():
        cfg = _deep_merge(cfg, _read_config_file(overlay_path))
    return validate_app_config(cfg, allow_unknown=allow_unknown)


def http_settings(cfg: dict) -> tuple[TimeoutConfig, RetryConfig]:
    http_cfg = cfg["http"]
    timeout = TimeoutConfig(connect=float(http_cfg["connect_timeout"]), read=float(http_cfg["read_timeout"]))
    retry = RetryConfig(max_attempts=int(http_cfg["max_attempts"]))
    return timeout, retry
