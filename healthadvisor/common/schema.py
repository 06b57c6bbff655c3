"""Minimal strict schemas for YAML config validation."""

from __future__ import annotations

from healthadvisor.common.errors import ConfigError


def _assert_required_keys(obj: dict, required: set[str], ctx: str) -> None:
    if not isinstance(obj, dict):
        raise ConfigError(f"{ctx} must be a mapping")
    missing = required - set(obj)
    if missing:
        missing_str = ", ".join(sorted(missing))
        raise ConfigError(f"Missing keys in {ctx}: {missing_str}")


def _assert_no_unknown_keys(obj: dict, known: set[str], ctx: str, allow_unknown: bool) -> None:
    if allow_unknown:
        return
    unknown = set(obj) - known
    if unknown:
        unknown_str = ", ".join(sorted(unknown))
        raise ConfigError(f"Unknown keys in {ctx}: {unknown_str}")


def _assert_positive_number(value, ctx: str) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ConfigError(f"{ctx} must be a positive number")


def validate_app_config(cfg: dict, *, allow_unknown: bool = False) -> dict:
    sections = {
        "search": {"index_name", "document_type", "scheme"},
        "geocoder": {"endpoint", "api_key"},
        "http": {"connect_timeout", "read_timeout", "max_attempts"},
    }
    _assert_required_keys(cfg, set(sections), "config")
    _assert_no_unknown_keys(cfg, set(sections), "config", allow_unknown)
    for name, keys in sections.items():
        _assert_required_keys(cfg[name], keys, name)
        _assert_no_unknown_keys(cfg[name], keys, name, allow_unknown)

    if not cfg["search"]["index_name"] or not cfg["search"]["document_type"]:
        raise ConfigError("search.index_name and search.document_type must be non-empty")
    if cfg["search"]["scheme"] not in ("http", "https"):
        raise ConfigError("search.scheme must be 'http' or 'https'")
    if not cfg["geocoder"]["endpoint"]:
        raise ConfigError("geocoder.endpoint must be non-empty")

    _assert_positive_number(cfg["http"]["connect_timeout"], "http.connect_timeout")
    _assert_positive_number(cfg["http"]["read_timeout"], "http.read_timeout")
    max_attempts = cfg["http"]["max_attempts"]
    if isinstance(max_attempts, bool) or not isinstance(max_attempts, int) or max_attempts < 1:
        raise ConfigError("http.max_attempts must be an integer >= 1")

    return cfg
