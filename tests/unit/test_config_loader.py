from pathlib import Path

import pytest

from healthadvisor.common.config_loader import DEFAULT_CONFIG, http_settings, load_app_config
from healthadvisor.common.errors import ConfigError


def test_load_app_config_defaults_without_file():
    cfg = load_app_config()
    assert cfg == DEFAULT_CONFIG
    assert cfg["search"]["index_name"] == "healthadvisor"
    assert cfg["search"]["document_type"] == "service"
    assert cfg["http"]["max_attempts"] == 1


def test_load_app_config_from_repo_config_file():
    cfg = load_app_config(Path("config/healthadvisor.yml"))
    assert cfg["search"]["index_name"] == "healthadvisor"
    assert cfg["geocoder"]["api_key"] is None


def test_load_app_config_merges_partial_file(tmp_path: Path):
    path = tmp_path / "cfg.yml"
    path.write_text("geocoder:\n  api_key: abc123\n", encoding="utf-8")

    cfg = load_app_config(path)

    assert cfg["geocoder"]["api_key"] == "abc123"
    assert cfg["geocoder"]["endpoint"] == DEFAULT_CONFIG["geocoder"]["endpoint"]
    assert DEFAULT_CONFIG["geocoder"]["api_key"] is None


def test_load_app_config_applies_overlay_values(tmp_path: Path):
    base = tmp_path / "base.yml"
    overlay = tmp_path / "overlay.yml"
    base.write_text("search:\n  index_name: staging\nhttp:\n  read_timeout: 60\n", encoding="utf-8")
    overlay.write_text("search:\n  scheme: https\n", encoding="utf-8")

    cfg = load_app_config(base, overlay_path=overlay)

    assert cfg["search"] == {"index_name": "staging", "document_type": "service", "scheme": "https"}
    assert cfg["http"]["read_timeout"] == 60


def test_load_app_config_ignores_missing_overlay(tmp_path: Path):
    cfg = load_app_config(overlay_path=tmp_path / "absent.yml")
    assert cfg == DEFAULT_CONFIG


def test_load_app_config_missing_file_raises(tmp_path: Path):
    with pytest.raises(ConfigError):
        load_app_config(tmp_path / "absent.yml")


@pytest.mark.parametrize(
    "text",
    [
        "search:\n  colour: blue\n",
        "extra_section: {}\n",
        "search:\n  scheme: ftp\n",
        "http:\n  max_attempts: 0\n",
        "http:\n  read_timeout: -1\n",
        "search: []\n",
        "- just\n- a list\n",
    ],
)
def test_load_app_config_rejects_invalid_values(tmp_path: Path, text: str):
    path = tmp_path / "cfg.yml"
    path.write_text(text, encoding="utf-8")

    with pytest.raises(ConfigError):
        load_app_config(path)


def test_load_app_config_allow_unknown(tmp_path: Path):
    path = tmp_path / "cfg.yml"
    path.write_text("search:\n  colour: blue\n", encoding="utf-8")

    assert load_app_config(path, allow_unknown=True)["search"]["colour"] == "blue"


def test_http_settings_builds_timeout_and_retry():
    timeout, retry = http_settings(DEFAULT_CONFIG)
    assert (timeout.connect, timeout.read) == (10.0, 30.0)
    assert retry.max_attempts == 1


def test_load_app_config_malformed_yaml_raises_config_error(tmp_path: Path):
    path = tmp_path / "cfg.yml"
    path.write_text("search: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="Invalid YAML"):
        load_app_config(path)


def test_load_app_config_unreadable_path_names_the_config(tmp_path: Path):
    config_dir = tmp_path / "cfg.d"
    config_dir.mkdir()

    with pytest.raises(ConfigError, match="cfg.d"):
        load_app_config(config_dir)
