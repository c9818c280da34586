"""Tests for YAML/JSON configuration loading."""

import json

import pytest

from cli_config import apply_config, load_config, repositories_from_config
from constants import Constants, VersionOrdering


@pytest.fixture
def restore_constants(monkeypatch):
    """Let apply_config mutate Constants, restoring values afterwards."""
    for name in ("FANOUT_TIMEOUT", "FANOUT_MAX_WORKERS", "REQUEST_TIMEOUT", "HTTP_RETRY_MAX", "ORDERING"):
        monkeypatch.setattr(Constants, name, getattr(Constants, name))


YAML_CONFIG = """
timeout: 3
max_workers: 4
ordering: Semantic
repositories:
  - id: internal
    url: https://nexus.example.com/maven2/
    strategies: [metadata]
  - name: missing id
    url: https://nowhere.example/
"""


def test_load_yaml(tmp_path):
    path = tmp_path / "depscout.yml"
    path.write_text(YAML_CONFIG, encoding="utf-8")

    cfg = load_config(str(path))

    assert cfg["timeout"] == 3
    assert cfg["repositories"][0]["id"] == "internal"


def test_load_json(tmp_path):
    path = tmp_path / "depscout.json"
    path.write_text(json.dumps({"timeout": 2}), encoding="utf-8")
    assert load_config(str(path)) == {"timeout": 2}


def test_missing_and_invalid_files_give_empty_config(tmp_path, caplog):
    assert load_config(None) == {}
    assert load_config(str(tmp_path / "absent.yml")) == {}
    assert "Config file not found" in caplog.text

    broken = tmp_path / "broken.yml"
    broken.write_text("timeout: [unterminated", encoding="utf-8")
    assert load_config(str(broken)) == {}

    scalar = tmp_path / "scalar.yml"
    scalar.write_text("just a string", encoding="utf-8")
    assert load_config(str(scalar)) == {}


def test_apply_config(restore_constants):
    apply_config({"timeout": 3, "max_workers": 4, "request_timeout": 2, "ordering": "Semantic"})

    assert Constants.FANOUT_TIMEOUT == 3.0
    assert Constants.FANOUT_MAX_WORKERS == 4
    assert Constants.REQUEST_TIMEOUT == 2.0
    assert Constants.ORDERING is VersionOrdering.SEMANTIC


def test_apply_config_ignores_invalid_values(restore_constants, caplog):
    before = Constants.ORDERING

    apply_config({"ordering": "alphabetical"})

    assert Constants.ORDERING is before
    assert "Ignoring invalid configuration value" in caplog.text


def test_invalid_value_does_not_block_other_keys(restore_constants, caplog):
    timeout = Constants.FANOUT_TIMEOUT

    apply_config({"timeout": "soon", "max_workers": 4, "http_retries": 2, "ordering": "semantic"})

    assert Constants.FANOUT_MAX_WORKERS == 4
    assert Constants.HTTP_RETRY_MAX == 2
    assert Constants.ORDERING is VersionOrdering.SEMANTIC
    assert Constants.FANOUT_TIMEOUT == timeout
    assert "'timeout'" in caplog.text


def test_repositories_from_config(tmp_path):
    path = tmp_path / "depscout.yml"
    path.write_text(YAML_CONFIG, encoding="utf-8")

    repos = repositories_from_config(load_config(str(path)))

    assert len(repos) == 1
    assert repos[0].id == "internal"
    assert repos[0].name == "internal"
    assert repos[0].strategies == ("metadata",)
    assert repos[0].is_local is False


def test_repositories_default_strategies():
    repos = repositories_from_config({"repositories": [{"id": "x", "url": "https://x.example/"}]})
    assert repos[0].strategies == Constants.DEFAULT_STRATEGIES
    assert repositories_from_config({"repositories": "nope"}) == []
