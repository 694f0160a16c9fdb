from __future__ import annotations

"""
Unit tests for configuration persistence.

The user data directory is redirected to a temporary folder through the
BUNDLETREE_HOME environment variable.
"""

import json

import pytest

from bundletree.domain.config import get_default_config, load_config, save_config
from bundletree.infra.fs import get_config_path


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    monkeypatch.setenv("BUNDLETREE_HOME", str(tmp_path / "home"))
    return tmp_path / "home"


def test_missing_file_returns_defaults():
    assert load_config() == get_default_config()


def test_save_then_load_merges_over_defaults():
    cfg = get_default_config()
    cfg["expand_depth"] = 2
    save_config(cfg)

    loaded = load_config()
    assert loaded["expand_depth"] == 2
    assert loaded["show_types"] is True


def test_partial_file_keeps_new_default_keys():
    with open(get_config_path(), "w", encoding="utf-8") as f:
        json.dump({"version": "1.0.0", "viewer": {"show_types": False}}, f)

    loaded = load_config()
    assert loaded["show_types"] is False
    assert loaded["decodable_extensions"] == get_default_config()["decodable_extensions"]


@pytest.mark.parametrize("content", [
    "{broken",
    "[1, 2]",
    '{"version": "1.0.0", "viewer": 5}',
    '{"version": "1.0.0", "viewer": ["show_types"]}',
])
def test_corrupted_file_falls_back_to_defaults(content):
    with open(get_config_path(), "w", encoding="utf-8") as f:
        f.write(content)

    assert load_config() == get_default_config()


def test_config_path_lives_in_data_dir(isolated_home):
    assert get_config_path().startswith(str(isolated_home))
