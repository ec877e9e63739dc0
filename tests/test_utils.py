# tests/test_utils.py
"""Unit tests for utility functions in the `shadovi.utils` module."""

from pathlib import Path

import pytest

from shadovi.utils import utils


def test_deep_merge() -> None:
    """Verify that `deep_merge` correctly merges nested dictionaries.

    This test ensures:
    - Existing values are preserved if not overridden.
    - Nested dictionaries are merged recursively.
    - Conflicting keys are overridden by values from the second dictionary.
    """
    base = {"a": 1, "b": {"x": 10, "y": 20}}
    override = {"b": {"y": 99, "z": 100}, "c": 3}
    result = utils.deep_merge(base, override)
    expected = {"a": 1, "b": {"x": 10, "y": 99, "z": 100}, "c": 3}
    assert result == expected
    assert base == {"a": 1, "b": {"x": 10, "y": 20}}


def test_hex_to_xterm_valid_color() -> None:
    """White maps to 231, black to 16."""
    assert utils.hex_to_xterm("#ffffff") == 231
    assert utils.hex_to_xterm("000000") == 16


def test_hex_to_xterm_invalid_color() -> None:
    """Invalid hex strings fall back to 255."""
    assert utils.hex_to_xterm("#zzz") == 255
    assert utils.hex_to_xterm("12") == 255
    assert utils.hex_to_xterm("#gggggg") == 255


def test_user_config_path_override(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("SHADOVI_CONFIG", str(tmp_path / "custom.toml"))
    assert utils.get_user_config_path() == tmp_path / "custom.toml"


def test_user_config_path_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("SHADOVI_CONFIG", raising=False)
    assert utils.get_user_config_path() == Path.home() / ".config" / "shadovi" / "config.toml"


def test_load_config_defaults_without_user_file(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setenv("SHADOVI_CONFIG", str(tmp_path / "absent.toml"))
    config = utils.load_config()
    assert config["editor"]["tab_width"] == 2
    assert config["editor"]["quit_times"] == 3
    assert "rust" in config["filetypes"]


def test_load_config_merges_user_file(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    user_file = tmp_path / "config.toml"
    user_file.write_text(
        '[editor]\ntab_width = 4\n\n[keybindings]\nfind = "f3"\n', encoding="utf-8"
    )
    monkeypatch.setenv("SHADOVI_CONFIG", str(user_file))
    config = utils.load_config()
    assert config["editor"]["tab_width"] == 4
    assert config["editor"]["quit_times"] == 3
    assert config["keybindings"]["find"] == "f3"
    assert config["keybindings"]["quit"] == "ctrl+q"


def test_load_config_ignores_broken_file(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    user_file = tmp_path / "config.toml"
    user_file.write_text("[editor\ntab_width = ", encoding="utf-8")
    monkeypatch.setenv("SHADOVI_CONFIG", str(user_file))
    assert utils.load_config()["editor"]["tab_width"] == 2


def test_load_config_does_not_mutate_defaults(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("SHADOVI_CONFIG", str(tmp_path / "absent.toml"))
    config = utils.load_config()
    config["editor"]["tab_width"] = 8
    assert utils.DEFAULT_CONFIG["editor"]["tab_width"] == 2
