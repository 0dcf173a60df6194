"""Tests for cookstack.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from cookstack.config import ConfigError, CookstackConfig, load_config


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, CookstackConfig)
    assert config.root == tmp_path.resolve()
    assert config.cookbook_paths == []
    assert config.ignore_file == "chefignore"
    assert config.exclude_paths == []
    assert config.log_file is None


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".cookstack.yml"
    config_file.write_text(
        """
cookbook_paths:
  - cookbooks
  - site-cookbooks
ignore_file: .cookignore
exclude_paths: ['test/*', '*.swp']
log_file: logs/cookstack.log
""",
        encoding="utf-8",
    )

    config = load_config(config_file)

    assert config.cookbook_paths == [
        tmp_path.resolve() / "cookbooks",
        tmp_path.resolve() / "site-cookbooks",
    ]
    assert config.ignore_file == ".cookignore"
    assert config.exclude_paths == ["test/*", "*.swp"]
    assert config.log_file == tmp_path.resolve() / "logs" / "cookstack.log"


def test_load_config_accepts_sibling_file_path(tmp_path: Path) -> None:
    (tmp_path / ".cookstack.yml").write_text("exclude_paths: README.md\n", encoding="utf-8")

    config = load_config(tmp_path / "anything.txt")

    assert config.exclude_paths == ["README.md"]


def test_load_config_empty_file_uses_defaults(tmp_path: Path) -> None:
    (tmp_path / ".cookstack.yml").write_text("\n", encoding="utf-8")

    assert load_config(tmp_path).cookbook_paths == []


def test_load_config_rejects_non_mapping(tmp_path: Path) -> None:
    (tmp_path / ".cookstack.yml").write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_load_config_wraps_yaml_errors(tmp_path: Path) -> None:
    (tmp_path / ".cookstack.yml").write_text("cookbook_paths: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="Failed to parse"):
        load_config(tmp_path)


def test_load_config_rejects_nested_ignore_file(tmp_path: Path) -> None:
    (tmp_path / ".cookstack.yml").write_text("ignore_file: sub/chefignore\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)
