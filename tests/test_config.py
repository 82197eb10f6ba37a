"""Tests for Config loading and startup validation."""

import dataclasses
from pathlib import Path

import pytest

from dotfiles_validator.config import (
    Config, ConfigError, DEFAULT_DOTFILES_DIR, ENV_VAR
)


class TestConfigLoad:

    def test_env_override(self, dotfiles_dir):
        config = Config.load(environ={ENV_VAR: str(dotfiles_dir)})

        assert config.dotfiles_dir == dotfiles_dir.resolve()

    def test_default_when_unset(self):
        config = Config.load(environ={})

        assert config.dotfiles_dir == DEFAULT_DOTFILES_DIR.resolve()

    def test_empty_env_value_uses_default(self):
        config = Config.load(environ={ENV_VAR: ""})

        assert config.dotfiles_dir == DEFAULT_DOTFILES_DIR.resolve()

    def test_tilde_expanded(self, monkeypatch, tmp_path):
        monkeypatch.setenv("HOME", str(tmp_path))

        config = Config.load(environ={ENV_VAR: "~/dots"})

        assert config.dotfiles_dir == (tmp_path / "dots").resolve()

    def test_reads_process_environment(self, monkeypatch, dotfiles_dir):
        monkeypatch.setenv(ENV_VAR, str(dotfiles_dir))

        assert Config.load().dotfiles_dir == dotfiles_dir.resolve()

    def test_flags(self, dotfiles_dir):
        config = Config.load(verbose=True, fix_mode=True, environ={ENV_VAR: str(dotfiles_dir)})

        assert config.verbose is True
        assert config.fix_mode is True

    def test_immutable(self, config):
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.verbose = True


class TestConfigValidate:

    def test_valid_directory(self, config):
        assert config.validate() == []
        config.require_valid()

    def test_missing_directory(self, tmp_path):
        config = Config(dotfiles_dir=tmp_path / "missing")

        errors = config.validate()
        assert len(errors) == 1
        assert "not found" in errors[0]

        with pytest.raises(ConfigError, match="not found"):
            config.require_valid()

    def test_file_instead_of_directory(self, tmp_path):
        path = tmp_path / "file"
        path.write_text("")

        assert "not a directory" in Config(dotfiles_dir=path).validate()[0]

    def test_path_helper(self, config):
        assert config.path(".dotter/global.toml") == config.dotfiles_dir / ".dotter" / "global.toml"
        assert isinstance(config.path("x"), Path)
