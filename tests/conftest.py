"""Pytest fixtures and helpers for dotfiles-validator tests."""

import io
import subprocess
from pathlib import Path
from typing import Iterable, List

import pytest
from rich.console import Console

from dotfiles_validator.config import Config


def git(repo: Path, *args: str) -> subprocess.CompletedProcess:
    return subprocess.run(["git", *args], cwd=repo, check=True, capture_output=True, text=True)


def write(root: Path, relative: str, content: str = "") -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    return path


class FakeVCS:
    """In-memory stand-in for GitRepo."""

    def __init__(self, tracked: Iterable[str] = (), ignored: Iterable[str] = ()):
        self.tracked = list(tracked)
        self.ignored = set(ignored)

    def is_tracked(self, path: str) -> bool:
        return path in self.tracked

    def is_ignored(self, path: str) -> bool:
        return path in self.ignored

    def list_tracked_files(self) -> List[str]:
        return list(self.tracked)


GLOBAL_TOML = """\
# Dotter global configuration
[helpers]

[shell]
depends = []

[shell.files]
"zsh/.zshrc" = "~/.zshrc"
"zsh/aliases.zsh" = "~/.config/zsh/aliases.zsh"

[editor.files]
"helix/config.toml" = "~/.config/helix/config.toml"
"""

HELIX_TOML = """\
theme = "onedark"

[editor]
line-number = "relative"
"""


@pytest.fixture
def dotfiles_dir(tmp_path) -> Path:
    """A dotfiles tree (not a git repository) declaring three files."""
    root = tmp_path / "dotfiles"
    root.mkdir()
    write(root, ".dotter/global.toml", GLOBAL_TOML)
    write(root, "zsh/.zshrc", "source ~/.config/zsh/aliases.zsh\n")
    write(root, "zsh/aliases.zsh", "alias ll='ls -la'\n")
    write(root, "helix/config.toml", HELIX_TOML)
    return root


@pytest.fixture
def git_dotfiles(dotfiles_dir) -> Path:
    """The same tree as a git repository with everything committed."""
    git(dotfiles_dir, "init")
    git(dotfiles_dir, "config", "user.email", "test@example.com")
    git(dotfiles_dir, "config", "user.name", "Test User")
    git(dotfiles_dir, "config", "commit.gpgsign", "false")
    git(dotfiles_dir, "add", ".")
    git(dotfiles_dir, "commit", "-m", "initial commit")
    return dotfiles_dir


@pytest.fixture
def config(dotfiles_dir) -> Config:
    return Config(dotfiles_dir=dotfiles_dir)


@pytest.fixture
def clean_vcs() -> FakeVCS:
    return FakeVCS(tracked=[
        ".dotter/global.toml",
        "zsh/.zshrc",
        "zsh/aliases.zsh",
        "helix/config.toml",
    ])


@pytest.fixture
def console() -> Console:
    """A console that records plain text."""
    return Console(file=io.StringIO(), width=200, color_system=None, highlight=False)


def output_of(console: Console) -> str:
    return console.file.getvalue()
