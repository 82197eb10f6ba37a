"""
Dotfiles Validator - read-only consistency checks for a dotter-managed repo.

Rules:
- Dotter configuration files exist
- Declared files exist, are tracked by git and are not ignored
- No tracked symlink is broken
- Tracked TOML and JSON files parse
"""

from .models import Severity, Issue, ValidationResult, DotterFileEntry
from .config import Config, ConfigError
from .git_facade import VCS, GitRepo
from .toml_parser import ParseError, parse, extract_file_entries
from .rules import RULES, bind_rules, run_rules
from .reporter import Reporter

__version__ = "0.1.0"
