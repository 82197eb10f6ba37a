"""
Runtime configuration for the validator.

The dotfiles root is resolved with priority:
1. DOTFILES_DIR environment variable (highest)
2. ~/.dotfiles (default)
"""

import os
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Mapping, Optional

logger = logging.getLogger(__name__)

ENV_VAR = "DOTFILES_DIR"
DEFAULT_DOTFILES_DIR = Path.home() / ".dotfiles"

# Dotter layout inside the repository
DOTTER_DIR = ".dotter"
GLOBAL_CONFIG = f"{DOTTER_DIR}/global.toml"
PLATFORM_CONFIG = f"{DOTTER_DIR}/macos.toml"


class ConfigError(Exception):
    """Raised when the validator cannot start against the configured root."""
    pass


@dataclass(frozen=True)
class Config:
    dotfiles_dir: Path
    verbose: bool = False
    fix_mode: bool = False

    @classmethod
    def load(
        cls,
        verbose: bool = False,
        fix_mode: bool = False,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "Config":
        env = os.environ if environ is None else environ
        override = env.get(ENV_VAR)
        if override:
            dotfiles_dir = Path(override).expanduser()
            logger.debug(f"Using {ENV_VAR}={dotfiles_dir}")
        else:
            dotfiles_dir = DEFAULT_DOTFILES_DIR
            logger.debug(f"{ENV_VAR} not set, using default {dotfiles_dir}")

        return cls(
            dotfiles_dir=dotfiles_dir.resolve(),
            verbose=verbose,
            fix_mode=fix_mode,
        )

    def validate(self) -> List[str]:
        """Returns list of startup errors, empty if the root is usable."""
        errors = []

        if not self.dotfiles_dir.exists():
            errors.append(f"Dotfiles directory not found: {self.dotfiles_dir}")
        elif not self.dotfiles_dir.is_dir():
            errors.append(f"Dotfiles path is not a directory: {self.dotfiles_dir}")
        elif not os.access(self.dotfiles_dir, os.R_OK | os.X_OK):
            errors.append(f"Dotfiles directory is not readable: {self.dotfiles_dir}")

        return errors

    def require_valid(self) -> None:
        errors = self.validate()
        if errors:
            raise ConfigError("; ".join(errors))

    def path(self, relative: str) -> Path:
        return self.dotfiles_dir / relative
