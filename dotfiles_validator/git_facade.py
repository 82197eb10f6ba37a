import subprocess
import logging
from pathlib import Path
from typing import List, Optional, Protocol

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


class VCS(Protocol):
    """Read-only queries the rules need from version control."""

    def is_tracked(self, path: str) -> bool: ...

    def is_ignored(self, path: str) -> bool: ...

    def list_tracked_files(self) -> List[str]: ...


class GitRepo:
    """
    Read-only view of a git working tree.

    Every query degrades to its negative answer (False / empty list) when git
    is missing, the directory is not a repository, or the call times out.
    """

    def __init__(self, repo_root: Path, timeout: float = DEFAULT_TIMEOUT):
        self.repo_root = repo_root
        self.timeout = timeout

    def _run_git(self, args: List[str]) -> Optional[subprocess.CompletedProcess]:
        try:
            return subprocess.run(
                ["git", "--literal-pathspecs"] + args,
                cwd=self.repo_root,
                capture_output=True,
                encoding="utf-8",
                errors="replace",
                timeout=self.timeout
            )
        except subprocess.TimeoutExpired:
            logger.debug(f"git {' '.join(args)} timed out after {self.timeout}s")
        except (OSError, subprocess.SubprocessError) as e:
            logger.debug(f"git {' '.join(args)} could not run: {e}")
        return None

    def is_tracked(self, path: str) -> bool:
        result = self._run_git(["ls-files", "--error-unmatch", "--", path])
        return result is not None and result.returncode == 0

    def is_ignored(self, path: str) -> bool:
        # check-ignore exits 1 for "not ignored" and 128 on fatal errors
        result = self._run_git(["check-ignore", "-q", "--", path])
        return result is not None and result.returncode == 0

    def list_tracked_files(self) -> List[str]:
        result = self._run_git(["ls-files", "-z"])
        if result is None:
            return []
        if result.returncode != 0:
            logger.debug(f"git ls-files failed in {self.repo_root}: {result.stderr.strip()}")
            return []
        return [name for name in result.stdout.split("\0") if name]
