"""Result types shared by the rules and the reporter."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True)
class Issue:
    """A single finding produced by a rule."""
    severity: Severity
    message: str
    file: Optional[str] = None
    fix_suggestion: Optional[str] = None

    @property
    def is_error(self) -> bool:
        return self.severity is Severity.ERROR


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of one rule. A rule passes unless it found an error."""
    rule_name: str
    passed: bool
    issues: List[Issue] = field(default_factory=list)

    @classmethod
    def from_issues(cls, rule_name: str, issues: List[Issue]) -> "ValidationResult":
        return cls(
            rule_name=rule_name,
            passed=not any(issue.is_error for issue in issues),
            issues=list(issues),
        )

    @property
    def error_count(self) -> int:
        return sum(1 for issue in self.issues if issue.is_error)


@dataclass(frozen=True)
class DotterFileEntry:
    """One `source = target` mapping declared in a dotter `[group.files]` table."""
    source: str
    target: str
    group: str


# Fix suggestion prefixes; the reporter batches suggestions by these
GITIGNORE_FIX_PREFIX = "Add to .gitignore: !"
GIT_ADD_FIX_PREFIX = "Run: git add "
