"""Terminal rendering of rule results and the final exit code."""

from typing import Dict, List, Optional, Sequence, Tuple

from rich.console import Console
from rich.text import Text

from .config import Config
from .models import GIT_ADD_FIX_PREFIX, GITIGNORE_FIX_PREFIX, Issue, Severity, ValidationResult

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_CRITICAL = 2

# (glyph, style)
PASS_STYLE = ("✓", "green")
FAIL_STYLE = ("✗", "red")
SEVERITY_STYLES: Dict[Severity, Tuple[str, str]] = {
    Severity.ERROR: FAIL_STYLE,
    Severity.WARNING: ("⚠", "yellow"),
    Severity.INFO: ("ℹ", "cyan"),
}
INFO_STYLE = SEVERITY_STYLES[Severity.INFO]
VERBOSE_STYLE = "blue"


def _files_with_fix(results: Sequence[ValidationResult], prefix: str) -> List[str]:
    """Files of every issue whose fix suggestion starts with `prefix`, in report order."""
    return [
        issue.file
        for result in results
        for issue in result.issues
        if issue.fix_suggestion and issue.fix_suggestion.startswith(prefix) and issue.file
    ]


class Reporter:
    """Prints results as they arrive and turns them into an exit code."""

    def __init__(self, config: Config, console: Optional[Console] = None):
        self.config = config
        self.console = console or Console(highlight=False)

    def _line(self, message: str, style: Tuple[str, str]):
        glyph, color = style
        self.console.print(Text(f"{glyph} {message}", style=color))

    def header(self):
        self.console.print()
        self.console.print(Text("Validating dotfiles repository...", style="bold"))
        self.console.print()

    def verbose(self, message: str):
        if self.config.verbose:
            self.console.print(Text(f"  {message}", style=VERBOSE_STYLE))

    def rule_started(self, label: str):
        self.verbose(f"Checking {label}...")

    def print_result(self, result: ValidationResult):
        self._line(result.rule_name, PASS_STYLE if result.passed else FAIL_STYLE)

        for issue in result.issues:
            self.print_issue(issue)

    def print_issue(self, issue: Issue):
        file_str = f" ({issue.file})" if issue.file else ""
        self._line(f"  {issue.message}{file_str}", SEVERITY_STYLES[issue.severity])

        if issue.fix_suggestion:
            self._line(f"    {issue.fix_suggestion}", INFO_STYLE)

    def print_fix_suggestions(self, results: Sequence[ValidationResult]):
        self.console.print()
        self.console.print(Text("Fix suggestions:", style="bold"))
        self.console.print()

        ignored_files = _files_with_fix(results, GITIGNORE_FIX_PREFIX)
        if ignored_files:
            self._line("Add these lines to .gitignore:", INFO_STYLE)
            for file in ignored_files:
                self._line(f"  !{file}", PASS_STYLE)
            self.console.print()

        untracked_files = _files_with_fix(results, GIT_ADD_FIX_PREFIX)
        if untracked_files:
            self._line("Run this command to track files:", INFO_STYLE)
            self._line(f"  git add {' '.join(untracked_files)}", PASS_STYLE)
            self.console.print()

    def summarize(self, results: Sequence[ValidationResult]) -> int:
        """Print the summary and return the process exit code."""
        self.console.print()
        self.console.print(Text("=" * 60, style="bold"))

        total_issues = sum(len(r.issues) for r in results)
        errors = sum(r.error_count for r in results)
        warnings = total_issues - errors

        if errors > 0:
            self._line(
                f"Validation failed: {total_issues} issue(s) found ({errors} errors, {warnings} warnings)",
                FAIL_STYLE,
            )
            if self.config.fix_mode:
                self.print_fix_suggestions(results)
            return EXIT_FAILED

        if warnings > 0:
            self._line(f"Validation completed with {warnings} warning(s)", SEVERITY_STYLES[Severity.WARNING])
        else:
            self._line("All validations passed!", PASS_STYLE)
            self.console.print()
        return EXIT_OK

    def critical(self, message: str):
        self._line(message, FAIL_STYLE)
