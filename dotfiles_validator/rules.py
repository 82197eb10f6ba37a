"""
Validation rules for a dotter-managed dotfiles repository.

Each rule is a plain function `(Config, VCS) -> ValidationResult`. Rules are
independent: none reads another's result, and all of them only look at the
filesystem and the VCS facade.

To add a rule:
    1. Write a function with the signature above
    2. Add (label, function) to RULES
"""

import json
import logging
from functools import partial
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from . import jsonc
from .config import Config, GLOBAL_CONFIG, PLATFORM_CONFIG
from .git_facade import VCS
from .models import (
    GIT_ADD_FIX_PREFIX, GITIGNORE_FIX_PREFIX, DotterFileEntry, Issue, Severity, ValidationResult
)
from .toml_parser import ParseError, extract_file_entries, parse

logger = logging.getLogger(__name__)

RuleFn = Callable[[Config, VCS], ValidationResult]
BoundRule = Tuple[str, Callable[[], ValidationResult]]


# =============================================================================
# Configuration Rules
# =============================================================================

def dotter_configs_exist(config: Config, vcs: VCS) -> ValidationResult:
    issues = []

    if not config.path(GLOBAL_CONFIG).is_file():
        issues.append(Issue(Severity.ERROR, "Dotter global.toml not found", file=GLOBAL_CONFIG))

    return ValidationResult.from_issues("Dotter configuration files exist", issues)


def _declared_entries(config: Config, issues: List[Issue]) -> List[DotterFileEntry]:
    """Union of the global and platform entries, first declaration wins."""
    by_source: Dict[str, DotterFileEntry] = {}

    for relative in (GLOBAL_CONFIG, PLATFORM_CONFIG):
        try:
            entries = extract_file_entries(parse(config.path(relative)))
        except (ParseError, OSError) as e:
            reason = e.reason if isinstance(e, ParseError) else (e.strerror or str(e))
            issues.append(Issue(
                Severity.WARNING,
                f"Skipped unparsable dotter config: {relative} ({reason})",
                file=relative,
            ))
            continue

        for entry in entries:
            by_source.setdefault(entry.source, entry)

    return list(by_source.values())


def dotter_files_tracked(config: Config, vcs: VCS) -> ValidationResult:
    issues: List[Issue] = []
    entries = _declared_entries(config, issues)

    logger.info(f"Found {len(entries)} files referenced in dotter configs")

    for entry in entries:
        source, group = entry.source, entry.group

        if not config.path(source).exists():
            issues.append(Issue(
                Severity.ERROR,
                f"File missing: {source} (from {group})",
                file=source,
            ))
        elif vcs.is_tracked(source):
            continue
        elif vcs.is_ignored(source):
            issues.append(Issue(
                Severity.ERROR,
                f"File ignored by git: {source} (from {group})",
                file=source,
                fix_suggestion=f"{GITIGNORE_FIX_PREFIX}{source}",
            ))
        else:
            issues.append(Issue(
                Severity.WARNING,
                f"File not tracked: {source} (from {group})",
                file=source,
                fix_suggestion=f"{GIT_ADD_FIX_PREFIX}{source}",
            ))

    return ValidationResult.from_issues("Dotter files exist and are tracked", issues)


# =============================================================================
# Filesystem Rules
# =============================================================================

def no_broken_symlinks(config: Config, vcs: VCS) -> ValidationResult:
    issues = []

    for file in vcs.list_tracked_files():
        path = config.path(file)
        # exists() follows the link, so a dangling or looping link reports False
        if path.is_symlink() and not path.exists():
            issues.append(Issue(Severity.ERROR, f"Broken symlink: {file}", file=file))

    return ValidationResult.from_issues("No broken symlinks", issues)


# =============================================================================
# Syntax Rules
# =============================================================================

def toml_files_valid(config: Config, vcs: VCS) -> ValidationResult:
    issues = []
    checked = 0

    for file in vcs.list_tracked_files():
        if not file.endswith(".toml"):
            continue
        path = config.path(file)
        if not path.is_file():
            logger.debug(f"Skipping {file}: not a regular file on disk")
            continue

        checked += 1
        try:
            parse(path)
        except ParseError as e:
            where = f"line {e.line_no}: {e.reason}" if e.line_no else e.reason
            issues.append(Issue(Severity.ERROR, f"Invalid TOML syntax: {file} ({where})", file=file))
        except OSError as e:
            issues.append(Issue(Severity.ERROR, f"Cannot read TOML file: {file} ({e.strerror})", file=file))

    return ValidationResult.from_issues(f"All {checked} TOML files are valid", issues)


def json_files_valid(config: Config, vcs: VCS) -> ValidationResult:
    issues = []
    checked = 0

    for file in vcs.list_tracked_files():
        if not file.endswith((".json", ".jsonc")):
            continue
        path = config.path(file)
        if not path.is_file():
            logger.debug(f"Skipping {file}: not a regular file on disk")
            continue

        checked += 1
        relaxed = jsonc.is_relaxed(file)
        try:
            jsonc.loads(path.read_text(encoding="utf-8-sig"), relaxed=relaxed)
        except (ValueError, OSError) as e:
            # UnicodeDecodeError and JSONDecodeError are both ValueErrors
            if relaxed:
                logger.debug(f"Not enforcing relaxed JSON file {file}: {e}")
                continue
            reason = f"line {e.lineno}: {e.msg}" if isinstance(e, json.JSONDecodeError) else str(e)
            issues.append(Issue(Severity.ERROR, f"Invalid JSON syntax: {file} ({reason})", file=file))

    return ValidationResult.from_issues(f"All {checked} JSON files are valid", issues)


# =============================================================================
# Rule Registry
# =============================================================================

# Run order; the label is shown for verbose progress and for crashed rules
RULES: List[Tuple[str, RuleFn]] = [
    ("Dotter configuration files exist", dotter_configs_exist),
    ("Dotter files exist and are tracked", dotter_files_tracked),
    ("No broken symlinks", no_broken_symlinks),
    ("TOML files are valid", toml_files_valid),
    ("JSON files are valid", json_files_valid),
]


def bind_rules(
    config: Config,
    vcs: VCS,
    rules: Sequence[Tuple[str, RuleFn]] = RULES,
) -> List[BoundRule]:
    """Close every rule over the run's config and VCS facade."""
    return [(label, partial(check, config, vcs)) for label, check in rules]


def run_rule(label: str, rule: Callable[[], ValidationResult]) -> ValidationResult:
    """Run one rule; a crash becomes a single error issue for that rule."""
    try:
        return rule()
    except Exception as e:
        logger.debug(f"Rule '{label}' raised", exc_info=True)
        return ValidationResult.from_issues(
            label,
            [Issue(Severity.ERROR, f"Internal error: {type(e).__name__}: {e}")],
        )


def run_rules(
    rules: Sequence[BoundRule],
    on_start: Optional[Callable[[str], None]] = None,
    on_result: Optional[Callable[[ValidationResult], None]] = None,
) -> List[ValidationResult]:
    """Run rules in order, reporting each result as soon as it completes."""
    results = []

    for label, rule in rules:
        if on_start:
            on_start(label)
        result = run_rule(label, rule)
        if on_result:
            on_result(result)
        results.append(result)

    return results
