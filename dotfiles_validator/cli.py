#!/usr/bin/env python3
"""
validate-dotfiles - Consistency checker for a dotter-managed dotfiles repo.

Checks that the dotter configuration exists, that every file it declares is
present and tracked by git (and not ignored), that no tracked symlink is
broken, and that tracked TOML and JSON files parse.

Read-only: never modifies files or repository state.

Usage:
    validate-dotfiles
    validate-dotfiles --fix --verbose
    DOTFILES_DIR=~/src/dotfiles validate-dotfiles
"""

import sys
import logging
import argparse
from typing import List, Optional

from rich.console import Console

from .config import Config, ConfigError, DEFAULT_DOTFILES_DIR, ENV_VAR
from .git_facade import GitRepo
from .reporter import EXIT_CRITICAL, Reporter
from .rules import bind_rules, run_rules

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="validate-dotfiles",
        description="Validate dotfiles repository structure and configuration",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Environment:
    {ENV_VAR}    Repository root to validate (default: {DEFAULT_DOTFILES_DIR})

Exit codes:
    0 - All validations passed (warnings allowed)
    1 - Validation failures found
    2 - Critical error (repository root unusable)
        """
    )

    parser.add_argument(
        "--fix", "-f",
        action="store_true",
        help="Show fix suggestions"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show detailed output"
    )

    return parser


def setup_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


def main(argv: Optional[List[str]] = None, console: Optional[Console] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    config = Config.load(verbose=args.verbose, fix_mode=args.fix)
    reporter = Reporter(config, console)

    try:
        config.require_valid()
    except ConfigError as e:
        reporter.critical(f"Error: {e}")
        return EXIT_CRITICAL

    reporter.header()
    reporter.verbose(f"Repository: {config.dotfiles_dir}")

    rules = bind_rules(config, GitRepo(config.dotfiles_dir))
    results = run_rules(rules, on_start=reporter.rule_started, on_result=reporter.print_result)

    return reporter.summarize(results)


def run():
    try:
        exit_code = main()
    except KeyboardInterrupt:
        exit_code = 130
    except Exception as e:
        logger.debug("Unexpected failure", exc_info=True)
        print(f"Critical error: {type(e).__name__}: {e}", file=sys.stderr)
        exit_code = EXIT_CRITICAL
    sys.exit(exit_code)


if __name__ == "__main__":
    run()
