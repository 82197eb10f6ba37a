"""
Minimal parser for dotter-style TOML configuration.

Understands exactly what the validator needs:
    - blank lines and `#` comments
    - `[section]`, `[section.subsection]` and `[[section]]` headers
    - `key = value` assignments scoped to the most recent header
    - multi-line arrays, inline tables and triple-quoted strings, kept as raw text

It is not a TOML implementation. Values are unquoted when they are plain
strings and otherwise returned as their raw text.
"""

import re
import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from .models import DotterFileEntry

logger = logging.getLogger(__name__)

FILES_SUFFIX = ".files"

ParsedConfig = Dict[str, Dict[str, str]]

HEADER_PATTERN = re.compile(r"^\[\s*([^\[\]]+?)\s*\]\s*(?:#.*)?$")
ARRAY_HEADER_PATTERN = re.compile(r"^\[\[\s*([^\[\]]+?)\s*\]\]\s*(?:#.*)?$")
TRIPLE_QUOTES = ('"""', "'''")


class ParseError(ValueError):
    """Raised for malformed syntax. Missing keys are not a parse error."""

    def __init__(self, reason: str, path: Optional[str] = None, line_no: Optional[int] = None):
        self.reason = reason
        self.path = path
        self.line_no = line_no
        location = path or "<string>"
        if line_no is not None:
            location = f"{location}:{line_no}"
        super().__init__(f"{location}: {reason}")


def _scan_value(text: str) -> Tuple[str, int, Optional[str]]:
    """
    Strip comments from a raw value and measure how much of it is still open.

    Returns (cleaned text, bracket depth, open quote delimiter or None).
    """
    depth = 0
    quote: Optional[str] = None
    i = 0
    while i < len(text):
        ch = text[i]
        if quote:
            if ch == "\\" and quote in ('"', '"""'):
                i += 2
                continue
            if text.startswith(quote, i):
                i += len(quote)
                quote = None
                continue
            if ch == "\n" and quote in ('"', "'"):
                break
            i += 1
            continue

        if text.startswith(TRIPLE_QUOTES, i):
            quote = text[i:i + 3]
            i += 3
            continue
        if ch in "\"'":
            quote = ch
        elif ch in "[{":
            depth += 1
        elif ch in "]}":
            depth -= 1
        elif ch == "#":
            newline = text.find("\n", i)
            text = text[:i] if newline == -1 else text[:i] + text[newline:]
            continue
        i += 1

    return text.rstrip(), depth, quote


def _unquote(value: str) -> str:
    for delim in TRIPLE_QUOTES:
        if len(value) >= 6 and value.startswith(delim) and value.endswith(delim):
            return value[3:-3]
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        return value[1:-1]
    return value


def _parse_header(line: str, line_no: int, source: str) -> str:
    match = ARRAY_HEADER_PATTERN.match(line) or HEADER_PATTERN.match(line)
    if not match:
        raise ParseError("malformed section header", source, line_no)
    return match.group(1)


def _split_assignment(line: str, line_no: int, source: str) -> Tuple[str, str]:
    if line[0] in "\"'":
        end = line.find(line[0], 1)
        if end == -1:
            raise ParseError("unterminated quoted key", source, line_no)
        rest = line[end + 1:].lstrip()
        if rest.startswith("="):
            return line[1:end], rest[1:].strip()

    if "=" not in line:
        raise ParseError("expected 'key = value'", source, line_no)

    key, _, value = line.partition("=")
    key = key.strip()
    if not key:
        raise ParseError("assignment without a key", source, line_no)
    return _unquote(key), value.strip()


def parse_text(text: str, source: str = "<string>") -> ParsedConfig:
    """Parse config text into {section: {key: value}}."""
    sections: ParsedConfig = {}
    current: Optional[str] = None

    pending_key: Optional[str] = None
    pending_lines: List[str] = []
    pending_start = 0

    def store(key: str, raw_value: str, line_no: int):
        value, depth, quote = _scan_value(raw_value)
        if quote in ('"', "'"):
            raise ParseError("unterminated string", source, line_no)
        if depth < 0:
            raise ParseError("unbalanced closing bracket", source, line_no)
        if depth > 0 or quote:
            return False
        if not value:
            raise ParseError(f"missing value for '{key}'", source, line_no)
        if current is None:
            logger.debug(f"{source}:{line_no}: discarding '{key}' outside any section")
        else:
            sections[current][key] = _unquote(value)
        return True

    for line_no, raw in enumerate(text.splitlines(), 1):
        if pending_key is not None:
            pending_lines.append(raw)
            if store(pending_key, "\n".join(pending_lines), pending_start):
                pending_key = None
                pending_lines = []
            continue

        line = raw.strip()
        if not line or line.startswith("#"):
            continue

        if line.startswith("["):
            current = _parse_header(line, line_no, source)
            sections.setdefault(current, {})
            continue

        key, value = _split_assignment(line, line_no, source)
        if not store(key, value, line_no):
            pending_key = key
            pending_lines = [value]
            pending_start = line_no

    if pending_key is not None:
        raise ParseError(f"unterminated value for '{pending_key}'", source, pending_start)

    return sections


def parse(path: Path) -> ParsedConfig:
    """
    Parse a config file. A missing file parses to an empty mapping.

    Raises:
        ParseError: on malformed syntax or undecodable content
    """
    if not path.exists():
        return {}

    try:
        # utf-8-sig drops a leading byte order mark
        text = path.read_text(encoding="utf-8-sig")
    except UnicodeDecodeError as e:
        raise ParseError(f"not valid UTF-8 ({e.reason})", str(path)) from e

    return parse_text(text, source=str(path))


def extract_file_entries(parsed: ParsedConfig) -> List[DotterFileEntry]:
    """Collect one entry per mapping found in every `[<group>.files]` section."""
    entries = []

    for section, values in parsed.items():
        if not section.endswith(FILES_SUFFIX):
            continue
        group = section.split(".", 1)[0]
        for source, target in values.items():
            entries.append(DotterFileEntry(source=source, target=target, group=group))

    return entries
