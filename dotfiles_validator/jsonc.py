"""
Best-effort loader for JSON with comments (JSONC).

Strips `//` and `/* */` comments and trailing commas outside of string
literals, then hands the result to the standard json parser. This is a
convenience pass, not a grammar for the relaxed format.
"""

import re
import json
from typing import Any

COMMENT_MARKERS = re.compile(r"//|/\*")

# Paths whose JSON is written for tools that accept comments
RELAXED_SUFFIXES = (".jsonc",)
RELAXED_DIRS = (".config/zed/",)


def is_relaxed(path: str) -> bool:
    """True for files in the comment-tolerant variant (not strictly validated)."""
    if path.endswith(RELAXED_SUFFIXES):
        return True
    normalized = "/" + path.lstrip("/")
    return any(f"/{d}" in normalized for d in RELAXED_DIRS)


def has_comments(text: str) -> bool:
    return COMMENT_MARKERS.search(text) is not None


def strip_comments(text: str) -> str:
    out = []
    i = 0
    in_string = False

    while i < len(text):
        ch = text[i]

        if in_string:
            out.append(ch)
            if ch == "\\" and i + 1 < len(text):
                out.append(text[i + 1])
                i += 2
                continue
            if ch == '"':
                in_string = False
            i += 1
            continue

        if ch == '"':
            in_string = True
            out.append(ch)
            i += 1
        elif text.startswith("//", i):
            newline = text.find("\n", i)
            i = len(text) if newline == -1 else newline
        elif text.startswith("/*", i):
            end = text.find("*/", i + 2)
            i = len(text) if end == -1 else end + 2
        else:
            out.append(ch)
            i += 1

    return _strip_trailing_commas("".join(out))


def _strip_trailing_commas(text: str) -> str:
    out = []
    in_string = False
    i = 0

    while i < len(text):
        ch = text[i]
        if in_string:
            out.append(ch)
            if ch == "\\" and i + 1 < len(text):
                out.append(text[i + 1])
                i += 2
                continue
            if ch == '"':
                in_string = False
        elif ch == '"':
            in_string = True
            out.append(ch)
        elif ch == ",":
            j = i + 1
            while j < len(text) and text[j].isspace():
                j += 1
            if j >= len(text) or text[j] not in "}]":
                out.append(ch)
        else:
            out.append(ch)
        i += 1

    return "".join(out)


def loads(text: str, relaxed: bool = False) -> Any:
    """
    Parse JSON, running the comment-stripping pass first when the text is
    in the relaxed variant or contains comment markers.

    Raises:
        json.JSONDecodeError: if the (possibly stripped) text is not valid JSON
    """
    if relaxed or has_comments(text):
        text = strip_comments(text)
    return json.loads(text)
