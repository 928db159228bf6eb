# File: entigen/utils.py
"""
Entigen - Utility Functions & Helpers
======================================
Small helpers used throughout the compilation pipeline:

- rendering of JavaScript literals (strings, numbers, regex literals) for
  the generated TypeScript sources;
- indentation helpers for the line-list template style;
- checksums and line counting for the export manifest;
- a ``Timer`` context manager used to record step metrics.

No external dependencies beyond the Python standard library.
"""

from __future__ import annotations

import hashlib
import json
import logging
import time
from typing import Dict, List, Optional, Sequence, Union

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("entigen.utils")


# ---------------------------------------------------------------------------
# JavaScript literal rendering
# ---------------------------------------------------------------------------


def js_string(value: str) -> str:
    """
    Render *value* as a double-quoted JavaScript string literal.

        >>> js_string("paid")
        '"paid"'
    """
    return json.dumps(value, ensure_ascii=False)


def js_number(value: Union[int, float]) -> str:
    """Render a number without a trailing ``.0`` for integral floats."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


_LINE_TERMINATOR_ESCAPES: Dict[str, str] = {
    "\n": "\\n",
    "\r": "\\r",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


def js_regex(pattern: str) -> str:
    """
    Render *pattern* as a regex literal, escaping unescaped slashes and
    line terminators (a literal cannot span lines).
    """
    escaped: List[str] = []
    backslash: bool = False
    for char in pattern:
        if char in _LINE_TERMINATOR_ESCAPES:
            if backslash:
                escaped.pop()
            escaped.append(_LINE_TERMINATOR_ESCAPES[char])
            backslash = False
            continue
        if char == "/" and not backslash:
            escaped.append("\\/")
        else:
            escaped.append(char)
        backslash = char == "\\" and not backslash
    return "/" + "".join(escaped) + "/"


# ---------------------------------------------------------------------------
# Indentation
# ---------------------------------------------------------------------------


def indent_lines(lines: Sequence[str], level: int = 1, size: int = 2) -> List[str]:
    """Indent a list of lines, leaving blank lines blank."""
    prefix: str = " " * (level * size)
    return [prefix + line if line.strip() else line for line in lines]


# ---------------------------------------------------------------------------
# Checksum & metrics
# ---------------------------------------------------------------------------


def sha256_hex(content: str) -> str:
    """Return SHA-256 hex digest of a string."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


def count_lines(content: str) -> int:
    """Count the number of lines in a string."""
    if not content:
        return 0
    return content.count("\n") + (1 if not content.endswith("\n") else 0)


# ---------------------------------------------------------------------------
# Timer context manager
# ---------------------------------------------------------------------------


class Timer:
    """
    Context-manager timer for pipeline steps.

    Usage:
        with Timer("resolve") as t:
            ...
        print(t.elapsed)
    """

    __slots__ = ("label", "start_time", "end_time", "elapsed")

    def __init__(self, label: str = "operation") -> None:
        self.label: str = label
        self.start_time: float = 0.0
        self.end_time: float = 0.0
        self.elapsed: float = 0.0

    def __enter__(self) -> "Timer":
        self.start_time = time.perf_counter()
        return self

    def __exit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[BaseException],
        exc_tb: Optional[object],
    ) -> None:
        self.end_time = time.perf_counter()
        self.elapsed = self.end_time - self.start_time
        logger.debug("Timer [%s]: %.4f seconds", self.label, self.elapsed)

    def __repr__(self) -> str:
        return f"<Timer {self.label}: {self.elapsed:.4f}s>"


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "js_string",
    "js_number",
    "js_regex",
    "indent_lines",
    "sha256_hex",
    "count_lines",
    "Timer",
]

logger.debug("entigen.utils loaded: %d public symbols.", len(__all__))
