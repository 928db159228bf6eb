# File: entigen/errors.py
"""
Entigen - Exception hierarchy
==============================
Exceptions raised inside the compilation pipeline.  User-facing validation
problems are never exceptions (see ``entigen.validators``); these classes
cover the two failure kinds that abort a compilation after validation.
"""

from __future__ import annotations

import logging
from typing import List, Optional

logger: logging.Logger = logging.getLogger("entigen.errors")


class CompilationError(Exception):
    """Base class for failures after validation has passed."""


class MaterializationError(CompilationError):
    """An I/O failure while writing artifacts; the output has been rolled back."""

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        super().__init__(message)
        self.path: Optional[str] = path


class GeneratorDefect(CompilationError):
    """An unexpected fault while resolving or rendering a validated workflow."""


__all__: List[str] = [
    "CompilationError",
    "MaterializationError",
    "GeneratorDefect",
]

logger.debug("entigen.errors loaded: %d public symbols.", len(__all__))
