# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Severity related types and helpers."""

from __future__ import annotations

from enum import Enum
from typing import Final


class Severity(str, Enum):
    """Severity levels reported on check-run annotations."""

    ERROR = "error"
    WARNING = "warning"


ESLINT_ERROR_LEVEL: Final[int] = 2
ESLINT_WARNING_LEVEL: Final[int] = 1

_SEVERITY_TO_ANNOTATION_LEVEL: Final[dict[Severity, str]] = {
    Severity.ERROR: "failure",
    Severity.WARNING: "warning",
}


def severity_from_eslint(level: int) -> Severity:
    """Map an ESLint numeric severity (``1`` warn, ``2`` error) to :class:`Severity`."""

    return Severity.ERROR if level == ESLINT_ERROR_LEVEL else Severity.WARNING


def severity_to_annotation_level(severity: Severity) -> str:
    """Map :class:`Severity` to a GitHub check-run ``annotation_level``."""

    return _SEVERITY_TO_ANNOTATION_LEVEL.get(severity, "warning")


__all__ = [
    "ESLINT_ERROR_LEVEL",
    "ESLINT_WARNING_LEVEL",
    "Severity",
    "severity_from_eslint",
    "severity_to_annotation_level",
]
