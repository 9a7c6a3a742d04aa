# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Strict decoding of ESLint JSON reports into :class:`Diagnostic` records."""

from __future__ import annotations

import os
from collections.abc import Sequence
from pathlib import Path
from typing import Any, Final, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from .errors import ToolInvocationError
from .models import Diagnostic
from .severity import severity_from_eslint

_UNKNOWN_RULE: Final[str] = "unknown"


class ESLintMessage(BaseModel):
    """One message entry of an ESLint result."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    line: int | None = Field(default=None, ge=0)
    column: int | None = Field(default=None, ge=0)
    end_line: int | None = Field(default=None, alias="endLine", ge=0)
    end_column: int | None = Field(default=None, alias="endColumn", ge=0)
    severity: Literal[1, 2]
    rule_id: str | None = Field(default=None, alias="ruleId")
    message: str
    fix: dict[str, Any] | None = None


class ESLintResult(BaseModel):
    """Per-file entry of ``eslint --format json`` output."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    file_path: str = Field(alias="filePath")
    messages: list[ESLintMessage]


_REPORT_ADAPTER: Final[TypeAdapter[list[ESLintResult]]] = TypeAdapter(list[ESLintResult])


def decode_eslint_report(stdout: str, *, tool: str = "eslint") -> list[ESLintResult]:
    """Validate ``stdout`` against the ESLint JSON report schema.

    Args:
        stdout: Raw standard output of ``eslint --format json``.
        tool: Tool name used in error messages.

    Returns:
        list[ESLintResult]: Decoded per-file results.

    Raises:
        ToolInvocationError: If the output is empty, not JSON, or does not match the schema.
    """

    if not stdout.strip():
        raise ToolInvocationError(tool, "produced no JSON report")
    try:
        return _REPORT_ADAPTER.validate_json(stdout)
    except ValidationError as exc:
        raise ToolInvocationError(tool, f"unexpected report format: {exc}") from exc


def _position(value: int | None) -> int:
    return value if value else 1


def workspace_relative(file_path: str, workspace: Path) -> str:
    """Return ``file_path`` relative to ``workspace`` using POSIX separators."""

    return Path(os.path.relpath(file_path, workspace)).as_posix()


def to_diagnostics(results: Sequence[ESLintResult], workspace: Path) -> list[Diagnostic]:
    """Convert decoded ESLint results into workspace-relative diagnostics."""

    diagnostics: list[Diagnostic] = []
    for result in results:
        path = workspace_relative(result.file_path, workspace)
        for message in result.messages:
            start_line = _position(message.line)
            start_column = _position(message.column)
            diagnostics.append(
                Diagnostic(
                    file_path=path,
                    start_line=start_line,
                    start_column=start_column,
                    end_line=max(message.end_line or start_line, start_line),
                    end_column=message.end_column or start_column,
                    severity=severity_from_eslint(message.severity),
                    rule_id=message.rule_id or _UNKNOWN_RULE,
                    message=message.message.strip(),
                    auto_fixable=message.fix is not None,
                ),
            )
    return diagnostics


__all__ = [
    "ESLintMessage",
    "ESLintResult",
    "decode_eslint_report",
    "to_diagnostics",
    "workspace_relative",
]
