# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Run external analysis tools and translate their output into diagnostics."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final, TypeAlias

from .errors import ToolInvocationError
from .logging import ActionLogger
from .models import Diagnostic
from .parsers import decode_eslint_report, to_diagnostics
from .process_utils import CommandRunner, SubprocessExecutionError, run_command

# ESLint exits 1 when it reports lint errors; anything above signals a crash or bad config.
_ESLINT_OK_CODES: Final[frozenset[int]] = frozenset({0, 1})


@dataclass(frozen=True, slots=True)
class TranslationOk:
    """Successful tool run with its diagnostics."""

    diagnostics: list[Diagnostic] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class TranslationError:
    """Tool run that could not produce diagnostics."""

    error: BaseException

    @property
    def reason(self) -> str:
        """Return the human readable failure message."""

        return str(self.error)


TranslationResult: TypeAlias = TranslationOk | TranslationError


def filter_by_extension(files: Iterable[str], extensions: Sequence[str]) -> list[str]:
    """Return ``files`` whose suffix is one of ``extensions``, preserving order."""

    wanted = {extension.lower() for extension in extensions}
    return [name for name in files if Path(name).suffix.lower() in wanted]


class DiagnosticTranslator:
    """Invoke ESLint-compatible linters and decode their JSON reports."""

    def __init__(
        self,
        *,
        directory: Path,
        workspace: Path,
        fix: bool,
        logger: ActionLogger,
        runner: CommandRunner = run_command,
    ) -> None:
        self._directory = directory
        self._workspace = workspace
        self._fix = fix
        self._logger = logger
        self._runner = runner

    def command(self, tool_path: Path, files: Sequence[str]) -> list[str]:
        """Return the linter command line for ``files``."""

        flags = ["--fix"] if self._fix else []
        return [str(tool_path), *flags, "--no-color", "--format", "json", *files]

    def run(self, tool_path: Path, files: Sequence[str]) -> TranslationResult:
        """Lint ``files`` and return their diagnostics or the failure that prevented it.

        Args:
            tool_path: Verified linter executable.
            files: Changed files already filtered to extensions the linter understands.

        Returns:
            TranslationResult: ``TranslationOk`` with diagnostics, or
            ``TranslationError`` describing why the tool could not be used.
        """

        if not files:
            self._logger.debug(f"no files for {tool_path.name}; skipping invocation")
            return TranslationOk([])
        try:
            completed = self._runner(
                self.command(tool_path, files),
                cwd=self._directory,
                check=False,
                capture_output=True,
            )
            if completed.returncode not in _ESLINT_OK_CODES:
                stderr = (completed.stderr or "").strip() or "<none>"
                raise ToolInvocationError(
                    tool_path.name,
                    f"exited with status {completed.returncode}. stderr: {stderr}",
                )
            results = decode_eslint_report(completed.stdout or "", tool=tool_path.name)
        except (OSError, ToolInvocationError) as exc:
            self._logger.fail(f"{tool_path.name} failed: {exc}")
            return TranslationError(exc)
        return TranslationOk(to_diagnostics(results, self._workspace))


class FormatterRunner:
    """Invoke Prettier-compatible formatters; only the exit status is consumed."""

    def __init__(
        self,
        *,
        directory: Path,
        fix: bool,
        logger: ActionLogger,
        runner: CommandRunner = run_command,
    ) -> None:
        self._directory = directory
        self._fix = fix
        self._logger = logger
        self._runner = runner

    def command(self, tool_path: Path, files: Sequence[str]) -> list[str]:
        """Return the formatter command line for ``files``."""

        mode = "--write" if self._fix else "--check"
        return [str(tool_path), "--ignore-unknown", mode, *files]

    def run(self, tool_path: Path, files: Sequence[str]) -> TranslationResult:
        """Format ``files`` in place (fix mode) or check them."""

        if not files:
            return TranslationOk([])
        try:
            self._runner(self.command(tool_path, files), cwd=self._directory, check=True, capture_output=False)
        except (OSError, SubprocessExecutionError) as exc:
            self._logger.fail(f"{tool_path.name} failed: {exc}")
            return TranslationError(exc)
        return TranslationOk([])


__all__ = [
    "DiagnosticTranslator",
    "FormatterRunner",
    "TranslationError",
    "TranslationOk",
    "TranslationResult",
    "filter_by_extension",
]
