# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shell-free wrappers around ``subprocess`` for tool and git invocations."""

from __future__ import annotations

import shutil

# Bandit: commands are argument lists built by prqa itself; ``shell=True`` is never used.
import subprocess  # nosec B404
from collections.abc import Callable, Sequence
from pathlib import Path
from subprocess import CompletedProcess

CommandRunner = Callable[..., CompletedProcess[str]]


class SubprocessExecutionError(RuntimeError):
    """Raised when a command exits with a non-zero status while ``check`` is true."""

    def __init__(
        self,
        command: Sequence[str],
        returncode: int,
        stdout: str | None,
        stderr: str | None,
    ) -> None:
        super().__init__(
            f"Command '{command[0]}' exited with status {returncode}. stderr: {stderr or '<none>'}",
        )
        self.command = tuple(command)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr


def _resolve_executable(args: Sequence[str]) -> list[str]:
    if not args:
        raise ValueError("subprocess command requires at least one argument")
    head, *rest = args
    if Path(head).is_absolute():
        return [head, *rest]
    resolved = shutil.which(head)
    if resolved is None:
        raise FileNotFoundError(f"Executable '{head}' was not found on PATH")
    return [resolved, *rest]


def run_command(
    args: Sequence[str],
    *,
    cwd: Path | None = None,
    check: bool = True,
    capture_output: bool = False,
) -> CompletedProcess[str]:
    """Execute *args* without a shell and return the completed process.

    Args:
        args: Command and arguments. Relative executables are resolved via ``PATH``.
        cwd: Working directory for the child process.
        check: Raise :class:`SubprocessExecutionError` on a non-zero exit when true.
        capture_output: Capture stdout/stderr instead of streaming them to the job log.

    Returns:
        CompletedProcess[str]: Completed process with text output.

    Raises:
        FileNotFoundError: If the executable cannot be resolved.
        SubprocessExecutionError: If ``check`` is true and the command fails.
    """

    normalized = _resolve_executable(args)
    # Bandit: argument list execution without shell expansion.
    completed: CompletedProcess[str] = subprocess.run(  # nosec B603
        normalized,
        cwd=str(cwd) if cwd is not None else None,
        check=False,
        capture_output=capture_output,
        text=True,
        encoding="utf-8",
        stdin=subprocess.DEVNULL,
    )
    if check and completed.returncode != 0:
        raise SubprocessExecutionError(
            normalized,
            completed.returncode,
            completed.stdout if isinstance(completed.stdout, str) else None,
            completed.stderr if isinstance(completed.stderr, str) else None,
        )
    return completed


__all__ = ["CommandRunner", "SubprocessExecutionError", "run_command"]
