# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Locate project-local Node tool binaries through the active package manager."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Final

from .logging import ActionLogger
from .process_utils import CommandRunner, SubprocessExecutionError, run_command

PNPM_LOCKFILE: Final[str] = "pnpm-lock.yaml"
YARN_LOCKFILE: Final[str] = "yarn.lock"
_LOCAL_BIN_DIR: Final[tuple[str, ...]] = ("node_modules", ".bin")


class PackageManager(Enum):
    """Package managers able to report a local binary directory."""

    PNPM = "pnpm"
    YARN = "yarn"
    NPM = "npm"


@dataclass(frozen=True, slots=True)
class ManagerStrategy:
    """Detection rule mapping a lockfile to a package manager."""

    kind: PackageManager
    lockfile: str | None

    def detect(self, filenames: set[str]) -> bool:
        """Return ``True`` when ``filenames`` selects this manager."""

        return self.lockfile is None or self.lockfile in filenames

    @property
    def bin_command(self) -> tuple[str, ...]:
        """Return the command printing the manager's binary directory."""

        return (self.kind.value, "bin")


# Evaluated in order; npm is the catch-all.
DEFAULT_MANAGER_STRATEGIES: Final[tuple[ManagerStrategy, ...]] = (
    ManagerStrategy(PackageManager.PNPM, PNPM_LOCKFILE),
    ManagerStrategy(PackageManager.YARN, YARN_LOCKFILE),
    ManagerStrategy(PackageManager.NPM, None),
)


class ToolLocator:
    """Resolve and verify executables such as ``eslint`` for a project directory."""

    def __init__(
        self,
        *,
        runner: CommandRunner = run_command,
        strategies: Iterable[ManagerStrategy] = DEFAULT_MANAGER_STRATEGIES,
        logger: ActionLogger | None = None,
    ) -> None:
        self._runner = runner
        self._strategies = tuple(strategies)
        self._logger = logger

    def detect_manager(self, directory: Path) -> ManagerStrategy:
        """Return the strategy selected by the lockfiles present in ``directory``."""

        names = {entry.name for entry in directory.iterdir()} if directory.is_dir() else set()
        for strategy in self._strategies:
            if strategy.detect(names):
                return strategy
        return self._strategies[-1]

    def resolve(self, directory: Path, tool_name: str) -> Path | None:
        """Return a verified executable for ``tool_name`` or ``None`` when unavailable.

        Args:
            directory: Project directory whose lockfile selects the package manager.
            tool_name: Executable name inside the binary directory.

        Returns:
            Path | None: Executable path that answered ``--version``; ``None`` otherwise.
        """

        strategy = self.detect_manager(directory)
        bin_dir = self._binary_directory(strategy, directory)
        candidate = (bin_dir / tool_name).resolve()
        try:
            completed = self._runner(
                [str(candidate), "--version"],
                cwd=directory,
                check=True,
                capture_output=True,
            )
        except (OSError, SubprocessExecutionError) as exc:
            self._debug(f"{tool_name} not usable at {candidate}: {exc}")
            return None
        self._debug(f"resolved {tool_name} {completed.stdout.strip()} via {strategy.kind.value} at {candidate}")
        return candidate

    def _binary_directory(self, strategy: ManagerStrategy, directory: Path) -> Path:
        try:
            completed = self._runner(
                list(strategy.bin_command),
                cwd=directory,
                check=True,
                capture_output=True,
            )
        except (OSError, SubprocessExecutionError) as exc:
            self._debug(f"'{' '.join(strategy.bin_command)}' failed ({exc}); using node_modules/.bin")
            return directory.joinpath(*_LOCAL_BIN_DIR)
        reported = completed.stdout.strip().splitlines()
        if not reported:
            return directory.joinpath(*_LOCAL_BIN_DIR)
        return (directory / reported[-1].strip()).resolve()

    def _debug(self, message: str) -> None:
        if self._logger is not None:
            self._logger.debug(message)


__all__ = [
    "DEFAULT_MANAGER_STRATEGIES",
    "ManagerStrategy",
    "PNPM_LOCKFILE",
    "PackageManager",
    "ToolLocator",
    "YARN_LOCKFILE",
]
