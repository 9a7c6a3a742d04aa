# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Commit tool-rewritten files back to the pull request branch."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Final

from .config import ActionConfig
from .errors import RemoteWriteConflict
from .github import PlatformClient
from .logging import ActionLogger
from .process_utils import CommandRunner, run_command

GIT_CHANGED_NAMES: Final[tuple[str, ...]] = ("git", "-c", "core.quotepath=off", "diff", "--name-only", "-z")


class ReconciliationCommitter:
    """Push locally modified candidate files whose contents differ from the remote branch."""

    def __init__(
        self,
        client: PlatformClient,
        *,
        config: ActionConfig,
        logger: ActionLogger,
        runner: CommandRunner = run_command,
    ) -> None:
        self._client = client
        self._config = config
        self._logger = logger
        self._runner = runner

    def locally_modified(self, candidates: Iterable[str]) -> list[str]:
        """Return candidates reported by ``git diff --name-only``, in diff order.

        Names are read NUL-separated and unquoted so non-ASCII paths compare
        equal to the pull request filenames.
        """

        wanted = set(candidates)
        completed = self._runner(
            list(GIT_CHANGED_NAMES),
            cwd=self._config.directory,
            check=True,
            capture_output=True,
        )
        names = (completed.stdout or "").split("\0")
        return [name for name in names if name and name in wanted]

    def reconcile(self, candidates: Sequence[str], commit_message_prefix: str) -> list[str]:
        """Write rewritten candidates to the head branch and return the paths committed.

        Files whose remote contents already match are skipped, so repeated runs
        over unchanged files perform no writes.

        Args:
            candidates: Files of the change set the tool may have rewritten.
            commit_message_prefix: Prefix of each ``"{prefix} {path}"`` commit message.

        Returns:
            list[str]: Paths that were committed.

        Raises:
            ConfigError: If a write is needed but the head branch is unknown.
        """

        committed: list[str] = []
        for name in self.locally_modified(candidates):
            contents = (self._config.directory / name).read_bytes()
            branch = self._config.require_head_ref()
            remote = self._client.get_file_contents(name, ref=branch)
            if remote is None:
                self._logger.warn(f"{name} does not exist on {branch}; leaving it unreconciled")
                continue
            if remote.raw() == contents:
                self._logger.debug(f"{name} already up to date on {branch}")
                continue
            try:
                self._client.create_or_update_file(
                    name,
                    branch=branch,
                    content=contents,
                    message=f"{commit_message_prefix} {name}",
                    sha=remote.sha,
                )
            except RemoteWriteConflict as exc:
                self._logger.warn(f"{name} changed on {branch} while fixing ({exc}); next run will retry")
                continue
            self._logger.ok(f"committed {name} to {branch}")
            committed.append(name)
        return committed


__all__ = ["GIT_CHANGED_NAMES", "ReconciliationCommitter"]
