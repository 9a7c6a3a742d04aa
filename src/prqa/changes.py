# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Discover the files touched by the pull request being checked."""

from __future__ import annotations

from .github import PlatformClient
from .logging import ActionLogger
from .models import ChangedFile, FileStatus


class ChangeSetProvider:
    """Page through the pull request file list and drop removed files."""

    def __init__(self, client: PlatformClient, *, logger: ActionLogger, page_size: int = 100) -> None:
        self._client = client
        self._logger = logger
        self._page_size = page_size

    def list_changed_files(self, pull_request: int | None) -> list[ChangedFile]:
        """Return the pull request's changed files in API order, excluding removals.

        Args:
            pull_request: Pull request number, or ``None`` outside a pull request.

        Returns:
            list[ChangedFile]: Files still present on the head branch.
        """

        self._logger.debug("getChangedFiles")
        if pull_request is None:
            self._logger.warn("This is not a PR. Skipping.")
            return []

        collected: list[ChangedFile] = []
        page = 1
        while True:
            entries = self._client.list_pull_request_files(pull_request, page=page, per_page=self._page_size)
            for entry in entries:
                changed = ChangedFile(path=entry["filename"], status=FileStatus(entry["status"]))
                self._logger.debug(f"{changed.path} {changed.status.value}")
                collected.append(changed)
            if len(entries) < self._page_size:
                break
            page += 1
        return [entry for entry in collected if entry.status is not FileStatus.REMOVED]


__all__ = ["ChangeSetProvider"]
