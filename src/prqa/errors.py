# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exception hierarchy shared by the check-run pipeline."""

from __future__ import annotations


class PRQAError(RuntimeError):
    """Base class for errors raised by prqa components."""


class ToolUnavailableError(PRQAError):
    """Raised when an external tool binary cannot be located or verified."""

    def __init__(self, tool: str, directory: str) -> None:
        super().__init__(f"Unable to locate {tool} in {directory}")
        self.tool = tool
        self.directory = directory


class ToolInvocationError(PRQAError):
    """Raised when an external tool fails or emits output that cannot be decoded."""

    def __init__(self, tool: str, reason: str) -> None:
        super().__init__(f"{tool}: {reason}")
        self.tool = tool
        self.reason = reason


class GitHubAPIError(PRQAError):
    """Raised when the GitHub REST API answers with a non-success status or cannot be reached (status 0)."""

    def __init__(self, status: int, message: str) -> None:
        super().__init__(f"GitHub API responded with {status}: {message}")
        self.status = status
        self.message = message


class RemoteWriteConflict(GitHubAPIError):
    """Raised when a contents write is rejected because the remote sha moved."""

    def __init__(self, path: str, status: int, message: str) -> None:
        super().__init__(status, message)
        self.path = path


class CheckRunStateError(PRQAError):
    """Raised when a check run is driven through an illegal transition."""


__all__ = [
    "CheckRunStateError",
    "GitHubAPIError",
    "PRQAError",
    "RemoteWriteConflict",
    "ToolInvocationError",
    "ToolUnavailableError",
]
