# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Core data models shared across the prqa package."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .errors import CheckRunStateError
from .severity import Severity


class FileStatus(str, Enum):
    """Status GitHub attaches to each file of a pull request."""

    ADDED = "added"
    MODIFIED = "modified"
    REMOVED = "removed"
    RENAMED = "renamed"
    COPIED = "copied"
    CHANGED = "changed"
    UNCHANGED = "unchanged"


class ChangedFile(BaseModel):
    """A file touched by the pull request under review."""

    model_config = ConfigDict(frozen=True)

    path: str
    status: FileStatus


class Diagnostic(BaseModel):
    """Normalized lint diagnostic reported as a check-run annotation.

    ``file_path`` is relative to the workspace root. Positions are 1-based.
    """

    model_config = ConfigDict(frozen=True)

    file_path: str
    start_line: int = Field(ge=1)
    start_column: int = Field(ge=1)
    end_line: int = Field(ge=1)
    end_column: int = Field(ge=1)
    severity: Severity
    rule_id: str
    message: str
    auto_fixable: bool = False

    @model_validator(mode="after")
    def _check_range(self) -> Diagnostic:
        if self.end_line < self.start_line:
            raise ValueError("end_line must not precede start_line")
        return self

    @property
    def is_error(self) -> bool:
        """Return ``True`` when the diagnostic counts towards a failing conclusion."""

        return self.severity is Severity.ERROR


class CheckStatus(str, Enum):
    """Remote status of a check run."""

    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class CheckConclusion(str, Enum):
    """Terminal conclusion of a completed check run."""

    SUCCESS = "success"
    FAILURE = "failure"


class CheckRun(BaseModel):
    """Local mirror of one remote check run and its lifecycle.

    The run moves ``created -> reporting -> completed``. All moves go through
    :meth:`transition`, which rejects anything after completion.
    """

    model_config = ConfigDict(validate_assignment=True)

    id: int
    name: str
    status: CheckStatus = CheckStatus.IN_PROGRESS
    conclusion: CheckConclusion | None = None
    updates: int = 0

    @property
    def completed(self) -> bool:
        """Return ``True`` once the run reached its terminal state."""

        return self.status is CheckStatus.COMPLETED

    @property
    def phase(self) -> str:
        """Return ``created``, ``reporting`` or ``completed``."""

        if self.completed:
            return "completed"
        return "reporting" if self.updates else "created"

    def check_transition(self, status: CheckStatus, conclusion: CheckConclusion | None = None) -> None:
        """Validate a move to ``status`` without recording it.

        Args:
            status: Status the next update will send.
            conclusion: Required when ``status`` is completed, forbidden otherwise.

        Raises:
            CheckRunStateError: If the run is already completed or the
                conclusion does not match the requested status.
        """

        if self.completed:
            raise CheckRunStateError(f"check run '{self.name}' ({self.id}) is already completed")
        if status is CheckStatus.COMPLETED and conclusion is None:
            raise CheckRunStateError("completing a check run requires a conclusion")
        if status is not CheckStatus.COMPLETED and conclusion is not None:
            raise CheckRunStateError("a conclusion may only accompany completion")

    def transition(self, status: CheckStatus, conclusion: CheckConclusion | None = None) -> None:
        """Record one accepted remote update moving the run to ``status``.

        Raises:
            CheckRunStateError: As :meth:`check_transition`.
        """

        self.check_transition(status, conclusion)
        if conclusion is not None:
            self.conclusion = conclusion
        self.status = status
        self.updates += 1


__all__ = [
    "ChangedFile",
    "CheckConclusion",
    "CheckRun",
    "CheckStatus",
    "Diagnostic",
    "FileStatus",
]
