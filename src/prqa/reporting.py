# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Drive the lifecycle of a GitHub check run and publish diagnostics to it."""

from __future__ import annotations

import traceback
from collections.abc import Iterator, Sequence
from typing import Any, Final, TypeVar

from .github import PlatformClient
from .logging import ActionLogger
from .models import CheckConclusion, CheckRun, CheckStatus, Diagnostic
from .severity import severity_to_annotation_level

MAX_ANNOTATIONS_PER_UPDATE: Final[int] = 50
MAX_SUMMARY_LENGTH: Final[int] = 65535
TRUNCATION_MARKER: Final[str] = "\n\n... (truncated)"

ItemT = TypeVar("ItemT")


def chunked(items: Sequence[ItemT], size: int = MAX_ANNOTATIONS_PER_UPDATE) -> Iterator[list[ItemT]]:
    """Yield disjoint, order-preserving slices of ``items`` holding at most ``size`` entries."""

    if size < 1:
        raise ValueError("chunk size must be positive")
    for start in range(0, len(items), size):
        yield list(items[start : start + size])


def truncate_summary(text: str, limit: int = MAX_SUMMARY_LENGTH) -> str:
    """Clip ``text`` to the longest check run summary GitHub accepts."""

    if len(text) <= limit:
        return text
    return text[: limit - len(TRUNCATION_MARKER)] + TRUNCATION_MARKER


def error_summary(errors: int) -> str:
    """Return ``"1 error found"`` or ``"N errors found"``."""

    noun = "error" if errors == 1 else "errors"
    return f"{errors} {noun} found"


def build_annotation(diagnostic: Diagnostic) -> dict[str, Any]:
    """Return the check-run annotation payload for ``diagnostic``."""

    annotation: dict[str, Any] = {
        "path": diagnostic.file_path,
        "start_line": diagnostic.start_line,
        "end_line": diagnostic.end_line,
        "annotation_level": severity_to_annotation_level(diagnostic.severity),
        "message": f"[{diagnostic.rule_id}] {diagnostic.message}",
        "title": diagnostic.rule_id,
    }
    # GitHub only accepts columns on single-line annotations.
    if diagnostic.start_line == diagnostic.end_line:
        annotation["start_column"] = diagnostic.start_column
        annotation["end_column"] = max(diagnostic.end_column, diagnostic.start_column)
    return annotation


class CheckRunReporter:
    """Create, update and conclude check runs on the configured commit.

    Args:
        client: Platform client used for the check-run endpoints.
        head_sha: Commit the check runs are attached to.
        logger: Logger for progress output.
        suppress_fixable: Drop auto-fixable diagnostics; the tool already corrected them.
        batch_size: Maximum annotations per update.
    """

    def __init__(
        self,
        client: PlatformClient,
        *,
        head_sha: str,
        logger: ActionLogger,
        suppress_fixable: bool = False,
        batch_size: int = MAX_ANNOTATIONS_PER_UPDATE,
    ) -> None:
        self._client = client
        self._head_sha = head_sha
        self._logger = logger
        self._suppress_fixable = suppress_fixable
        self._batch_size = min(batch_size, MAX_ANNOTATIONS_PER_UPDATE)

    def start(self, name: str) -> CheckRun:
        """Create an in-progress check run called ``name``."""

        run_id = self._client.create_check_run(name, head_sha=self._head_sha, status=CheckStatus.IN_PROGRESS.value)
        self._logger.debug(f"started check run {name} id={run_id}")
        return CheckRun(id=run_id, name=name)

    def report(self, run: CheckRun, diagnostics: Sequence[Diagnostic]) -> CheckConclusion:
        """Publish ``diagnostics`` in batches and complete ``run``.

        Every update carries the same summary; only the last one marks the run
        completed and carries the conclusion. An empty sequence still sends a
        single completing update.

        Returns:
            CheckConclusion: Conclusion the run was completed with.
        """

        reported = [item for item in diagnostics if not (self._suppress_fixable and item.auto_fixable)]
        errors = sum(1 for item in reported if item.is_error)
        conclusion = CheckConclusion.FAILURE if errors else CheckConclusion.SUCCESS
        summary = error_summary(errors)
        batches = list(chunked(reported, self._batch_size)) or [[]]
        for index, batch in enumerate(batches, start=1):
            last = index == len(batches)
            status = CheckStatus.COMPLETED if last else CheckStatus.IN_PROGRESS
            run.check_transition(status, conclusion if last else None)
            self._client.update_check_run(
                run.id,
                head_sha=self._head_sha,
                status=status.value,
                conclusion=conclusion.value if last else None,
                output={
                    "title": run.name,
                    "summary": summary,
                    "annotations": [build_annotation(item) for item in batch],
                },
            )
            run.transition(status, conclusion if last else None)
            self._logger.debug(f"{run.name}: sent batch {index}/{len(batches)} ({len(batch)} annotations)")
        return conclusion

    def fail(self, run: CheckRun, error: BaseException) -> CheckConclusion:
        """Complete ``run`` as failed with ``error``'s message and trace as summary."""

        trace = "".join(traceback.format_exception(error)).rstrip()
        run.check_transition(CheckStatus.COMPLETED, CheckConclusion.FAILURE)
        self._client.update_check_run(
            run.id,
            head_sha=self._head_sha,
            status=CheckStatus.COMPLETED.value,
            conclusion=CheckConclusion.FAILURE.value,
            output={"title": run.name, "summary": truncate_summary(f"{error} {trace}")},
        )
        run.transition(CheckStatus.COMPLETED, CheckConclusion.FAILURE)
        return CheckConclusion.FAILURE


__all__ = [
    "MAX_ANNOTATIONS_PER_UPDATE",
    "MAX_SUMMARY_LENGTH",
    "CheckRunReporter",
    "build_annotation",
    "chunked",
    "error_summary",
    "truncate_summary",
]
