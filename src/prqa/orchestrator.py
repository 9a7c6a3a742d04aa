# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Sequence change discovery, tool stages, reporting and reconciliation."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from .changes import ChangeSetProvider
from .config import ActionConfig
from .errors import GitHubAPIError, ToolUnavailableError
from .github import PlatformClient
from .locator import ToolLocator
from .logging import ActionLogger
from .models import ChangedFile, CheckConclusion
from .process_utils import CommandRunner, SubprocessExecutionError, run_command
from .reconcile import ReconciliationCommitter
from .reporting import CheckRunReporter
from .translator import (
    DiagnosticTranslator,
    FormatterRunner,
    TranslationError,
    TranslationResult,
    filter_by_extension,
)


class StageExecutor(Protocol):
    """Callable shape shared by the linter translator and the formatter runner."""

    def run(self, tool_path: Path, files: Sequence[str]) -> TranslationResult: ...


@dataclass(frozen=True, slots=True)
class StageResult:
    """Outcome of one tool stage."""

    name: str
    conclusion: CheckConclusion | None
    diagnostics: int = 0
    committed: tuple[str, ...] = ()


@dataclass(slots=True)
class RunSummary:
    """Aggregate outcome of one invocation."""

    files: list[ChangedFile] = field(default_factory=list)
    stages: list[StageResult] = field(default_factory=list)

    @property
    def failed(self) -> bool:
        """Return ``True`` when any stage did not conclude successfully."""

        return any(stage.conclusion is not CheckConclusion.SUCCESS for stage in self.stages)


class Orchestrator:
    """Run the linter stage then the formatter stage over the pull request's files."""

    def __init__(
        self,
        config: ActionConfig,
        *,
        client: PlatformClient,
        logger: ActionLogger,
        runner: CommandRunner = run_command,
        locator: ToolLocator | None = None,
    ) -> None:
        self._config = config
        self._logger = logger
        self._changes = ChangeSetProvider(client, logger=logger, page_size=config.page_size)
        self._locator = locator or ToolLocator(runner=runner, logger=logger)
        self._reporter = CheckRunReporter(
            client,
            head_sha=config.sha,
            logger=logger,
            suppress_fixable=config.fix,
            batch_size=config.batch_size,
        )
        self._translator = DiagnosticTranslator(
            directory=config.directory,
            workspace=config.workspace,
            fix=config.fix,
            logger=logger,
            runner=runner,
        )
        self._formatter = FormatterRunner(directory=config.directory, fix=config.fix, logger=logger, runner=runner)
        self._committer = ReconciliationCommitter(client, config=config, logger=logger, runner=runner)

    def run(self) -> RunSummary:
        """Execute both stages once over the change set.

        Returns:
            RunSummary: Changed files and per-stage outcomes. Empty when the run
            was not triggered by a pull request or nothing changed.
        """

        files = self._changes.list_changed_files(self._config.pull_request)
        summary = RunSummary(files=files)
        if not files:
            return summary
        paths = [entry.path for entry in files]
        summary.stages.append(
            self._run_stage(
                name=self._config.lint_check_name,
                tool=self._config.linter,
                executor=self._translator,
                files=filter_by_extension(paths, self._config.lint_extensions),
                candidates=paths,
                commit_prefix=self._config.lint_commit_prefix,
            ),
        )
        summary.stages.append(
            self._run_stage(
                name=self._config.format_check_name,
                tool=self._config.formatter,
                executor=self._formatter,
                files=paths,
                candidates=paths,
                commit_prefix=self._config.format_commit_prefix,
            ),
        )
        return summary

    def _run_stage(
        self,
        *,
        name: str,
        tool: str,
        executor: StageExecutor,
        files: Sequence[str],
        candidates: Sequence[str],
        commit_prefix: str,
    ) -> StageResult:
        self._logger.info(f"{name}: checking {len(files)} file(s)")
        tool_path = self._locator.resolve(self._config.directory, tool)
        diagnostics = 0
        conclusion: CheckConclusion | None = None
        try:
            run = self._reporter.start(name)
            if tool_path is None:
                missing = ToolUnavailableError(tool, str(self._config.directory))
                self._logger.fail(str(missing))
                conclusion = self._reporter.fail(run, missing)
            else:
                result = executor.run(tool_path, files)
                if isinstance(result, TranslationError):
                    conclusion = self._reporter.fail(run, result.error)
                else:
                    diagnostics = len(result.diagnostics)
                    conclusion = self._reporter.report(run, result.diagnostics)
        except GitHubAPIError as exc:
            self._logger.fail(f"{name}: unable to publish check run: {exc}")

        committed: list[str] = []
        if self._config.fix and tool_path is not None:
            try:
                committed = self._committer.reconcile(candidates, commit_prefix)
            except (GitHubAPIError, SubprocessExecutionError, OSError, UnicodeDecodeError) as exc:
                self._logger.fail(f"{name}: unable to commit fixes: {exc}")
        return StageResult(name=name, conclusion=conclusion, diagnostics=diagnostics, committed=tuple(committed))


__all__ = ["Orchestrator", "RunSummary", "StageResult"]
