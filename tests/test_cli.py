# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the ``prqa`` command line."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from prqa import cli
from prqa.cli import app
from prqa.models import CheckConclusion
from prqa.orchestrator import RunSummary, StageResult

_ENV_KEYS = (
    "INPUT_TOKEN",
    "GITHUB_TOKEN",
    "GITHUB_REPOSITORY",
    "GITHUB_SHA",
    "GITHUB_HEAD_REF",
    "GITHUB_EVENT_PATH",
    "GITHUB_WORKSPACE",
    "GITHUB_API_URL",
    "INPUT_EXTENSIONS",
    "RUNNER_DEBUG",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch) -> None:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_missing_configuration_exits_with_code_2(tmp_path: Path) -> None:
    result = CliRunner().invoke(app, ["run", "--directory", str(tmp_path), "--no-emoji", "--no-color"])

    assert result.exit_code == 2
    assert "GITHUB_REPOSITORY" in result.stdout


def test_run_builds_config_and_reports_stages(tmp_path: Path, monkeypatch) -> None:
    event = tmp_path / "event.json"
    event.write_text(json.dumps({"pull_request": {"number": 5}}), encoding="utf-8")
    monkeypatch.setenv("GITHUB_REPOSITORY", "acme/web")
    monkeypatch.setenv("GITHUB_SHA", "0123456789")
    monkeypatch.setenv("GITHUB_EVENT_PATH", str(event))
    seen: dict[str, object] = {}

    class FakeOrchestrator:
        def __init__(self, config, *, client, logger) -> None:
            seen["config"] = config
            seen["client"] = client

        def run(self) -> RunSummary:
            return RunSummary(
                stages=[
                    StageResult(name="ESLint", conclusion=CheckConclusion.FAILURE, diagnostics=3),
                    StageResult(name="Prettier", conclusion=CheckConclusion.SUCCESS, committed=("a.ts",)),
                ],
            )

    monkeypatch.setattr(cli, "Orchestrator", FakeOrchestrator)

    result = CliRunner().invoke(
        app,
        ["run", "--directory", str(tmp_path), "--token", "cli-token", "--no-fix", "--no-emoji", "--no-color"],
    )

    assert result.exit_code == 0, result.stdout
    config = seen["config"]
    assert config.token == "cli-token"
    assert config.pull_request == 5
    assert config.fix is False
    assert "ESLint: failure (3 diagnostics, 0 commits)" in result.stdout
    assert "Prettier: success (0 diagnostics, 1 commits)" in result.stdout
