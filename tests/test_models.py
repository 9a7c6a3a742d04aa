# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the check-run lifecycle and diagnostic model."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from prqa.errors import CheckRunStateError
from prqa.models import CheckConclusion, CheckRun, CheckStatus, Diagnostic
from prqa.severity import Severity


def test_check_run_moves_from_created_to_completed() -> None:
    run = CheckRun(id=1, name="ESLint")
    assert run.phase == "created"

    run.transition(CheckStatus.IN_PROGRESS)
    assert run.phase == "reporting"
    assert run.conclusion is None

    run.transition(CheckStatus.COMPLETED, CheckConclusion.FAILURE)
    assert run.phase == "completed"
    assert run.completed
    assert run.conclusion is CheckConclusion.FAILURE
    assert run.updates == 2


def test_check_run_cannot_complete_twice() -> None:
    run = CheckRun(id=1, name="ESLint")
    run.transition(CheckStatus.COMPLETED, CheckConclusion.SUCCESS)

    with pytest.raises(CheckRunStateError):
        run.transition(CheckStatus.COMPLETED, CheckConclusion.FAILURE)
    with pytest.raises(CheckRunStateError):
        run.transition(CheckStatus.IN_PROGRESS)
    assert run.conclusion is CheckConclusion.SUCCESS


def test_check_run_conclusion_only_on_completion() -> None:
    run = CheckRun(id=3, name="Prettier")

    with pytest.raises(CheckRunStateError):
        run.transition(CheckStatus.IN_PROGRESS, CheckConclusion.SUCCESS)
    with pytest.raises(CheckRunStateError):
        run.transition(CheckStatus.COMPLETED)
    assert run.phase == "created"


def test_diagnostic_rejects_zero_positions_and_inverted_ranges() -> None:
    base = {
        "file_path": "src/a.ts",
        "start_line": 3,
        "start_column": 1,
        "end_line": 3,
        "end_column": 4,
        "severity": Severity.ERROR,
        "rule_id": "no-unused-vars",
        "message": "'x' is defined but never used.",
    }
    assert Diagnostic(**base).is_error

    with pytest.raises(ValidationError):
        Diagnostic(**{**base, "start_line": 0})
    with pytest.raises(ValidationError):
        Diagnostic(**{**base, "end_line": 2})


def test_check_transition_validates_without_recording() -> None:
    run = CheckRun(id=4, name="ESLint")

    run.check_transition(CheckStatus.COMPLETED, CheckConclusion.FAILURE)
    assert run.phase == "created"
    assert run.conclusion is None
    with pytest.raises(CheckRunStateError):
        run.check_transition(CheckStatus.COMPLETED)
