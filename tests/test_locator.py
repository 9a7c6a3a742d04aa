# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for lockfile-driven tool resolution."""

from __future__ import annotations

from pathlib import Path

import pytest

from prqa.locator import PackageManager, ToolLocator


def _is_version_probe(args: list[str]) -> bool:
    return args[1:] == ["--version"]


@pytest.mark.parametrize(
    ("lockfile", "manager"),
    [
        ("pnpm-lock.yaml", PackageManager.PNPM),
        ("yarn.lock", PackageManager.YARN),
        (None, PackageManager.NPM),
    ],
)
def test_lockfile_selects_package_manager(tmp_path: Path, runner, lockfile, manager) -> None:
    if lockfile:
        (tmp_path / lockfile).write_text("", encoding="utf-8")
    bin_dir = tmp_path / "node_modules" / ".bin"
    runner.on_output(lambda args: args == [manager.value, "bin"], stdout=f"{bin_dir}\n")
    runner.on_output(_is_version_probe, stdout="v9.0.0\n")

    resolved = ToolLocator(runner=runner).resolve(tmp_path, "eslint")

    assert resolved == (bin_dir / "eslint").resolve()
    assert runner.calls[0] == [manager.value, "bin"]
    assert runner.calls[1] == [str((bin_dir / "eslint").resolve()), "--version"]


def test_pnpm_lock_wins_over_yarn_lock(tmp_path: Path) -> None:
    (tmp_path / "pnpm-lock.yaml").write_text("", encoding="utf-8")
    (tmp_path / "yarn.lock").write_text("", encoding="utf-8")

    assert ToolLocator().detect_manager(tmp_path).kind is PackageManager.PNPM


def test_failed_version_probe_yields_none(tmp_path: Path, runner) -> None:
    runner.on_output(lambda args: args == ["npm", "bin"], stdout=f"{tmp_path}/node_modules/.bin\n")
    runner.on_output(_is_version_probe, returncode=127)

    assert ToolLocator(runner=runner).resolve(tmp_path, "eslint") is None


def test_missing_binary_yields_none(tmp_path: Path, runner) -> None:
    runner.on_output(lambda args: args == ["npm", "bin"], stdout=f"{tmp_path}/node_modules/.bin\n")

    assert ToolLocator(runner=runner).resolve(tmp_path, "prettier") is None


def test_unsupported_bin_command_falls_back_to_local_bin(tmp_path: Path, runner) -> None:
    runner.on_output(lambda args: args == ["npm", "bin"], returncode=1)
    runner.on_output(_is_version_probe, stdout="3.3.3\n")

    resolved = ToolLocator(runner=runner).resolve(tmp_path, "prettier")

    assert resolved == (tmp_path / "node_modules" / ".bin" / "prettier").resolve()
