# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures: an in-memory GitHub, a scripted command runner and a quiet logger."""

from __future__ import annotations

import base64
import io
import subprocess
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

import pytest
from rich.console import Console

from prqa.config import ActionConfig
from prqa.errors import RemoteWriteConflict
from prqa.github import RemoteFile
from prqa.logging import ActionLogger
from prqa.process_utils import SubprocessExecutionError

Handler = Callable[[list[str], Path | None], "subprocess.CompletedProcess[str]"]


class FakeGitHub:
    """In-memory stand-in for :class:`prqa.github.GitHubClient`."""

    def __init__(self) -> None:
        self.pages: dict[int, list[dict[str, Any]]] = {}
        self.remote: dict[str, tuple[str, str]] = {}
        self.conflicts: set[str] = set()
        self.list_calls: list[tuple[int, int, int]] = []
        self.created: list[dict[str, Any]] = []
        self.updates: list[dict[str, Any]] = []
        self.writes: list[dict[str, Any]] = []

    def list_pull_request_files(self, pull_number: int, *, page: int, per_page: int) -> list[dict[str, Any]]:
        self.list_calls.append((pull_number, page, per_page))
        return list(self.pages.get(page, []))

    def create_check_run(self, name: str, *, head_sha: str, status: str) -> int:
        self.created.append({"name": name, "head_sha": head_sha, "status": status})
        return len(self.created)

    def update_check_run(
        self,
        check_run_id: int,
        *,
        head_sha: str,
        status: str,
        output: dict[str, Any],
        conclusion: str | None = None,
    ) -> None:
        self.updates.append(
            {
                "id": check_run_id,
                "head_sha": head_sha,
                "status": status,
                "conclusion": conclusion,
                "output": output,
            },
        )

    def updates_for(self, check_run_id: int) -> list[dict[str, Any]]:
        return [update for update in self.updates if update["id"] == check_run_id]

    def get_file_contents(self, path: str, *, ref: str) -> RemoteFile | None:
        if path not in self.remote:
            return None
        text, sha = self.remote[path]
        encoded = base64.b64encode(text.encode("utf-8")).decode("ascii")
        return RemoteFile(path=path, content=encoded, sha=sha)

    def create_or_update_file(self, path: str, *, branch: str, content: bytes, message: str, sha: str) -> None:
        if path in self.conflicts:
            raise RemoteWriteConflict(path, 409, f"{path} does not match {sha}")
        self.writes.append({"path": path, "branch": branch, "content": content, "message": message, "sha": sha})
        self.remote[path] = (content.decode("utf-8"), f"sha-{len(self.writes)}")


class FakeRunner:
    """Scripted replacement for :func:`prqa.process_utils.run_command`."""

    def __init__(self) -> None:
        self.calls: list[list[str]] = []
        self._handlers: list[tuple[Callable[[list[str]], bool], Handler]] = []

    def on(self, predicate: Callable[[list[str]], bool], handler: Handler) -> None:
        self._handlers.append((predicate, handler))

    def on_output(self, predicate: Callable[[list[str]], bool], stdout: str = "", returncode: int = 0) -> None:
        self.on(predicate, lambda args, _cwd: completed(args, stdout=stdout, returncode=returncode))

    def commands(self, name: str) -> list[list[str]]:
        return [call for call in self.calls if Path(call[0]).name == name]

    def __call__(
        self,
        args: Sequence[str],
        *,
        cwd: Path | None = None,
        check: bool = True,
        capture_output: bool = False,
    ) -> subprocess.CompletedProcess[str]:
        command = list(args)
        self.calls.append(command)
        for predicate, handler in self._handlers:
            if predicate(command):
                result = handler(command, cwd)
                if check and result.returncode != 0:
                    raise SubprocessExecutionError(command, result.returncode, result.stdout, result.stderr)
                return result
        raise FileNotFoundError(f"Executable '{command[0]}' was not found on PATH")


def completed(args: Sequence[str], *, stdout: str = "", stderr: str = "", returncode: int = 0):
    return subprocess.CompletedProcess(list(args), returncode, stdout=stdout, stderr=stderr)


@pytest.fixture
def github() -> FakeGitHub:
    """Return an empty in-memory GitHub."""
    return FakeGitHub()


@pytest.fixture
def runner() -> FakeRunner:
    """Return a command runner with no scripted commands."""
    return FakeRunner()


@pytest.fixture
def make_completed() -> Callable[..., subprocess.CompletedProcess[str]]:
    """Expose the ``CompletedProcess`` builder to handler lambdas."""
    return completed


@pytest.fixture
def log_stream() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def logger(log_stream: io.StringIO) -> ActionLogger:
    """Return a debug-enabled logger writing plain text to ``log_stream``."""
    console = Console(file=log_stream, no_color=True, width=200, highlight=False)
    return ActionLogger(console=console, use_emoji=False, debug_enabled=True)


@pytest.fixture
def config(tmp_path: Path) -> ActionConfig:
    """Return a fix-mode configuration for pull request #7 rooted at ``tmp_path``."""
    return ActionConfig(
        token="test-token",
        owner="acme",
        repo="web",
        sha="0123456789abcdef",
        pull_request=7,
        head_ref="feature/login",
        directory=tmp_path,
        workspace=tmp_path,
        fix=True,
    )
