# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Typer entry point used by the GitHub Action and local invocations."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Annotated

import typer
from rich.logging import RichHandler

from .config import ActionConfig, ConfigError
from .github import GitHubClient
from .logging import build_action_logger, fail, section
from .models import CheckConclusion
from .orchestrator import Orchestrator

CONFIG_ERROR_EXIT_CODE = 2

app = typer.Typer(
    name="prqa",
    help="Lint and format pull request changes, reporting results as GitHub check runs.",
    add_completion=False,
    no_args_is_help=True,
)


@app.callback()
def _root() -> None:
    """Pull request lint/format check runner."""


@app.command("run")
def run(
    directory: Annotated[
        Path | None,
        typer.Option("--directory", "-C", help="Project directory containing the lockfile and sources."),
    ] = None,
    token: Annotated[str | None, typer.Option("--token", help="GitHub token; defaults to INPUT_TOKEN/GITHUB_TOKEN.")] = None,
    fix: Annotated[
        bool | None,
        typer.Option("--fix/--no-fix", help="Apply fixes and commit them; defaults to on for pull requests."),
    ] = None,
    debug: Annotated[bool, typer.Option("--debug", help="Print debug output.")] = False,
    emoji: Annotated[bool, typer.Option("--emoji/--no-emoji", help="Prefix messages with emoji.")] = True,
    no_color: Annotated[bool, typer.Option("--no-color", help="Disable coloured output.")] = False,
) -> None:
    """Run the ESLint and Prettier stages against the current pull request."""

    env = os.environ
    debug = debug or env.get("RUNNER_DEBUG") == "1"
    logger = build_action_logger(emoji=emoji, debug=debug, no_color=no_color)
    if debug:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=logger.console, show_time=False)],
        )

    try:
        config = ActionConfig.from_environment(env, directory=directory, token=token, fix=fix)
        section(f"prqa {config.owner}/{config.repo}@{config.sha[:7]}", use_color=not no_color)
        summary = Orchestrator(config, client=GitHubClient.from_config(config), logger=logger).run()
    except ConfigError as exc:
        fail(str(exc), use_emoji=emoji, use_color=not no_color)
        raise typer.Exit(code=CONFIG_ERROR_EXIT_CODE) from exc

    for stage in summary.stages:
        conclusion = stage.conclusion.value if stage.conclusion else "not reported"
        message = f"{stage.name}: {conclusion} ({stage.diagnostics} diagnostics, {len(stage.committed)} commits)"
        if stage.conclusion is CheckConclusion.SUCCESS:
            logger.ok(message)
        else:
            logger.warn(message)


def main() -> None:
    """Invoke the Typer application."""

    app()


__all__ = ["app", "main"]
