# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Explicit run configuration built once from the GitHub Actions environment."""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

DEFAULT_API_URL: Final[str] = "https://api.github.com"
DEFAULT_LINT_EXTENSIONS: Final[tuple[str, ...]] = (".ts", ".tsx", ".vue")


class ConfigError(RuntimeError):
    """Raised when required configuration is missing or malformed."""


class ActionConfig(BaseModel):
    """Immutable settings shared by every component of a run."""

    model_config = ConfigDict(frozen=True)

    token: str = Field(min_length=1)
    owner: str
    repo: str
    sha: str
    pull_request: int | None = None
    head_ref: str | None = None
    directory: Path
    workspace: Path
    fix: bool = False
    api_url: str = DEFAULT_API_URL
    request_timeout: float = 30.0
    linter: str = "eslint"
    formatter: str = "prettier"
    lint_check_name: str = "ESLint"
    format_check_name: str = "Prettier"
    lint_commit_prefix: str = "style(auto): eslint fix"
    format_commit_prefix: str = "style(auto): prettier fix"
    lint_extensions: tuple[str, ...] = DEFAULT_LINT_EXTENSIONS
    batch_size: int = Field(default=50, ge=1, le=50)
    page_size: int = Field(default=100, ge=1, le=100)

    @field_validator("lint_extensions", mode="before")
    @classmethod
    def _normalise_extensions(cls, value: object) -> object:
        if isinstance(value, str):
            value = value.split(",")
        if isinstance(value, (list, tuple)):
            cleaned = (str(item).strip().lower() for item in value)
            return tuple(item if item.startswith(".") else f".{item}" for item in cleaned if item)
        return value

    @field_validator("api_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    def require_head_ref(self) -> str:
        """Return the pull request head branch or raise :class:`ConfigError`."""

        if not self.head_ref:
            raise ConfigError("GITHUB_HEAD_REF is required to commit fixes back to the pull request branch")
        return self.head_ref

    @classmethod
    def from_environment(
        cls,
        env: Mapping[str, str],
        **overrides: Any,
    ) -> ActionConfig:
        """Build the configuration from a GitHub Actions style environment.

        Args:
            env: Environment mapping, normally ``os.environ``.
            **overrides: Field values taking precedence over the environment.
                ``None`` values are ignored.

        Returns:
            ActionConfig: Validated configuration.

        Raises:
            ConfigError: If a required variable is missing or a value is invalid.
        """

        explicit = {key: value for key, value in overrides.items() if value is not None}
        repository = env.get("GITHUB_REPOSITORY", "")
        owner, _, repo = repository.partition("/")
        if not (owner and repo) and not {"owner", "repo"} <= explicit.keys():
            raise ConfigError("GITHUB_REPOSITORY must be set to '<owner>/<repo>'")
        token = env.get("INPUT_TOKEN") or env.get("GITHUB_TOKEN")
        if not token and "token" not in explicit:
            raise ConfigError("a GitHub token is required (input 'token' or GITHUB_TOKEN)")
        sha = env.get("GITHUB_SHA")
        if not sha and "sha" not in explicit:
            raise ConfigError("GITHUB_SHA must be set")

        directory = Path(explicit.pop("directory", None) or Path.cwd()).resolve()
        workspace_raw = env.get("GITHUB_WORKSPACE")
        pull_request = _pull_request_number(env.get("GITHUB_EVENT_PATH"))
        values: dict[str, Any] = {
            "token": token,
            "owner": owner,
            "repo": repo,
            "sha": sha,
            "pull_request": pull_request,
            "head_ref": env.get("GITHUB_HEAD_REF") or None,
            "directory": directory,
            "workspace": Path(workspace_raw).resolve() if workspace_raw else directory,
            "fix": pull_request is not None,
        }
        if env.get("GITHUB_API_URL"):
            values["api_url"] = env["GITHUB_API_URL"]
        if env.get("INPUT_EXTENSIONS"):
            values["lint_extensions"] = env["INPUT_EXTENSIONS"]
        values.update(explicit)
        try:
            return cls(**values)
        except ValidationError as exc:
            raise ConfigError(f"invalid configuration: {exc}") from exc


def _pull_request_number(event_path: str | None) -> int | None:
    """Return ``pull_request.number`` from the workflow event payload, if any."""

    if not event_path:
        return None
    path = Path(event_path)
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return None
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"unable to read event payload {path}: {exc}") from exc
    pull_request = payload.get("pull_request") if isinstance(payload, dict) else None
    if not isinstance(pull_request, dict):
        return None
    number = pull_request.get("number")
    return number if isinstance(number, int) else None


__all__ = ["DEFAULT_API_URL", "DEFAULT_LINT_EXTENSIONS", "ActionConfig", "ConfigError"]
