# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Minimal blocking client for the GitHub REST endpoints the action consumes."""

from __future__ import annotations

import base64
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Final, Protocol
from urllib.parse import quote

import requests

from .config import ActionConfig
from .errors import GitHubAPIError, RemoteWriteConflict

LOGGER = logging.getLogger(__name__)

_ACCEPT: Final[str] = "application/vnd.github+json"
_API_VERSION: Final[str] = "2022-11-28"
_NOT_FOUND: Final[int] = 404
_CONFLICT_STATUSES: Final[frozenset[int]] = frozenset({409, 422})


@dataclass(frozen=True, slots=True)
class RemoteFile:
    """File contents as stored on a remote branch."""

    path: str
    content: str
    sha: str

    def raw(self) -> bytes:
        """Return the base64 ``content`` as stored bytes, line endings untouched."""

        return base64.b64decode(self.content)


class PlatformClient(Protocol):
    """Operations the pipeline needs from the review platform."""

    def list_pull_request_files(self, pull_number: int, *, page: int, per_page: int) -> list[dict[str, Any]]: ...

    def create_check_run(self, name: str, *, head_sha: str, status: str) -> int: ...

    def update_check_run(
        self,
        check_run_id: int,
        *,
        head_sha: str,
        status: str,
        output: Mapping[str, Any],
        conclusion: str | None = None,
    ) -> None: ...

    def get_file_contents(self, path: str, *, ref: str) -> RemoteFile | None: ...

    def create_or_update_file(
        self,
        path: str,
        *,
        branch: str,
        content: bytes,
        message: str,
        sha: str,
    ) -> None: ...


class GitHubClient:
    """Thin wrapper over :mod:`requests` bound to one repository."""

    def __init__(
        self,
        *,
        token: str,
        owner: str,
        repo: str,
        api_url: str = "https://api.github.com",
        timeout: float = 30.0,
        session: requests.Session | None = None,
    ) -> None:
        self._base = f"{api_url.rstrip('/')}/repos/{owner}/{repo}"
        self._timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "Authorization": f"Bearer {token}",
                "Accept": _ACCEPT,
                "X-GitHub-Api-Version": _API_VERSION,
            },
        )

    @classmethod
    def from_config(cls, config: ActionConfig, *, session: requests.Session | None = None) -> GitHubClient:
        """Create a client for the repository named in ``config``."""

        return cls(
            token=config.token,
            owner=config.owner,
            repo=config.repo,
            api_url=config.api_url,
            timeout=config.request_timeout,
            session=session,
        )

    def list_pull_request_files(self, pull_number: int, *, page: int, per_page: int) -> list[dict[str, Any]]:
        """Return one page of the files changed by pull request ``pull_number``."""

        response = self._request(
            "GET",
            f"/pulls/{pull_number}/files",
            params={"page": page, "per_page": per_page},
        )
        payload = response.json()
        if not isinstance(payload, list):
            raise GitHubAPIError(response.status_code, "expected a list of pull request files")
        return payload

    def create_check_run(self, name: str, *, head_sha: str, status: str) -> int:
        """Create a check run on ``head_sha`` and return its id."""

        response = self._request("POST", "/check-runs", json={"name": name, "head_sha": head_sha, "status": status})
        return int(response.json()["id"])

    def update_check_run(
        self,
        check_run_id: int,
        *,
        head_sha: str,
        status: str,
        output: Mapping[str, Any],
        conclusion: str | None = None,
    ) -> None:
        """Patch check run ``check_run_id`` with a new status and output."""

        body: dict[str, Any] = {"head_sha": head_sha, "status": status, "output": dict(output)}
        if conclusion is not None:
            body["conclusion"] = conclusion
        self._request("PATCH", f"/check-runs/{check_run_id}", json=body)

    def get_file_contents(self, path: str, *, ref: str) -> RemoteFile | None:
        """Return ``path`` as stored on ``ref`` or ``None`` when it does not exist there."""

        try:
            response = self._request("GET", f"/contents/{quote(path)}", params={"ref": ref})
        except GitHubAPIError as exc:
            if exc.status == _NOT_FOUND:
                return None
            raise
        payload = response.json()
        if not isinstance(payload, dict) or "sha" not in payload:
            raise GitHubAPIError(response.status_code, f"{path} is not a file on {ref}")
        content = str(payload.get("content", "")).replace("\n", "")
        return RemoteFile(path=path, content=content, sha=str(payload["sha"]))

    def create_or_update_file(
        self,
        path: str,
        *,
        branch: str,
        content: bytes,
        message: str,
        sha: str,
    ) -> None:
        """Write ``content`` to ``path`` on ``branch`` as a single commit.

        Raises:
            RemoteWriteConflict: If ``sha`` no longer matches the remote blob.
        """

        body = {
            "message": message,
            "content": base64.b64encode(content).decode("ascii"),
            "sha": sha,
            "branch": branch,
        }
        try:
            self._request("PUT", f"/contents/{quote(path)}", json=body)
        except GitHubAPIError as exc:
            if exc.status in _CONFLICT_STATUSES:
                raise RemoteWriteConflict(path, exc.status, exc.message) from exc
            raise

    def _request(self, method: str, endpoint: str, **kwargs: Any) -> requests.Response:
        url = f"{self._base}{endpoint}"
        LOGGER.debug("%s %s", method, url)
        try:
            response = self._session.request(method, url, timeout=self._timeout, **kwargs)
        except requests.RequestException as exc:
            raise GitHubAPIError(0, f"{method} {url} failed: {exc}") from exc
        if not response.ok:
            raise GitHubAPIError(response.status_code, _error_message(response))
        return response


def _error_message(response: requests.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text or response.reason or ""
    if isinstance(payload, dict) and payload.get("message"):
        return str(payload["message"])
    return response.text


__all__ = ["GitHubClient", "PlatformClient", "RemoteFile"]
