from __future__ import annotations

import re
from typing import Any, Dict, Optional

import httpx


DEFAULT_API_BASE = "https://api.github.com"
API_VERSION = "2022-11-28"

_REPO_RE = re.compile(r"^[A-Za-z0-9_.\-]+/[A-Za-z0-9_.\-]+$")


class GitHubError(RuntimeError):
    """Base error for the GitHub client."""


def is_valid_repository(repository: Optional[str]) -> bool:
    """Return True for identifiers shaped like `owner/repo`."""
    return bool(repository) and _REPO_RE.match(repository.strip()) is not None


class GitHubClient:
    """
    Minimal GitHub REST client focused on repository dispatch events.

    Sends the bearer token plus the versioned-API `Accept` and
    `X-GitHub-Api-Version` headers on every request. Responses are returned
    as-is; callers decide which status codes count as success.
    """

    def __init__(
        self,
        token: str,
        *,
        api_base: str = DEFAULT_API_BASE,
        client: Optional[httpx.Client] = None,
    ) -> None:
        if not token:
            raise ValueError("token is required")
        self._api_base = api_base.rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.Client()
        self._headers = {
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": API_VERSION,
        }

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "GitHubClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # --------------- Public API ---------------
    def repository_dispatch(
        self,
        repository: str,
        event_type: str,
        *,
        client_payload: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        """
        Fire a `repository_dispatch` event on `repository` (`owner/repo`).

        GitHub answers 204 No Content when the event was accepted.
        Transport failures propagate as `httpx.HTTPError`.
        """
        if not is_valid_repository(repository):
            raise GitHubError(f"Invalid repository identifier: {repository!r}")
        body: Dict[str, Any] = {"event_type": event_type}
        if client_payload is not None:
            body["client_payload"] = client_payload
        return self._client.post(
            f"{self._api_base}/repos/{repository.strip()}/dispatches",
            json=body,
            headers=self._headers,
        )


__all__ = [
    "GitHubClient",
    "GitHubError",
    "is_valid_repository",
    "DEFAULT_API_BASE",
]
