from __future__ import annotations

from typing import Any, Optional

import httpx


DEFAULT_TIMEOUT = httpx.Timeout(5.0)


class UpstashError(RuntimeError):
    """Base error for the Upstash REST client."""


class UpstashApiError(UpstashError):
    """API returned an error payload, a non-2xx status, or an unexpected structure."""


class UpstashRedisClient:
    """
    Minimal Upstash Redis REST client focused on SET.

    Notes
    - Commands are sent as a JSON array to the database root URL, e.g.
      `["SET", "keepalive", "2024-09-05T12:00:00+00:00"]`.
    - Authenticates with the REST token as a bearer credential.
    - No retries: a failed call surfaces immediately as `UpstashError`.
    """

    def __init__(
        self,
        url: str,
        token: str,
        *,
        timeout: httpx.Timeout | float = DEFAULT_TIMEOUT,
        client: Optional[httpx.Client] = None,
    ) -> None:
        if not url:
            raise ValueError("url is required")
        if not token:
            raise ValueError("token is required")
        self._url = url.rstrip("/")
        self._token = token
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=timeout)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "UpstashRedisClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # --------------- Public API ---------------
    def set(self, key: str, value: str) -> Any:
        """Run `SET key value`; returns the command result (normally "OK")."""
        return self._command(["SET", key, value])

    # --------------- Internal ---------------
    def _command(self, args: list[str]) -> Any:
        headers = {"Authorization": f"Bearer {self._token}"}
        try:
            resp = self._client.post(self._url, json=args, headers=headers)
        except httpx.HTTPError as exc:
            raise UpstashError(f"Request to Upstash failed: {exc}") from exc

        try:
            data = resp.json()
        except ValueError:
            data = None

        # Upstash answers { "result": ... } or { "error": "..." }
        if isinstance(data, dict) and data.get("error"):
            raise UpstashApiError(f"{data['error']} (HTTP {resp.status_code})")
        if resp.status_code >= 300:
            raise UpstashApiError(
                f"HTTP {resp.status_code} from Upstash: {resp.text[:200]}"
            )
        if not isinstance(data, dict) or "result" not in data:
            raise UpstashApiError("Malformed response from Upstash REST API")
        return data["result"]


__all__ = [
    "UpstashRedisClient",
    "UpstashError",
    "UpstashApiError",
]
