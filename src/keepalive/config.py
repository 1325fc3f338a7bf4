from __future__ import annotations

import logging
import os
from typing import Mapping, Optional

from pydantic import BaseModel, Field, field_validator

from common.github import DEFAULT_API_BASE, is_valid_repository


# Environment variable names (GitHub Actions provides the GITHUB_* ones)
ENV_STORE_URL = "UPSTASH_REDIS_REST_URL"
ENV_STORE_TOKEN = "UPSTASH_REDIS_REST_TOKEN"
ENV_HEALTHCHECK_URL = "HEALTHCHECK_URL"
ENV_DISPATCH_TOKEN = "GH_DISPATCH_TOKEN"
ENV_REPOSITORY = "GITHUB_REPOSITORY"
ENV_GITHUB_API_URL = "GITHUB_API_URL"
ENV_STRICT = "KEEPALIVE_STRICT"
ENV_LOG_LEVEL = "LOG_LEVEL"

# Backward-compatible fallback for the dispatch token
FALLBACK_ENV_DISPATCH_TOKEN = "GITHUB_TOKEN"

_TRUTHY = {"1", "true", "yes", "on"}


def _getenv(environ: Mapping[str, str], name: str, default: Optional[str] = None) -> Optional[str]:
    val = environ.get(name)
    return val if val not in (None, "") else default


def parse_bool(raw: Optional[str]) -> bool:
    return bool(raw) and raw.strip().lower() in _TRUTHY


class KeepaliveConfig(BaseModel):
    """
    Inputs for a single keepalive run, resolved once at process start.

    Fields
    - store_url / store_token: Upstash REST endpoint and token. Needed by the
      heartbeat; when missing the heartbeat step fails but the run continues.
    - health_check_url: optional probe target; the probe is skipped without it.
    - dispatch_token / repository: both needed for the self-dispatch, which is
      skipped otherwise. `repository` is `owner/repo`.
    - strict: when True, a failed step makes the process exit non-zero.
    """

    store_url: Optional[str] = None
    store_token: Optional[str] = None
    health_check_url: Optional[str] = None
    dispatch_token: Optional[str] = None
    repository: Optional[str] = None
    github_api_url: str = DEFAULT_API_BASE
    strict: bool = False
    log_level: str = Field(default="INFO")

    @field_validator("store_url", "store_token", "health_check_url", "dispatch_token", "repository")
    @classmethod
    def _blank_is_absent(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        return v or None

    @field_validator("log_level", mode="before")
    @classmethod
    def _known_level(cls, v: object) -> str:
        # Unknown names would make dictConfig reject the whole logging setup
        name = str(v or "").strip().upper()
        return name if name in logging.getLevelNamesMapping() else "INFO"

    @property
    def has_store(self) -> bool:
        return bool(self.store_url and self.store_token)

    @property
    def can_dispatch(self) -> bool:
        return bool(self.dispatch_token) and is_valid_repository(self.repository)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "KeepaliveConfig":
        env = os.environ if environ is None else environ
        return cls(
            store_url=_getenv(env, ENV_STORE_URL),
            store_token=_getenv(env, ENV_STORE_TOKEN),
            health_check_url=_getenv(env, ENV_HEALTHCHECK_URL),
            dispatch_token=_getenv(env, ENV_DISPATCH_TOKEN) or _getenv(env, FALLBACK_ENV_DISPATCH_TOKEN),
            repository=_getenv(env, ENV_REPOSITORY),
            github_api_url=_getenv(env, ENV_GITHUB_API_URL, DEFAULT_API_BASE),
            strict=parse_bool(_getenv(env, ENV_STRICT)),
            log_level=_getenv(env, ENV_LOG_LEVEL, "INFO"),
        )
