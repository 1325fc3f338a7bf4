"""The three keepalive steps.

Each step makes at most one outbound call, never raises, and reports its
outcome as a `StepResult`. Clients are passed in so tests can swap them.
"""

from __future__ import annotations

import logging
from datetime import datetime, UTC
from typing import Any, Optional, Protocol

import httpx

from common.github import GitHubClient
from .config import KeepaliveConfig
from .models import StepResult


logger = logging.getLogger(__name__)

HEARTBEAT_KEY = "keepalive"
DISPATCH_EVENT_TYPE = "keepalive"

STEP_HEARTBEAT = "heartbeat"
STEP_PROBE = "probe"
STEP_DISPATCH = "dispatch"

# Response bodies are only kept for diagnostics
_BODY_PREVIEW = 500


class KeyValueStore(Protocol):
    def set(self, key: str, value: str) -> Any: ...


def heartbeat_timestamp(now: Optional[datetime] = None) -> str:
    """ISO-8601 UTC timestamp with millisecond precision, e.g. 2024-09-05T12:00:00.000Z."""
    now = now or datetime.now(UTC)
    if now.tzinfo is None:
        now = now.replace(tzinfo=UTC)
    return now.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def write_heartbeat(
    config: KeepaliveConfig,
    store: Optional[KeyValueStore],
    *,
    now: Optional[datetime] = None,
) -> StepResult:
    if store is None or not config.has_store:
        msg = "store endpoint or credential not configured"
        logger.error("❌ Heartbeat write failed: %s", msg)
        return StepResult.failure(STEP_HEARTBEAT, detail=msg)

    value = heartbeat_timestamp(now)
    try:
        store.set(HEARTBEAT_KEY, value)
    except Exception as exc:  # noqa: BLE001 - any store failure is recorded, not raised
        logger.error("❌ Heartbeat write failed: %s", exc)
        return StepResult.failure(STEP_HEARTBEAT, detail=str(exc))

    logger.info("✅ Heartbeat written at %s", value)
    return StepResult.success(STEP_HEARTBEAT, detail=value)


def probe_health(config: KeepaliveConfig, http: httpx.Client) -> StepResult:
    url = config.health_check_url
    if not url:
        logger.info("⏭️ Health probe skipped: no health-check URL configured")
        return StepResult.skip(STEP_PROBE, "no health-check URL configured")

    try:
        resp = http.get(url, follow_redirects=False)
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        logger.error("❌ Health probe failed for %s: %s", url, exc)
        return StepResult.failure(STEP_PROBE, detail=str(exc) or exc.__class__.__name__)

    status = resp.status_code
    if 200 <= status < 400:
        logger.info("✅ Health probe OK (%s) for %s", status, url)
        return StepResult.success(STEP_PROBE, http_status=status)

    logger.warning("❌ Health probe failed (%s) for %s", status, url)
    return StepResult.failure(STEP_PROBE, detail=f"HTTP {status}", http_status=status)


def trigger_self_dispatch(config: KeepaliveConfig, github: Optional[GitHubClient]) -> StepResult:
    if not config.dispatch_token or not config.repository:
        logger.info("⏭️ Self-dispatch skipped: token or repository not configured")
        return StepResult.skip(STEP_DISPATCH, "token or repository not configured")
    if not config.can_dispatch:
        logger.warning("⏭️ Self-dispatch skipped: invalid repository %r", config.repository)
        return StepResult.skip(STEP_DISPATCH, f"invalid repository identifier: {config.repository}")
    if github is None:
        logger.error("❌ Self-dispatch failed: no GitHub client")
        return StepResult.failure(STEP_DISPATCH, detail="no GitHub client")

    try:
        resp = github.repository_dispatch(config.repository, DISPATCH_EVENT_TYPE)
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        logger.error("❌ Self-dispatch failed: %s", exc)
        return StepResult.failure(STEP_DISPATCH, detail=str(exc) or exc.__class__.__name__)

    # GitHub documents 204 No Content as the only success answer
    if resp.status_code == 204:
        logger.info("✅ Self-dispatch sent to %s", config.repository)
        return StepResult.success(STEP_DISPATCH, http_status=204)

    body = resp.text[:_BODY_PREVIEW]
    logger.error("❌ Self-dispatch failed (%s): %s", resp.status_code, body)
    return StepResult.failure(STEP_DISPATCH, detail=body, http_status=resp.status_code)
