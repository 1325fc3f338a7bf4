from __future__ import annotations

import argparse
import logging
from contextlib import ExitStack
from datetime import datetime, UTC
from typing import Any, Dict, Optional, Sequence

import httpx

from common.github import GitHubClient
from common.logging import configure_logging
from common.upstash import UpstashRedisClient
from .config import KeepaliveConfig
from .models import RunReport
from .steps import (
    KeyValueStore,
    probe_health,
    trigger_self_dispatch,
    write_heartbeat,
)


logger = logging.getLogger(__name__)


def run_once(
    config: KeepaliveConfig,
    *,
    store: Optional[KeyValueStore] = None,
    http: Optional[httpx.Client] = None,
    github: Optional[GitHubClient] = None,
) -> RunReport:
    """
    Run the heartbeat write, health probe and self-dispatch, in that order.

    - Clients not injected are built from `config` and closed on return.
    - Every step runs regardless of how the previous ones ended.
    - Never raises for step failures; the outcome is in the returned report.
    """
    started_at = datetime.now(UTC)

    with ExitStack() as stack:
        if store is None and config.has_store:
            store = stack.enter_context(UpstashRedisClient(config.store_url, config.store_token))
        if http is None:
            http = stack.enter_context(httpx.Client())
        if github is None and config.can_dispatch:
            github = stack.enter_context(
                GitHubClient(config.dispatch_token, api_base=config.github_api_url)
            )

        heartbeat = write_heartbeat(config, store, now=started_at)
        probe = probe_health(config, http)
        dispatch = trigger_self_dispatch(config, github)

    report = RunReport(started_at=started_at, heartbeat=heartbeat, probe=probe, dispatch=dispatch)
    if report.failures:
        logger.warning(
            "Keepalive finished with %d failed step(s): %s",
            len(report.failures),
            ", ".join(s.step for s in report.failures),
        )
    else:
        logger.info("Keepalive finished: %s", report.to_summary()["steps"])
    return report


def exit_code(report: RunReport, *, strict: bool = False) -> int:
    """Process exit status for `report`.

    Always 0 so the scheduler keeps the job enabled, unless `strict` is set
    and at least one step failed. Skipped steps never count as failures.
    """
    if strict and report.failures:
        return 1
    return 0


def _parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="swing-keepalive",
        description="Write a heartbeat, probe a health URL and self-dispatch a keepalive event.",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        default=None,
        help="exit non-zero when any step fails (default: KEEPALIVE_STRICT or off)",
    )
    parser.add_argument("--log-level", default=None, help="logging level (default: LOG_LEVEL or INFO)")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    config = KeepaliveConfig.from_env()
    overrides: Dict[str, Any] = {}
    if args.strict is not None:
        overrides["strict"] = args.strict
    if args.log_level:
        overrides["log_level"] = args.log_level
    if overrides:
        config = KeepaliveConfig.model_validate({**config.model_dump(), **overrides})

    configure_logging(config.log_level)
    report = run_once(config)
    return exit_code(report, strict=config.strict)
