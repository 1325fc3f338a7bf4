"""
Common utilities for swing-keepalive.

Modules:
- upstash: Upstash Redis REST client (SET)
- github: GitHub REST client for repository dispatch events
- logging: dictConfig-based logging setup
"""

__all__ = [
    "upstash",
    "github",
    "logging",
]
