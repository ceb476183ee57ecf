"""Naming rules shared by the CLI and the services.

Postman asset names and state-file keys are derived from the same
service/stage inputs; keeping both here gives a single source of truth.
"""

from __future__ import annotations

import re

DEFAULT_DOMAIN = "demo"

_WHITESPACE = re.compile(r"\s+")


def sanitize(value: str) -> str:
    """Replace every whitespace run with a single underscore."""

    return _WHITESPACE.sub("_", value)


def state_key(domain: str | None, service: str, stage: str) -> str:
    """Composite cache key `domain:service:stage`."""

    return ":".join(
        (
            sanitize(domain or DEFAULT_DOMAIN),
            sanitize(service),
            sanitize(stage),
        )
    )


def asset_name(service: str, *, prefix: str = "[DEMO]", suffix: str = "#main") -> str:
    """Display name used for both the spec and its collection."""

    parts = [prefix, sanitize(service), suffix]
    return " ".join(part for part in parts if part)
