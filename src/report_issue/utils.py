from __future__ import annotations

import logging
import os
from typing import Any, Awaitable

logger = logging.getLogger("report_issue")


def env_bool(name: str, default: bool = False) -> bool:
    v = (os.getenv(name) or "").strip().lower()
    if not v:
        return default
    return v in {"1", "true", "yes", "y", "on"}


def env_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def env_str(name: str, default: str = "") -> str:
    v = (os.getenv(name) or "").strip()
    return v or default


async def best_effort(call: Awaitable[Any], what: str) -> None:
    """Await a display command; failures are logged, never raised or retried."""
    try:
        await call
    except Exception as exc:  # noqa: BLE001 - display errors never reach the user
        logger.warning("Display command failed (%s): %s", what, exc)
