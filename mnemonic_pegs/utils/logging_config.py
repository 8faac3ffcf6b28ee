"""Helpers for configuring consistent project logging output."""

from __future__ import annotations

import logging
import os
from typing import Optional

_DEFAULT_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
_CONFIGURED = False

LOG_LEVEL_ENV = "MNEMONIC_PEGS_LOG_LEVEL"


def _resolve_level(level: str | int | None, default: int) -> int:
    if level is None:
        return default
    if isinstance(level, int):
        return level
    try:
        return int(level)
    except (TypeError, ValueError):
        normalized = str(level).strip().upper()
        return getattr(logging, normalized, default)


def configure_logging(
    level: Optional[str | int] = None,
    *,
    default: int = logging.WARNING,
    force: bool = False,
) -> None:
    """Initialise root logging handlers for the command line tools.

    The explicit ``level`` wins, then ``MNEMONIC_PEGS_LOG_LEVEL``, then
    ``default``. Repeated calls are no-ops unless ``force`` is set.
    """

    global _CONFIGURED

    if _CONFIGURED and not force:
        return

    env_level = os.environ.get(LOG_LEVEL_ENV)
    resolved_level = _resolve_level(level if level is not None else env_level, default)

    logging.basicConfig(level=resolved_level, format=_DEFAULT_FORMAT, force=force)
    logging.getLogger("mnemonic_pegs").setLevel(resolved_level)
    _CONFIGURED = True


__all__ = ["configure_logging", "LOG_LEVEL_ENV"]
