"""Logging setup for the schemasync CLI."""

from __future__ import annotations

import logging
import os
from typing import Final

LOG_LEVEL_ENV: Final[str] = "SCHEMASYNC_LOG_LEVEL"

# chatty below WARNING during migrations and engine setup
_QUIET_LOGGERS: Final[tuple[str, ...]] = ("alembic", "sqlalchemy.engine")


def resolve_log_level(level: int | str | None = None) -> int:
    """Return a numeric level from ``level``, ``SCHEMASYNC_LOG_LEVEL`` or INFO."""

    candidate = level if level is not None else os.getenv(LOG_LEVEL_ENV)
    if candidate is None or candidate == "":
        return logging.INFO
    if isinstance(candidate, int):
        return candidate
    resolved = logging.getLevelNamesMapping().get(candidate.strip().upper())
    if resolved is None:
        raise ValueError(f"Unknown log level: {candidate}")
    return resolved


def configure_logging(*, level: int | str | None = None, force: bool = False) -> None:
    """Configure the root logger for CLI output.

    Reconciliation logs creates, updates and deletes at INFO and skipped writes at
    DEBUG, so ``SCHEMASYNC_LOG_LEVEL=DEBUG`` shows every decision.
    """

    resolved = resolve_log_level(level)
    logging.basicConfig(
        level=resolved,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(resolved, logging.WARNING))
