"""Alembic migrations for the entity graph tables."""

from __future__ import annotations

from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING, Final

from alembic import command
from alembic.config import Config

from schemasync.config import get_database_config

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

MIGRATIONS_PATH: Final[Path] = Path(__file__).resolve().parent

log = getLogger(__name__)


def _build_config() -> Config:
    # Revisions ship inside the package, so installed copies find them too.
    config = Config()
    config.set_main_option("script_location", str(MIGRATIONS_PATH))
    return config


def upgrade_head(*, engine: Engine | None = None, database_uri: str | None = None) -> None:
    """Bring the entity, relationship and external source tables to the latest revision.

    With ``engine`` the upgrade runs on one of its connections, which lets an
    in-memory SQLite database keep the tables it was migrated with.
    """

    config = _build_config()
    if engine is not None:
        log.debug("Upgrading entity graph schema on %s", engine.url)
        with engine.begin() as connection:
            config.attributes["connection"] = connection
            command.upgrade(config, "head")
        return
    url = database_uri or get_database_config().uri
    log.debug("Upgrading entity graph schema from configured database uri")
    config.set_main_option("sqlalchemy.url", url)
    command.upgrade(config, "head")
