"""Reconciliation defaults read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Final

from schemasync.domain.model import DeleteSemantic

from .env import require_env_vars, split_env_list
from .errors import ConfigurationError

EXTERNAL_SOURCE_ENV: Final[str] = "SCHEMASYNC_EXTERNAL_SOURCE"
DELETE_SEMANTICS_ENV: Final[str] = "SCHEMASYNC_DELETE_SEMANTICS"
ALLOWED_USERS_ENV: Final[str] = "SCHEMASYNC_ALLOWED_USERS"

DEFAULT_DELETE_SEMANTICS: Final[frozenset[DeleteSemantic]] = frozenset(
    {DeleteSemantic.SOFT, DeleteSemantic.HARD}
)


@dataclass(frozen=True, slots=True)
class ReconciliationConfig:
    external_source_name: str | None = None
    supported_delete_semantics: frozenset[DeleteSemantic] = field(
        default=DEFAULT_DELETE_SEMANTICS
    )
    # None means every caller is allowed
    allowed_users: frozenset[str] | None = None


def _parse_delete_semantics(values: tuple[str, ...]) -> frozenset[DeleteSemantic]:
    semantics: set[DeleteSemantic] = set()
    for value in values:
        try:
            semantics.add(DeleteSemantic(value.lower()))
        except ValueError as exc:
            raise ConfigurationError(
                f"Unknown delete semantic in {DELETE_SEMANTICS_ENV}: {value}",
                variables=(DELETE_SEMANTICS_ENV,),
            ) from exc
    return frozenset(semantics)


def get_reconciliation_config() -> ReconciliationConfig:
    source = os.getenv(EXTERNAL_SOURCE_ENV)
    semantics = split_env_list(DELETE_SEMANTICS_ENV)
    users = split_env_list(ALLOWED_USERS_ENV)
    return ReconciliationConfig(
        external_source_name=source.strip() if source and source.strip() else None,
        supported_delete_semantics=(
            _parse_delete_semantics(semantics) if semantics else DEFAULT_DELETE_SEMANTICS
        ),
        allowed_users=frozenset(users) if users else None,
    )


def require_external_source_name() -> str:
    """Return the configured default external source or raise if it is not set."""

    return require_env_vars((EXTERNAL_SOURCE_ENV,))[EXTERNAL_SOURCE_ENV].strip()
