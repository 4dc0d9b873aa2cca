"""Authorizer implementations used by the application service."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from schemasync.domain.errors import AuthorizationError
from schemasync.domain.ports import Action

if TYPE_CHECKING:
    from collections.abc import Iterable

log = logging.getLogger(__name__)


class AllowAllAuthorizer:
    """Accept every non-empty caller."""

    def authorize(self, user_id: str, action: Action) -> None:
        if not user_id:
            raise AuthorizationError(user_id, action)


class AllowListAuthorizer:
    """Allow only known users; read-only users may not write or delete."""

    def __init__(self, users: Iterable[str], *, read_only_users: Iterable[str] = ()) -> None:
        self.read_only_users = frozenset(read_only_users)
        self.users = frozenset(users) | self.read_only_users

    def authorize(self, user_id: str, action: Action) -> None:
        if user_id not in self.users:
            log.warning("Rejected %s for unknown user %s", action, user_id)
            raise AuthorizationError(user_id, action)
        if action is not Action.READ and user_id in self.read_only_users:
            log.warning("Rejected %s for read-only user %s", action, user_id)
            raise AuthorizationError(user_id, action)


if TYPE_CHECKING:
    from schemasync.domain.ports import Authorizer

    _allow_all_check: Authorizer = AllowAllAuthorizer()
    _allow_list_check: Authorizer = AllowListAuthorizer(())
