"""Caller authorization port."""

from __future__ import annotations

from enum import StrEnum
from typing import Protocol, runtime_checkable


class Action(StrEnum):
    READ = "read"
    WRITE = "write"
    DELETE = "delete"


@runtime_checkable
class Authorizer(Protocol):
    """Raises ``AuthorizationError`` when ``user_id`` may not perform ``action``."""

    def authorize(self, user_id: str, action: Action) -> None: ...
