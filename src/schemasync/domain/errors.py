"""Error taxonomy raised by the reconciliation core.

Every operation fails fast on the first unrecoverable condition. Nothing here is
retried or compensated; steps completed before the failure stay completed.
"""

from __future__ import annotations


class SchemaSyncError(Exception):
    """Root of all errors raised by schemasync."""


class InvalidInputError(SchemaSyncError, ValueError):
    """A required value is missing or malformed. Raised before any store access."""

    def __init__(self, message: str, *, parameter: str | None = None) -> None:
        super().__init__(message)
        self.parameter = parameter


class UnsupportedOperationError(InvalidInputError):
    """The requested delete semantic (or other mode) is not supported."""


class ExternalSourceNotFoundError(InvalidInputError):
    """The named external source has not been registered."""

    def __init__(self, name: str) -> None:
        super().__init__(f"External source not registered: {name!r}", parameter="externalSourceName")
        self.name = name


class AuthorizationError(SchemaSyncError):
    """The caller is not allowed to perform the requested action."""

    def __init__(self, user_id: str, action: str) -> None:
        super().__init__(f"User {user_id!r} is not authorized to {action}")
        self.user_id = user_id
        self.action = action


class ReferenceableNotFoundError(SchemaSyncError):
    """A lineage endpoint did not resolve to any persisted entity."""

    def __init__(self, qualified_name: str) -> None:
        super().__init__(f"No referenceable entity found for qualified name {qualified_name!r}")
        self.qualified_name = qualified_name


class StoreError(SchemaSyncError):
    """The entity graph store failed to read or write."""


class DuplicateEntityError(StoreError):
    """More than one active entity claims the same natural key."""

    def __init__(self, type_name: str, qualified_name: str) -> None:
        super().__init__(f"Multiple {type_name} entities share qualified name {qualified_name!r}")
        self.type_name = type_name
        self.qualified_name = qualified_name
