from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID, uuid4


def new_id() -> UUID:
    return uuid4()


@dataclass(eq=False, kw_only=True)
class ExternalSource:
    """A registered upstream system whose writes are tagged with its identity."""

    id: UUID = field(default_factory=new_id)
    name: str
    created_at: datetime = field(default_factory=lambda: datetime.now(tz=UTC))


@dataclass(frozen=True, slots=True, kw_only=True)
class Provenance:
    """Tag attached to every store write."""

    source_id: UUID
    source_name: str
    user_id: str

    @classmethod
    def for_source(cls, source: ExternalSource, *, user_id: str) -> Provenance:
        return cls(source_id=source.id, source_name=source.name, user_id=user_id)
