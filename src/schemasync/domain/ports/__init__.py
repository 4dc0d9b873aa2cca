"""Domain port definitions for adapters."""

from __future__ import annotations

from .authorization import Action, Authorizer
from .persistence import EntityGraphStore, ExternalSourceRegistry

__all__ = [
    "Action",
    "Authorizer",
    "EntityGraphStore",
    "ExternalSourceRegistry",
]
