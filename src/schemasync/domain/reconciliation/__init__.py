"""Reconciliation core for synchronizing tabular schemas into the entity graph.

Layered flow of one upsert:
1) validate the desired state (no store access yet)
2) resolve the provenance source
3) resolve identity by qualified name
4) diff persisted vs. desired properties and write only on change
5) reconcile every attribute the same way, nested under the schema type

Linking and cascade removal are separate entry points on the engine.
"""

from __future__ import annotations

from .attributes import AttributeReconciler
from .contracts import (
    AttributeReconciliation,
    EndpointResolution,
    LineageEndpoint,
    LineageLink,
    RemovalResult,
    WriteOutcome,
)
from .diff import changed_properties, has_difference
from .engine import SchemaReconciliationEngine
from .identity import IdentityResolver
from .lineage import RelationshipLinker
from .removal import CascadeRemover
from .schema_types import SchemaTypeReconciler

__all__ = [
    "AttributeReconciler",
    "AttributeReconciliation",
    "CascadeRemover",
    "EndpointResolution",
    "IdentityResolver",
    "LineageEndpoint",
    "LineageLink",
    "RelationshipLinker",
    "RemovalResult",
    "SchemaReconciliationEngine",
    "SchemaTypeReconciler",
    "WriteOutcome",
    "changed_properties",
    "has_difference",
]
