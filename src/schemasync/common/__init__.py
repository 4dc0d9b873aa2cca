from __future__ import annotations

from .locks import KeyedLocks

__all__ = ["KeyedLocks"]
