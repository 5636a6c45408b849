"""A map that can be looked up from either side."""

from __future__ import annotations

from typing import Dict, Generic, Hashable, Optional, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V", bound=Hashable)


class BiMap(Generic[K, V]):
    """Pairs of keys and values, searchable by key or by value.

    Inserting over an existing key or value replaces the mapping in that
    direction only; the previous pairing stays reachable from the other side.
    """

    def __init__(self) -> None:
        self._forward: Dict[K, V] = {}
        self._backward: Dict[V, K] = {}

    def insert(self, key: K, value: V) -> None:
        """Record that ``key`` maps to ``value`` and back."""
        self._forward[key] = value
        self._backward[value] = key

    def get_key(self, value: V) -> Optional[K]:
        """Return the key recorded for ``value``, or None."""
        return self._backward.get(value)

    def get_value(self, key: K) -> Optional[V]:
        """Return the value recorded for ``key``, or None."""
        return self._forward.get(key)

    def __len__(self) -> int:
        return len(self._forward)

    def __repr__(self) -> str:
        return f"BiMap({self._forward!r})"