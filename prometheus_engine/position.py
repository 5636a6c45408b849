"""Three-dimensional positions with component-wise ordering."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional


@dataclass
class Position:
    """A point in space.

    The comparison operators ``<``, ``<=``, ``>`` and ``>=`` hold only when they
    hold for every component. :meth:`partial_cmp` gives the lexicographic order.
    """

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def add(self, other: Position) -> Position:
        """Return the component-wise sum of this position and ``other``."""
        return Position(self.x + other.x, self.y + other.y, self.z + other.z)

    def __add__(self, other: object) -> Position:
        if not isinstance(other, Position):
            return NotImplemented
        return self.add(other)

    def partial_cmp(self, other: Position) -> Optional[int]:
        """Compare lexicographically by x, then y, then z.

        Returns -1, 0 or 1, or None when a component is not comparable (NaN).
        """
        for mine, theirs in zip(self, other):
            if mine < theirs:
                return -1
            if mine > theirs:
                return 1
            if mine != theirs:
                return None
        return 0

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Position):
            return NotImplemented
        return self.x >= other.x and self.y >= other.y and self.z >= other.z

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Position):
            return NotImplemented
        return self.x > other.x and self.y > other.y and self.z > other.z

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Position):
            return NotImplemented
        return self.x <= other.x and self.y <= other.y and self.z <= other.z

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Position):
            return NotImplemented
        return self.x < other.x and self.y < other.y and self.z < other.z