"""Axis-aligned bounding boxes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

from .position import Position


@dataclass
class AABB:
    """An axis-aligned box spanning ``min`` to ``max``."""

    min: Position = field(default_factory=Position)
    max: Position = field(default_factory=Position)

    def middle(self) -> Position:
        """Return the centre of the box."""
        return Position(
            (self.min.x + self.max.x) / 2.0,
            (self.min.y + self.max.y) / 2.0,
            (self.min.z + self.max.z) / 2.0,
        )

    def split_2d(self) -> Tuple[AABB, AABB, AABB, AABB]:
        """Split the box into four quadrants in the x/y plane.

        The order is left-bottom, left-top, right-top, right-bottom.
        """
        middle = self.middle()
        return (
            AABB(Position(*self.min), Position(*middle)),
            AABB(Position(self.min.x, middle.y, 0.0), Position(middle.x, self.max.y, 0.0)),
            AABB(Position(*middle), Position(*self.max)),
            AABB(Position(middle.x, self.min.y, 0.0), Position(self.max.x, middle.y, 0.0)),
        )

    def contains(self, position: Position) -> bool:
        """Return True if ``position`` lies within the box, bounds included."""
        return position >= self.min and position <= self.max

    def expand(self, other: AABB) -> None:
        """Grow this box in x and y so that it also covers ``other``."""
        self.min.x = min(self.min.x, other.min.x)
        self.min.y = min(self.min.y, other.min.y)
        self.max.x = max(self.max.x, other.max.x)
        self.max.y = max(self.max.y, other.max.y)

    def expand_pos(self, other: Position) -> None:
        """Grow this box in x and y so that it also covers the point ``other``."""
        if self.min.x > other.x:
            self.min.x = other.x
        elif self.max.x < other.x:
            self.max.x = other.x
        if self.min.y > other.y:
            self.min.y = other.y
        elif self.max.y < other.y:
            self.max.y = other.y

    def add(self, position: Position) -> AABB:
        """Return this box moved by ``position``."""
        return AABB(self.min.add(position), self.max.add(position))