"""Immutable 2D integer coordinate used as a buffer key."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Point:
    """A column/row position. The origin is the top-left terminal cell."""

    x: int
    y: int

    def __add__(self, other: object) -> Point:
        if not isinstance(other, Point):
            return NotImplemented
        return Point(self.x + other.x, self.y + other.y)
