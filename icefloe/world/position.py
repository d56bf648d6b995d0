"""Position and Direction — the value types every grid query is built on.

Rows grow downward: ``Direction.UP`` decreases ``y`` and
``Direction.DOWN`` increases it, matching how the board is printed.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Direction(Enum):
    """Cardinal slide directions.

    Declaration order is significant: the AI heuristic scans directions
    in this order and picks the first that qualifies.
    """

    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    @property
    def delta(self) -> tuple[int, int]:
        """Return the ``(dx, dy)`` step for this direction."""
        return self.value

    @property
    def opposite(self) -> Direction:
        """Return the direction pointing the other way."""
        dx, dy = self.value
        return Direction((-dx, -dy))

    @property
    def key(self) -> str:
        """Single-letter key used by the console prompt."""
        return self.name[0]

    @classmethod
    def from_key(cls, text: str) -> Direction:
        """Parse ``U``/``D``/``L``/``R`` (case-insensitive).

        Raises:
            ValueError: If ``text`` is not one of the four keys.
        """
        key = text.strip().upper()
        for direction in cls:
            if direction.key == key:
                return direction
        msg = f"unknown direction key: {text!r}"
        raise ValueError(msg)

    def __str__(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class Position:
    """An immutable column/row pair.

    Attributes:
        x: Column index.
        y: Row index.
    """

    x: int
    y: int

    def step(self, direction: Direction) -> Position:
        """Return the neighbouring position one cell toward ``direction``."""
        dx, dy = direction.delta
        return Position(self.x + dx, self.y + dy)

    def in_bounds(self, size: int) -> bool:
        """Return True if both coordinates lie in ``[0, size)``."""
        return 0 <= self.x < size and 0 <= self.y < size

    def is_edge(self, size: int) -> bool:
        """Return True if this in-bounds position touches the grid border."""
        return self.in_bounds(size) and (
            self.x in (0, size - 1) or self.y in (0, size - 1)
        )

    def __str__(self) -> str:
        return f"({self.x}, {self.y})"
