"""Grid — the bounded, multi-occupancy surface the penguins slide on.

The Grid is the single owner of every live terrain object.  Each cell
holds an insertion-ordered list of occupants; the obstacle/item/actor
views are computed from those lists on demand so that no secondary
index can drift out of sync after an object is removed.

The grid never touches an object's ``position`` field.  Whoever moves
an object is responsible for removing it from the old bucket, updating
its position and placing it in the new bucket.
"""

from __future__ import annotations

import copy
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from icefloe.terrain.actor import Actor
from icefloe.terrain.objects import Item, Obstacle
from icefloe.world.position import Position

if TYPE_CHECKING:
    from icefloe.terrain.objects import TerrainObject


@dataclass
class Grid:
    """A square grid of cells, each holding zero or more occupants.

    Attributes:
        size: Number of rows and columns.
        cells: Mapping from in-bounds Position to its occupant list.
    """

    size: int = 10
    cells: dict[Position, list[TerrainObject]] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Create one empty bucket per in-bounds cell."""
        if self.size <= 0:
            msg = f"grid size must be positive, got {self.size}"
            raise ValueError(msg)
        self.cells = {
            Position(x, y): [] for y in range(self.size) for x in range(self.size)
        }

    # -- Queries -------------------------------------------------------------

    def is_valid(self, pos: Position) -> bool:
        """Return True if ``pos`` lies inside the grid."""
        return pos.in_bounds(self.size)

    def is_empty(self, pos: Position) -> bool:
        """Return True if ``pos`` is in bounds and holds no occupants."""
        return self.is_valid(pos) and not self.cells[pos]

    def occupants_at(self, pos: Position) -> tuple[TerrainObject, ...]:
        """Return a snapshot of the occupants at ``pos``.

        Out-of-bounds positions have no occupants.  The returned tuple is
        a copy, so callers may mutate the grid while iterating it.
        """
        if not self.is_valid(pos):
            return ()
        return tuple(self.cells[pos])

    def contains(self, obj: TerrainObject) -> bool:
        """Return True if ``obj`` sits in the bucket named by its position."""
        bucket = self.cells.get(obj.position)
        if bucket is None:
            return False
        return any(o is obj for o in bucket)

    # -- Mutation ------------------------------------------------------------

    def place(self, pos: Position, obj: TerrainObject) -> None:
        """Append ``obj`` to the occupants of ``pos``.

        Raises:
            IndexError: If ``pos`` is out of bounds.
        """
        if not self.is_valid(pos):
            msg = f"{pos} out of bounds for {self.size}x{self.size} grid"
            raise IndexError(msg)
        self.cells[pos].append(obj)

    def remove(self, pos: Position, obj: TerrainObject) -> None:
        """Remove ``obj`` (by identity) from the occupants of ``pos``.

        Raises:
            ValueError: If ``obj`` is not in that cell.
        """
        bucket = self.cells.get(pos, [])
        for i, occupant in enumerate(bucket):
            if occupant is obj:
                del bucket[i]
                return
        msg = f"{obj.tag} is not at {pos}"
        raise ValueError(msg)

    # -- Derived views -------------------------------------------------------

    def objects(self) -> Iterator[TerrainObject]:
        """Yield every live object in row-major cell order."""
        for bucket in self.cells.values():
            yield from bucket

    def actors(self) -> list[Actor]:
        """Return the actors currently on the grid."""
        return [o for o in self.objects() if isinstance(o, Actor)]

    def obstacles(self) -> list[Obstacle]:
        """Return the obstacles currently on the grid."""
        return [o for o in self.objects() if isinstance(o, Obstacle)]

    def items(self) -> list[Item]:
        """Return the items still lying on the grid."""
        return [o for o in self.objects() if isinstance(o, Item)]

    def edge_positions(self) -> list[Position]:
        """Return every border cell in row-major order."""
        return [pos for pos in self.cells if pos.is_edge(self.size)]

    def empty_positions(self, *, edge_only: bool = False) -> list[Position]:
        """Return unoccupied cells, optionally restricted to the border."""
        return [
            pos
            for pos, bucket in self.cells.items()
            if not bucket and (not edge_only or pos.is_edge(self.size))
        ]

    def clone(self) -> Grid:
        """Return a deep snapshot of the grid and every object on it."""
        return copy.deepcopy(self)
