"""Terrain objects — the static and sliding things that share the ice.

Every occupant of the grid derives from ``TerrainObject``.  Objects
compare by identity (``eq=False``): two krill of the same weight on the
same cell are still two different pieces of food, and grid removal
must take out the right one.

Obstacles are a single dataclass tagged with an ``ObstacleKind``; the
engine matches on the kind to pick a collision effect.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from icefloe.world.position import Position


@dataclass(eq=False)
class TerrainObject:
    """Common state for every grid occupant.

    Attributes:
        position: Cell the object occupies (stale while it is in transit).
    """

    position: Position

    @property
    def tag(self) -> str:
        """Short display tag used on the printed board."""
        raise NotImplementedError

    def clone(self) -> TerrainObject:
        """Return an independent deep copy of this object."""
        return copy.deepcopy(self)


class FoodCategory(Enum):
    """Kinds of food lying on the ice, valued by their display tag."""

    KRILL = "Kr"
    CRUSTACEAN = "Cr"
    ANCHOVY = "An"
    SQUID = "Sq"
    MACKEREL = "Ma"

    @property
    def display_name(self) -> str:
        return self.name.capitalize()


@dataclass(eq=False)
class Item(TerrainObject):
    """A piece of food.  Never slides.

    Attributes:
        category: What kind of food this is.
        weight: Score value when collected.
    """

    category: FoodCategory
    weight: int

    @property
    def tag(self) -> str:
        return self.category.value

    def __str__(self) -> str:
        return f"{self.category.display_name} ({self.weight} units)"


class ObstacleKind(Enum):
    """Obstacle variants.

    - LIGHT_BLOCK: slides when hit and stuns the penguin that hit it.
    - HEAVY_BLOCK: never moves; knocks the lightest food out of a penguin.
    - SEA_LION: slides when hit and bounces the penguin backward.
    - HOLE: swallows penguins and sliding obstacles until plugged.
    """

    LIGHT_BLOCK = "LB"
    HEAVY_BLOCK = "HB"
    SEA_LION = "SL"
    HOLE = "HI"

    @property
    def display_name(self) -> str:
        return {
            ObstacleKind.LIGHT_BLOCK: "LightIceBlock",
            ObstacleKind.HEAVY_BLOCK: "HeavyIceBlock",
            ObstacleKind.SEA_LION: "SeaLion",
            ObstacleKind.HOLE: "HoleInIce",
        }[self]


@dataclass(eq=False)
class Obstacle(TerrainObject):
    """A hazard on the ice.

    Attributes:
        kind: Which obstacle variant this is.
        plugged: For holes only: True once a sliding obstacle has
            fallen in.  Never reverts.
    """

    kind: ObstacleKind
    plugged: bool = False

    @property
    def tag(self) -> str:
        if self.kind is ObstacleKind.HOLE and self.plugged:
            return "PH"
        return self.kind.value

    @property
    def is_slidable(self) -> bool:
        """Return True for the kinds that start sliding when struck."""
        return self.kind in (ObstacleKind.LIGHT_BLOCK, ObstacleKind.SEA_LION)

    @property
    def is_open_hole(self) -> bool:
        """Return True for a hole that still swallows whatever slides in."""
        return self.kind is ObstacleKind.HOLE and not self.plugged

    @property
    def is_passable(self) -> bool:
        """Return True if sliding objects pass straight over this obstacle."""
        return self.kind is ObstacleKind.HOLE and self.plugged

    def plug(self) -> None:
        """Plug this hole.

        Raises:
            ValueError: If this obstacle is not a hole.
        """
        if self.kind is not ObstacleKind.HOLE:
            msg = f"only holes can be plugged, not {self.kind.display_name}"
            raise ValueError(msg)
        self.plugged = True

    def __str__(self) -> str:
        return self.kind.display_name
