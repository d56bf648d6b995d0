"""Actor — a penguin sliding across the ice.

All four penguin kinds share one dataclass.  What differs between them
is the special ability, and the per-kind state that ability needs is
kept on the actor itself:

- KING / EMPEROR arm a voluntary stop that fires on the 5th / 3rd
  square of the next slide (``stop_armed`` + ``slide_steps``).
- ROYAL takes a single safe step before sliding (no extra state).
- ROCKHOPPER remembers the cell of the hazard it will jump over
  (``jump_target``).

Each ability can be used once per game (``special_used``).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from icefloe.terrain.objects import Item, TerrainObject

if TYPE_CHECKING:
    from icefloe.world.position import Direction, Position


class ActorKind(Enum):
    """Penguin variants, valued by their display name."""

    KING = "King Penguin"
    EMPEROR = "Emperor Penguin"
    ROYAL = "Royal Penguin"
    ROCKHOPPER = "Rockhopper Penguin"

    @property
    def stop_threshold(self) -> int | None:
        """Square on which an armed voluntary stop fires, if any."""
        return _STOP_THRESHOLDS.get(self)


_STOP_THRESHOLDS: dict[ActorKind, int] = {
    ActorKind.KING: 5,
    ActorKind.EMPEROR: 3,
}


@dataclass(eq=False)
class Actor(TerrainObject):
    """A single penguin.

    Attributes:
        name: Identifier shown on the board (``P1``, ``P2``, ...).
        kind: Penguin variant.
        inventory: Collected food in pickup order.
        special_used: True once the special ability has been spent.
        stunned: True if the next turn must be skipped.
        fallen: True once the penguin has left the game.
        player_controlled: True for the human player's penguin.
        last_direction: Direction of the most recent slide.
        stop_armed: KING/EMPEROR only: the next slide stops voluntarily.
        slide_steps: Squares counted toward the voluntary stop.
        jump_target: ROCKHOPPER only: cell of the hazard to jump over.
    """

    name: str
    kind: ActorKind
    inventory: list[Item] = field(default_factory=list)
    special_used: bool = False
    stunned: bool = False
    fallen: bool = False
    player_controlled: bool = False
    last_direction: Direction | None = None
    stop_armed: bool = False
    slide_steps: int = 0
    jump_target: Position | None = None

    @property
    def tag(self) -> str:
        return self.name

    @property
    def score(self) -> int:
        """Total weight of all collected food."""
        return sum(item.weight for item in self.inventory)

    @property
    def can_act(self) -> bool:
        """Return True if this penguin takes its next turn normally."""
        return not self.fallen and not self.stunned

    # -- Inventory -----------------------------------------------------------

    def collect(self, item: Item) -> None:
        """Append ``item`` to the inventory."""
        self.inventory.append(item)

    def drop_lightest(self) -> Item | None:
        """Remove and return the lightest item, or None if empty.

        Ties go to the item collected first.
        """
        if not self.inventory:
            return None
        lightest = min(self.inventory, key=lambda item: item.weight)
        self.inventory.remove(lightest)
        return lightest

    # -- Ability state -------------------------------------------------------

    def arm_stop(self) -> None:
        """Arm the voluntary stop for the next slide."""
        self.stop_armed = True
        self.slide_steps = 0

    def count_step(self) -> bool:
        """Count one square of an armed slide.

        Returns:
            True when the counter reaches this kind's stop threshold.
        """
        threshold = self.kind.stop_threshold
        if not self.stop_armed or threshold is None or self.fallen:
            return False
        self.slide_steps += 1
        return self.slide_steps >= threshold

    def end_slide(self) -> None:
        """Disarm per-slide ability state once the penguin is at rest."""
        self.stop_armed = False
        self.slide_steps = 0

    def clear_jump(self) -> None:
        self.jump_target = None

    def __str__(self) -> str:
        ability = "used" if self.special_used else "available"
        return (
            f"{self.name} [{self.kind.value} at {self.position}, "
            f"food={self.score} units, ability {ability}]"
        )
