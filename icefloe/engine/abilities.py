"""Special abilities — the one-shot power each penguin kind carries.

``activate_special`` spends a penguin's ability and reports what
happened as an ``AbilityResult``.  Nothing here raises for ordinary
outcomes: stepping into the water or finding no hazard to jump are
results, not errors.

- KING / EMPEROR arm a voluntary stop for the upcoming slide.
- ROYAL takes one careful step, independent of the slide direction.
- ROCKHOPPER scans ahead for a hazard to jump during the slide.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING

from icefloe.engine.errors import SlideContractError
from icefloe.terrain.actor import ActorKind
from icefloe.terrain.objects import Item, Obstacle

if TYPE_CHECKING:
    from icefloe.terrain.actor import Actor
    from icefloe.world.grid import Grid
    from icefloe.world.position import Direction, Position

logger = logging.getLogger(__name__)


class AbilityOutcome(Enum):
    """Result of trying to use a special ability."""

    ALREADY_USED = auto()
    STOP_ARMED = auto()
    STEPPED = auto()
    BLOCKED = auto()
    FELL = auto()
    JUMP_READY = auto()
    NO_TARGET = auto()


@dataclass
class AbilityResult:
    """What an ability activation did.

    Attributes:
        outcome: Which outcome occurred.
        direction: Direction the ability was used in.
        position: Where the penguin ended up (or the jump target).
        collected: Food picked up by a ROYAL step.
        detail: Extra context (the blocker, or "water"/"hole" for falls).
    """

    outcome: AbilityOutcome
    direction: Direction
    position: Position | None = None
    collected: list[Item] = field(default_factory=list)
    detail: str = ""

    @property
    def succeeded(self) -> bool:
        return self.outcome in (
            AbilityOutcome.STOP_ARMED,
            AbilityOutcome.STEPPED,
            AbilityOutcome.JUMP_READY,
        )


def activate_special(grid: Grid, actor: Actor, direction: Direction) -> AbilityResult:
    """Spend ``actor``'s special ability toward ``direction``.

    The ability is consumed by any attempt, successful or not.  A second
    attempt changes nothing and reports ``ALREADY_USED``.

    Args:
        grid: The grid the penguin is standing on.
        actor: The penguin using its ability.
        direction: Direction of the slide (KING, EMPEROR, ROCKHOPPER)
            or of the single step (ROYAL).

    Returns:
        An AbilityResult describing the outcome.

    Raises:
        SlideContractError: If the penguin has fallen.
    """
    if actor.fallen:
        msg = f"{actor.name} has fallen and cannot use its ability"
        raise SlideContractError(msg)
    if actor.special_used:
        return AbilityResult(AbilityOutcome.ALREADY_USED, direction, actor.position)

    actor.special_used = True
    match actor.kind:
        case ActorKind.KING | ActorKind.EMPEROR:
            actor.arm_stop()
            result = AbilityResult(AbilityOutcome.STOP_ARMED, direction, actor.position)
        case ActorKind.ROYAL:
            result = _safe_step(grid, actor, direction)
        case ActorKind.ROCKHOPPER:
            result = _prepare_jump(grid, actor, direction)

    logger.debug("%s ability: %s %s", actor.name, result.outcome.name, direction)
    return result


def _safe_step(grid: Grid, actor: Actor, direction: Direction) -> AbilityResult:
    """Move a ROYAL penguin exactly one square."""
    target = actor.position.step(direction)

    if not grid.is_valid(target):
        grid.remove(actor.position, actor)
        actor.fallen = True
        return AbilityResult(AbilityOutcome.FELL, direction, None, detail="water")

    occupants = grid.occupants_at(target)
    if any(isinstance(o, Obstacle) and o.is_open_hole for o in occupants):
        grid.remove(actor.position, actor)
        actor.position = target
        actor.fallen = True
        return AbilityResult(AbilityOutcome.FELL, direction, target, detail="hole")

    blocker = next(
        (
            o
            for o in occupants
            if not isinstance(o, Item)
            and not (isinstance(o, Obstacle) and o.is_passable)
        ),
        None,
    )
    if blocker is not None:
        return AbilityResult(
            AbilityOutcome.BLOCKED,
            direction,
            actor.position,
            detail=str(blocker) if isinstance(blocker, Obstacle) else blocker.tag,
        )

    grid.remove(actor.position, actor)
    actor.position = target
    grid.place(target, actor)
    collected = [o for o in occupants if isinstance(o, Item)]
    for item in collected:
        grid.remove(target, item)
        actor.collect(item)
    return AbilityResult(AbilityOutcome.STEPPED, direction, target, collected)


def find_jump_target(grid: Grid, start: Position, direction: Direction) -> Position | None:
    """Return the first cell ahead of ``start`` holding a jumpable hazard.

    Plugged holes are not hazards.  Other penguins and food do not end
    the scan.
    """
    pos = start.step(direction)
    while grid.is_valid(pos):
        for obj in grid.occupants_at(pos):
            if isinstance(obj, Obstacle) and not obj.is_passable:
                return pos
        pos = pos.step(direction)
    return None


def _prepare_jump(grid: Grid, actor: Actor, direction: Direction) -> AbilityResult:
    target = find_jump_target(grid, actor.position, direction)
    actor.jump_target = target
    if target is None:
        return AbilityResult(AbilityOutcome.NO_TARGET, direction, None)
    return AbilityResult(AbilityOutcome.JUMP_READY, direction, target)
