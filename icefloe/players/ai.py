"""Greedy AI for computer-controlled penguins.

The heuristic is stateless and deterministic apart from two random
draws: the coin flip deciding whether to use a special ability, and the
last-resort direction when every neighbour is water.

Direction preference, scanning in ``Direction`` order:

1. A direction with food somewhere along the open path.
2. A direction with a non-hole obstacle along the path (hitting things
   may push them or bounce the penguin somewhere useful).
3. Any direction whose next square is on the grid.
4. Anything at all (the penguin will fall).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from icefloe.engine.abilities import find_jump_target
from icefloe.terrain.actor import ActorKind
from icefloe.terrain.objects import Item, Obstacle
from icefloe.world.position import Direction

if TYPE_CHECKING:
    from numpy.random import Generator

    from icefloe.terrain.actor import Actor
    from icefloe.world.grid import Grid
    from icefloe.world.position import Position


@dataclass(frozen=True)
class TurnDecision:
    """Everything a penguin decides at the start of its turn.

    Attributes:
        slide_direction: Direction of the slide.  None asks the
            controller again once the special ability has been used.
        use_special: Whether to spend the special ability this turn.
        special_direction: Direction for the ability.  Differs from the
            slide direction only for ROYAL steps.
    """

    slide_direction: Direction | None
    use_special: bool = False
    special_direction: Direction | None = None


def food_in_path(grid: Grid, start: Position, direction: Direction) -> bool:
    """Return True if food lies ahead before any other occupant."""
    pos = start.step(direction)
    while grid.is_valid(pos):
        occupants = grid.occupants_at(pos)
        if occupants:
            return all(isinstance(o, Item) for o in occupants)
        pos = pos.step(direction)
    return False


def obstacle_in_path(grid: Grid, start: Position, direction: Direction) -> bool:
    """Return True if a non-hole obstacle lies ahead before an open hole.

    Plugged holes and food are passed over; the scan stops at the first
    other occupant.
    """
    pos = start.step(direction)
    while grid.is_valid(pos):
        for obj in grid.occupants_at(pos):
            if isinstance(obj, Obstacle):
                if obj.is_open_hole:
                    return False
                if not obj.is_passable:
                    return True
            elif not isinstance(obj, Item):
                return False
        pos = pos.step(direction)
    return False


def choose_direction(grid: Grid, actor: Actor, rng: Generator) -> Direction:
    """Pick a slide direction for ``actor`` using the greedy preference."""
    pos = actor.position
    for direction in Direction:
        if food_in_path(grid, pos, direction):
            return direction
    for direction in Direction:
        if obstacle_in_path(grid, pos, direction):
            return direction
    for direction in Direction:
        if grid.is_valid(pos.step(direction)):
            return direction
    return _random_direction(rng)


def choose_step_direction(grid: Grid, actor: Actor, rng: Generator) -> Direction:
    """Pick a direction for a ROYAL penguin's single step.

    Prefers a square that is empty or holds only food or plugged holes,
    then any on-grid square without an open hole.
    """
    pos = actor.position
    for direction in Direction:
        target = pos.step(direction)
        if grid.is_valid(target) and all(
            isinstance(o, Item) or (isinstance(o, Obstacle) and o.is_passable)
            for o in grid.occupants_at(target)
        ):
            return direction
    for direction in Direction:
        target = pos.step(direction)
        if grid.is_valid(target) and not any(
            isinstance(o, Obstacle) and o.is_open_hole
            for o in grid.occupants_at(target)
        ):
            return direction
    return _random_direction(rng)


def wants_special(
    grid: Grid,
    actor: Actor,
    direction: Direction,
    rng: Generator,
    chance: float,
) -> bool:
    """Decide whether ``actor`` spends its ability this turn.

    ROCKHOPPER jumps whenever a hazard lies ahead; every other kind
    flips a coin weighted by ``chance``.
    """
    if actor.special_used:
        return False
    if actor.kind is ActorKind.ROCKHOPPER:
        return find_jump_target(grid, actor.position, direction) is not None
    return bool(rng.random() < chance)


def decide(grid: Grid, actor: Actor, rng: Generator, chance: float) -> TurnDecision:
    """Build a full TurnDecision for a computer-controlled penguin.

    For a ROYAL the slide direction is chosen before the step and is
    re-evaluated by the turn controller once the step has been taken.
    """
    slide = choose_direction(grid, actor, rng)
    if not wants_special(grid, actor, slide, rng, chance):
        return TurnDecision(slide_direction=slide)
    if actor.kind is ActorKind.ROYAL:
        step = choose_step_direction(grid, actor, rng)
        return TurnDecision(slide, use_special=True, special_direction=step)
    return TurnDecision(slide, use_special=True, special_direction=slide)


def _random_direction(rng: Generator) -> Direction:
    directions = list(Direction)
    return directions[int(rng.integers(len(directions)))]
