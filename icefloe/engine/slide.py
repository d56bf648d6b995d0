"""SlideEngine — resolves slides and the chain reactions they trigger.

Two mutually recursive entry points drive every movement on the ice:

- ``resolve_actor_slide`` moves a penguin square by square until it
  leaves the grid, collects food, stops voluntarily, or hits something.
- ``resolve_obstacle_slide`` does the same for a light ice block or a
  sea lion that has been struck.

A collision may start further slides (a struck penguin, a pushed block,
a bounced penguin).  Each nested call is counted and the depth is
capped, so a runaway chain raises instead of exhausting the stack.

Bookkeeping rules followed throughout:

1. A moving object is removed from its cell before it starts stepping
   and is placed back (with its position updated) only where it ends up.
2. Objects that leave the game (fallen penguins, sunk obstacles,
   collected or destroyed food) are simply never placed back.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING

from icefloe.engine.errors import (
    ChainReactionLimitError,
    SlideContractError,
    SlideError,
)
from icefloe.engine.events import EventKind, EventLog, SlideEvent
from icefloe.terrain.actor import Actor
from icefloe.terrain.objects import Item, Obstacle, ObstacleKind

if TYPE_CHECKING:
    from icefloe.terrain.objects import TerrainObject
    from icefloe.world.grid import Grid
    from icefloe.world.position import Direction, Position

logger = logging.getLogger(__name__)

DEFAULT_MAX_CHAIN_DEPTH = 64


class SlideEngine:
    """Resolves actor and obstacle slides on a shared grid.

    Attributes:
        grid: The grid all objects live on.
        max_chain_depth: Maximum number of nested slides in one chain.
        events: Buffer of events produced since the last drain.
    """

    def __init__(
        self,
        grid: Grid,
        *,
        max_chain_depth: int = DEFAULT_MAX_CHAIN_DEPTH,
        events: EventLog | None = None,
    ) -> None:
        self.grid = grid
        self.max_chain_depth = max_chain_depth
        self.events = events if events is not None else EventLog()
        self._depth = 0

    # -- Public entry points -------------------------------------------------

    def resolve_actor_slide(self, actor: Actor, direction: Direction) -> None:
        """Slide ``actor`` toward ``direction`` and resolve all fallout.

        Raises:
            SlideContractError: If the actor has fallen or is not on the grid.
            ChainReactionLimitError: If the chain exceeds ``max_chain_depth``.
        """
        if actor.fallen:
            msg = f"{actor.name} has fallen and cannot slide"
            raise SlideContractError(msg)
        if not self.grid.contains(actor):
            msg = f"{actor.name} is not on the grid at {actor.position}"
            raise SlideContractError(msg)
        with self._nested():
            self._slide_actor(actor, direction)

    def resolve_obstacle_slide(
        self,
        obstacle: Obstacle,
        direction: Direction,
    ) -> None:
        """Slide a struck ``obstacle`` toward ``direction``.

        Raises:
            SlideContractError: If the obstacle cannot slide or is not
                on the grid.
            ChainReactionLimitError: If the chain exceeds ``max_chain_depth``.
        """
        if not obstacle.is_slidable:
            msg = f"{obstacle.kind.display_name} does not slide"
            raise SlideContractError(msg)
        if not self.grid.contains(obstacle):
            msg = f"{obstacle.kind.display_name} is not on the grid at {obstacle.position}"
            raise SlideContractError(msg)
        with self._nested():
            self._slide_obstacle(obstacle, direction)

    # -- Actor slide ---------------------------------------------------------

    def _slide_actor(self, actor: Actor, direction: Direction) -> None:
        actor.last_direction = direction
        self.grid.remove(actor.position, actor)
        current = actor.position

        # Every iteration advances at least one square, so a straight
        # line across the grid always ends within ``size`` iterations.
        for _ in range(self.grid.size + 1):
            nxt = current.step(direction)

            if not self.grid.is_valid(nxt):
                self._fall(actor, current, EventKind.FELL_INTO_WATER)
                return

            if actor.jump_target is not None and actor.jump_target == nxt:
                finished, landing = self._jump(actor, nxt, direction)
                if finished:
                    return
                if landing is not None:
                    current = landing
                    continue

            if actor.count_step() and self._can_rest_on(nxt):
                self._settle(actor, nxt)
                self._record(EventKind.VOLUNTARY_STOP, actor.name, nxt)
                return

            occupants = self.grid.occupants_at(nxt)

            items = [o for o in occupants if isinstance(o, Item)]
            if items:
                self._settle(actor, nxt)
                self._collect(actor, nxt, items)
                return

            other = next((o for o in occupants if isinstance(o, Actor)), None)
            if other is not None:
                self._settle(actor, current)
                self._record(EventKind.COLLIDED, actor.name, current, other.name)
                self.resolve_actor_slide(other, direction)
                return

            obstacle = self._first_blocker(occupants)
            if obstacle is not None:
                self._collide(actor, obstacle, current, direction)
                return

            current = nxt

        msg = f"{actor.name} slid past the edge of a {self.grid.size}-cell grid"
        raise SlideError(msg)

    def _jump(
        self,
        actor: Actor,
        hazard_pos: Position,
        direction: Direction,
    ) -> tuple[bool, Position | None]:
        """Try to hop over the hazard at ``hazard_pos``.

        Returns:
            ``(finished, landing)``.  ``finished`` is True when the slide
            ended during the jump (fell, or stopped on food).  Otherwise
            ``landing`` is where to keep sliding from, or None if the
            jump failed and the hazard must be handled as a collision.
        """
        actor.clear_jump()
        hazard = self._describe(hazard_pos)
        landing = hazard_pos.step(direction)

        if not self.grid.is_valid(landing):
            self._record(EventKind.JUMPED, actor.name, None, hazard)
            self._fall(actor, hazard_pos, EventKind.FELL_INTO_WATER)
            return True, None

        occupants = self.grid.occupants_at(landing)
        if any(not isinstance(o, Item) for o in occupants):
            self._record(EventKind.JUMP_FAILED, actor.name, hazard_pos, hazard)
            return False, None

        self._record(EventKind.JUMPED, actor.name, landing, hazard)
        items = [o for o in occupants if isinstance(o, Item)]
        if items:
            self._settle(actor, landing)
            self._collect(actor, landing, items)
            return True, None
        return False, landing

    def _collide(
        self,
        actor: Actor,
        obstacle: Obstacle,
        stop: Position,
        direction: Direction,
    ) -> None:
        """Apply ``obstacle``'s collision effect to ``actor``.

        ``stop`` is the last free square before the obstacle.
        """
        match obstacle.kind:
            case ObstacleKind.HOLE:
                self._fall(actor, obstacle.position, EventKind.FELL_INTO_HOLE)
            case ObstacleKind.LIGHT_BLOCK:
                self._settle(actor, stop)
                actor.stunned = True
                self._record(EventKind.STUNNED, actor.name, stop, str(obstacle))
                self._record(EventKind.PUSHED, obstacle.tag, obstacle.position, str(direction))
                self.resolve_obstacle_slide(obstacle, direction)
            case ObstacleKind.HEAVY_BLOCK:
                self._settle(actor, stop)
                self._record(EventKind.STOPPED, actor.name, stop, str(obstacle))
                dropped = actor.drop_lightest()
                if dropped is not None:
                    self._record(EventKind.DROPPED, actor.name, stop, str(dropped))
            case ObstacleKind.SEA_LION:
                bounce = direction.opposite
                self._record(EventKind.BOUNCED, actor.name, stop, str(bounce))
                self._put(actor, stop)
                self._record(EventKind.PUSHED, obstacle.tag, obstacle.position, str(direction))
                self.resolve_obstacle_slide(obstacle, direction)
                self.resolve_actor_slide(actor, bounce)

    # -- Obstacle slide ------------------------------------------------------

    def _slide_obstacle(self, obstacle: Obstacle, direction: Direction) -> None:
        self.grid.remove(obstacle.position, obstacle)
        current = obstacle.position

        for _ in range(self.grid.size + 1):
            nxt = current.step(direction)

            if not self.grid.is_valid(nxt):
                self._record(EventKind.OBSTACLE_SUNK, obstacle.tag, None, "water")
                return

            occupants = self.grid.occupants_at(nxt)

            # Sliding obstacles plough straight through food.
            for item in (o for o in occupants if isinstance(o, Item)):
                self.grid.remove(nxt, item)
                self._record(EventKind.ITEM_DESTROYED, item.tag, nxt, obstacle.tag)

            actor = next((o for o in occupants if isinstance(o, Actor)), None)
            if actor is not None:
                self._put(obstacle, current)
                self._record(EventKind.OBSTACLE_STOPPED, obstacle.tag, current, actor.name)
                return

            other = self._first_blocker(occupants)
            if other is not None:
                if other.is_open_hole:
                    other.plug()
                    self._record(EventKind.OBSTACLE_SUNK, obstacle.tag, nxt, "hole")
                    self._record(EventKind.HOLE_PLUGGED, other.tag, nxt, obstacle.tag)
                    return
                self._put(obstacle, current)
                self._record(EventKind.OBSTACLE_STOPPED, obstacle.tag, current, other.tag)
                if (
                    obstacle.kind is ObstacleKind.LIGHT_BLOCK
                    and other.kind is ObstacleKind.SEA_LION
                ):
                    self._record(EventKind.PUSHED, other.tag, nxt, str(direction))
                    self.resolve_obstacle_slide(other, direction)
                return

            current = nxt

        msg = f"{obstacle.tag} slid past the edge of a {self.grid.size}-cell grid"
        raise SlideError(msg)

    # -- Helpers -------------------------------------------------------------

    @contextmanager
    def _nested(self) -> Iterator[None]:
        """Count one level of slide nesting for the duration of the block."""
        self._depth += 1
        try:
            if self._depth > self.max_chain_depth:
                raise ChainReactionLimitError(self.max_chain_depth)
            yield
        finally:
            self._depth -= 1

    @staticmethod
    def _first_blocker(occupants: tuple[TerrainObject, ...]) -> Obstacle | None:
        """Return the first obstacle that a slider cannot pass over."""
        for obj in occupants:
            if isinstance(obj, Obstacle) and not obj.is_passable:
                return obj
        return None

    def _can_rest_on(self, pos: Position) -> bool:
        """Return True if a voluntary stop may end on ``pos``."""
        return all(
            isinstance(o, Obstacle) and o.is_passable
            for o in self.grid.occupants_at(pos)
        )

    def _put(self, obj: TerrainObject, pos: Position) -> None:
        obj.position = pos
        self.grid.place(pos, obj)

    def _settle(self, actor: Actor, pos: Position) -> None:
        """Bring ``actor`` to rest on ``pos`` and end its slide."""
        self._put(actor, pos)
        actor.end_slide()
        actor.clear_jump()

    def _fall(self, actor: Actor, pos: Position, kind: EventKind) -> None:
        """Take ``actor`` out of the game.  It is already off the grid."""
        actor.position = pos
        actor.fallen = True
        actor.end_slide()
        actor.clear_jump()
        self._record(kind, actor.name, pos if kind is EventKind.FELL_INTO_HOLE else None)

    def _collect(self, actor: Actor, pos: Position, items: list[Item]) -> None:
        for item in items:
            self.grid.remove(pos, item)
            actor.collect(item)
            self._record(EventKind.COLLECTED, actor.name, pos, str(item))

    def _describe(self, pos: Position) -> str:
        for obj in self.grid.occupants_at(pos):
            if isinstance(obj, Obstacle):
                return obj.kind.display_name
        return "hazard"

    def _record(
        self,
        kind: EventKind,
        subject: str,
        position: Position | None = None,
        detail: str = "",
    ) -> None:
        event = SlideEvent(kind=kind, subject=subject, position=position, detail=detail)
        logger.debug("%s %s at %s %s", kind.name, subject, position, detail)
        self.events.record(event)
