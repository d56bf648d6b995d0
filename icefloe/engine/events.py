"""Slide events — a record of everything that happened during a turn.

The engine appends one ``SlideEvent`` per state transition.  The turn
controller drains them after each action and the console layer turns
them into narration.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from icefloe.world.position import Position


class EventKind(Enum):
    """Kinds of state transition reported by the engine."""

    # Actor outcomes
    STOPPED = auto()
    FELL_INTO_WATER = auto()
    FELL_INTO_HOLE = auto()
    COLLECTED = auto()
    VOLUNTARY_STOP = auto()
    JUMPED = auto()
    JUMP_FAILED = auto()
    COLLIDED = auto()
    STUNNED = auto()
    DROPPED = auto()
    BOUNCED = auto()
    # Obstacle outcomes
    PUSHED = auto()
    OBSTACLE_STOPPED = auto()
    OBSTACLE_SUNK = auto()
    HOLE_PLUGGED = auto()
    ITEM_DESTROYED = auto()


@dataclass(frozen=True)
class SlideEvent:
    """A single engine state transition.

    Attributes:
        kind: What happened.
        subject: Tag or name of the object it happened to.
        position: Where it happened (None when it left the grid).
        detail: Extra context, e.g. the other party of a collision.
    """

    kind: EventKind
    subject: str
    position: Position | None = None
    detail: str = ""


class EventLog:
    """Append-only buffer of events, drained once per turn."""

    def __init__(self) -> None:
        self._events: list[SlideEvent] = []

    def record(self, event: SlideEvent) -> None:
        self._events.append(event)

    def drain(self) -> list[SlideEvent]:
        """Return all buffered events and clear the buffer."""
        events, self._events = self._events, []
        return events

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[SlideEvent]:
        return iter(self._events)
