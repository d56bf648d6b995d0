"""Exceptions raised by the slide engine.

Ordinary game outcomes (falling, blocked steps, nothing to drop) are
never exceptions.  These signal that the caller broke the engine's
contract or that a chain reaction ran away.
"""

from __future__ import annotations


class SlideError(Exception):
    """Base class for slide engine failures."""


class SlideContractError(SlideError):
    """The engine was asked to move something it cannot move.

    Raised for fallen actors, objects missing from the grid, and
    obstacles that do not slide.  Usually means a roster or index kept
    by the caller still references a removed object.
    """


class ChainReactionLimitError(SlideError):
    """Nested slide resolution went deeper than the configured cap."""

    def __init__(self, depth: int) -> None:
        super().__init__(f"chain reaction exceeded {depth} nested slides")
        self.depth = depth
