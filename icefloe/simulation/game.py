"""Game — board setup and the round-robin turn loop.

Owns all top-level game state and plays it in the canonical order:

1. Populate the board (penguins on edge cells, then obstacles, then food)
2. For each round, every penguin in roster order takes one turn:
   a. Fallen penguins are skipped; stunned penguins lose this turn
   b. The penguin decides (AI heuristic or the player's controller)
   c. Its special ability is used, if chosen
   d. The slide engine resolves the slide and any chain reaction
3. After the last round, penguins are ranked by collected weight
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field, replace

import numpy as np
from numpy.random import Generator

from icefloe.engine.abilities import AbilityResult, activate_special
from icefloe.engine.errors import ChainReactionLimitError
from icefloe.engine.events import SlideEvent
from icefloe.engine.slide import SlideEngine
from icefloe.players import ai
from icefloe.players.ai import TurnDecision
from icefloe.simulation.config import GameConfig
from icefloe.terrain.actor import Actor, ActorKind
from icefloe.terrain.objects import FoodCategory, Item, Obstacle, ObstacleKind
from icefloe.world.grid import Grid
from icefloe.world.position import Position

logger = logging.getLogger(__name__)

Controller = Callable[["Game", Actor], TurnDecision]


@dataclass
class TurnReport:
    """Outcome of a single penguin's turn.

    Attributes:
        actor: The penguin whose turn it was.
        round: 1-based round number.
        skipped: True if the turn was lost to a stun or a fall.
        aborted: True if the slide was cut short by the chain limit.
        decision: What the penguin chose to do (None when skipped).
        ability: Result of the special ability, if one was used.
        events: Engine events produced during the turn.
    """

    actor: Actor
    round: int
    skipped: bool = False
    aborted: bool = False
    decision: TurnDecision | None = None
    ability: AbilityResult | None = None
    events: list[SlideEvent] = field(default_factory=list)


@dataclass
class Game:
    """Drives a game forward turn by turn.

    Attributes:
        config: Loaded game configuration.
        controller: Decision callback for the player's penguin.  When
            None, every penguin is played by the AI.
        grid: The board; owns every live object.
        engine: Slide engine bound to ``grid``.
        actors: Roster of every penguin, fallen ones included.
        rng: Master seeded random generator.
        round: Number of completed rounds.
    """

    config: GameConfig
    controller: Controller | None = None
    grid: Grid = field(init=False)
    engine: SlideEngine = field(init=False)
    actors: list[Actor] = field(init=False, default_factory=list)
    rng: Generator = field(init=False)
    round: int = 0

    def __post_init__(self) -> None:
        """Build grid, engine and RNG from config and populate the board."""
        self.rng = np.random.default_rng(self.config.seed)
        self.grid = Grid(size=self.config.grid_size)
        self.engine = SlideEngine(
            self.grid,
            max_chain_depth=self.config.max_chain_depth,
        )
        self.populate()

    # -- Setup ---------------------------------------------------------------

    def populate(self) -> None:
        """Place penguins, obstacles and food on random empty cells."""
        kinds = list(ActorKind)
        for i in range(self.config.actor_count):
            pos = self._random_empty(edge_only=True)
            kind = kinds[int(self.rng.integers(len(kinds)))]
            self.add_actor(Actor(position=pos, name=f"P{i + 1}", kind=kind))

        if self.config.player_controlled and self.actors:
            player = self.actors[int(self.rng.integers(len(self.actors)))]
            player.player_controlled = True

        obstacle_kinds = list(ObstacleKind)
        for _ in range(self.config.obstacle_count):
            pos = self._random_empty()
            kind = obstacle_kinds[int(self.rng.integers(len(obstacle_kinds)))]
            self.grid.place(pos, Obstacle(position=pos, kind=kind))

        categories = list(FoodCategory)
        for _ in range(self.config.item_count):
            pos = self._random_empty()
            category = categories[int(self.rng.integers(len(categories)))]
            weight = int(
                self.rng.integers(
                    self.config.min_item_weight,
                    self.config.max_item_weight + 1,
                ),
            )
            self.grid.place(pos, Item(position=pos, category=category, weight=weight))

    def add_actor(self, actor: Actor) -> None:
        """Put a penguin on the board and append it to the roster."""
        self.grid.place(actor.position, actor)
        self.actors.append(actor)

    def _random_empty(self, *, edge_only: bool = False) -> Position:
        candidates = self.grid.empty_positions(edge_only=edge_only)
        if not candidates:
            msg = "no empty cell left to place an object"
            raise RuntimeError(msg)
        return candidates[int(self.rng.integers(len(candidates)))]

    # -- Turn loop -----------------------------------------------------------

    @property
    def player(self) -> Actor | None:
        """The player's penguin, if there is one."""
        return next((a for a in self.actors if a.player_controlled), None)

    @property
    def is_over(self) -> bool:
        """Return True once all rounds are played or every penguin fell."""
        return self.round >= self.config.total_rounds or all(
            a.fallen for a in self.actors
        )

    def play_turn(self, actor: Actor) -> TurnReport:
        """Play one penguin's turn.

        Args:
            actor: The penguin to move.

        Returns:
            A TurnReport describing what happened.
        """
        report = TurnReport(actor=actor, round=self.round + 1)

        # A prepared jump only lasts for the turn it was prepared in.
        actor.clear_jump()

        if actor.fallen:
            report.skipped = True
            return report
        if actor.stunned:
            actor.stunned = False
            report.skipped = True
            logger.info("%s is stunned and skips round %d", actor.name, report.round)
            return report

        decision = self._decide(actor)
        report.decision = decision
        slide = decision.slide_direction

        if decision.use_special and not actor.special_used:
            direction = decision.special_direction or slide
            if direction is None:
                msg = f"no direction given for {actor.name}'s special action"
                raise ValueError(msg)
            report.ability = activate_special(self.grid, actor, direction)
            if (
                actor.kind is ActorKind.ROYAL
                and not actor.player_controlled
                and not actor.fallen
            ):
                # The step changed the penguin's surroundings.
                slide = ai.choose_direction(self.grid, actor, self.rng)

        if slide is None and not actor.fallen:
            # The player picks the slide after seeing where the step landed.
            slide = self._decide(actor).slide_direction
            if slide is None:
                msg = f"no slide direction given for {actor.name}"
                raise ValueError(msg)
            report.decision = replace(decision, slide_direction=slide)

        if not actor.fallen:
            try:
                self.engine.resolve_actor_slide(actor, slide)
            except ChainReactionLimitError as exc:
                report.aborted = True
                logger.warning("round %d: %s - %s", report.round, actor.name, exc)
                for other in self.grid.actors():
                    other.end_slide()

        report.events = self.engine.events.drain()
        logger.info(
            "round %d: %s slid %s -> %s (score %d)",
            report.round,
            actor.name,
            slide,
            "fallen" if actor.fallen else actor.position,
            actor.score,
        )
        return report

    def play_round(
        self,
        on_turn: Callable[[TurnReport], None] | None = None,
    ) -> list[TurnReport]:
        """Give every penguin one turn, in roster order.

        Args:
            on_turn: Called with each report as soon as the turn ends.
        """
        reports: list[TurnReport] = []
        for actor in self.actors:
            report = self.play_turn(actor)
            if on_turn is not None:
                on_turn(report)
            reports.append(report)
        self.round += 1
        return reports

    def run(
        self,
        on_turn: Callable[[TurnReport], None] | None = None,
    ) -> list[TurnReport]:
        """Play all remaining rounds and return every turn report."""
        reports: list[TurnReport] = []
        while not self.is_over:
            reports.extend(self.play_round(on_turn))
        return reports

    def standings(self) -> list[Actor]:
        """Return penguins ranked by collected weight, heaviest first."""
        return sorted(self.actors, key=lambda a: a.score, reverse=True)

    def _decide(self, actor: Actor) -> TurnDecision:
        if actor.player_controlled and self.controller is not None:
            return self.controller(self, actor)
        return ai.decide(
            self.grid,
            actor,
            self.rng,
            self.config.ai_special_chance,
        )
