"""Console front end — board rendering, narration and player prompts.

Nothing here changes game state.  The board is drawn as a bordered
table; each cell shows the most important occupant (penguin, then
obstacle, then food).
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from icefloe.engine.abilities import AbilityOutcome
from icefloe.engine.events import EventKind
from icefloe.players.ai import TurnDecision
from icefloe.terrain.actor import Actor, ActorKind
from icefloe.terrain.objects import Item, Obstacle
from icefloe.world.position import Direction, Position

if TYPE_CHECKING:
    from icefloe.engine.abilities import AbilityResult
    from icefloe.engine.events import SlideEvent
    from icefloe.simulation.game import Game, TurnReport
    from icefloe.terrain.objects import TerrainObject
    from icefloe.world.grid import Grid

_CELL_WIDTH = 4
_PLACES = ("1st", "2nd", "3rd")

_NARRATION: dict[EventKind, str] = {
    EventKind.STOPPED: "{subject} hits a {detail} and stops.",
    EventKind.FELL_INTO_WATER: "{subject} falls into the water!",
    EventKind.FELL_INTO_HOLE: "{subject} falls into the HoleInIce!",
    EventKind.COLLECTED: "{subject} takes the {detail} on the ground.",
    EventKind.VOLUNTARY_STOP: "{subject} stops at an empty square using its special action.",
    EventKind.JUMPED: "{subject} jumps over the {detail} in its path.",
    EventKind.JUMP_FAILED: "{subject} tries to jump the {detail} but the landing spot is occupied!",
    EventKind.COLLIDED: "{subject} collides with {detail}!",
    EventKind.STUNNED: "{subject} hits a LightIceBlock and is STUNNED!",
    EventKind.DROPPED: "{subject} drops {detail} as a penalty.",
    EventKind.BOUNCED: "{subject} hits a SeaLion and bounces back {detail}!",
    EventKind.PUSHED: "{subject} starts sliding {detail}.",
    EventKind.OBSTACLE_STOPPED: "{subject} stops at {detail}.",
    EventKind.OBSTACLE_SUNK: "{subject} falls into the {detail}!",
    EventKind.HOLE_PLUGGED: "{detail} PLUGS the HoleInIce!",
    EventKind.ITEM_DESTROYED: "{detail} destroys the {subject}!",
}

_REMOVED = {EventKind.FELL_INTO_WATER, EventKind.FELL_INTO_HOLE}


def cell_tag(occupants: tuple[TerrainObject, ...]) -> str:
    """Return the tag shown for a cell: penguin > obstacle > food."""
    for kind in (Actor, Obstacle, Item):
        for obj in occupants:
            if isinstance(obj, kind):
                return obj.tag
    return ""


def render_grid(grid: Grid) -> str:
    """Render the board as a bordered text table."""
    separator = "-" * (grid.size * (_CELL_WIDTH + 1) + 1)
    lines = [separator]
    for y in range(grid.size):
        row = "|"
        for x in range(grid.size):
            tag = cell_tag(grid.occupants_at(Position(x, y)))
            row += f" {tag:<2} |"
        lines += [row, separator]
    return "\n".join(lines)


def narrate(event: SlideEvent) -> list[str]:
    """Turn an engine event into one or more lines of narration."""
    template = _NARRATION[event.kind]
    lines = [template.format(subject=event.subject, detail=event.detail)]
    if event.kind in _REMOVED:
        lines.append(f"*** {event.subject} IS REMOVED FROM THE GAME!")
    return lines


def narrate_ability(actor: Actor, result: AbilityResult) -> list[str]:
    """Describe the outcome of a special ability."""
    name = actor.name
    match result.outcome:
        case AbilityOutcome.ALREADY_USED:
            return [f"{name} has already used its special action."]
        case AbilityOutcome.STOP_ARMED:
            square = actor.kind.stop_threshold
            return [f"{name} will stop on square {square} of its slide."]
        case AbilityOutcome.STEPPED:
            lines = [f"{name} moves one square {result.direction}."]
            lines += [f"{name} takes the {item} on the ground." for item in result.collected]
            return lines
        case AbilityOutcome.BLOCKED:
            return [
                f"{name} cannot step there! Blocked by {result.detail}.",
                f"{name}'s special action is wasted.",
            ]
        case AbilityOutcome.FELL:
            where = "water" if result.detail == "water" else "HoleInIce"
            return [
                f"{name} accidentally steps into the {where}!",
                f"*** {name} IS REMOVED FROM THE GAME!",
            ]
        case AbilityOutcome.JUMP_READY:
            return [f"{name} prepares to jump over a hazard in its path."]
        case AbilityOutcome.NO_TARGET:
            return [f"{name} finds nothing to jump; its special action is wasted."]


def narrate_turn(report: TurnReport) -> list[str]:
    """Describe a whole turn, including the special ability and slide."""
    actor = report.actor
    suffix = " (Your Penguin)" if actor.player_controlled else ""
    lines = [f"*** Turn {report.round} - {actor.name}{suffix}:"]
    if report.skipped:
        lines.append(f"{actor.name}'s turn is SKIPPED.")
        return lines
    decision = report.decision
    if decision is not None:
        if report.ability is not None:
            lines.append(f"{actor.name} chooses to USE its special action.")
            lines += narrate_ability(actor, report.ability)
        elif not actor.special_used:
            lines.append(f"{actor.name} does NOT use its special action.")
        if report.events:
            lines.append(f"{actor.name} chooses to move {actor.last_direction}.")
    for event in report.events:
        lines += narrate(event)
    if report.aborted:
        lines.append("The chain reaction goes on too long and the ice freezes in place.")
    return lines


def render_roster(game: Game) -> str:
    """List every penguin with its kind, marking the player's."""
    lines = ["These are the penguins on the icy terrain:"]
    for actor in game.actors:
        marker = " ---> YOUR PENGUIN" if actor.player_controlled else ""
        lines.append(f"- {actor.name}: {actor.kind.value}{marker}")
    return "\n".join(lines)


def render_scoreboard(actors: list[Actor]) -> str:
    """Render the final ranking (``actors`` already sorted)."""
    lines = ["***** SCOREBOARD FOR THE PENGUINS *****"]
    for i, actor in enumerate(actors):
        place = _PLACES[i] if i < len(_PLACES) else f"{i + 1}th"
        marker = " (Your Penguin)" if actor.player_controlled else ""
        food = ", ".join(f"{item.tag} ({item.weight} units)" for item in actor.inventory)
        lines += [
            f"* {place} place: {actor.name}{marker}",
            f"  |---> Food items: {food or 'none'}",
            f"  |---> Total weight: {actor.score} units",
        ]
    return "\n".join(lines)


# -- Player input ------------------------------------------------------------


def prompt_yes_no(question: str, read: Callable[[str], str] = input) -> bool:
    """Ask until the answer is Y or N."""
    while True:
        answer = read(f"{question} --> ").strip().upper()
        if answer in ("Y", "N"):
            return answer == "Y"
        print("Invalid input. Please enter Y or N.")


def prompt_direction(question: str, read: Callable[[str], str] = input) -> Direction:
    """Ask until the answer parses as U, D, L or R."""
    while True:
        try:
            return Direction.from_key(read(f"{question} --> "))
        except ValueError:
            print("Invalid input. Please enter U, D, L, or R.")


def console_controller(
    read: Callable[[str], str] = input,
) -> Callable[[Game, Actor], TurnDecision]:
    """Build a controller that asks the human player for each decision.

    A ROYAL that steps is asked for its slide direction only after the
    step, when the turn controller calls back a second time.
    """
    keys = "Answer with U (Up), D (Down), L (Left), R (Right)"
    stepped: set[str] = set()

    def decide(game: Game, actor: Actor) -> TurnDecision:
        if actor.name in stepped:
            stepped.discard(actor.name)
            print(f"{actor.name} is now at {actor.position}.")
            slide = prompt_direction(f"Which direction will {actor.name} move? {keys}", read)
            return TurnDecision(slide)
        use_special = False
        if not actor.special_used:
            use_special = prompt_yes_no(
                f"Will {actor.name} use its special action? Answer with Y or N",
                read,
            )
        if use_special and actor.kind is ActorKind.ROYAL:
            step = prompt_direction(
                f"Which direction will {actor.name} step? {keys}",
                read,
            )
            stepped.add(actor.name)
            return TurnDecision(None, use_special=True, special_direction=step)
        slide = prompt_direction(f"Which direction will {actor.name} move? {keys}", read)
        return TurnDecision(slide, use_special=use_special)

    return decide
