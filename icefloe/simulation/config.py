"""Config — load game parameters from YAML files.

All tunable constants (board size, population counts, food weights, AI
behaviour, engine safety limits) live in YAML and are parsed into a
typed dataclass here.  Missing keys fall back to the defaults below.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import yaml


@dataclass
class GameConfig:
    """Top-level game configuration.

    Attributes:
        seed: RNG seed for deterministic replay.
        grid_size: Number of rows and columns on the board.
        actor_count: Penguins placed on the edge cells.
        obstacle_count: Obstacles placed on random empty cells.
        item_count: Food items placed on random empty cells.
        total_rounds: Rounds played; each penguin acts once per round.
        min_item_weight: Lightest possible food item.
        max_item_weight: Heaviest possible food item.
        ai_special_chance: Probability that a computer penguin uses its
            special ability on a given turn (ROCKHOPPER ignores this).
        max_chain_depth: Cap on nested slides in one chain reaction.
        player_controlled: If True, one random penguin is the player's.
    """

    seed: int = 42
    grid_size: int = 10
    actor_count: int = 3
    obstacle_count: int = 15
    item_count: int = 20
    total_rounds: int = 4

    # Food
    min_item_weight: int = 1
    max_item_weight: int = 5

    # AI
    ai_special_chance: float = 0.30

    # Engine
    max_chain_depth: int = 64

    player_controlled: bool = False

    def __post_init__(self) -> None:
        """Reject boards that cannot hold the requested population."""
        if self.min_item_weight > self.max_item_weight:
            msg = (
                f"min_item_weight ({self.min_item_weight}) exceeds "
                f"max_item_weight ({self.max_item_weight})"
            )
            raise ValueError(msg)
        edge_cells = max(1, 4 * (self.grid_size - 1))
        if self.actor_count > edge_cells:
            msg = f"{self.actor_count} penguins do not fit on {edge_cells} edge cells"
            raise ValueError(msg)
        population = self.actor_count + self.obstacle_count + self.item_count
        if population > self.grid_size * self.grid_size:
            msg = f"{population} objects do not fit on a {self.grid_size}x{self.grid_size} grid"
            raise ValueError(msg)

    @classmethod
    def from_yaml(cls, path: str | Path) -> GameConfig:
        """Load configuration from a YAML file.

        Args:
            path: Path to the YAML config file.

        Returns:
            A populated GameConfig instance.

        Raises:
            FileNotFoundError: If the config file does not exist.
        """
        path = Path(path)
        with path.open("r") as f:
            data = yaml.safe_load(f) or {}

        return cls(
            seed=data.get("seed", cls.seed),
            grid_size=data.get("grid_size", cls.grid_size),
            actor_count=data.get("actor_count", cls.actor_count),
            obstacle_count=data.get("obstacle_count", cls.obstacle_count),
            item_count=data.get("item_count", cls.item_count),
            total_rounds=data.get("total_rounds", cls.total_rounds),
            min_item_weight=data.get("min_item_weight", cls.min_item_weight),
            max_item_weight=data.get("max_item_weight", cls.max_item_weight),
            ai_special_chance=data.get(
                "ai_special_chance",
                cls.ai_special_chance,
            ),
            max_chain_depth=data.get("max_chain_depth", cls.max_chain_depth),
            player_controlled=data.get(
                "player_controlled",
                cls.player_controlled,
            ),
        )
