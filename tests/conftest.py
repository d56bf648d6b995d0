"""Shared fixtures for the icefloe test suite."""

from __future__ import annotations

import numpy as np
import pytest
from numpy.random import Generator

from icefloe.engine.slide import SlideEngine
from icefloe.simulation.config import GameConfig
from icefloe.terrain.actor import Actor, ActorKind
from icefloe.terrain.objects import FoodCategory, Item, Obstacle, ObstacleKind
from icefloe.world.grid import Grid
from icefloe.world.position import Position


@pytest.fixture
def rng() -> Generator:
    """A deterministic random generator for reproducible tests."""
    return np.random.default_rng(seed=12345)


@pytest.fixture
def grid() -> Grid:
    """An empty 10x10 grid."""
    return Grid(size=10)


@pytest.fixture
def engine(grid: Grid) -> SlideEngine:
    """A slide engine bound to the empty grid fixture."""
    return SlideEngine(grid)


@pytest.fixture
def empty_config() -> GameConfig:
    """A config that leaves the board empty so tests can stage it."""
    return GameConfig(actor_count=0, obstacle_count=0, item_count=0)


def put_actor(
    grid: Grid,
    x: int,
    y: int,
    kind: ActorKind = ActorKind.ROYAL,
    name: str = "P1",
) -> Actor:
    """Place a new penguin at ``(x, y)`` and return it."""
    actor = Actor(position=Position(x, y), name=name, kind=kind)
    grid.place(actor.position, actor)
    return actor


def put_obstacle(grid: Grid, x: int, y: int, kind: ObstacleKind) -> Obstacle:
    """Place a new obstacle at ``(x, y)`` and return it."""
    obstacle = Obstacle(position=Position(x, y), kind=kind)
    grid.place(obstacle.position, obstacle)
    return obstacle


def put_item(
    grid: Grid,
    x: int,
    y: int,
    weight: int = 3,
    category: FoodCategory = FoodCategory.KRILL,
) -> Item:
    """Place a new food item at ``(x, y)`` and return it."""
    item = Item(position=Position(x, y), category=category, weight=weight)
    grid.place(item.position, item)
    return item


def assert_consistent(grid: Grid) -> None:
    """Every live object sits in exactly the bucket named by its position."""
    seen: list[object] = []
    for pos, bucket in grid.cells.items():
        assert grid.is_valid(pos)
        for obj in bucket:
            assert obj.position == pos
            assert not any(o is obj for o in seen)
            seen.append(obj)
    for actor in grid.actors():
        assert not actor.fallen
