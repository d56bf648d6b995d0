"""Tests for icefloe.simulation — config loading and the turn loop."""

from pathlib import Path

import pytest
from conftest import assert_consistent, put_actor, put_item, put_obstacle

from icefloe.engine.abilities import AbilityOutcome
from icefloe.players.ai import TurnDecision
from icefloe.simulation.config import GameConfig
from icefloe.simulation.game import Game, TurnReport
from icefloe.terrain.actor import Actor, ActorKind
from icefloe.terrain.objects import FoodCategory, Item, ObstacleKind
from icefloe.world.position import Direction, Position

DEFAULT_YAML = Path(__file__).resolve().parent.parent / "config" / "default.yaml"


def board_tags(game: Game) -> list[tuple[Position, tuple[str, ...]]]:
    return [
        (pos, tuple(obj.tag for obj in bucket))
        for pos, bucket in game.grid.cells.items()
    ]


class TestGameConfig:
    """Tests for GameConfig defaults and YAML loading."""

    def test_defaults(self) -> None:
        config = GameConfig()
        assert config.grid_size == 10
        assert config.actor_count == 3
        assert config.obstacle_count == 15
        assert config.item_count == 20
        assert config.total_rounds == 4
        assert (config.min_item_weight, config.max_item_weight) == (1, 5)
        assert config.ai_special_chance == pytest.approx(0.30)
        assert config.max_chain_depth == 64
        assert not config.player_controlled

    def test_from_yaml_partial(self, tmp_path: Path) -> None:
        path = tmp_path / "game.yaml"
        path.write_text("seed: 7\ntotal_rounds: 2\n")
        config = GameConfig.from_yaml(path)
        assert config.seed == 7
        assert config.total_rounds == 2
        assert config.grid_size == 10

    def test_from_empty_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert GameConfig.from_yaml(path) == GameConfig()

    def test_shipped_default(self) -> None:
        config = GameConfig.from_yaml(DEFAULT_YAML)
        assert config.player_controlled
        assert config.item_count == 20

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            GameConfig.from_yaml(tmp_path / "nope.yaml")

    def test_rejects_inverted_weights(self) -> None:
        with pytest.raises(ValueError):
            GameConfig(min_item_weight=5, max_item_weight=1)

    def test_rejects_overcrowded_board(self) -> None:
        with pytest.raises(ValueError):
            GameConfig(grid_size=3, obstacle_count=10, item_count=0, actor_count=0)


class TestSetup:
    """Board population."""

    def test_population_counts(self) -> None:
        game = Game(GameConfig())
        assert [a.name for a in game.actors] == ["P1", "P2", "P3"]
        assert len(game.grid.actors()) == 3
        assert len(game.grid.obstacles()) == 15
        assert len(game.grid.items()) == 20
        assert_consistent(game.grid)

    def test_penguins_start_on_edges(self) -> None:
        game = Game(GameConfig(seed=3))
        assert all(a.position.is_edge(game.grid.size) for a in game.actors)

    def test_one_object_per_cell(self) -> None:
        game = Game(GameConfig(seed=11))
        assert all(len(bucket) <= 1 for bucket in game.grid.cells.values())

    def test_item_weights_in_range(self) -> None:
        game = Game(GameConfig(seed=5, min_item_weight=2, max_item_weight=3))
        assert {item.weight for item in game.grid.items()} <= {2, 3}

    def test_same_seed_same_board(self) -> None:
        assert board_tags(Game(GameConfig(seed=9))) == board_tags(
            Game(GameConfig(seed=9)),
        )

    def test_player_selection(self) -> None:
        game = Game(GameConfig(player_controlled=True))
        players = [a for a in game.actors if a.player_controlled]
        assert len(players) == 1
        assert game.player is players[0]

    def test_no_player_by_default(self) -> None:
        assert Game(GameConfig()).player is None

    def test_no_room_left(self) -> None:
        game = Game(GameConfig(grid_size=1, actor_count=0, obstacle_count=1, item_count=0))
        with pytest.raises(RuntimeError):
            game._random_empty()


class TestTurns:
    """Single turns on a hand-staged board."""

    def test_stunned_penguin_skips_once(self, empty_config: GameConfig) -> None:
        game = Game(empty_config)
        actor = put_actor(game.grid, 4, 4)
        game.actors.append(actor)
        actor.stunned = True
        actor.jump_target = Position(4, 8)

        report = game.play_turn(actor)

        assert report.skipped
        assert report.decision is None
        assert not actor.stunned
        assert actor.jump_target is None
        assert actor.position == Position(4, 4)

    def test_fallen_penguin_is_skipped(self, empty_config: GameConfig) -> None:
        game = Game(empty_config)
        actor = Actor(position=Position(0, 0), name="P1", kind=ActorKind.KING)
        actor.fallen = True
        game.actors.append(actor)
        report = game.play_turn(actor)
        assert report.skipped
        assert report.events == []

    def test_player_controller_drives_royal(self, empty_config: GameConfig) -> None:
        def controller(game: Game, actor: Actor) -> TurnDecision:
            return TurnDecision(
                Direction.RIGHT,
                use_special=True,
                special_direction=Direction.DOWN,
            )

        game = Game(empty_config, controller=controller)
        actor = Actor(position=Position(4, 4), name="P1", kind=ActorKind.ROYAL)
        actor.player_controlled = True
        game.add_actor(actor)
        put_item(game.grid, 4, 5, weight=3)
        put_item(game.grid, 7, 5, weight=2)

        report = game.play_turn(actor)

        assert report.ability is not None
        assert report.ability.outcome is AbilityOutcome.STEPPED
        assert actor.position == Position(7, 5)
        assert actor.score == 5
        assert report.events
        assert len(game.engine.events) == 0

    def test_royal_stepping_into_water_does_not_slide(
        self,
        empty_config: GameConfig,
    ) -> None:
        def controller(game: Game, actor: Actor) -> TurnDecision:
            return TurnDecision(
                Direction.RIGHT,
                use_special=True,
                special_direction=Direction.UP,
            )

        game = Game(empty_config, controller=controller)
        actor = Actor(position=Position(4, 0), name="P1", kind=ActorKind.ROYAL)
        actor.player_controlled = True
        game.add_actor(actor)

        report = game.play_turn(actor)

        assert report.ability is not None
        assert report.ability.outcome is AbilityOutcome.FELL
        assert report.events == []
        assert actor.fallen

    def test_runaway_chain_ends_the_turn(self) -> None:
        config = GameConfig(
            actor_count=0,
            obstacle_count=0,
            item_count=0,
            max_chain_depth=4,
        )
        game = Game(config, controller=lambda g, a: TurnDecision(Direction.RIGHT))
        put_obstacle(game.grid, 1, 3, ObstacleKind.HEAVY_BLOCK)
        put_obstacle(game.grid, 2, 3, ObstacleKind.SEA_LION)
        put_obstacle(game.grid, 6, 3, ObstacleKind.SEA_LION)
        put_obstacle(game.grid, 7, 3, ObstacleKind.HEAVY_BLOCK)
        actor = Actor(
            position=Position(4, 3),
            name="P1",
            kind=ActorKind.KING,
            player_controlled=True,
        )
        game.add_actor(actor)

        report = game.play_turn(actor)

        assert report.aborted
        assert game.grid.contains(actor)
        assert not actor.stop_armed
        assert_consistent(game.grid)


    def test_controller_without_slide_direction(self, empty_config: GameConfig) -> None:
        game = Game(empty_config, controller=lambda g, a: TurnDecision(None))
        actor = Actor(
            position=Position(4, 4),
            name="P1",
            kind=ActorKind.KING,
            player_controlled=True,
        )
        game.add_actor(actor)
        with pytest.raises(ValueError):
            game.play_turn(actor)


class TestRun:
    """Whole games played by the AI."""

    @pytest.mark.parametrize("seed", range(40))
    def test_board_stays_consistent_every_turn(self, seed: int) -> None:
        game = Game(GameConfig(seed=seed, total_rounds=6))

        def check(report: TurnReport) -> None:
            assert_consistent(game.grid)
            for actor in game.actors:
                assert game.grid.contains(actor) != actor.fallen

        game.run(on_turn=check)
        assert game.is_over
        assert game.round <= 6

    @pytest.mark.parametrize("seed", range(10))
    def test_crowded_board_terminates(self, seed: int) -> None:
        config = GameConfig(
            seed=seed,
            grid_size=6,
            actor_count=4,
            obstacle_count=16,
            item_count=10,
        )
        game = Game(config)
        game.run(on_turn=lambda report: assert_consistent(game.grid))
        assert game.is_over

    def test_runs_every_round(self) -> None:
        game = Game(GameConfig(seed=21))
        reports = game.run()
        assert game.is_over
        assert game.round <= 4
        assert len(reports) == 3 * game.round
        assert_consistent(game.grid)

    def test_on_turn_sees_every_report(self) -> None:
        game = Game(GameConfig(seed=4))
        seen = []
        reports = game.run(on_turn=seen.append)
        assert seen == reports

    def test_game_over_when_everyone_fell(self, empty_config: GameConfig) -> None:
        game = Game(empty_config)
        actor = Actor(position=Position(0, 0), name="P1", kind=ActorKind.KING)
        actor.fallen = True
        game.actors.append(actor)
        assert game.is_over
        assert game.run() == []

    def test_same_seed_same_game(self) -> None:
        first = Game(GameConfig(seed=13))
        second = Game(GameConfig(seed=13))
        first.run()
        second.run()
        assert [(a.name, a.score, a.fallen) for a in first.actors] == [
            (a.name, a.score, a.fallen) for a in second.actors
        ]
        assert board_tags(first) == board_tags(second)

    def test_food_is_never_created(self) -> None:
        game = Game(GameConfig(seed=8))
        before = sum(item.weight for item in game.grid.items())
        game.run()
        collected = sum(a.score for a in game.actors)
        remaining = sum(item.weight for item in game.grid.items())
        assert collected + remaining <= before
        carried = {id(item) for a in game.actors for item in a.inventory}
        assert not carried & {id(item) for item in game.grid.items()}

    def test_fallen_penguins_keep_their_food(self, empty_config: GameConfig) -> None:
        game = Game(empty_config)
        actor = put_actor(game.grid, 9, 4)
        game.actors.append(actor)
        item = put_item(game.grid, 0, 0, weight=4)
        game.grid.remove(item.position, item)
        actor.collect(item)
        game.engine.resolve_actor_slide(actor, Direction.RIGHT)
        assert actor.fallen
        assert game.standings()[0].score == 4

    def test_standings_sorted(self, empty_config: GameConfig) -> None:
        game = Game(empty_config)
        for i, weight in enumerate((2, 5, 3)):
            actor = put_actor(game.grid, i, 0, name=f"P{i + 1}")
            actor.collect(
                Item(position=Position(i, 9), category=FoodCategory.SQUID, weight=weight),
            )
            game.actors.append(actor)
        assert [a.name for a in game.standings()] == ["P2", "P3", "P1"]
