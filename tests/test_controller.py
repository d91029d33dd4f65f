from __future__ import annotations

import io

import pytest

from antwar.config import GameConfig
from antwar.controller import Controller, run_with_ai
from antwar.errors import DesyncError
from antwar.protocol import RoundInfo, TokenReader, encode_operations
from antwar.units import Ant, AntState, Operation, OperationType as Op, Tower, TowerType


def _make_controller(player: int = 0, text: str = "", config: GameConfig | None = None) -> Controller:
    return Controller(player, 0, TokenReader(io.StringIO(text)), io.BytesIO(), config)


def _build_ai(player, state):
    return [Operation(Op.BUILD_TOWER, 5, 9)]


def test_snapshot_extends_paths() -> None:
    controller = _make_controller()
    controller.update_from_round_info(RoundInfo(0, ants=[Ant(0, 0, 2, 9, hp=10)], coins=(50, 50), base_hp=(50, 50)))
    controller.update_from_round_info(RoundInfo(1, ants=[Ant(0, 0, 3, 9, hp=10, age=1)], coins=(51, 51), base_hp=(50, 50)))
    ant = controller.state.ant_of_id(0)
    assert ant.path == [4]
    assert (ant.x, ant.y, ant.age) == (3, 9, 1)
    assert controller.state.next_ant_id == 1
    assert controller.state.coins == [51, 51]
    assert controller.state.round == 1


def test_snapshot_terminal_ant_deposits_and_leaves() -> None:
    controller = _make_controller()
    controller.update_from_round_info(RoundInfo(0, ants=[Ant(0, 0, 2, 9, hp=10)], coins=(50, 50), base_hp=(50, 50)))
    controller.update_from_round_info(
        RoundInfo(1, ants=[Ant(0, 0, 3, 9, hp=0, age=1, state=AntState.FAIL)], coins=(50, 50), base_hp=(50, 50))
    )
    assert controller.state.ants == {}
    # Two snapshots, two attenuations
    assert controller.state.pheromone[0, 3, 9] == pytest.approx(0.97 * (0.97 * 8 + 0.3) + 0.3 - 5)


def test_snapshot_jump_is_desync() -> None:
    controller = _make_controller()
    controller.update_from_round_info(RoundInfo(0, ants=[Ant(0, 0, 2, 9, hp=10)], coins=(50, 50), base_hp=(50, 50)))
    with pytest.raises(DesyncError):
        controller.update_from_round_info(
            RoundInfo(1, ants=[Ant(0, 0, 6, 9, hp=10, age=1)], coins=(50, 50), base_hp=(50, 50))
        )


def test_snapshot_replaces_towers() -> None:
    controller = _make_controller()
    controller.state.build_tower(0, 0, 5, 9)
    tower = Tower(3, 1, 9, 2, TowerType.QUICK, 1)
    controller.update_from_round_info(RoundInfo(1, towers=[tower], coins=(50, 50), base_hp=(50, 50)))
    assert controller.state.all_towers() == [tower]
    assert controller.state.next_tower_id == 4


def test_self_operations_gated() -> None:
    controller = _make_controller()
    assert controller.append_self_operation(Operation(Op.BUILD_TOWER, 5, 9))
    assert not controller.append_self_operation(Operation(Op.BUILD_TOWER, 5, 9))
    controller.send_self_operations()
    assert controller.writer.getvalue() == encode_operations([Operation(Op.BUILD_TOWER, 5, 9)])
    controller.apply_self_operations()
    assert controller.state.coins[0] == 35


def test_opponent_operations_applied() -> None:
    controller = _make_controller(player=0, text="1\n11 9 2\n")
    controller.read_opponent_operations()
    controller.apply_opponent_operations()
    assert controller.state.tower_at(9, 2).player == 1
    assert controller.state.coins[1] == 35


def test_run_as_player_zero() -> None:
    stdin = io.StringIO("0 0\n0\n1\n1\n0 0 5 9 0 1\n0\n36 51\n50 50\n")
    stdout = io.BytesIO()
    controller = Controller.connect(stdin, stdout)
    run_with_ai(_build_ai, controller)

    # Second round the cell is taken, so an empty batch goes out
    assert stdout.getvalue() == encode_operations([Operation(Op.BUILD_TOWER, 5, 9)]) + encode_operations([])
    assert controller.state.round == 1
    assert controller.state.tower_at(5, 9).cd == 1
    assert controller.state.coins == [36, 51]


def test_run_as_player_one_reads_first() -> None:
    stdin = io.StringIO("1 0\n1\n11 5 9\n")
    stdout = io.BytesIO()
    controller = Controller.connect(stdin, stdout)
    seen = []

    def ai(player, state):
        seen.append((player, state.tower_at(5, 9) is not None))
        return [Operation(Op.BUILD_TOWER, 9, 2)]

    run_with_ai(ai, controller)
    assert seen == [(1, True)]
    assert stdout.getvalue() == encode_operations([Operation(Op.BUILD_TOWER, 9, 2)])


def test_configured_seed_overrides_judge() -> None:
    a = _make_controller(config=GameConfig(seed=7))
    b = Controller(0, 99, TokenReader(io.StringIO("")), io.BytesIO(), GameConfig(seed=7))
    assert (a.state.pheromone == b.state.pheromone).all()


def test_seed_override_is_logged(caplog) -> None:
    with caplog.at_level("WARNING", logger="antwar.controller"):
        Controller(0, 99, TokenReader(io.StringIO("")), io.BytesIO(), GameConfig(seed=7))
    assert "replaces judge seed 99" in caplog.text

    caplog.clear()
    with caplog.at_level("WARNING", logger="antwar.controller"):
        Controller(0, 7, TokenReader(io.StringIO("")), io.BytesIO(), GameConfig(seed=7))
    assert caplog.text == ""


def test_dump_path_written(tmp_path) -> None:
    path = tmp_path / "rounds.dump"
    controller = _make_controller(config=GameConfig(dump_path=str(path)))
    controller.update_from_round_info(RoundInfo(4, coins=(50, 50), base_hp=(50, 50)))
    assert path.read_text().startswith("4\n0\n0\n50 50\n50 50\n")
