from __future__ import annotations

import io

import pytest

from antwar.errors import EndOfInput, ProtocolError
from antwar.protocol import (
    TokenReader, encode_operations, read_init_info, read_opponent_operations, read_round_info,
)
from antwar.state import GameState
from antwar.units import AntState, Operation, OperationType as Op, Tower, TowerType, Ant


def _reader(text: str) -> TokenReader:
    return TokenReader(io.StringIO(text))


def test_empty_batch_frame() -> None:
    assert encode_operations([]) == b"\x00\x00\x00\x020\n"


def test_batch_frame_length() -> None:
    ops = [Operation(Op.BUILD_TOWER, 5, 9), Operation(Op.UPGRADE_GENERATED_ANT), Operation(Op.DOWNGRADE_TOWER, 12)]
    frame = encode_operations(ops)
    body = b"3\n11 5 9\n32\n13 12\n"
    assert frame[4:] == body
    assert int.from_bytes(frame[:4], "big") == len(body)


def test_read_init_info() -> None:
    assert read_init_info(_reader("1 123456789\n")) == (1, 123456789)
    with pytest.raises(ProtocolError):
        read_init_info(_reader("2 5\n"))


def test_read_opponent_operations_by_arity() -> None:
    ops = read_opponent_operations(_reader("4\n11 5 9\n13 4\n31\n21 3 9\n"))
    assert ops == [
        Operation(Op.BUILD_TOWER, 5, 9),
        Operation(Op.DOWNGRADE_TOWER, 4),
        Operation(Op.UPGRADE_GENERATION_SPEED),
        Operation(Op.USE_LIGHTNING_STORM, 3, 9),
    ]


def test_tokens_span_lines() -> None:
    reader = _reader("2\n11\n5 9 32")
    assert read_opponent_operations(reader) == [
        Operation(Op.BUILD_TOWER, 5, 9),
        Operation(Op.UPGRADE_GENERATED_ANT),
    ]


def test_read_round_info() -> None:
    text = "7\n1\n0 0 5 9 1 1\n2\n3 1 15 9 10 0 1 0\n4 0 2 9 0 0 5 2\n41 60\n50 48\n"
    info = read_round_info(_reader(text))
    assert info.round == 7
    assert info.towers == [Tower(0, 0, 5, 9, TowerType.HEAVY, 1)]
    assert info.ants[0] == Ant(3, 1, 15, 9, 10, 0, 1, AntState.ALIVE)
    assert info.ants[1].state == AntState.FAIL
    assert info.coins == (41, 60)
    assert info.base_hp == (50, 48)


def test_dump_reads_back_as_round_info() -> None:
    state = GameState(seed=3)
    state.round = 9
    state.build_tower(0, 1, 9, 2)
    state.add_ant(Ant(0, 0, 2, 9, hp=10))
    out = io.StringIO()
    state.dump(out)
    info = read_round_info(_reader(out.getvalue()))
    assert info.round == 9
    assert info.towers == state.all_towers()
    assert info.ants == state.all_ants()
    assert info.coins == (50, 50)


def test_truncated_input() -> None:
    with pytest.raises(EndOfInput):
        read_round_info(_reader("3\n1\n0 0 5"))


def test_malformed_input() -> None:
    with pytest.raises(ProtocolError):
        read_opponent_operations(_reader("1\n11 five 9\n"))
    with pytest.raises(ProtocolError):
        read_opponent_operations(_reader("1\n77 1 1\n"))
    with pytest.raises(ProtocolError):
        read_round_info(_reader("1\n1\n0 0 5 9 4 0\n"))


def test_out_of_range_owner_and_level() -> None:
    # Ant fields: id player x y hp level age state
    with pytest.raises(ProtocolError):
        read_round_info(_reader("1\n0\n1\n0 2 2 9 10 0 0 0\n50 50\n50 50\n"))
    with pytest.raises(ProtocolError):
        read_round_info(_reader("1\n0\n1\n0 0 2 9 10 3 0 0\n50 50\n50 50\n"))
    with pytest.raises(ProtocolError):
        read_round_info(_reader("1\n0\n1\n0 0 2 9 10 -1 0 0\n50 50\n50 50\n"))
    with pytest.raises(ProtocolError):
        read_round_info(_reader("1\n1\n0 5 5 9 0 0\n0\n50 50\n50 50\n"))
