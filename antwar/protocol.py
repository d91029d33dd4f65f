"""
Judge wire format.

Input is whitespace-separated decimal integers on a text stream. Output
is a 4-byte big-endian length header followed by the operation count and
one line per operation.
"""

import logging
from dataclasses import dataclass, field
from typing import BinaryIO, Iterator, TextIO

from .errors import EndOfInput, ProtocolError
from .units import Ant, AntState, Operation, OperationType, Tower, TowerType

logger = logging.getLogger(__name__)


# Number of arguments following each operation code on the wire
ARG_COUNT = {
    OperationType.UPGRADE_GENERATION_SPEED: 0,
    OperationType.UPGRADE_GENERATED_ANT: 0,
    OperationType.DOWNGRADE_TOWER: 1,
}


@dataclass
class RoundInfo:
    """Authoritative snapshot the judge sends after each round."""
    round: int
    towers: list[Tower] = field(default_factory=list)
    ants: list[Ant] = field(default_factory=list)
    coins: tuple[int, int] = (0, 0)
    base_hp: tuple[int, int] = (0, 0)


class TokenReader:
    """Reads integers one at a time from a text stream."""

    def __init__(self, stream: TextIO):
        self.stream = stream
        self._tokens: Iterator[str] = iter(())

    def _next_token(self) -> str:
        for token in self._tokens:
            return token
        for line in self.stream:
            words = line.split()
            if words:
                self._tokens = iter(words[1:])
                return words[0]
        raise EndOfInput("Unexpected end of input")

    def read_int(self) -> int:
        token = self._next_token()
        try:
            return int(token)
        except ValueError:
            raise ProtocolError(f"Expected an integer, got {token!r}") from None

    def read_ints(self, n: int) -> list[int]:
        return [self.read_int() for _ in range(n)]


def read_init_info(reader: TokenReader) -> tuple[int, int]:
    """Player id and pheromone seed."""
    player, seed = reader.read_ints(2)
    if player not in (0, 1):
        raise ProtocolError(f"Invalid player id {player}")
    return player, seed


def read_operation(reader: TokenReader) -> Operation:
    code = reader.read_int()
    try:
        op_type = OperationType(code)
    except ValueError:
        raise ProtocolError(f"Unknown operation type {code}") from None
    args = reader.read_ints(ARG_COUNT.get(op_type, 2))
    return Operation(op_type, *args)


def read_opponent_operations(reader: TokenReader) -> list[Operation]:
    count = reader.read_int()
    return [read_operation(reader) for _ in range(count)]


def read_round_info(reader: TokenReader) -> RoundInfo:
    info = RoundInfo(round=reader.read_int())

    for _ in range(reader.read_int()):
        tower_id, player, x, y, tower_type, cd = reader.read_ints(6)
        if player not in (0, 1):
            raise ProtocolError(f"Invalid player id {player} for tower {tower_id}")
        try:
            info.towers.append(Tower(tower_id, player, x, y, TowerType(tower_type), cd))
        except ValueError:
            raise ProtocolError(f"Unknown tower type {tower_type}") from None

    for _ in range(reader.read_int()):
        ant_id, player, x, y, hp, level, age, state = reader.read_ints(8)
        if player not in (0, 1):
            raise ProtocolError(f"Invalid player id {player} for ant {ant_id}")
        if not 0 <= level < len(Ant.MAX_HP):
            raise ProtocolError(f"Invalid level {level} for ant {ant_id}")
        try:
            info.ants.append(Ant(ant_id, player, x, y, hp, level, age, AntState(state)))
        except ValueError:
            raise ProtocolError(f"Unknown ant state {state}") from None

    info.coins = tuple(reader.read_ints(2))
    info.base_hp = tuple(reader.read_ints(2))
    logger.debug(f"Round {info.round}: {len(info.towers)} towers, {len(info.ants)} ants")
    return info


def encode_operations(ops: list[Operation]) -> bytes:
    """Framed batch: length header, count line, one line per operation."""
    body = f"{len(ops)}\n" + "".join(f"{op}\n" for op in ops)
    payload = body.encode("ascii")
    return len(payload).to_bytes(4, "big") + payload


def send_operations(writer: BinaryIO, ops: list[Operation]):
    writer.write(encode_operations(ops))
    writer.flush()
