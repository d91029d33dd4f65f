"""
Live-game controller.

Mirrors the judge's state from the round snapshots it sends, applies both
players' operations locally between snapshots, and sends this player's
batch. run_with_ai drives the per-round turn order around an AI callback.
"""

import logging
import sys
from pathlib import Path
from typing import BinaryIO, Callable, Optional, TextIO

from . import protocol
from .config import GameConfig
from .errors import DesyncError, EndOfInput
from .gate import validate
from .map import get_direction
from .protocol import RoundInfo, TokenReader
from .state import GameState
from .units import Ant, Operation

logger = logging.getLogger(__name__)


class Controller:
    """One player's view of a running match."""

    def __init__(self, player_id: int, seed: int, reader: TokenReader, writer: BinaryIO,
                 config: Optional[GameConfig] = None):
        self.config = config or GameConfig()
        self.self_player_id = player_id
        self.reader = reader
        self.writer = writer
        if self.config.seed is not None and self.config.seed != seed:
            logger.warning(f"Configured seed {self.config.seed} replaces judge seed {seed}; "
                           f"local pheromone will not match the judge")
            seed = self.config.seed
        self.state = GameState(seed, max_round=self.config.max_round)
        self.self_operations: list[Operation] = []
        self.opponent_operations: list[Operation] = []

    @classmethod
    def connect(cls, stdin: TextIO = None, stdout: BinaryIO = None,
                config: Optional[GameConfig] = None) -> "Controller":
        """Read the init line and build a controller on the given streams."""
        reader = TokenReader(stdin or sys.stdin)
        player_id, seed = protocol.read_init_info(reader)
        logger.info(f"Playing as player {player_id}")
        return cls(player_id, seed, reader, stdout or sys.stdout.buffer, config)

    @property
    def opponent_id(self) -> int:
        return 1 - self.self_player_id

    # ------------------------------------------------------------------
    # Snapshot merge
    # ------------------------------------------------------------------

    def read_round_info(self):
        self.update_from_round_info(protocol.read_round_info(self.reader))

    def update_from_round_info(self, info: RoundInfo):
        state = self.state
        state.towers = {t.id: t for t in info.towers}
        if info.towers:
            state.next_tower_id = max(state.next_tower_id, info.towers[-1].id + 1)

        self.update_ants(info.ants)
        state.global_pheromone_attenuation()
        state.update_pheromone_for_ants()
        state.clear_dead_and_succeeded_ants()

        for player in (0, 1):
            state.set_coin(player, info.coins[player])
            state.set_base_hp(player, info.base_hp[player])

        state.round = info.round
        state.count_down_super_weapons_cd()
        self.self_operations = []
        self.opponent_operations = []

        if self.config.dump_path:
            with open(Path(self.config.dump_path), "a") as f:
                state.dump(f)

    def update_ants(self, reported: list[Ant]):
        """Merge reported ants, extending known ants' paths by their last step."""
        merged = {}
        for new in reported:
            ant = self.state.ant_of_id(new.id)
            if ant is None:
                merged[new.id] = new
                continue
            if (ant.x, ant.y) != (new.x, new.y):
                direction = get_direction(ant.x, ant.y, new.x, new.y)
                if direction is None:
                    logger.error(f"Ant {ant.id} jumped from {(ant.x, ant.y)} to {(new.x, new.y)}")
                    raise DesyncError(f"Ant {ant.id} moved to a non-adjacent cell")
                ant.path.append(direction)
            ant.x, ant.y = new.x, new.y
            ant.hp, ant.age, ant.state = new.hp, new.age, new.state
            merged[ant.id] = ant

        dropped = set(self.state.ants) - set(merged)
        if dropped:
            logger.debug(f"Ants missing from snapshot: {sorted(dropped)}")
        self.state.ants = merged
        if reported:
            self.state.next_ant_id = max(self.state.next_ant_id, reported[-1].id + 1)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def read_opponent_operations(self):
        self.opponent_operations = protocol.read_opponent_operations(self.reader)

    def apply_opponent_operations(self):
        self._apply(self.opponent_id, self.opponent_operations)

    def append_self_operation(self, op: Operation) -> bool:
        if not validate(self.state, self.self_player_id, self.self_operations, op):
            return False
        self.self_operations.append(op)
        return True

    def apply_self_operations(self):
        self._apply(self.self_player_id, self.self_operations)

    def send_self_operations(self):
        protocol.send_operations(self.writer, self.self_operations)

    def _apply(self, player: int, ops: list[Operation]):
        self.state.count_down_super_weapons_left_time(player)
        for op in ops:
            self.state.apply_operation(player, op)
        self.state.apply_active_super_weapons(player)


AI = Callable[[int, GameState], list[Operation]]


def play_round(controller: Controller, ai: AI):
    """One round of the judge protocol, in this player's turn order."""
    def decide_and_send():
        for op in ai(controller.self_player_id, controller.state):
            controller.append_self_operation(op)
        controller.send_self_operations()
        controller.apply_self_operations()

    if controller.self_player_id == 0:
        decide_and_send()
        controller.read_opponent_operations()
        controller.apply_opponent_operations()
    else:
        controller.read_opponent_operations()
        controller.apply_opponent_operations()
        decide_and_send()
    controller.read_round_info()


def run_with_ai(ai: AI, controller: Optional[Controller] = None):
    """Play rounds until the judge closes the input stream."""
    controller = controller or Controller.connect()
    try:
        while True:
            play_round(controller, ai)
    except EndOfInput:
        logger.info(f"Input closed at round {controller.state.round}")
