"""
Round sequencing for the ant-war arena.

Orchestrates phases: combat → movement → pheromone → cleanup → spawn → income → upkeep
Operations are applied per player before the phases run; the round limit is
judged before anything else happens.
"""

import logging
from enum import Enum
from typing import Callable, Optional

from .combat import TowerCombat, AttackReport
from .costs import BASIC_INCOME
from .gate import validate
from .state import GameState
from .units import Ant, AntState, Base, Operation

logger = logging.getLogger(__name__)


class GameStatus(Enum):
    RUNNING = "running"
    PLAYER0_WIN = "player0_win"
    PLAYER1_WIN = "player1_win"
    UNDECIDED = "undecided"

    @classmethod
    def win_for(cls, player: int) -> "GameStatus":
        return cls.PLAYER0_WIN if player == 0 else cls.PLAYER1_WIN


class Phase(Enum):
    """Round phases in order of execution."""
    COMBAT = "combat"          # towers fire
    MOVEMENT = "movement"      # ants age, walk, score
    PHEROMONE = "pheromone"    # attenuate, then deposit outcomes
    CLEANUP = "cleanup"        # drop terminal ants
    SPAWN = "spawn"
    INCOME = "income"
    UPKEEP = "upkeep"          # round counter, weapon cooldowns, batches


class Simulator:
    """
    Resolves rounds on a private copy of a game state.

    Each round: collect both players' operations through add_operation,
    call apply_operations for each player, then next_round.
    """

    PHASES = [
        Phase.COMBAT,
        Phase.MOVEMENT,
        Phase.PHEROMONE,
        Phase.CLEANUP,
        Phase.SPAWN,
        Phase.INCOME,
        Phase.UPKEEP,
    ]

    def __init__(self, state: GameState):
        self._state = state.copy()
        self.operations: list[list[Operation]] = [[], []]
        self.status = GameStatus.RUNNING
        self.tower_combat = TowerCombat()

        # Callbacks
        self.on_phase_end: Optional[Callable] = None
        self.on_game_end: Optional[Callable] = None

    @property
    def state(self) -> GameState:
        return self._state

    def get_operations(self, player: int) -> list[Operation]:
        return list(self.operations[player])

    def add_operation(self, player: int, op: Operation) -> bool:
        """Append `op` to `player`'s batch if it passes the gate."""
        if not validate(self._state, player, self.operations[player], op):
            return False
        self.operations[player].append(op)
        return True

    def apply_operations(self, player: int):
        """Tick `player`'s weapon durations, apply their batch, then their active weapons."""
        self._state.count_down_super_weapons_left_time(player)
        for op in self.operations[player]:
            self._state.apply_operation(player, op)
        self._state.apply_active_super_weapons(player)

    def next_round(self) -> GameStatus:
        """Settle the round. Returns RUNNING, or the terminal status once decided."""
        if self.status != GameStatus.RUNNING:
            raise RuntimeError("Game already over")

        if self._state.round >= self._state.max_round:
            return self._finish(self.judge_winner())

        for phase in self.PHASES:
            result = self.execute_phase(phase)
            if phase == Phase.MOVEMENT and result is not None:
                return self._finish(result)

        return GameStatus.RUNNING

    def execute_phase(self, phase: Phase):
        """Execute a single phase."""
        result = None

        if phase == Phase.COMBAT:
            result = self._execute_combat_phase()
        elif phase == Phase.MOVEMENT:
            result = self._execute_movement_phase()
        elif phase == Phase.PHEROMONE:
            self._execute_pheromone_phase()
        elif phase == Phase.CLEANUP:
            self._state.clear_dead_and_succeeded_ants()
        elif phase == Phase.SPAWN:
            result = self._execute_spawn_phase()
        elif phase == Phase.INCOME:
            for player in (0, 1):
                self._state.update_coin(player, BASIC_INCOME)
        elif phase == Phase.UPKEEP:
            self._execute_upkeep_phase()

        if self.on_phase_end:
            self.on_phase_end(phase, result)

        return result

    def judge_winner(self) -> GameStatus:
        hp0, hp1 = self._state.bases[0].hp, self._state.bases[1].hp
        if hp0 > hp1:
            return GameStatus.PLAYER0_WIN
        if hp0 < hp1:
            return GameStatus.PLAYER1_WIN
        return GameStatus.UNDECIDED

    def _finish(self, status: GameStatus) -> GameStatus:
        self.status = status
        logger.info(f"Game over at round {self._state.round}: {status.value}")
        if self.on_game_end:
            self.on_game_end(status)
        return status

    def _execute_combat_phase(self) -> list[AttackReport]:
        state = self._state
        ants = state.all_ants()
        for ant in ants:
            ant.deflector = state.is_shielded_by_deflector(ant)

        reports = []
        for tower in state.all_towers():
            if state.is_tower_shielded_by_emp(tower):
                continue
            report = self.tower_combat.attack(tower, ants, state.round)
            if report.reward:
                state.update_coin(tower.player, report.reward)
            if report.hit_anything:
                reports.append(report)

        for ant in ants:
            ant.deflector = False
        return reports

    def _execute_movement_phase(self) -> Optional[GameStatus]:
        state = self._state
        for ant in state.all_ants():
            ant.age += 1
            if ant.is_terminal:
                continue
            if ant.age > Ant.AGE_LIMIT:
                ant.set_state(AntState.TOO_OLD)
            if ant.state == AntState.ALIVE:
                direction = state.next_move(ant)
                if direction is not None:
                    ant.move(direction)

            enemy = 1 - ant.player
            if (ant.x, ant.y) == Base.POSITIONS[enemy]:
                ant.set_state(AntState.SUCCESS)
                state.update_base_hp(enemy, -1)
                if state.bases[enemy].hp <= 0:
                    return GameStatus.win_for(ant.player)

            if ant.state == AntState.FROZEN:
                ant.set_state(AntState.ALIVE)
        return None

    def _execute_pheromone_phase(self):
        self._state.global_pheromone_attenuation()
        self._state.update_pheromone_for_ants()

    def _execute_spawn_phase(self) -> list[Ant]:
        state = self._state
        spawned = []
        for base in state.bases:
            ant = base.generate_ant(state.next_ant_id, state.round)
            if ant is not None:
                state.add_ant(ant)
                spawned.append(ant)
        return spawned

    def _execute_upkeep_phase(self):
        self._state.round += 1
        self._state.count_down_super_weapons_cd()
        self.operations = [[], []]
