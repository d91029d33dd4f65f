"""
Operation gate: decides whether an operation may join a player's batch.

Three checks, in order: the batch has no conflicting operation, the
operation is legal against the current state, and the player can still
afford the whole batch. Nothing here mutates the state.
"""

import logging
from typing import Sequence, TYPE_CHECKING

from .costs import build_tower_cost, destroy_tower_income, downgrade_tower_income, operation_income
from .map import is_highland, is_valid_pos
from .units import Base, Operation, OperationType, TowerType

if TYPE_CHECKING:
    from .state import GameState

logger = logging.getLogger(__name__)


def is_operation_valid(state: "GameState", player: int, op: Operation) -> bool:
    """Legality of a single operation against the current state."""
    if op.type == OperationType.BUILD_TOWER:
        return (
            is_highland(player, op.arg0, op.arg1)
            and state.tower_at(op.arg0, op.arg1) is None
            and not state.is_shielded_by_emp(player, op.arg0, op.arg1)
        )

    if op.type == OperationType.UPGRADE_TOWER:
        tower = state.tower_of_id(op.arg0)
        return (
            tower is not None
            and tower.player == player
            and tower.is_upgrade_type_valid(op.arg1)
            and not state.is_tower_shielded_by_emp(tower)
        )

    if op.type == OperationType.DOWNGRADE_TOWER:
        tower = state.tower_of_id(op.arg0)
        return (
            tower is not None
            and tower.player == player
            and not state.is_tower_shielded_by_emp(tower)
        )

    if op.is_super_weapon:
        return (
            is_valid_pos(op.arg0, op.arg1)
            and state.super_weapon_cd[player][op.super_weapon_type] <= 0
        )

    if op.type == OperationType.UPGRADE_GENERATION_SPEED:
        return state.bases[player].gen_speed_level < Base.MAX_LEVEL

    if op.type == OperationType.UPGRADE_GENERATED_ANT:
        return state.bases[player].ant_level < Base.MAX_LEVEL

    return False


def collides(batch: Sequence[Operation], op: Operation) -> bool:
    """Whether `op` conflicts with an operation already in `batch`."""
    if op.type == OperationType.BUILD_TOWER:
        return any(
            o.type == OperationType.BUILD_TOWER and (o.arg0, o.arg1) == (op.arg0, op.arg1)
            for o in batch
        )

    if op.type in (OperationType.UPGRADE_TOWER, OperationType.DOWNGRADE_TOWER):
        return any(
            o.type in (OperationType.UPGRADE_TOWER, OperationType.DOWNGRADE_TOWER)
            and o.arg0 == op.arg0
            for o in batch
        )

    if op.is_base_upgrade:
        return any(o.is_base_upgrade for o in batch)

    if op.is_super_weapon:
        return any(o.type == op.type for o in batch)

    return True


def check_affordable(state: "GameState", player: int, ops: Sequence[Operation]) -> bool:
    """
    Whether `player` can pay for all of `ops` applied in order.

    Build prices and destroy refunds depend on the tower count, which is
    tracked as it would be after each earlier operation in the batch.
    """
    income = 0
    tower_num = state.tower_num_of_player(player)
    for op in ops:
        if op.type == OperationType.BUILD_TOWER:
            income -= build_tower_cost(tower_num)
            tower_num += 1
        elif op.type == OperationType.DOWNGRADE_TOWER:
            tower = state.tower_of_id(op.arg0)
            if tower is None:
                return False
            if tower.type == TowerType.BASIC:
                income += destroy_tower_income(tower_num)
                tower_num -= 1
            else:
                income += downgrade_tower_income(tower.type)
        else:
            income += operation_income(state, player, op, tower_num)
    return income + state.coins[player] >= 0


def validate(state: "GameState", player: int, batch: Sequence[Operation], op: Operation) -> bool:
    """Whether `op` may be appended to `player`'s pending `batch`."""
    if collides(batch, op):
        logger.debug(f"Player {player}: {op} collides with pending batch")
        return False
    if not is_operation_valid(state, player, op):
        logger.debug(f"Player {player}: {op} is not valid")
        return False
    if not check_affordable(state, player, [*batch, op]):
        logger.debug(f"Player {player}: cannot afford {op}")
        return False
    return True
