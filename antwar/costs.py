"""
Economy rules: prices, refunds and per-operation income.

All amounts are integer coins. Refunds are truncated toward zero.
"""

import logging
from typing import Optional, TYPE_CHECKING

from .units import Operation, OperationType, SuperWeapon, TowerType

if TYPE_CHECKING:
    from .state import GameState

logger = logging.getLogger(__name__)


COIN_INIT = 50
BASIC_INCOME = 1

TOWER_BUILD_PRICE_BASE = 15
TOWER_BUILD_PRICE_RATIO = 2
LEVEL2_TOWER_UPGRADE_PRICE = 60
LEVEL3_TOWER_UPGRADE_PRICE = 200
TOWER_DOWNGRADE_REFUND_RATIO = 0.8

LEVEL2_BASE_UPGRADE_PRICE = 200
LEVEL3_BASE_UPGRADE_PRICE = 250


def build_tower_cost(tower_num: int) -> int:
    """Price of the next tower when the player already owns `tower_num`."""
    return int(TOWER_BUILD_PRICE_BASE * TOWER_BUILD_PRICE_RATIO ** tower_num)


def destroy_tower_income(tower_num: int) -> int:
    """Refund for destroying a basic tower while owning `tower_num` towers."""
    return int(build_tower_cost(tower_num - 1) * TOWER_DOWNGRADE_REFUND_RATIO)


def upgrade_tower_cost(target_type: TowerType) -> int:
    if TowerType(target_type).tier == 2:
        return LEVEL2_TOWER_UPGRADE_PRICE
    return LEVEL3_TOWER_UPGRADE_PRICE


def downgrade_tower_income(current_type: TowerType) -> int:
    return int(upgrade_tower_cost(current_type) * TOWER_DOWNGRADE_REFUND_RATIO)


def upgrade_base_cost(level: int) -> int:
    return LEVEL2_BASE_UPGRADE_PRICE if level == 0 else LEVEL3_BASE_UPGRADE_PRICE


def use_super_weapon_cost(weapon_type) -> int:
    return SuperWeapon.price_of(weapon_type)


def operation_income(state: "GameState", player: int, op: Operation,
                     tower_num: Optional[int] = None) -> int:
    """
    Signed coin delta of applying `op` for `player`.

    `tower_num` is the tower count the price is evaluated against; it
    defaults to the player's current count. Operations on missing towers
    are worth nothing.
    """
    if tower_num is None:
        tower_num = state.tower_num_of_player(player)

    if op.type == OperationType.BUILD_TOWER:
        return -build_tower_cost(tower_num)

    if op.type == OperationType.UPGRADE_TOWER:
        return -upgrade_tower_cost(op.arg1)

    if op.type == OperationType.DOWNGRADE_TOWER:
        tower = state.tower_of_id(op.arg0)
        if tower is None:
            logger.debug(f"Income of downgrade on missing tower {op.arg0}")
            return 0
        if tower.type == TowerType.BASIC:
            return destroy_tower_income(tower_num)
        return downgrade_tower_income(tower.type)

    if op.is_super_weapon:
        return -use_super_weapon_cost(op.super_weapon_type)

    if op.type == OperationType.UPGRADE_GENERATION_SPEED:
        return -upgrade_base_cost(state.bases[player].gen_speed_level)

    if op.type == OperationType.UPGRADE_GENERATED_ANT:
        return -upgrade_base_cost(state.bases[player].ant_level)

    return 0
