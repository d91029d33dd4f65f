"""
Combat resolution modules for the ant-war arena.
"""

from .base import CombatResolver, AttackReport
from .towers import TowerCombat
from .super_weapons import SuperWeaponCombat

__all__ = [
    "CombatResolver", "AttackReport",
    "TowerCombat",
    "SuperWeaponCombat",
]
