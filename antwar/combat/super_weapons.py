"""
Super weapon effects - area abilities bought with coins.

Handles:
- Lightning storm (kills enemy ants inside the area every round)
- Emergency evasion (grants friendly ants two dodge charges)
- EMP blaster and deflector shields (passive, queried by position)
"""

from typing import Iterable, Optional

from .base import CombatResolver, AttackReport
from ..units import Ant, AntState, SuperWeapon, SuperWeaponType


class SuperWeaponCombat(CombatResolver):
    """Resolves active super weapon effects on ants."""

    EVASION_CHARGES = 2

    def apply(self, weapon: SuperWeapon, ants: Iterable[Ant],
              round_number: int = 0) -> Optional[AttackReport]:
        """Apply one round of an active weapon. Passive weapons report None."""
        if weapon.type == SuperWeaponType.LIGHTNING_STORM:
            return self.lightning_storm(weapon, ants, round_number)
        if weapon.type == SuperWeaponType.EMERGENCY_EVASION:
            return self.emergency_evasion(weapon, ants, round_number)
        return None

    def lightning_storm(self, weapon: SuperWeapon, ants: Iterable[Ant],
                        round_number: int) -> AttackReport:
        struck = self.attackable_ants(ants, weapon.player, weapon.x, weapon.y, weapon.range)
        for ant in struck:
            ant.hp = 0
            ant.set_state(AntState.FAIL)
        return self.build_report(int(weapon.type), weapon.player, round_number, struck)

    def emergency_evasion(self, weapon: SuperWeapon, ants: Iterable[Ant],
                          round_number: int) -> AttackReport:
        covered = [
            ant for ant in ants
            if ant.player == weapon.player and ant.is_alive
            and ant.is_in_range(weapon.x, weapon.y, weapon.range)
        ]
        for ant in covered:
            ant.evasion = self.EVASION_CHARGES
        return self.build_report(int(weapon.type), weapon.player, round_number, covered)

    @staticmethod
    def shields(weapons: Iterable[SuperWeapon], weapon_type: SuperWeaponType,
                player: int, x: int, y: int) -> bool:
        """Whether a `weapon_type` instance owned by `player` covers (x, y)."""
        return any(
            w.type == weapon_type and w.player == player and w.is_in_range(x, y)
            for w in weapons
        )
