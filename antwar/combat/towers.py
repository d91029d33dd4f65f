"""
Tower combat resolution.

Handles:
- Cooldown ticking and multi-shot towers (more than one attack per round)
- Target selection (nearest first, two targets for the double tower)
- Area effects (mortar splash, pulse ring, missile blast)
- Evasion charges, deflector protection and ice freezing
"""

from typing import Iterable

from .base import CombatResolver, AttackReport
from ..units import Ant, AntState, Tower, TowerType


class TowerCombat(CombatResolver):
    """Resolves tower attacks against ants."""

    # type: radius of the splash around each target
    SPLASH_RADIUS = {
        TowerType.MORTAR: 1,
        TowerType.MORTAR_PLUS: 1,
        TowerType.MISSILE: 2,
    }

    TARGET_COUNT = {
        TowerType.DOUBLE: 2,
    }

    def attack(self, tower: Tower, ants: Iterable[Ant], round_number: int = 0) -> AttackReport:
        """
        Run one round of `tower` against `ants`.

        The cooldown ticks down first; the tower only fires at zero, and
        re-arms only if something was affected.
        """
        ants = list(ants)
        tower.cd = max(tower.cd - 1, 0)
        affected: list[Ant] = []

        if tower.cd <= 0:
            for _ in range(self.attack_cycles(tower)):
                targets = self.nearest_ants(
                    ants, tower.player, tower.x, tower.y, tower.range,
                    self.TARGET_COUNT.get(tower.type, 1),
                )
                for target in targets:
                    for ant in self.affected_by(tower, target, ants):
                        self.hit(tower, ant)
                        affected.append(ant)
            if affected:
                tower.reset_cd()

        return self.build_report(tower.id, tower.player, round_number, affected)

    def attack_cycles(self, tower: Tower) -> int:
        if tower.speed >= 1:
            return 1
        return round(1 / tower.speed)

    def affected_by(self, tower: Tower, target: Ant, ants: list[Ant]) -> list[Ant]:
        """Ants hit when `tower` fires at `target`."""
        if tower.type == TowerType.PULSE:
            return self.attackable_ants(ants, tower.player, tower.x, tower.y, tower.range)
        radius = self.SPLASH_RADIUS.get(tower.type)
        if radius is None:
            return [target]
        return self.attackable_ants(ants, tower.player, target.x, target.y, radius)

    def hit(self, tower: Tower, ant: Ant):
        """Apply one hit. Evasion beats deflector, deflector beats weak hits."""
        if ant.evasion > 0:
            ant.evasion -= 1
            return
        if ant.deflector and tower.damage < ant.max_hp // 2:
            return
        ant.hp -= tower.damage
        if tower.type == TowerType.ICE:
            ant.set_state(AntState.FROZEN)
        if ant.hp <= 0:
            ant.set_state(AntState.FAIL)
