"""
Base combat resolution with shared targeting helpers.
"""

from dataclasses import dataclass, field
from typing import Iterable

from ..map import distance
from ..units import Ant, AntState


@dataclass
class AttackReport:
    """What a single attacker did in one round."""
    attacker_id: int
    player: int
    round: int
    affected_ids: list[int] = field(default_factory=list)
    killed_ids: list[int] = field(default_factory=list)
    reward: int = 0

    @property
    def hit_anything(self) -> bool:
        return bool(self.affected_ids)


class CombatResolver:
    """Base class for combat resolution."""

    def attackable_ants(self, ants: Iterable[Ant], player: int,
                        x: int, y: int, radius: int) -> list[Ant]:
        """Enemies of `player` still alive within `radius` of (x, y), in input order."""
        return [ant for ant in ants if ant.is_attackable_from(player, x, y, radius)]

    def nearest_ants(self, ants: Iterable[Ant], player: int,
                     x: int, y: int, radius: int, count: int) -> list[Ant]:
        """Up to `count` attackable ants ordered by distance, then id."""
        candidates = self.attackable_ants(ants, player, x, y, radius)
        candidates.sort(key=lambda ant: (distance(ant.x, ant.y, x, y), ant.id))
        return candidates[:count]

    def build_report(self, attacker_id: int, player: int, round_number: int,
                     affected: Iterable[Ant]) -> AttackReport:
        unique = {ant.id: ant for ant in affected}
        killed = [ant for ant in unique.values() if ant.state == AntState.FAIL]
        return AttackReport(
            attacker_id=attacker_id,
            player=player,
            round=round_number,
            affected_ids=sorted(unique),
            killed_ids=sorted(ant.id for ant in killed),
            reward=sum(ant.reward for ant in killed),
        )
