"""
Authoritative game state for the ant-war arena.

Aggregates towers, ants, bases, coins, the pheromone field and super
weapons, with the queries and mutations the round engine and the live
controller are built from. Towers and ants live in dicts keyed by id;
insertion order is creation order.
"""

import copy
import logging
from pathlib import Path
from typing import Optional, TextIO

import numpy as np

from . import pheromone
from .combat import SuperWeaponCombat
from .costs import COIN_INIT, operation_income
from .map import distance, is_path, neighbor, reverse_direction, NUM_DIRECTIONS
from .units import (
    Ant, Base, Operation, OperationType, SuperWeapon, SuperWeaponType,
    Tower, TowerType,
)

logger = logging.getLogger(__name__)


MAX_ROUND = 512

# Attraction toward the enemy base, indexed by (next_dist - cur_dist + 1)
ETA = (1.25, 1.00, 0.75)


class GameState:
    """Complete state of one match."""

    def __init__(self, seed: int, max_round: int = MAX_ROUND):
        self.round = 0
        self.max_round = max_round
        self.towers: dict[int, Tower] = {}
        self.ants: dict[int, Ant] = {}
        self.bases = [Base(0), Base(1)]
        self.coins = [COIN_INIT, COIN_INIT]
        self.pheromone: np.ndarray = pheromone.init_field(seed)
        self.super_weapons: list[SuperWeapon] = []
        self.super_weapon_cd = [{t: 0 for t in SuperWeaponType} for _ in range(2)]
        self.next_ant_id = 0
        self.next_tower_id = 0

        self.weapon_combat = SuperWeaponCombat()

    def copy(self) -> "GameState":
        """Independent deep copy; mutating it never touches this state."""
        return copy.deepcopy(self)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def all_ants(self) -> list[Ant]:
        return list(self.ants.values())

    def ant_at(self, x: int, y: int) -> list[Ant]:
        return [ant for ant in self.ants.values() if ant.x == x and ant.y == y]

    def ant_of_id(self, ant_id: int) -> Optional[Ant]:
        return self.ants.get(ant_id)

    def all_towers(self) -> list[Tower]:
        return list(self.towers.values())

    def tower_at(self, x: int, y: int) -> Optional[Tower]:
        for tower in self.towers.values():
            if tower.x == x and tower.y == y:
                return tower
        return None

    def tower_of_id(self, tower_id: int) -> Optional[Tower]:
        return self.towers.get(tower_id)

    def tower_num_of_player(self, player: int) -> int:
        return sum(1 for tower in self.towers.values() if tower.player == player)

    def is_shielded_by_emp(self, player: int, x: int, y: int) -> bool:
        """Whether the opponent of `player` has an EMP blaster covering (x, y)."""
        return SuperWeaponCombat.shields(
            self.super_weapons, SuperWeaponType.EMP_BLASTER, 1 - player, x, y
        )

    def is_tower_shielded_by_emp(self, tower: Tower) -> bool:
        return self.is_shielded_by_emp(tower.player, tower.x, tower.y)

    def is_shielded_by_deflector(self, ant: Ant) -> bool:
        return SuperWeaponCombat.shields(
            self.super_weapons, SuperWeaponType.DEFLECTOR, ant.player, ant.x, ant.y
        )

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def build_tower(self, tower_id: int, player: int, x: int, y: int,
                    tower_type: TowerType = TowerType.BASIC) -> Tower:
        tower = Tower.build(tower_id, player, x, y, tower_type)
        self.towers[tower_id] = tower
        self.next_tower_id = max(self.next_tower_id, tower_id + 1)
        logger.debug(f"Player {player} built tower {tower_id} at ({x}, {y})")
        return tower

    def upgrade_tower(self, tower_id: int, tower_type: TowerType):
        tower = self.towers.get(tower_id)
        if tower is not None:
            tower.upgrade(tower_type)

    def downgrade_or_destroy_tower(self, tower_id: int):
        tower = self.towers.get(tower_id)
        if tower is None:
            return
        if tower.is_downgrade_valid():
            tower.downgrade()
        else:
            del self.towers[tower_id]
            logger.debug(f"Tower {tower_id} destroyed")

    def upgrade_generation_speed(self, player: int):
        self.bases[player].upgrade_generation_speed()

    def upgrade_generated_ant(self, player: int):
        self.bases[player].upgrade_generated_ant()

    def set_coin(self, player: int, value: int):
        self.coins[player] = value

    def update_coin(self, player: int, change: int):
        self.coins[player] += change

    def set_base_hp(self, player: int, value: int):
        self.bases[player].hp = value

    def update_base_hp(self, player: int, change: int):
        self.bases[player].hp += change

    def add_ant(self, ant: Ant):
        self.ants[ant.id] = ant
        self.next_ant_id = max(self.next_ant_id, ant.id + 1)

    def clear_dead_and_succeeded_ants(self):
        self.ants = {i: ant for i, ant in self.ants.items() if ant.is_alive}

    def global_pheromone_attenuation(self):
        self.pheromone = pheromone.attenuate(self.pheromone)

    def update_pheromone(self, ant: Ant):
        pheromone.deposit(self.pheromone, ant)

    def update_pheromone_for_ants(self):
        for ant in self.ants.values():
            self.update_pheromone(ant)

    def use_super_weapon(self, weapon_type: SuperWeaponType, player: int, x: int, y: int):
        self.super_weapons.append(SuperWeapon(weapon_type, player, x, y))
        self.super_weapon_cd[player][SuperWeaponType(weapon_type)] = SuperWeapon.cooldown_of(weapon_type)
        logger.debug(f"Player {player} used {SuperWeaponType(weapon_type).name} at ({x}, {y})")

    def apply_operation(self, player: int, op: Operation):
        """Charge the operation's income, then perform it. Assumes it passed the gate."""
        self.update_coin(player, operation_income(self, player, op))

        if op.type == OperationType.BUILD_TOWER:
            self.build_tower(self.next_tower_id, player, op.arg0, op.arg1)
        elif op.type == OperationType.UPGRADE_TOWER:
            self.upgrade_tower(op.arg0, TowerType(op.arg1))
        elif op.type == OperationType.DOWNGRADE_TOWER:
            self.downgrade_or_destroy_tower(op.arg0)
        elif op.is_super_weapon:
            self.use_super_weapon(op.super_weapon_type, player, op.arg0, op.arg1)
        elif op.type == OperationType.UPGRADE_GENERATION_SPEED:
            self.upgrade_generation_speed(player)
        elif op.type == OperationType.UPGRADE_GENERATED_ANT:
            self.upgrade_generated_ant(player)

    def count_down_super_weapons_left_time(self, player: int):
        """Tick `player`'s weapon durations; expired ones are removed."""
        kept = []
        for weapon in self.super_weapons:
            if weapon.player == player:
                weapon.left_time -= 1
                if weapon.left_time <= 0:
                    logger.debug(f"{weapon.type.name} of player {player} expired")
                    continue
            kept.append(weapon)
        self.super_weapons = kept

    def apply_active_super_weapons(self, player: int):
        for weapon in self.super_weapons:
            if weapon.player != player:
                continue
            report = self.weapon_combat.apply(weapon, self.ants.values(), self.round)
            if report is not None and report.reward:
                self.update_coin(player, report.reward)

    def count_down_super_weapons_cd(self):
        for cds in self.super_weapon_cd:
            for weapon_type in cds:
                cds[weapon_type] = max(cds[weapon_type] - 1, 0)

    # ------------------------------------------------------------------
    # Movement
    # ------------------------------------------------------------------

    def next_move(self, ant: Ant) -> Optional[int]:
        """
        Direction an ant takes this round, or None when it is boxed in.

        Each neighbour that is a path cell and does not undo the last step
        scores eta * pheromone, where eta favours cells closer to the enemy
        base. Highest weighted score wins, then highest raw pheromone, then
        the lowest direction index.
        """
        target_x, target_y = Base.POSITIONS[1 - ant.player]
        cur_dist = distance(ant.x, ant.y, target_x, target_y)
        last = ant.path[-1] if ant.path else None

        best = None
        best_key = None
        for i in range(NUM_DIRECTIONS):
            if last is not None and last == reverse_direction(i):
                continue
            x, y = neighbor(ant.x, ant.y, i)
            if not is_path(x, y):
                continue
            raw = float(self.pheromone[ant.player, x, y])
            eta = ETA[distance(x, y, target_x, target_y) - cur_dist + 1]
            key = (eta * raw, raw)
            if best_key is None or key > best_key:
                best, best_key = i, key
        return best

    # ------------------------------------------------------------------
    # Debug export
    # ------------------------------------------------------------------

    def dump(self, stream: TextIO):
        """Write the state in round-info layout, followed by both pheromone layers."""
        stream.write(f"{self.round}\n")
        stream.write(f"{len(self.towers)}\n")
        for t in self.towers.values():
            stream.write(f"{t.id} {t.player} {t.x} {t.y} {int(t.type)} {t.cd}\n")
        stream.write(f"{len(self.ants)}\n")
        for a in self.ants.values():
            stream.write(f"{a.id} {a.player} {a.x} {a.y} {a.hp} {a.level} {a.age} {int(a.state)}\n")
        stream.write(f"{self.coins[0]} {self.coins[1]}\n")
        stream.write(f"{self.bases[0].hp} {self.bases[1].hp}\n")
        for layer in self.pheromone:
            for row in layer:
                stream.write("".join(f"{value:.4f} " for value in row) + "\n")

    def show(self, path: Path | str = "info.out"):
        """Human-readable summary table."""
        lines = [f"Rounds:{self.round}", "Towers:", "id\tplayer\tx\ty\ttype\tcd"]
        for t in self.towers.values():
            lines.append(f"{t.id}\t{t.player}\t\t{t.x}\t{t.y}\t{int(t.type)}\t{t.cd}")
        lines += ["Ants:", "id\tplayer\tx\ty\thp\tage\tstate"]
        for a in self.ants.values():
            lines.append(f"{a.id}\t{a.player}\t\t{a.x}\t{a.y}\t{a.hp}\t{a.age}\t{int(a.state)}")
        lines += [
            f"coin0:{self.coins[0]}",
            f"coin1:{self.coins[1]}",
            f"base0:{self.bases[0].hp}",
            f"base1:{self.bases[1].hp}",
        ]
        Path(path).write_text("\n".join(lines) + "\n")
