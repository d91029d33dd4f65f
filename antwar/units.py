"""
Entity model for the ant-war arena.

Handles ants, towers, bases, active super weapons and player operations.
Static stat tables live on the classes; runtime state on the instances.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Optional

from .map import OFFSET, distance


class AntState(IntEnum):
    ALIVE = 0
    SUCCESS = 1
    FAIL = 2
    TOO_OLD = 3
    FROZEN = 4


class TowerType(IntEnum):
    BASIC = 0
    # Heavy branch
    HEAVY = 1
    HEAVY_PLUS = 11
    ICE = 12
    CANNON = 13
    # Quick branch
    QUICK = 2
    QUICK_PLUS = 21
    DOUBLE = 22
    SNIPER = 23
    # Mortar branch
    MORTAR = 3
    MORTAR_PLUS = 31
    PULSE = 32
    MISSILE = 33

    @property
    def tier(self) -> int:
        if self.value == 0:
            return 1
        return 2 if self.value < 10 else 3


class SuperWeaponType(IntEnum):
    LIGHTNING_STORM = 1
    EMP_BLASTER = 2
    DEFLECTOR = 3
    EMERGENCY_EVASION = 4


class OperationType(IntEnum):
    BUILD_TOWER = 11
    UPGRADE_TOWER = 12
    DOWNGRADE_TOWER = 13
    USE_LIGHTNING_STORM = 21
    USE_EMP_BLASTER = 22
    USE_DEFLECTOR = 23
    USE_EMERGENCY_EVASION = 24
    UPGRADE_GENERATION_SPEED = 31
    UPGRADE_GENERATED_ANT = 32


@dataclass
class Ant:
    """A walking unit. Dies to towers, scores on the enemy base."""

    AGE_LIMIT = 32
    MAX_HP = (10, 25, 50)
    REWARD = (3, 5, 7)

    id: int
    player: int
    x: int
    y: int
    hp: int
    level: int = 0
    age: int = 0
    state: AntState = AntState.ALIVE
    path: list[int] = field(default_factory=list)
    evasion: int = 0
    deflector: bool = False

    @property
    def max_hp(self) -> int:
        return self.MAX_HP[self.level]

    @property
    def reward(self) -> int:
        return self.REWARD[self.level]

    @property
    def is_alive(self) -> bool:
        return self.state in (AntState.ALIVE, AntState.FROZEN)

    @property
    def is_terminal(self) -> bool:
        return not self.is_alive

    def move(self, direction: int):
        """Step one cell and record the direction in the path."""
        dx, dy = OFFSET[self.y % 2][direction]
        self.path.append(direction)
        self.x += dx
        self.y += dy

    def is_in_range(self, x: int, y: int, radius: int) -> bool:
        return distance(self.x, self.y, x, y) <= radius

    def is_attackable_from(self, player: int, x: int, y: int, radius: int) -> bool:
        """An enemy of `player`, alive, within `radius` of (x, y)."""
        return self.player != player and self.is_alive and self.is_in_range(x, y, radius)

    def set_state(self, state: AntState):
        # Terminal states are sticky
        if self.is_terminal:
            return
        self.state = state


@dataclass
class Tower:
    """A defensive structure on a player's highland."""

    # type: (damage, speed, range)
    TOWER_STATS = {
        TowerType.BASIC: (5, 2, 2),
        TowerType.HEAVY: (15, 2, 2),
        TowerType.QUICK: (6, 1, 3),
        TowerType.MORTAR: (16, 4, 3),
        TowerType.HEAVY_PLUS: (35, 2, 2),
        TowerType.ICE: (15, 2, 2),
        TowerType.CANNON: (50, 4, 3),
        TowerType.QUICK_PLUS: (8, 0.5, 3),
        TowerType.DOUBLE: (10, 1, 4),
        TowerType.SNIPER: (13, 2, 6),
        TowerType.MORTAR_PLUS: (35, 4, 4),
        TowerType.PULSE: (30, 3, 2),
        TowerType.MISSILE: (45, 6, 5),
    }

    UPGRADE_TREE = {
        TowerType.BASIC: (TowerType.HEAVY, TowerType.QUICK, TowerType.MORTAR),
        TowerType.HEAVY: (TowerType.HEAVY_PLUS, TowerType.ICE, TowerType.CANNON),
        TowerType.QUICK: (TowerType.QUICK_PLUS, TowerType.DOUBLE, TowerType.SNIPER),
        TowerType.MORTAR: (TowerType.MORTAR_PLUS, TowerType.PULSE, TowerType.MISSILE),
    }

    id: int
    player: int
    x: int
    y: int
    type: TowerType = TowerType.BASIC
    cd: int = 0
    damage: int = field(init=False)
    speed: float = field(init=False)
    range: int = field(init=False)

    def __post_init__(self):
        self.type = TowerType(self.type)
        self._load_stats()

    @classmethod
    def build(cls, tower_id: int, player: int, x: int, y: int,
              tower_type: TowerType = TowerType.BASIC) -> "Tower":
        """A freshly built tower, cooldown primed."""
        tower = cls(tower_id, player, x, y, tower_type)
        tower.reset_cd()
        return tower

    def _load_stats(self):
        self.damage, self.speed, self.range = self.TOWER_STATS[self.type]

    @property
    def tier(self) -> int:
        return self.type.tier

    def reset_cd(self):
        self.cd = int(self.speed) if self.speed > 1 else 1

    def is_upgrade_type_valid(self, new_type: int) -> bool:
        return new_type in self.UPGRADE_TREE.get(self.type, ())

    def is_downgrade_valid(self) -> bool:
        return self.type != TowerType.BASIC

    def upgrade(self, new_type: TowerType):
        self.type = TowerType(new_type)
        self._load_stats()
        self.reset_cd()

    def downgrade(self):
        self.type = TowerType(self.type // 10)
        self._load_stats()
        self.reset_cd()


@dataclass
class Base:
    """A player's home cell. Spawns ants, loses hp when enemy ants arrive."""

    MAX_HP = 50
    POSITIONS = ((2, 9), (16, 9))
    GENERATION_CYCLE = (4, 2, 1)
    MAX_LEVEL = 2

    player: int
    hp: int = MAX_HP
    gen_speed_level: int = 0
    ant_level: int = 0

    @property
    def x(self) -> int:
        return self.POSITIONS[self.player][0]

    @property
    def y(self) -> int:
        return self.POSITIONS[self.player][1]

    def generate_ant(self, ant_id: int, round_number: int) -> Optional[Ant]:
        if round_number % self.GENERATION_CYCLE[self.gen_speed_level]:
            return None
        return Ant(
            id=ant_id,
            player=self.player,
            x=self.x,
            y=self.y,
            hp=Ant.MAX_HP[self.ant_level],
            level=self.ant_level,
        )

    def upgrade_generation_speed(self):
        self.gen_speed_level = min(self.gen_speed_level + 1, self.MAX_LEVEL)

    def upgrade_generated_ant(self):
        self.ant_level = min(self.ant_level + 1, self.MAX_LEVEL)


@dataclass
class SuperWeapon:
    """An active area effect placed by a player."""

    # type: (duration, range, cooldown, price)
    WEAPON_STATS = {
        SuperWeaponType.LIGHTNING_STORM: (20, 3, 100, 150),
        SuperWeaponType.EMP_BLASTER: (20, 3, 100, 150),
        SuperWeaponType.DEFLECTOR: (10, 3, 50, 100),
        SuperWeaponType.EMERGENCY_EVASION: (1, 3, 50, 100),
    }

    type: SuperWeaponType
    player: int
    x: int
    y: int
    left_time: int = field(init=False)
    range: int = field(init=False)

    def __post_init__(self):
        self.type = SuperWeaponType(self.type)
        self.left_time, self.range, _, _ = self.WEAPON_STATS[self.type]

    @classmethod
    def cooldown_of(cls, weapon_type: SuperWeaponType) -> int:
        return cls.WEAPON_STATS[weapon_type][2]

    @classmethod
    def price_of(cls, weapon_type: SuperWeaponType) -> int:
        return cls.WEAPON_STATS[weapon_type][3]

    def is_in_range(self, x: int, y: int) -> bool:
        return distance(self.x, self.y, x, y) <= self.range


INVALID_ARG = -1


@dataclass(frozen=True)
class Operation:
    """
    A single player action for one round.

    Arguments by type: build (x, y); upgrade (tower_id, new_type);
    downgrade (tower_id,); super weapons (x, y); base upgrades none.
    """
    type: OperationType
    arg0: int = INVALID_ARG
    arg1: int = INVALID_ARG

    def __post_init__(self):
        object.__setattr__(self, "type", OperationType(self.type))

    @property
    def arguments(self) -> tuple[int, ...]:
        return tuple(a for a in (self.arg0, self.arg1) if a != INVALID_ARG)

    @property
    def is_super_weapon(self) -> bool:
        return OperationType.USE_LIGHTNING_STORM <= self.type <= OperationType.USE_EMERGENCY_EVASION

    @property
    def is_base_upgrade(self) -> bool:
        return self.type in (OperationType.UPGRADE_GENERATION_SPEED,
                             OperationType.UPGRADE_GENERATED_ANT)

    @property
    def super_weapon_type(self) -> Optional[SuperWeaponType]:
        if not self.is_super_weapon:
            return None
        return SuperWeaponType(self.type % 10)

    def __str__(self) -> str:
        return " ".join(str(int(v)) for v in (self.type, *self.arguments))
