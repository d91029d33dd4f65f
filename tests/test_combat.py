from __future__ import annotations

import pytest

from antwar.combat import SuperWeaponCombat, TowerCombat
from antwar.units import Ant, AntState, SuperWeapon, SuperWeaponType, Tower, TowerType


def _tower(tower_type: TowerType = TowerType.BASIC, cd: int = 0) -> Tower:
    # Player 0 highland, distance 2 from (3, 9)
    return Tower(0, 0, 5, 9, tower_type, cd)


def _enemy(ant_id: int = 0, x: int = 3, y: int = 9, level: int = 0) -> Ant:
    return Ant(ant_id, 1, x, y, hp=Ant.MAX_HP[level], level=level)


def test_basic_tower_hits_and_rearms() -> None:
    tower = _tower()
    ant = _enemy()
    report = TowerCombat().attack(tower, [ant])
    assert ant.hp == 5
    assert report.affected_ids == [0]
    assert report.killed_ids == []
    assert tower.cd == 2


def test_fresh_tower_waits_for_cooldown() -> None:
    tower = Tower.build(0, 0, 5, 9)
    ant = _enemy()
    combat = TowerCombat()
    assert not combat.attack(tower, [ant]).hit_anything
    assert tower.cd == 1
    assert combat.attack(tower, [ant]).hit_anything
    assert ant.hp == 5


def test_two_hits_kill_level_zero_ant() -> None:
    tower = _tower()
    ant = _enemy()
    combat = TowerCombat()
    combat.attack(tower, [ant])
    combat.attack(tower, [ant])
    report = combat.attack(tower, [ant])
    assert ant.hp == 0
    assert ant.state == AntState.FAIL
    assert report.killed_ids == [0]
    assert report.reward == 3


def test_idle_tower_does_not_rearm() -> None:
    tower = _tower()
    friendly = Ant(0, 0, 3, 9, hp=10)
    far = _enemy(1, x=12, y=9)
    report = TowerCombat().attack(tower, [friendly, far])
    assert not report.hit_anything
    assert tower.cd == 0
    assert friendly.hp == 10


def test_nearest_target_then_lowest_id() -> None:
    tower = _tower()
    near = _enemy(5, x=4, y=9)
    tie_low = _enemy(1, x=3, y=9)
    tie_high = _enemy(2, x=3, y=9)
    TowerCombat().attack(tower, [tie_high, tie_low, near])
    assert near.hp == 5
    assert tie_low.hp == tie_high.hp == 10

    tower.cd = 0
    near.set_state(AntState.FAIL)
    TowerCombat().attack(tower, [tie_high, tie_low, near])
    assert tie_low.hp == 5
    assert tie_high.hp == 10


def test_double_tower_hits_two_targets() -> None:
    tower = _tower(TowerType.DOUBLE)
    ants = [_enemy(0), _enemy(1, x=4, y=9), _enemy(2, x=3, y=8)]
    report = TowerCombat().attack(tower, ants)
    assert report.affected_ids == [0, 1]
    assert ants[2].hp == 10


def test_mortar_splash() -> None:
    tower = _tower(TowerType.MORTAR)
    target = _enemy(0, level=2)
    beside = _enemy(1, x=3, y=10, level=2)
    outside = _enemy(2, x=3, y=12, level=2)
    report = TowerCombat().attack(tower, [target, beside, outside])
    assert report.affected_ids == [0, 1]
    assert target.hp == beside.hp == 34
    assert outside.hp == 50
    assert tower.cd == 4


def test_missile_splash_radius_two() -> None:
    tower = _tower(TowerType.MISSILE)
    target = _enemy(0, x=6, y=9, level=2)
    two_away = _enemy(1, x=8, y=9, level=2)
    three_away = _enemy(2, x=9, y=9, level=2)
    report = TowerCombat().attack(tower, [target, two_away, three_away])
    assert report.affected_ids == [0, 1]
    assert target.hp == two_away.hp == 5
    assert three_away.hp == 50
    assert tower.cd == 6


@pytest.mark.parametrize("tower_type, hp_left", [
    (TowerType.CANNON, 0),
    (TowerType.SNIPER, 37),
    (TowerType.HEAVY_PLUS, 15),
])
def test_single_target_towers_spare_neighbours(tower_type, hp_left) -> None:
    tower = _tower(tower_type)
    target = _enemy(0, level=2)
    beside = _enemy(1, x=3, y=10, level=2)
    report = TowerCombat().attack(tower, [target, beside])
    assert report.affected_ids == [0]
    assert target.hp == hp_left
    assert beside.hp == 50


def test_pulse_hits_everything_in_range() -> None:
    tower = _tower(TowerType.PULSE)
    ants = [_enemy(0, level=2), _enemy(1, x=4, y=9, level=2), _enemy(2, x=12, y=9, level=2)]
    report = TowerCombat().attack(tower, ants)
    assert report.affected_ids == [0, 1]
    assert ants[2].hp == 50


def test_quick_plus_fires_twice() -> None:
    tower = _tower(TowerType.QUICK_PLUS)
    ant = _enemy(level=1)
    report = TowerCombat().attack(tower, [ant])
    assert ant.hp == 25 - 16
    assert report.affected_ids == [0]
    assert tower.cd == 1


def test_ice_freezes() -> None:
    tower = _tower(TowerType.ICE)
    ant = _enemy(level=2)
    TowerCombat().attack(tower, [ant])
    assert ant.hp == 35
    assert ant.state == AntState.FROZEN


def test_ice_kill_is_fail() -> None:
    tower = _tower(TowerType.ICE)
    ant = _enemy()
    TowerCombat().attack(tower, [ant])
    assert ant.state == AntState.FAIL


def test_evasion_consumes_charges() -> None:
    tower = _tower()
    ant = _enemy()
    ant.evasion = 2
    combat = TowerCombat()
    report = combat.attack(tower, [ant])
    assert report.affected_ids == [0]
    assert ant.hp == 10
    assert ant.evasion == 1
    assert tower.cd == 2


def test_deflector_blocks_weak_hits() -> None:
    ant = _enemy(level=2)
    ant.deflector = True
    TowerCombat().attack(_tower(), [ant])
    assert ant.hp == 50

    TowerCombat().attack(_tower(TowerType.CANNON), [ant])
    assert ant.hp == 0
    assert ant.state == AntState.FAIL


def test_lightning_storm_kills_enemies_only() -> None:
    storm = SuperWeapon(SuperWeaponType.LIGHTNING_STORM, 0, 3, 9)
    enemy = _enemy(0, level=1)
    friend = Ant(1, 0, 3, 9, hp=10)
    report = SuperWeaponCombat().apply(storm, [enemy, friend])
    assert enemy.state == AntState.FAIL
    assert enemy.hp == 0
    assert friend.is_alive
    assert report.reward == 5


def test_emergency_evasion_covers_friends() -> None:
    evasion = SuperWeapon(SuperWeaponType.EMERGENCY_EVASION, 1, 3, 9)
    friend = _enemy(0)
    other = Ant(1, 0, 3, 9, hp=10)
    SuperWeaponCombat().apply(evasion, [friend, other])
    assert friend.evasion == 2
    assert other.evasion == 0


def test_passive_weapons_report_nothing() -> None:
    emp = SuperWeapon(SuperWeaponType.EMP_BLASTER, 1, 3, 9)
    assert SuperWeaponCombat().apply(emp, [_enemy()]) is None
    assert SuperWeaponCombat.shields([emp], SuperWeaponType.EMP_BLASTER, 1, 5, 9)
    assert not SuperWeaponCombat.shields([emp], SuperWeaponType.EMP_BLASTER, 0, 5, 9)
