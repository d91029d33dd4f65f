from __future__ import annotations

import logging

import numpy as np

from .errors import DesyncError
from .map import MAP_SIZE, OFFSET
from .units import Ant, AntState, Base

logger = logging.getLogger(__name__)


PHEROMONE_INIT = 10
PHEROMONE_MIN = 0
PHEROMONE_ATTENUATING_RATIO = 0.97

# Deposit per distinct visited cell, by terminal state
TAU = {
    AntState.SUCCESS: 10,
    AntState.FAIL: -5,
    AntState.TOO_OLD: -3,
}


class LinearCongruential:
    """48-bit multiplicative generator shared with the judge."""

    MULTIPLIER = 25214903917
    MASK = (1 << 48) - 1

    def __init__(self, seed: int):
        self.seed = seed

    def next(self) -> int:
        self.seed = (self.MULTIPLIER * self.seed) & self.MASK
        return self.seed


def init_field(seed: int) -> np.ndarray:
    """Seeded field of shape (2, MAP_SIZE, MAP_SIZE), filled in (player, x, y) order."""
    rng = LinearCongruential(seed)
    pher = np.empty((2, MAP_SIZE, MAP_SIZE), dtype=np.float64)
    for player in range(2):
        for x in range(MAP_SIZE):
            for y in range(MAP_SIZE):
                pher[player, x, y] = rng.next() * 2.0 ** -46 + 8
    return pher


def attenuate(pher: np.ndarray) -> np.ndarray:
    """Pull every cell toward PHEROMONE_INIT by the attenuating ratio."""
    return PHEROMONE_ATTENUATING_RATIO * pher + (1 - PHEROMONE_ATTENUATING_RATIO) * PHEROMONE_INIT


def deposit(pher: np.ndarray, ant: Ant) -> None:
    """
    Write a terminal ant's outcome along its recorded path, in place.

    Each distinct cell on the walk from the ant's own base receives TAU
    once, floored at PHEROMONE_MIN. Alive and frozen ants leave no trace.
    Raises DesyncError when the walk does not end at the ant's position.
    """
    tau = TAU.get(ant.state)
    if tau is None:
        return

    layer = pher[ant.player]
    visited = set()

    def mark(x: int, y: int):
        if (x, y) in visited:
            return
        visited.add((x, y))
        layer[x, y] = max(PHEROMONE_MIN, layer[x, y] + tau)

    x, y = Base.POSITIONS[ant.player]
    for direction in ant.path:
        mark(x, y)
        dx, dy = OFFSET[y % 2][direction]
        x, y = x + dx, y + dy

    if (x, y) != (ant.x, ant.y):
        logger.error(f"Ant {ant.id} path ends at {(x, y)}, reported at {(ant.x, ant.y)}")
        raise DesyncError(f"Ant {ant.id} path does not end at its position")

    mark(x, y)
