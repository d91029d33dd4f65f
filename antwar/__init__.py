"""
Rules engine for a two-player ant-war tower defence game.

Core modules:
- map: Hex grid geometry and terrain table
- units: Ants, towers, bases, super weapons, operations
- costs: Economy rules
- pheromone: Seeded pheromone field and deposit rules
- state: Game state aggregate
- gate: Operation validation
- combat/: Tower and super weapon resolution
- turn: Round sequencing
- protocol: Judge wire format
- controller: Live-game driver
- config: Runtime configuration
"""

from .map import PointType, distance, get_direction, is_highland, is_path, is_valid_pos
from .units import (
    Ant, Tower, Base, SuperWeapon, Operation,
    AntState, TowerType, SuperWeaponType, OperationType,
)
from .errors import DesyncError, ProtocolError, EndOfInput
from .state import GameState
from .gate import validate
from .turn import Simulator, GameStatus, Phase
from .controller import Controller, run_with_ai
from .config import GameConfig, load_config, setup_logging

__all__ = [
    # Map
    "PointType", "distance", "get_direction", "is_highland", "is_path", "is_valid_pos",
    # Units
    "Ant", "Tower", "Base", "SuperWeapon", "Operation",
    "AntState", "TowerType", "SuperWeaponType", "OperationType",
    # Errors
    "DesyncError", "ProtocolError", "EndOfInput",
    # State
    "GameState", "validate",
    # Round engine
    "Simulator", "GameStatus", "Phase",
    # Live game
    "Controller", "run_with_ai",
    # Config
    "GameConfig", "load_config", "setup_logging",
]
