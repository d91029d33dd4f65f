"""
Runtime configuration.

Values come from <data_path>/config.yaml when present, then from ANTWAR_*
environment variables (a .env file next to the package root is loaded
first).
"""

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv

from .state import MAX_ROUND

logger = logging.getLogger(__name__)

CONFIG_FILE = "config.yaml"

ENV_OVERRIDES = {
    "ANTWAR_MAX_ROUND": "max_round",
    "ANTWAR_SEED": "seed",
    "ANTWAR_LOG_LEVEL": "log_level",
    "ANTWAR_DUMP_PATH": "dump_path",
}


@dataclass
class GameConfig:
    max_round: int = MAX_ROUND
    seed: Optional[int] = None          # overrides the judge's seed when set
    log_level: str = "WARNING"
    dump_path: Optional[str] = None     # per-round state dump, off by default

    def __post_init__(self):
        self.max_round = _coerce_int("max_round", self.max_round)
        if self.seed is not None:
            self.seed = _coerce_int("seed", self.seed)
        if self.max_round <= 0:
            raise ValueError(f"max_round must be positive, got {self.max_round}")
        if not isinstance(logging.getLevelName(str(self.log_level).upper()), int):
            raise ValueError(f"Unknown log level: {self.log_level}")
        self.log_level = str(self.log_level).upper()


def _coerce_int(name: str, value) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be an integer, got {value!r}") from None


def load_config(path: Path | str | None = None, env_file: Path | str | None = None,
                data_path: Path | str = "data") -> GameConfig:
    """
    Load config from YAML (if it exists), then apply environment overrides.

    Without an explicit path the file is looked up as data_path/config.yaml.
    """
    load_dotenv(env_file or Path(__file__).parent.parent / ".env")

    config_path = Path(path) if path is not None else Path(data_path) / CONFIG_FILE
    values = {}
    if config_path.exists():
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
        known = {f.name for f in fields(GameConfig)}
        for key, value in data.items():
            if key in known:
                values[key] = value
            else:
                logger.warning(f"Ignoring unknown config key: {key}")
    else:
        logger.debug(f"Config file not found: {config_path}, using defaults")

    for env_name, key in ENV_OVERRIDES.items():
        if env_name in os.environ:
            values[key] = os.environ[env_name]

    return GameConfig(**values)


def setup_logging(level: str = "WARNING"):
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
