"""
Configuration loaders for the simulation.

Loads balance settings from balance.env. Every setting has a default, so a
missing file (or a missing key) falls back to the tuned game values.
"""

import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional

from . import constants
from . import envparse
from . import validate

logger = logging.getLogger(__name__)

BALANCE_FILENAME = "balance.env"


@dataclass
class BalanceConfig:
    """Tunable balance values from balance.env"""
    tick_interval_ms: int = constants.TICK_INTERVAL_MS
    max_catchup_ticks: int = constants.MAX_CATCHUP_TICKS
    ticks_per_day: int = constants.TICKS_PER_DAY
    sprint_days: int = constants.DEFAULT_SPRINT_DAYS
    blocker_spawn_chance: float = constants.BLOCKER_SPAWN_CHANCE_PER_TICK
    max_active_blockers: int = constants.MAX_ACTIVE_BLOCKERS
    wip_penalty_per_excess: float = constants.WIP_PENALTY_PER_EXCESS
    wip_penalty_floor: float = constants.WIP_PENALTY_FLOOR
    momentum_multiplier: float = constants.MOMENTUM_MULTIPLIER
    momentum_ticks: int = constants.MOMENTUM_TICKS
    payout_curve: float = constants.CONTRACT_PAYOUT_CURVE
    perfect_bonus: float = constants.PERFECT_COMPLETION_BONUS
    early_bonus_per_day: float = constants.EARLY_DELIVERY_BONUS_PER_DAY
    max_team_size: int = constants.MAX_TEAM_SIZE
    starting_cash: int = constants.STARTING_CASH
    candidates_per_batch: int = constants.CANDIDATES_PER_BATCH
    seed: Optional[int] = None

    @property
    def ticks_per_sprint(self) -> int:
        return self.ticks_per_day * self.sprint_days


# env key -> BalanceConfig field
ENV_KEYS = {
    "TICK_INTERVAL_MS": "tick_interval_ms",
    "MAX_CATCHUP_TICKS": "max_catchup_ticks",
    "TICKS_PER_DAY": "ticks_per_day",
    "SPRINT_DAYS": "sprint_days",
    "BLOCKER_SPAWN_CHANCE": "blocker_spawn_chance",
    "MAX_ACTIVE_BLOCKERS": "max_active_blockers",
    "WIP_PENALTY_PER_EXCESS": "wip_penalty_per_excess",
    "WIP_PENALTY_FLOOR": "wip_penalty_floor",
    "MOMENTUM_MULTIPLIER": "momentum_multiplier",
    "MOMENTUM_TICKS": "momentum_ticks",
    "PAYOUT_CURVE": "payout_curve",
    "PERFECT_BONUS": "perfect_bonus",
    "EARLY_BONUS_PER_DAY": "early_bonus_per_day",
    "MAX_TEAM_SIZE": "max_team_size",
    "STARTING_CASH": "starting_cash",
    "CANDIDATES_PER_BATCH": "candidates_per_batch",
    "SEED": "seed",
}

_FIELD_TYPES = {f.name: f.type for f in fields(BalanceConfig)}


def _coerce(key: str, raw: str):
    """Convert an env string to the field's type.

    Unconvertible values are returned as-is so schema validation reports them.
    """
    field_type = _FIELD_TYPES[ENV_KEYS[key]]
    if key == "SEED":
        if raw.strip().lower() in ("", "none", "null"):
            return None
        field_type = int
    try:
        if field_type in (int, "int"):
            return int(raw)
        if field_type in (float, "float"):
            return float(raw)
    except ValueError:
        return raw
    return raw


def parse_balance_env(env: dict) -> BalanceConfig:
    """Build a BalanceConfig from a parsed env dict.

    Raises:
        validate.ValidationError: If a value is out of range or the wrong type
    """
    values = {}
    for key, raw in env.items():
        if key not in ENV_KEYS:
            logger.warning(f"Unknown balance key '{key}', ignoring")
            continue
        values[key] = _coerce(key, raw)

    validate.validate(values, "balance")

    return BalanceConfig(**{ENV_KEYS[k]: v for k, v in values.items()})


def load_balance_config(config_dir: Optional[Path]) -> BalanceConfig:
    """Load balance.env and return BalanceConfig.

    If config_dir is None or the file doesn't exist, returns defaults.
    """
    if config_dir is None:
        return BalanceConfig()

    env_path = config_dir / BALANCE_FILENAME
    if not env_path.exists():
        return BalanceConfig()

    config = parse_balance_env(envparse.load_env(str(env_path)))
    logger.info(f"Loaded balance config from {env_path}")
    return config
