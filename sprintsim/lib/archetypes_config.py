"""
Developer archetype tables.

Loads archetypes.yaml to override the hiring tables used by the candidate
generator. If no config file exists, returns the built-in defaults.

ARCHETYPE TABLE
===============

Each archetype defines:
- label: display name ("Senior Dev")
- weight: how many slots it gets in the weighted candidate pool
- velocity_range: [min, max] points per tick, drawn uniformly
- cost_range: [min, max] hire cost, drawn as a uniform integer
- names: display name pool, drawn without repeats where possible
- passive: optional trait; at most one of blocker_rate_reduction or
  velocity_aura

Overrides are per field: an archetypes.yaml entry that only sets `weight`
keeps the default names, ranges and passive.

    archetypes:
      senior:
        weight: 2
        velocity_range: [1.5, 2.0]
"""

import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Optional

import yaml

from .types import PassiveEffect
from . import validate

logger = logging.getLogger(__name__)

ARCHETYPES_FILENAME = "archetypes.yaml"


@dataclass(frozen=True)
class Archetype:
    """One hireable developer class."""
    key: str
    label: str
    weight: int
    velocity_range: tuple[float, float]
    cost_range: tuple[int, int]
    names: tuple[str, ...]
    passive: Optional[PassiveEffect] = None


# Ordered by rarity. Weights reproduce the classic pool:
# junior, junior, mid, mid, senior, qa, scrumMaster
DEFAULT_ARCHETYPES: dict[str, Archetype] = {
    "junior": Archetype(
        key="junior",
        label="Junior Dev",
        weight=2,
        velocity_range=(0.4, 0.6),
        cost_range=(400, 700),
        names=(
            "Alex the Intern", "Casey Chen", "Jordan Park", "Riley Nguyen",
            "Sam Torres", "Morgan Lee", "Drew Kim", "Avery Patel",
        ),
    ),
    "mid": Archetype(
        key="mid",
        label="Mid Dev",
        weight=2,
        velocity_range=(0.8, 1.2),
        cost_range=(1000, 1500),
        names=(
            "Chris Ramirez", "Taylor Okonkwo", "Jamie Singh", "Quinn Andersen",
            "Blake Hoffman", "Skyler Yamamoto", "Devon Walsh", "Reese Kowalski",
        ),
    ),
    "senior": Archetype(
        key="senior",
        label="Senior Dev",
        weight=1,
        velocity_range=(1.4, 1.8),
        cost_range=(2000, 2800),
        names=(
            "Dr. Evelyn Shaw", "Marcus Delacroix", "Priya Nair", "Felix Bauer",
            "Ingrid Svensson", "Leo Tanaka", "Niamh O'Brien", "Omar Farouk",
        ),
    ),
    "qa": Archetype(
        key="qa",
        label="QA Engineer",
        weight=1,
        velocity_range=(0.2, 0.4),
        cost_range=(600, 900),
        names=(
            "Pat the Bug Hunter", "Sage Brennan", "River Osei", "Frankie Dubois",
            "Harley Reyes", "Kendall Moore", "Billie Varga", "Arlo Petrov",
        ),
        passive=PassiveEffect(
            label="Bug Shield",
            description="Reduces blocker spawn rate by 25%",
            blocker_rate_reduction=0.25,
        ),
    ),
    "scrum_master": Archetype(
        key="scrum_master",
        label="Scrum Master",
        weight=1,
        velocity_range=(0.1, 0.1),
        cost_range=(1500, 2000),
        names=(
            "The Coach", "Mx. Agile", "Coach Kofi", "Sensei Huang",
            "Facilitator Femi", "Guru Lena", "Maestro Raj", "Director Iris",
        ),
        passive=PassiveEffect(
            label="Velocity Aura",
            description="+10% team velocity while on roster",
            velocity_aura=0.10,
        ),
    ),
}


@dataclass
class ArchetypesConfig:
    """Archetype tables from archetypes.yaml."""
    archetypes: dict[str, Archetype] = field(default_factory=lambda: DEFAULT_ARCHETYPES.copy())

    def weighted_pool(self) -> list[str]:
        """Archetype keys repeated by weight, for a uniform pick."""
        pool = []
        for key, archetype in self.archetypes.items():
            pool.extend([key] * archetype.weight)
        return pool

    def get(self, key: str) -> Archetype:
        if key not in self.archetypes:
            raise ValueError(f"Unknown archetype: {key}")
        return self.archetypes[key]


def _apply_override(base: Archetype, data: dict) -> Archetype:
    """Merge one validated yaml entry over an archetype."""
    changes = {}
    if "label" in data:
        changes["label"] = data["label"]
    if "weight" in data:
        changes["weight"] = data["weight"]
    if "velocity_range" in data:
        changes["velocity_range"] = tuple(data["velocity_range"])
    if "cost_range" in data:
        changes["cost_range"] = tuple(data["cost_range"])
    if "names" in data:
        changes["names"] = tuple(data["names"])
    if "passive" in data:
        changes["passive"] = PassiveEffect(**data["passive"]) if data["passive"] else None
    return replace(base, **changes)


def load_archetypes_config(config_dir: Optional[Path]) -> ArchetypesConfig:
    """Load archetypes.yaml and return ArchetypesConfig.

    If config_dir is None or file doesn't exist, returns defaults. A file
    that fails to parse or validate is ignored with a warning.
    """
    if config_dir is None:
        return ArchetypesConfig()

    config_path = config_dir / ARCHETYPES_FILENAME
    if not config_path.exists():
        return ArchetypesConfig()

    try:
        data = yaml.safe_load(config_path.read_text())
        archetypes = DEFAULT_ARCHETYPES.copy()
        if data and "archetypes" in data:
            for key, entry in data["archetypes"].items():
                if key not in archetypes:
                    logger.warning(f"Unknown archetype '{key}' in {config_path}, ignoring")
                    continue
                validate.validate_archetype(key, entry or {})
                archetypes[key] = _apply_override(archetypes[key], entry or {})
        return ArchetypesConfig(archetypes=archetypes)
    except (yaml.YAMLError, AttributeError, validate.ValidationError) as e:
        logger.warning(f"Failed to parse {config_path}: {e}")
        return ArchetypesConfig()
