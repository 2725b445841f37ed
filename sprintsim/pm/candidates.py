"""
Job board candidate generation.

Each batch draws archetypes from the weighted pool, avoiding repeats within
the batch (best effort), and names unique against the roster and the batch.
"""

import logging
from typing import Iterable, Optional

from sprintsim.lib import constants
from sprintsim.lib.archetypes_config import Archetype, ArchetypesConfig
from sprintsim.lib.random_source import RandomSource
from sprintsim.lib.types import Contributor

logger = logging.getLogger(__name__)


def pick_archetype(rng: RandomSource, pool: list[str], taken: set[str]) -> str:
    """Weighted pick that avoids `taken`, accepting a duplicate after
    CANDIDATE_ARCHETYPE_RETRIES failed attempts."""
    key = rng.choice(pool)
    attempts = 0
    while key in taken and attempts < constants.CANDIDATE_ARCHETYPE_RETRIES:
        key = rng.choice(pool)
        attempts += 1
    return key


def pick_name(rng: RandomSource, archetype: Archetype, used: set[str]) -> str:
    """Name from the archetype pool not in `used`; any pool name if exhausted."""
    fresh = [n for n in archetype.names if n not in used]
    return rng.choice(fresh) if fresh else rng.choice(archetype.names)


def make_contributor(rng: RandomSource, archetype: Archetype, name: str) -> Contributor:
    """Roll velocity and hire cost from the archetype's ranges."""
    v_low, v_high = archetype.velocity_range
    c_low, c_high = archetype.cost_range
    return Contributor(
        id=rng.new_id("dev"),
        name=name,
        archetype=archetype.key,
        velocity=round(rng.uniform(v_low, v_high), 2),
        hire_cost=rng.randint(c_low, c_high),
        passive_effect=archetype.passive,
    )


def generate_candidates(
    rng: RandomSource,
    roster: Iterable[Contributor] = (),
    config: Optional[ArchetypesConfig] = None,
    count: int = constants.CANDIDATES_PER_BATCH,
) -> list[Contributor]:
    """Generate a batch of hiring candidates.

    Args:
        rng: Random source for every draw
        roster: Current team, whose names are not reused
        config: Archetype tables (defaults if None)
        count: Batch size
    """
    config = config or ArchetypesConfig()
    pool = config.weighted_pool()
    if not pool:
        logger.warning("[GEN] archetype pool is empty, no candidates generated")
        return []

    used_names = {c.name for c in roster}
    taken_archetypes: set[str] = set()
    candidates = []

    for _ in range(count):
        key = pick_archetype(rng, pool, taken_archetypes)
        taken_archetypes.add(key)
        archetype = config.get(key)
        name = pick_name(rng, archetype, used_names)
        used_names.add(name)
        candidates.append(make_contributor(rng, archetype, name))

    logger.debug(f"[GEN] candidates: {', '.join(f'{c.name} ({c.archetype})' for c in candidates)}")
    return candidates
