"""
Contract and blocker generation.

Contracts are drawn from fixed ranges; every field is an independent draw
from the injected RandomSource, so a seeded source yields the same contract.
"""

import logging

from sprintsim.lib import constants
from sprintsim.lib.random_source import RandomSource
from sprintsim.lib.types import ItemKind, ItemStatus, WorkItem
from sprintsim.pm.models import Contract

logger = logging.getLogger(__name__)


def draw_titles(rng: RandomSource, count: int, pool: list[str]) -> list[str]:
    """Draw titles without replacement, falling back to replacement once the
    pool is exhausted."""
    available = list(pool)
    titles = []
    for _ in range(count):
        if available:
            titles.append(available.pop(rng.randint(0, len(available) - 1)))
        else:
            titles.append(rng.choice(pool))
    return titles


def make_story(rng: RandomSource, title: str) -> WorkItem:
    """New backlog story with a random point cost."""
    low, high = constants.STORY_POINT_RANGE
    return WorkItem(
        id=rng.new_id("story"),
        kind=ItemKind.STORY,
        title=title,
        points_required=rng.randint(low, high),
        status=ItemStatus.BACKLOG,
    )


def make_blocker(rng: RandomSource) -> WorkItem:
    """New blocker. Blockers start in progress, so they block immediately."""
    return WorkItem(
        id=rng.new_id("blocker"),
        kind=ItemKind.BLOCKER,
        title=rng.choice(constants.BLOCKER_TITLES),
        points_required=constants.BLOCKER_STORY_POINTS,
        status=ItemStatus.IN_PROGRESS,
    )


def generate_contract(rng: RandomSource, sprint_days: int = constants.DEFAULT_SPRINT_DAYS) -> Contract:
    """Generate a contract with a fresh backlog of stories.

    Args:
        rng: Random source for every draw
        sprint_days: In-game days per sprint (from balance config)
    """
    story_count = rng.randint(*constants.STORIES_PER_CONTRACT_RANGE)
    titles = draw_titles(rng, story_count, constants.STORY_TITLES)
    stories = [make_story(rng, title) for title in titles]

    contract = Contract(
        id=rng.new_id("contract"),
        client_name=rng.choice(constants.CLIENT_NAMES),
        base_payout=rng.randint(*constants.CONTRACT_PAYOUT_RANGE),
        sprint_days=sprint_days,
        total_sprints=rng.randint(*constants.SPRINTS_PER_CONTRACT_RANGE),
        stories=stories,
    )

    logger.debug(
        f"[GEN] contract {contract.client_name}: {len(stories)} stories, "
        f"{contract.total_points} pts, {contract.total_sprints} sprints, ${contract.base_payout}"
    )
    return contract
