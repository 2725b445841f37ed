"""
Payout and grading for sprint and contract results.

Pure functions: everything is computed from the stories handed in, with
balance values taken from a BalanceConfig.

Cash follows a curve, not a straight percentage:

    cash = base_payout * completion_ratio ** payout_curve

With the default curve of 1.3, 80% completion pays ~75% of base and 60%
pays ~51%. A perfect contract adds a bonus on top of the curved cash;
shipping early adds a per-day bonus computed off the *base* payout.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from sprintsim.lib.config import BalanceConfig
from sprintsim.lib.constants import FALLBACK_GRADE, GRADE_THRESHOLDS
from sprintsim.lib.types import ItemStatus, WorkItem
from sprintsim.pm.models import PeriodResult, ResultKind

logger = logging.getLogger(__name__)


@dataclass
class PayoutBreakdown:
    """Cash components for a completion ratio."""
    cash: float
    perfect_bonus: float
    early_bonus: float

    @property
    def total(self) -> float:
        return self.cash + self.perfect_bonus + self.early_bonus


def _stories(items: Iterable[WorkItem]) -> list[WorkItem]:
    return [i for i in items if i.is_story]


def points_completed(items: Iterable[WorkItem]) -> float:
    """Sum of points done across story items."""
    return sum(s.points_done for s in _stories(items))


def points_total(items: Iterable[WorkItem]) -> float:
    return sum(s.points_required for s in _stories(items))


def completion_ratio(items: Iterable[WorkItem]) -> float:
    """Points done / points required across stories. 0 when there is no work."""
    stories = _stories(items)
    total = points_total(stories)
    if total <= 0:
        return 0.0
    return min(1.0, points_completed(stories) / total)


def grade_for_ratio(ratio: float) -> str:
    """Letter grade for a completion ratio, checked top-down (S=100% ... F)."""
    for grade, threshold in GRADE_THRESHOLDS:
        if ratio >= threshold:
            return grade
    return FALLBACK_GRADE


def payout_for_ratio(
    ratio: float,
    base_payout: float,
    days_remaining: int = 0,
    config: Optional[BalanceConfig] = None,
) -> PayoutBreakdown:
    """Compute curved cash, perfect bonus and early bonus.

    Args:
        ratio: Contract-wide completion ratio, clamped into [0, 1]
        base_payout: Contract base payout
        days_remaining: Days left when shipped early (0 if not)
        config: Balance values (defaults if None)
    """
    config = config or BalanceConfig()
    ratio = min(1.0, max(0.0, ratio))
    days_remaining = max(0, days_remaining)

    cash = base_payout * ratio ** config.payout_curve
    perfect = cash * config.perfect_bonus if ratio == 1.0 else 0.0
    early = base_payout * config.early_bonus_per_day * days_remaining

    return PayoutBreakdown(
        cash=round(cash, 2),
        perfect_bonus=round(perfect, 2),
        early_bonus=round(early, 2),
    )


def _sprint_tallies(sprint_items: Iterable[WorkItem]) -> dict:
    stories = _stories(sprint_items)
    done = [s for s in stories if s.status is ItemStatus.DONE]
    return {
        "tickets_completed": len(done),
        "tickets_total": len(stories),
        "points_completed": points_completed(stories),
        "points_total": points_total(stories),
    }


def calculate_interim(
    sprint_items: Iterable[WorkItem],
    contract_items: Iterable[WorkItem],
    sprint_number: int,
    total_sprints: int,
    blockers_dismissed: int = 0,
    days_remaining: int = 0,
) -> PeriodResult:
    """Result for a sprint that is not the last one.

    No cash changes hands; the grade is provisional, from the contract-wide
    ratio so far.
    """
    contract_stories = _stories(contract_items)
    ratio = completion_ratio(contract_stories)
    return PeriodResult(
        kind=ResultKind.INTERIM,
        sprint_number=sprint_number,
        total_sprints=total_sprints,
        contract_points_completed=points_completed(contract_stories),
        contract_points_total=points_total(contract_stories),
        blockers_dismissed=blockers_dismissed,
        grade=grade_for_ratio(ratio),
        days_remaining=max(0, days_remaining),
        **_sprint_tallies(sprint_items),
    )


def calculate_final(
    sprint_items: Iterable[WorkItem],
    contract_items: Iterable[WorkItem],
    base_payout: float,
    sprint_number: int,
    total_sprints: int,
    blockers_dismissed: int = 0,
    days_remaining: int = 0,
    config: Optional[BalanceConfig] = None,
) -> PeriodResult:
    """Result that closes the contract and pays out."""
    contract_stories = _stories(contract_items)
    ratio = completion_ratio(contract_stories)
    payout = payout_for_ratio(ratio, base_payout, days_remaining, config)
    grade = grade_for_ratio(ratio)

    logger.info(
        f"[PAYOUT] ratio={ratio:.3f} grade={grade} cash={payout.cash:.2f} "
        f"perfect={payout.perfect_bonus:.2f} early={payout.early_bonus:.2f}"
    )

    return PeriodResult(
        kind=ResultKind.FINAL,
        sprint_number=sprint_number,
        total_sprints=total_sprints,
        contract_points_completed=points_completed(contract_stories),
        contract_points_total=points_total(contract_stories),
        blockers_dismissed=blockers_dismissed,
        grade=grade,
        days_remaining=max(0, days_remaining),
        cash_earned=payout.cash,
        perfect_bonus=payout.perfect_bonus,
        early_bonus=payout.early_bonus,
        **_sprint_tallies(sprint_items),
    )
