"""
Data models for contracts and sprint results.
"""

from dataclasses import dataclass, field
from enum import Enum

from sprintsim.lib.types import WorkItem


class ResultKind(Enum):
    """Interim results close a sprint; the final result closes the contract."""
    INTERIM = "interim"
    FINAL = "final"


@dataclass
class Contract:
    """A multi-sprint client engagement with one aggregate payout.

    `stories` is the full backlog across every sprint. Items are shared
    with the board, so their status is always the true lifecycle state.
    """
    id: str
    client_name: str
    base_payout: int
    sprint_days: int
    total_sprints: int                         # 2-4
    stories: list[WorkItem] = field(default_factory=list)
    current_sprint: int = 1                    # 1-based

    @property
    def total_points(self) -> float:
        return sum(s.points_required for s in self.stories)

    @property
    def is_final_sprint(self) -> bool:
        return self.current_sprint >= self.total_sprints


@dataclass(frozen=True)
class PeriodResult:
    """Sprint or contract summary shown on the review screen.

    Cash fields are only non-zero on the final result.
    """
    kind: ResultKind
    sprint_number: int
    total_sprints: int
    tickets_completed: int                     # This sprint
    tickets_total: int
    points_completed: float
    points_total: float
    contract_points_completed: float           # Whole contract
    contract_points_total: float
    blockers_dismissed: int
    grade: str
    days_remaining: int = 0
    cash_earned: float = 0.0
    perfect_bonus: float = 0.0
    early_bonus: float = 0.0

    @property
    def is_final(self) -> bool:
        return self.kind is ResultKind.FINAL

    @property
    def completion_ratio(self) -> float:
        if self.contract_points_total <= 0:
            return 0.0
        return min(1.0, self.contract_points_completed / self.contract_points_total)

    @property
    def total_payout(self) -> float:
        return self.cash_earned + self.perfect_bonus + self.early_bonus
