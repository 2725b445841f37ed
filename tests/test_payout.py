"""Tests for sprintsim.lib.payout module."""

import pytest

from sprintsim.lib.config import BalanceConfig
from sprintsim.lib.payout import (
    calculate_final,
    calculate_interim,
    completion_ratio,
    grade_for_ratio,
    payout_for_ratio,
)
from sprintsim.lib.types import ItemKind, ItemStatus, WorkItem
from sprintsim.pm.models import ResultKind


def story(sid, required, done=0.0, status=ItemStatus.IN_PROGRESS):
    return WorkItem(
        id=sid, kind=ItemKind.STORY, title=sid,
        points_required=required, points_done=done, status=status,
    )


def blocker(bid):
    return WorkItem(id=bid, kind=ItemKind.BLOCKER, title=bid, points_required=0,
                    status=ItemStatus.IN_PROGRESS)


class TestCompletionRatio:
    """Tests for completion_ratio."""

    def test_empty_is_zero(self):
        assert completion_ratio([]) == 0.0

    def test_all_done_is_one(self):
        items = [story("a", 3, 3, ItemStatus.DONE), story("b", 2, 2, ItemStatus.DONE)]
        assert completion_ratio(items) == 1.0

    def test_partial_progress_counts(self):
        """Points done on unfinished stories count toward the ratio."""
        items = [story("a", 4, 2), story("b", 6, 0, ItemStatus.BACKLOG)]
        assert completion_ratio(items) == pytest.approx(0.2)

    def test_blockers_ignored(self):
        items = [story("a", 4, 4, ItemStatus.DONE), blocker("x")]
        assert completion_ratio(items) == 1.0


class TestGradeForRatio:
    """Tests for letter grade bands."""

    @pytest.mark.parametrize("ratio,grade", [
        (1.0, "S"),
        (0.99, "A"),
        (0.8, "A"),
        (0.6, "B"),
        (0.4, "C"),
        (0.2, "D"),
        (0.19, "F"),
        (0.0, "F"),
    ])
    def test_bands(self, ratio, grade):
        assert grade_for_ratio(ratio) == grade

    def test_monotonic(self):
        """A higher ratio never produces a worse grade."""
        order = ["F", "D", "C", "B", "A", "S"]
        ranks = [order.index(grade_for_ratio(i / 100)) for i in range(101)]
        assert ranks == sorted(ranks)


class TestPayoutForRatio:
    """Tests for payout_for_ratio."""

    def test_full_completion_pays_base_plus_perfect(self):
        payout = payout_for_ratio(1.0, 2000)
        assert payout.cash == 2000
        assert payout.perfect_bonus == 500
        assert payout.early_bonus == 0

    def test_zero_completion_pays_nothing(self):
        payout = payout_for_ratio(0.0, 2000)
        assert payout.cash == 0
        assert payout.total == 0

    def test_curve_at_eighty_percent(self):
        """80% on a 1000 base with curve 1.3 pays about 748."""
        payout = payout_for_ratio(0.8, 1000)
        assert payout.cash == pytest.approx(1000 * 0.8 ** 1.3, abs=0.01)
        assert 740 < payout.cash < 750
        assert payout.perfect_bonus == 0

    def test_early_bonus_from_base_payout(self):
        """3 days early at 5% per day on a 2000 base is 300."""
        payout = payout_for_ratio(1.0, 2000, days_remaining=3)
        assert payout.early_bonus == pytest.approx(300)

    def test_inputs_clamped(self):
        assert payout_for_ratio(1.5, 1000).cash == 1000
        assert payout_for_ratio(-0.5, 1000).cash == 0
        assert payout_for_ratio(1.0, 1000, days_remaining=-2).early_bonus == 0

    def test_config_overrides_curve(self):
        config = BalanceConfig(payout_curve=1.0, perfect_bonus=0.0)
        payout = payout_for_ratio(0.5, 1000, config=config)
        assert payout.cash == pytest.approx(500)


class TestCalculateInterim:
    """Tests for interim sprint results."""

    def test_reports_contract_points_without_cash(self):
        """Sprint 1 of 2 completes 6 of the contract's 10 points."""
        sprint = [story("a", 4, 4, ItemStatus.DONE), story("b", 2, 2, ItemStatus.DONE)]
        backlog = [story("c", 4, 0, ItemStatus.BACKLOG)]

        result = calculate_interim(sprint, sprint + backlog, sprint_number=1, total_sprints=2)

        assert result.kind is ResultKind.INTERIM
        assert result.contract_points_completed == 6
        assert result.contract_points_total == 10
        assert result.cash_earned == 0
        assert result.total_payout == 0
        assert result.tickets_completed == 2
        assert result.tickets_total == 2

    def test_counts_only_done_tickets(self):
        sprint = [story("a", 4, 4, ItemStatus.DONE), story("b", 4, 1)]
        result = calculate_interim(sprint, sprint, sprint_number=1, total_sprints=3)
        assert result.tickets_completed == 1
        assert result.tickets_total == 2
        assert result.points_completed == 5


class TestCalculateFinal:
    """Tests for the contract-closing result."""

    def test_eighty_percent_grade_a(self):
        sprint = [story("a", 8, 8, ItemStatus.DONE), story("b", 2, 0)]
        result = calculate_final(sprint, sprint, base_payout=1000, sprint_number=2, total_sprints=2)

        assert result.is_final
        assert result.grade == "A"
        assert result.cash_earned == pytest.approx(1000 * 0.8 ** 1.3, abs=0.01)
        assert result.perfect_bonus == 0

    def test_perfect_early_ship(self):
        sprint = [story("a", 5, 5, ItemStatus.DONE)]
        result = calculate_final(
            sprint, sprint, base_payout=2000, sprint_number=2, total_sprints=2,
            blockers_dismissed=2, days_remaining=3,
        )
        assert result.grade == "S"
        assert result.cash_earned == 2000
        assert result.perfect_bonus == 500
        assert result.early_bonus == pytest.approx(300)
        assert result.total_payout == pytest.approx(2800)
        assert result.blockers_dismissed == 2
        assert result.days_remaining == 3

    def test_logs_payout(self, caplog):
        import logging
        caplog.set_level(logging.INFO)
        sprint = [story("a", 5, 5, ItemStatus.DONE)]
        calculate_final(sprint, sprint, base_payout=1000, sprint_number=1, total_sprints=2)
        assert "[PAYOUT]" in caplog.text
