"""Tests for sprintsim.runner.accessors module."""

import pytest

from sprintsim.lib.types import Contributor, ItemKind, ItemStatus, PassiveEffect, WorkItem
from sprintsim.runner.accessors import Board, Roster


def story(sid, required=3, done=0.0, status=ItemStatus.BACKLOG):
    return WorkItem(id=sid, kind=ItemKind.STORY, title=sid,
                    points_required=required, points_done=done, status=status)


def blocker(bid, status=ItemStatus.IN_PROGRESS):
    return WorkItem(id=bid, kind=ItemKind.BLOCKER, title=bid, points_required=0, status=status)


def dev(did, velocity=1.0, passive=None, cost=0):
    return Contributor(id=did, name=did, archetype="mid", velocity=velocity,
                       hire_cost=cost, passive_effect=passive)


class TestBoardPlanning:
    """Commit / uncommit / start work."""

    @pytest.fixture
    def board(self):
        board = Board()
        board.load_backlog([story("a"), story("b"), story("c")])
        return board

    def test_load_backlog(self, board):
        assert [s.id for s in board.backlog] == ["a", "b", "c"]
        assert board.items == []

    def test_commit_queues_story(self, board):
        assert board.commit("a")
        assert board.find("a").status is ItemStatus.QUEUED
        assert board.find_in_backlog("a") is None

    def test_commit_unknown(self, board):
        assert not board.commit("zzz")

    def test_uncommit_only_queued(self, board):
        board.commit("a")
        board.start_work("a")
        assert not board.uncommit("a")

        board.commit("b")
        assert board.uncommit("b")
        assert board.find_in_backlog("b").status is ItemStatus.BACKLOG

    def test_start_work(self, board):
        board.commit("a")
        assert board.start_work("a")
        assert board.in_progress_stories()[0].id == "a"
        # Already started
        assert not board.start_work("a")

    def test_commit_keeps_backlog_order(self, board):
        board.commit("b")
        board.commit("a")
        assert [s.id for s in board.stories()] == ["b", "a"]
        assert [s.id for s in board.backlog] == ["c"]


class TestBoardBlockers:
    """Blocker queries and dismissal."""

    def test_blocked_while_blocker_active(self):
        board = Board()
        board.add_blocker(blocker("x"))
        assert board.is_blocked
        assert board.dismiss_blocker("x")
        assert not board.is_blocked

    def test_dismiss_twice_is_noop(self):
        board = Board()
        board.add_blocker(blocker("x"))
        assert board.dismiss_blocker("x")
        assert not board.dismiss_blocker("x")

    def test_dismiss_story_rejected(self):
        board = Board()
        board.items.append(story("a", status=ItemStatus.IN_PROGRESS))
        assert not board.dismiss_blocker("a")

    def test_active_blockers(self):
        board = Board()
        board.add_blocker(blocker("x"))
        board.add_blocker(blocker("y", status=ItemStatus.DONE))
        assert [b.id for b in board.active_blockers()] == ["x"]
        assert len(board.blockers()) == 2


class TestBoardCleanup:
    """End-of-sprint cleanup."""

    def test_unfinished_return_with_progress(self):
        board = Board()
        board.items = [
            story("a", 3, 3, ItemStatus.DONE),
            story("b", 4, 1.5, ItemStatus.IN_PROGRESS),
            story("c", 2, 0, ItemStatus.QUEUED),
            blocker("x"),
        ]
        assert board.return_unfinished_to_backlog() == 2
        assert board.items == []
        returned = {s.id: s for s in board.backlog}
        assert set(returned) == {"b", "c"}
        assert returned["b"].points_done == 1.5
        assert returned["b"].status is ItemStatus.BACKLOG


class TestWorkItem:
    """Progress clamping on items."""

    def test_progress_clamped(self):
        item = story("a", 2)
        assert item.add_progress(5) == 2
        assert item.points_done == 2
        assert item.remaining_points == 0

    def test_negative_progress_clamped(self):
        item = story("a", 2, 1)
        item.add_progress(-3)
        assert item.points_done == 0


class TestRoster:
    """Team velocity and hiring."""

    def test_effective_velocity_with_aura(self):
        aura = PassiveEffect(label="Velocity Aura", velocity_aura=0.10)
        roster = Roster([dev("a", 1.0), dev("b", 0.5), dev("sm", 0.1, aura)])
        assert roster.base_velocity == pytest.approx(1.6)
        assert roster.effective_velocity == pytest.approx(1.6 * 1.1)

    def test_blocker_rate_reduction_sums(self):
        shield = PassiveEffect(label="Bug Shield", blocker_rate_reduction=0.25)
        roster = Roster([dev("q1", 0.3, shield), dev("q2", 0.3, shield)])
        assert roster.blocker_rate_reduction == pytest.approx(0.5)

    def test_hire(self):
        roster = Roster([dev("a")])
        roster.set_candidates([dev("c1"), dev("c2")])
        hired = roster.hire("c2")
        assert hired.id == "c2"
        assert roster.size == 2
        assert [c.id for c in roster.candidates] == ["c1"]

    def test_hire_unknown(self):
        roster = Roster()
        assert roster.hire("nope") is None
        assert roster.size == 0
