"""
Board and roster accessors.

The tick processor and the studio only reach shared game state through
these two objects. Hosts with their own state containers can pass any
object exposing the same methods; these in-memory versions are what the
library uses by default.

Board layout:
- backlog: contract stories not committed to the current sprint
- items:   the current sprint board (committed stories + blockers)

A story object is shared between the board and Contract.stories, so status
changes made here are the contract's true state.
"""

import logging
from typing import Iterable, Optional

from sprintsim.lib.types import Contributor, ItemStatus, WorkItem

logger = logging.getLogger(__name__)


class Board:
    """Sprint board and contract backlog."""

    def __init__(self):
        self.items: list[WorkItem] = []
        self.backlog: list[WorkItem] = []

    # --- Queries ---

    def find(self, item_id: str) -> Optional[WorkItem]:
        for item in self.items:
            if item.id == item_id:
                return item
        return None

    def find_in_backlog(self, item_id: str) -> Optional[WorkItem]:
        for item in self.backlog:
            if item.id == item_id:
                return item
        return None

    def stories(self) -> list[WorkItem]:
        """Stories committed to the current sprint."""
        return [i for i in self.items if i.is_story]

    def blockers(self) -> list[WorkItem]:
        return [i for i in self.items if i.is_blocker]

    def active_blockers(self) -> list[WorkItem]:
        return [i for i in self.items if i.is_active_blocker]

    def in_progress_stories(self) -> list[WorkItem]:
        return [i for i in self.items if i.is_story and i.status is ItemStatus.IN_PROGRESS]

    def incomplete_stories(self) -> list[WorkItem]:
        return [i for i in self.items if i.is_story and i.status is not ItemStatus.DONE]

    @property
    def is_blocked(self) -> bool:
        return any(i.is_active_blocker for i in self.items)

    # --- Mutations ---

    def load_backlog(self, stories: Iterable[WorkItem]) -> None:
        """Start a contract: everything in the backlog, empty sprint board."""
        self.backlog = list(stories)
        self.items = []

    def commit(self, item_id: str) -> bool:
        """Move a backlog story onto the sprint board."""
        item = self.find_in_backlog(item_id)
        if item is None or item.status is not ItemStatus.BACKLOG:
            return False
        self.backlog.remove(item)
        item.status = ItemStatus.QUEUED
        self.items.append(item)
        return True

    def uncommit(self, item_id: str) -> bool:
        """Return a not-yet-started story to the backlog."""
        item = self.find(item_id)
        if item is None or not item.is_story or item.status is not ItemStatus.QUEUED:
            return False
        self.items.remove(item)
        item.status = ItemStatus.BACKLOG
        self.backlog.append(item)
        return True

    def start_work(self, item_id: str) -> bool:
        """Pull a queued story into progress."""
        item = self.find(item_id)
        if item is None or not item.is_story or item.status is not ItemStatus.QUEUED:
            return False
        item.status = ItemStatus.IN_PROGRESS
        return True

    def progress(self, item: WorkItem, points: float) -> float:
        """Add progress to an item, clamped. Returns points applied."""
        return item.add_progress(points)

    def set_status(self, item: WorkItem, status: ItemStatus) -> None:
        item.status = status

    def add_blocker(self, blocker: WorkItem) -> None:
        self.items.append(blocker)

    def dismiss_blocker(self, item_id: str) -> bool:
        """Clear an active blocker. Dismissing twice is a no-op."""
        item = self.find(item_id)
        if item is None or not item.is_active_blocker:
            return False
        item.status = ItemStatus.DONE
        return True

    def return_unfinished_to_backlog(self) -> int:
        """Sprint cleanup: unfinished stories go back to the backlog with their
        progress, done stories and blockers leave the board. Returns how many
        stories were returned."""
        returned = 0
        for item in self.items:
            if item.is_story and item.status is not ItemStatus.DONE:
                item.status = ItemStatus.BACKLOG
                self.backlog.append(item)
                returned += 1
        self.items = []
        if returned:
            logger.debug(f"[BOARD] returned {returned} unfinished stories to backlog")
        return returned

    def clear(self) -> None:
        self.items = []
        self.backlog = []


class Roster:
    """Hired developers and the job board."""

    def __init__(self, contributors: Iterable[Contributor] = ()):
        self.contributors: list[Contributor] = list(contributors)
        self.candidates: list[Contributor] = []

    @property
    def size(self) -> int:
        return len(self.contributors)

    @property
    def base_velocity(self) -> float:
        return sum(c.velocity for c in self.contributors)

    @property
    def velocity_aura(self) -> float:
        return sum(c.velocity_aura for c in self.contributors)

    @property
    def effective_velocity(self) -> float:
        """Team velocity with additive aura bonuses applied."""
        return self.base_velocity * (1.0 + self.velocity_aura)

    @property
    def blocker_rate_reduction(self) -> float:
        return sum(c.blocker_rate_reduction for c in self.contributors)

    def set_candidates(self, candidates: Iterable[Contributor]) -> None:
        self.candidates = list(candidates)

    def find_candidate(self, candidate_id: str) -> Optional[Contributor]:
        for candidate in self.candidates:
            if candidate.id == candidate_id:
                return candidate
        return None

    def hire(self, candidate_id: str) -> Optional[Contributor]:
        """Move a candidate onto the roster. Returns the hire, or None."""
        candidate = self.find_candidate(candidate_id)
        if candidate is None:
            return None
        self.candidates.remove(candidate)
        self.contributors.append(candidate)
        return candidate
