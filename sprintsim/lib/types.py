"""
Shared data types for the simulation.

Board items and roster entries live here so the generators, the tick
processor and the accessors can share them without circular imports.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ItemKind(Enum):
    """What a board item is."""
    STORY = "story"
    BLOCKER = "blocker"


class ItemStatus(Enum):
    """Lifecycle column of a board item."""
    BACKLOG = "backlog"          # Contract backlog, not committed to a sprint
    QUEUED = "queued"            # Committed to the current sprint, not started
    IN_PROGRESS = "in_progress"
    DONE = "done"


@dataclass
class WorkItem:
    """A story or a blocker.

    Blockers carry zero points; they are cleared by dismissal, not by work.
    """
    id: str
    kind: ItemKind
    title: str
    points_required: float
    points_done: float = 0.0
    status: ItemStatus = ItemStatus.BACKLOG

    @property
    def is_story(self) -> bool:
        return self.kind is ItemKind.STORY

    @property
    def is_blocker(self) -> bool:
        return self.kind is ItemKind.BLOCKER

    @property
    def is_active_blocker(self) -> bool:
        return self.is_blocker and self.status is ItemStatus.IN_PROGRESS

    @property
    def is_complete(self) -> bool:
        return self.status is ItemStatus.DONE

    @property
    def remaining_points(self) -> float:
        return max(0.0, self.points_required - self.points_done)

    def add_progress(self, points: float) -> float:
        """Add points, clamped to [0, points_required]. Returns points applied."""
        before = self.points_done
        self.points_done = min(self.points_required, max(0.0, before + points))
        return self.points_done - before


@dataclass(frozen=True)
class PassiveEffect:
    """Archetype trait. At most one of the two modifiers is set."""
    label: str
    description: str = ""
    blocker_rate_reduction: float = 0.0  # Multiplicative cut to disruption chance
    velocity_aura: float = 0.0           # Additive bonus to team velocity


@dataclass
class Contributor:
    """A developer on the roster or on the job board."""
    id: str
    name: str
    archetype: str
    velocity: float  # Points per tick
    hire_cost: int = 0
    passive_effect: Optional[PassiveEffect] = None

    @property
    def blocker_rate_reduction(self) -> float:
        return self.passive_effect.blocker_rate_reduction if self.passive_effect else 0.0

    @property
    def velocity_aura(self) -> float:
        return self.passive_effect.velocity_aura if self.passive_effect else 0.0
