"""Sprint phase enum and phase queries.

The transition logic lives in fsm.py; this module provides:
- Phase enum for type safety
- The set of phases in which the clock ticks
- parse_phase() for FSM state strings

Lifecycle per contract:
    IDLE -> PLANNING -> ACTIVE -> REVIEW -> PLANNING -> ... -> REVIEW -> IDLE
"""

from enum import Enum


class Phase(Enum):
    """All sprint phases.

    Values match FSM state strings.
    """

    IDLE = "idle"
    PLANNING = "planning"    # One in-game day reserved for committing work
    ACTIVE = "active"
    REVIEW = "review"


# Phases in which the clock drives the tick processor
TICKABLE_PHASES = frozenset({Phase.PLANNING, Phase.ACTIVE})


def parse_phase(value: str | None) -> Phase | None:
    """Parse a phase string into Phase enum.

    Returns None if the phase is unknown.
    """
    if value is None:
        return None
    for phase in Phase:
        if phase.value == value:
            return phase
    return None


def is_tickable(phase: Phase | None) -> bool:
    return phase in TICKABLE_PHASES
