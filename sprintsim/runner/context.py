"""
Per-sprint simulation context.
"""

from dataclasses import dataclass


@dataclass
class SimulationContext:
    """Transient counters for the sprint in flight.

    Owned by the tick processor and reset at the start of every sprint.
    Phase and the day counter live on the FSM.
    """
    ticks_this_day: int = 0
    blockers_dismissed: int = 0
    momentum_ticks_remaining: int = 0
    early_ship_signalled: bool = False
    ticks_total: int = 0  # Ticks processed this sprint, all phases

    def reset(self) -> None:
        """Clear all counters for a new sprint."""
        self.ticks_this_day = 0
        self.blockers_dismissed = 0
        self.momentum_ticks_remaining = 0
        self.early_ship_signalled = False
        self.ticks_total = 0

    def record_blocker_dismissed(self) -> None:
        self.blockers_dismissed += 1

    def arm_momentum(self, ticks: int) -> None:
        """Start (or restart) the momentum window."""
        self.momentum_ticks_remaining = ticks

    def consume_momentum(self) -> bool:
        """Use one tick of the momentum window. Returns True if it was active."""
        if self.momentum_ticks_remaining <= 0:
            return False
        self.momentum_ticks_remaining -= 1
        return True
