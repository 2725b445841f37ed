"""Sprint phase state machine using transitions library.

Owns the contract lifecycle: which phase we're in, which sprint of the
contract, and the in-game day counter. Provides:
- Explicit triggers (named actions)
- Guards (conditions for transitions)
- After callbacks that reset day counters and store results

Illegal triggers are no-ops that return False rather than raising, since
they can arrive from the UI mid-tick.

Usage:
    from sprintsim.workflow.fsm import SprintFSM

    fsm = SprintFSM()
    fsm.accept_contract(contract)           # idle -> planning
    fsm.planning_day_elapsed()              # planning -> active
    fsm.period_boundary_reached(result)     # active -> review
    fsm.advance_to_next_sprint()            # review -> planning (more sprints)
    fsm.close_contract()                    # review -> idle (final sprint)
"""

import logging
from typing import Callable, Optional

from transitions import Machine

from sprintsim.lib import constants
from sprintsim.lib.format import format_day
from sprintsim.pm.models import Contract, PeriodResult
from sprintsim.workflow.state_machine import Phase, TICKABLE_PHASES

logger = logging.getLogger(__name__)


# State values must match Phase enum for compatibility
STATES = [
    "idle",
    "planning",
    "active",
    "review",
]

# Transitions defined as (trigger, source, dest)
# Each trigger becomes a method on the FSM
TRANSITIONS = [
    # Contract accepted from the board
    {"trigger": "accept_contract", "source": "idle", "dest": "planning",
     "conditions": "_has_contract_arg", "after": "_on_accept_contract"},

    # Planning day over (clock-driven) or player started the sprint
    {"trigger": "planning_day_elapsed", "source": "planning", "dest": "active",
     "after": "_on_planning_day_elapsed"},

    # Sprint ran out of days
    {"trigger": "period_boundary_reached", "source": "active", "dest": "review",
     "after": "_store_result"},

    # All committed work done with days to spare
    {"trigger": "ship_early", "source": "active", "dest": "review",
     "conditions": "_ship_early_allowed", "after": "_store_result"},

    # Review outcomes
    {"trigger": "advance_to_next_sprint", "source": "review", "dest": "planning",
     "conditions": "_has_more_sprints", "after": "_on_next_sprint"},
    {"trigger": "close_contract", "source": "review", "dest": "idle",
     "conditions": "_is_final_sprint", "after": "_on_close_contract"},
]


def _event_arg(event, name: str):
    """Fetch a trigger argument passed either by keyword or positionally."""
    if name in event.kwargs:
        return event.kwargs[name]
    return event.args[0] if event.args else None


class SprintFSM:
    """State machine for the sprint lifecycle.

    Wraps the transitions library with sprint-specific state:
    - The active contract and its current sprint
    - Day counter for the current sprint (planning is day 1)
    - The result produced when the sprint closed
    - Logs all transitions
    """

    def __init__(
        self,
        on_transition: Callable[[str, str, str], None] | None = None,
        ship_early_guard: Callable[[], bool] | None = None,
    ):
        """Initialize the FSM in the idle phase.

        Args:
            on_transition: Optional callback(from_state, to_state, trigger) called after transitions
            ship_early_guard: Optional callable deciding whether ship_early is allowed
        """
        self.on_transition = on_transition
        self.ship_early_guard = ship_early_guard

        self.contract: Optional[Contract] = None
        self.current_day = 0
        self.total_days = constants.DEFAULT_SPRINT_DAYS
        self.sprint_number = 0  # Sprints played across all contracts
        self.last_result: Optional[PeriodResult] = None

        self.machine = Machine(
            model=self,
            states=STATES,
            transitions=TRANSITIONS,
            initial="idle",
            auto_transitions=False,  # Only explicit transitions
            send_event=True,  # Pass EventData to callbacks
            ignore_invalid_triggers=True,  # Illegal triggers are no-ops
            after_state_change="on_state_change",  # Callback after any transition
        )

    # --- Guards ---

    def _has_contract_arg(self, event) -> bool:
        return _event_arg(event, "contract") is not None

    def _ship_early_allowed(self, event) -> bool:
        if self.ship_early_guard is None:
            return True
        return bool(self.ship_early_guard())

    def _has_more_sprints(self, event) -> bool:
        return self.contract is not None and self.contract.current_sprint < self.contract.total_sprints

    def _is_final_sprint(self, event) -> bool:
        return self.contract is not None and self.contract.current_sprint == self.contract.total_sprints

    # --- Transition effects ---

    def _on_accept_contract(self, event) -> None:
        self.contract = _event_arg(event, "contract")
        self.contract.current_sprint = 1
        self.current_day = 1
        self.total_days = self.contract.sprint_days
        self.sprint_number += 1
        self.last_result = None

    def _on_planning_day_elapsed(self, event) -> None:
        self.current_day = constants.PLANNING_DAYS + 1

    def _store_result(self, event) -> None:
        self.last_result = _event_arg(event, "result")

    def _on_next_sprint(self, event) -> None:
        self.contract.current_sprint += 1
        self.current_day = 1
        self.sprint_number += 1
        self.last_result = None

    def _on_close_contract(self, event) -> None:
        self.contract = None
        self.current_day = 0
        self.last_result = None

    def on_state_change(self, event) -> None:
        """Callback after any state transition.

        Logs the transition and notifies the host.
        """
        from_state = event.transition.source
        to_state = event.transition.dest
        trigger = event.event.name

        sprint = f" sprint {self.contract.current_sprint}/{self.contract.total_sprints}" if self.contract else ""
        logger.info(f"[FSM] {from_state} -> {to_state} ({trigger}){sprint}")

        if self.on_transition:
            self.on_transition(from_state, to_state, trigger)

    # --- Queries ---

    @property
    def phase(self) -> Phase:
        return Phase(self.state)

    @property
    def is_tickable(self) -> bool:
        return self.phase in TICKABLE_PHASES

    @property
    def days_remaining(self) -> int:
        """Whole days left in the sprint after the current one."""
        return max(0, self.total_days - self.current_day)

    @property
    def is_past_deadline(self) -> bool:
        return self.current_day > self.total_days

    def advance_day(self) -> int:
        """Advance the day counter. Returns the new day."""
        self.current_day += 1
        logger.debug(f"[FSM] {format_day(self.current_day, self.total_days)}")
        return self.current_day

    def can(self, trigger: str) -> bool:
        """Check if a trigger is available in the current phase (guards not evaluated)."""
        return trigger in self.get_available_triggers()

    def get_available_triggers(self) -> list[str]:
        """Get list of triggers available in current phase."""
        return self.machine.get_triggers(self.state)
