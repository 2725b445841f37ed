"""
Per-tick simulation step.

One call to TickProcessor.tick() advances the world by one clock tick:

Planning: count ticks until the planning day is over, then start the
sprint.

Active:
1. Blocking rule - any in-progress blocker freezes all story progress
2. Allocation - team velocity, scaled by the WIP penalty and the momentum
   bonus, split evenly over in-progress stories
3. Promotion - finished stories move to done and re-arm momentum
4. Disruption roll - maybe spawn a blocker
5. Early-ship signal - once per sprint, when all committed work is done
6. Day/period boundary - advance the day, close the sprint when the
   day budget is spent

Every edge case is a value-level guard: no in-progress stories means no
allocation, a missing contract means the tick is a no-op.
"""

import logging
from typing import Optional

from sprintsim.lib import payout
from sprintsim.lib.config import BalanceConfig
from sprintsim.lib.format import format_day
from sprintsim.lib.random_source import RandomSource
from sprintsim.lib.types import ItemStatus, WorkItem
from sprintsim.notifications import Notifier
from sprintsim.pm.contracts import make_blocker
from sprintsim.pm.models import PeriodResult
from sprintsim.runner.accessors import Board, Roster
from sprintsim.runner.context import SimulationContext
from sprintsim.workflow.fsm import SprintFSM
from sprintsim.workflow.state_machine import Phase

logger = logging.getLogger(__name__)


def wip_multiplier(in_progress: int, roster_size: int, per_excess: float, floor: float) -> float:
    """Throughput multiplier for running more stories than there are people.

    Each in-progress story beyond the roster size costs `per_excess`; the
    result never drops below `floor`.
    """
    excess = max(0, in_progress - roster_size)
    return max(floor, 1.0 - per_excess * excess)


def disruption_chance(base_chance: float, reduction: float) -> float:
    """Per-tick blocker probability after passive reductions, floored at 0."""
    return max(0.0, base_chance * max(0.0, 1.0 - reduction))


class TickProcessor:
    """Runs the per-tick simulation against the board, roster and FSM."""

    def __init__(
        self,
        fsm: SprintFSM,
        board: Board,
        roster: Roster,
        rng: RandomSource,
        config: Optional[BalanceConfig] = None,
        notifier: Optional[Notifier] = None,
        context: Optional[SimulationContext] = None,
    ):
        self.fsm = fsm
        self.board = board
        self.roster = roster
        self.rng = rng
        self.config = config or BalanceConfig()
        self.notifier = notifier or Notifier()
        self.context = context or SimulationContext()

        if self.fsm.ship_early_guard is None:
            self.fsm.ship_early_guard = lambda: self.early_ship_available

    # --- Sprint lifecycle hooks ---

    def reset_sprint(self) -> None:
        """Clear per-sprint counters. Call when a sprint's planning begins."""
        self.context.reset()

    def dismiss_blocker(self, item_id: str) -> bool:
        """Player dismissed a blocker. Counted once per blocker."""
        if not self.board.dismiss_blocker(item_id):
            logger.debug(f"[TICK] dismiss ignored for {item_id}: not an active blocker")
            return False
        self.context.record_blocker_dismissed()
        logger.debug(f"[TICK] blocker {item_id} dismissed ({self.context.blockers_dismissed} this sprint)")
        return True

    # --- Queries ---

    @property
    def early_ship_available(self) -> bool:
        """Committed work all done and nothing blocking."""
        if self.fsm.phase is not Phase.ACTIVE:
            return False
        return (
            bool(self.board.stories())
            and not self.board.incomplete_stories()
            and not self.board.is_blocked
        )

    def effective_velocity(self, in_progress: int, momentum: bool) -> float:
        """Velocity available this tick before it is split across stories."""
        wip = wip_multiplier(
            in_progress,
            self.roster.size,
            self.config.wip_penalty_per_excess,
            self.config.wip_penalty_floor,
        )
        boost = self.config.momentum_multiplier if momentum else 1.0
        return self.roster.effective_velocity * wip * boost

    def contract_stories(self) -> list[WorkItem]:
        """Contract-wide story picture: current board, backlog, then stories
        closed in earlier sprints. First occurrence of an id wins."""
        contract = self.fsm.contract
        sources = [self.board.stories(), self.board.backlog]
        if contract is not None:
            sources.append(contract.stories)

        merged: dict[str, WorkItem] = {}
        for source in sources:
            for item in source:
                if item.is_story and item.id not in merged:
                    merged[item.id] = item
        return list(merged.values())

    # --- Tick ---

    def tick(self) -> None:
        """Advance the simulation by one tick."""
        if self.fsm.contract is None:
            logger.debug("[TICK] no active contract, skipping")
            return

        phase = self.fsm.phase
        if phase is Phase.PLANNING:
            self.context.ticks_total += 1
            self._planning_tick()
        elif phase is Phase.ACTIVE:
            self.context.ticks_total += 1
            self._active_tick()

    def _planning_tick(self) -> None:
        self.context.ticks_this_day += 1
        if self.context.ticks_this_day >= self.config.ticks_per_day:
            self.context.ticks_this_day = 0
            self.fsm.planning_day_elapsed()

    def _active_tick(self) -> None:
        momentum = self.context.consume_momentum()

        if not self.board.is_blocked:
            self._allocate(momentum)

        completed = self._promote_completed()
        if completed:
            self.context.arm_momentum(self.config.momentum_ticks)

        self._roll_disruption()
        self._check_early_ship()
        self._advance_clock()

    def _allocate(self, momentum: bool) -> None:
        stories = self.board.in_progress_stories()
        if not stories:
            return
        share = self.effective_velocity(len(stories), momentum) / len(stories)
        for story in stories:
            self.board.progress(story, share)

    def _promote_completed(self) -> list[WorkItem]:
        completed = []
        for story in self.board.in_progress_stories():
            if story.points_done >= story.points_required:
                self.board.set_status(story, ItemStatus.DONE)
                completed.append(story)
        for story in completed:
            logger.debug(f"[TICK] story done: {story.title} ({story.points_required} pts)")
        return completed

    def _roll_disruption(self) -> None:
        # Never block a sprint with nothing left to do
        if not self.board.incomplete_stories():
            return
        if len(self.board.active_blockers()) >= self.config.max_active_blockers:
            return

        chance = disruption_chance(self.config.blocker_spawn_chance, self.roster.blocker_rate_reduction)
        if not self.rng.chance(chance):
            return

        blocker = make_blocker(self.rng)
        self.board.add_blocker(blocker)
        logger.info(f"[TICK] blocker spawned: {blocker.title} ({format_day(self.fsm.current_day, self.fsm.total_days)})")
        self.notifier.blocker_spawned(blocker.title)

    def _check_early_ship(self) -> None:
        if self.context.early_ship_signalled or not self.early_ship_available:
            return
        self.context.early_ship_signalled = True
        logger.info(f"[TICK] early ship available with {self.fsm.days_remaining} days left")
        self.notifier.early_ship_available()

    def _advance_clock(self) -> None:
        self.context.ticks_this_day += 1
        if self.context.ticks_this_day < self.config.ticks_per_day:
            return

        self.context.ticks_this_day = 0
        self.fsm.advance_day()
        if self.fsm.is_past_deadline:
            self._close_sprint()

    # --- Sprint close ---

    def build_result(self, days_remaining: int = 0) -> PeriodResult:
        """Score the sprint: interim if more sprints remain, final otherwise."""
        contract = self.fsm.contract
        sprint_items = self.board.stories()
        contract_items = self.contract_stories()

        if contract.is_final_sprint:
            return payout.calculate_final(
                sprint_items,
                contract_items,
                base_payout=contract.base_payout,
                sprint_number=contract.current_sprint,
                total_sprints=contract.total_sprints,
                blockers_dismissed=self.context.blockers_dismissed,
                days_remaining=days_remaining,
                config=self.config,
            )
        return payout.calculate_interim(
            sprint_items,
            contract_items,
            sprint_number=contract.current_sprint,
            total_sprints=contract.total_sprints,
            blockers_dismissed=self.context.blockers_dismissed,
            days_remaining=days_remaining,
        )

    def _close_sprint(self) -> None:
        result = self.build_result()
        logger.info(
            f"[TICK] sprint {result.sprint_number}/{result.total_sprints} over: "
            f"{result.tickets_completed}/{result.tickets_total} stories, grade {result.grade}"
        )
        self.fsm.period_boundary_reached(result=result)
        self.notifier.sprint_ended(result.sprint_number, result.total_sprints, result.grade)

    def ship_early(self) -> Optional[PeriodResult]:
        """Close the sprint now, scoring the days left. Returns the result,
        or None if shipping isn't allowed right now."""
        if self.fsm.contract is None or not self.early_ship_available:
            logger.debug("[TICK] ship early ignored: not eligible")
            return None

        result = self.build_result(days_remaining=self.fsm.days_remaining)
        if not self.fsm.ship_early(result=result):
            return None
        logger.info(f"[TICK] shipped early with {result.days_remaining} days left")
        return result
