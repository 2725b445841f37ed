"""
Studio: the host-facing game object.

Wires the clock, FSM, tick processor, board and roster together and
exposes the player actions. Hosts (a UI, a bot, a test) drive the game
only through these methods plus the frame scheduler.

Usage:
    from sprintsim.studio import Studio

    studio = Studio.from_config_dir(Path("config"))
    contract = studio.accept_contract()
    studio.commit_story(contract.stories[0].id)
    studio.start_sprint()
    studio.start_work(contract.stories[0].id)
    studio.scheduler.fire(t)  # or an AsyncioFrameScheduler
"""

import logging
from pathlib import Path
from typing import Optional

from sprintsim.lib import constants
from sprintsim.lib.archetypes_config import ArchetypesConfig, load_archetypes_config
from sprintsim.lib.config import BalanceConfig, load_balance_config
from sprintsim.lib.format import format_cash, format_velocity
from sprintsim.lib.random_source import RandomSource
from sprintsim.lib.types import Contributor
from sprintsim.notifications import Notifier
from sprintsim.pm import Contract, PeriodResult, generate_candidates, generate_contract
from sprintsim.runner.accessors import Board, Roster
from sprintsim.runner.clock import FixedTimestepClock, ManualFrameScheduler
from sprintsim.runner.tick import TickProcessor
from sprintsim.workflow.fsm import SprintFSM
from sprintsim.workflow.state_machine import Phase, parse_phase

logger = logging.getLogger(__name__)


def make_starter_developer(rng: RandomSource) -> Contributor:
    """The intern every studio starts with."""
    return Contributor(
        id=rng.new_id("dev"),
        name=constants.STARTER_DEVELOPER_NAME,
        archetype="junior",
        velocity=constants.BASE_DEVELOPER_VELOCITY,
        hire_cost=0,
    )


class Studio:
    """One player's studio: team, cash and the contract in flight."""

    def __init__(
        self,
        config: Optional[BalanceConfig] = None,
        archetypes: Optional[ArchetypesConfig] = None,
        rng: Optional[RandomSource] = None,
        notifier: Optional[Notifier] = None,
        scheduler=None,
    ):
        self.config = config or BalanceConfig()
        self.archetypes = archetypes or ArchetypesConfig()
        self.rng = rng or RandomSource(self.config.seed)
        self.notifier = notifier or Notifier()
        self.scheduler = scheduler or ManualFrameScheduler()

        self.cash: float = self.config.starting_cash
        self.board = Board()
        self.roster = Roster([make_starter_developer(self.rng)])
        self.fsm = SprintFSM(on_transition=self._on_transition)
        self.processor = TickProcessor(
            self.fsm,
            self.board,
            self.roster,
            self.rng,
            config=self.config,
            notifier=self.notifier,
        )
        self.clock = FixedTimestepClock(
            self.processor.tick,
            lambda: self.fsm.phase,
            self.scheduler,
            tick_interval_ms=self.config.tick_interval_ms,
            max_catchup_ticks=self.config.max_catchup_ticks,
        )
        self.refresh_candidates()

    @classmethod
    def from_config_dir(cls, config_dir: Optional[Path], **kwargs) -> "Studio":
        """Build a studio from balance.env and archetypes.yaml in config_dir."""
        return cls(
            config=load_balance_config(config_dir),
            archetypes=load_archetypes_config(config_dir),
            **kwargs,
        )

    # --- Queries ---

    @property
    def phase(self) -> Phase:
        return self.fsm.phase

    @property
    def contract(self) -> Optional[Contract]:
        return self.fsm.contract

    @property
    def last_result(self) -> Optional[PeriodResult]:
        return self.fsm.last_result

    @property
    def sprint_number(self) -> int:
        """Sprints started across every contract."""
        return self.fsm.sprint_number

    @property
    def early_ship_available(self) -> bool:
        return self.processor.early_ship_available

    def planning_capacity(self) -> float:
        """Points the current team can finish in the working days of a sprint."""
        total_days = self.fsm.total_days if self.fsm.contract else self.config.sprint_days
        working_days = max(1, total_days - constants.PLANNING_DAYS)
        return self.roster.effective_velocity * self.config.ticks_per_day * working_days

    def is_overcommitted(self) -> bool:
        committed = sum(s.remaining_points for s in self.board.stories())
        return committed > self.planning_capacity()

    # --- Clock wiring ---

    def _on_transition(self, from_state: str, to_state: str, trigger: str) -> None:
        # The clock only runs between acceptance and review
        if parse_phase(to_state) in (Phase.REVIEW, Phase.IDLE):
            self.clock.stop()

    # --- Contract lifecycle ---

    def accept_contract(self, contract: Optional[Contract] = None) -> Optional[Contract]:
        """Take a contract (generated if not given) and enter planning."""
        if self.fsm.phase is not Phase.IDLE:
            logger.warning(f"[STUDIO] cannot accept a contract during {self.fsm.phase.value}")
            return None

        contract = contract or generate_contract(self.rng, self.config.sprint_days)
        if not self.fsm.accept_contract(contract=contract):
            return None

        self.board.load_backlog(contract.stories)
        self.processor.reset_sprint()
        self.clock.start()
        logger.info(
            f"[STUDIO] accepted {contract.client_name}: {len(contract.stories)} stories, "
            f"{contract.total_sprints} sprints, {format_cash(contract.base_payout)}"
        )
        return contract

    def commit_story(self, story_id: str) -> bool:
        if self.fsm.phase is not Phase.PLANNING:
            return False
        return self.board.commit(story_id)

    def uncommit_story(self, story_id: str) -> bool:
        if self.fsm.phase is not Phase.PLANNING:
            return False
        return self.board.uncommit(story_id)

    def start_sprint(self) -> bool:
        """Skip the rest of the planning day."""
        if self.fsm.phase is not Phase.PLANNING:
            return False
        self.processor.context.ticks_this_day = 0
        return self.fsm.planning_day_elapsed()

    def start_work(self, story_id: str) -> bool:
        if self.fsm.phase is not Phase.ACTIVE:
            return False
        return self.board.start_work(story_id)

    def dismiss_blocker(self, blocker_id: str) -> bool:
        return self.processor.dismiss_blocker(blocker_id)

    def ship_early(self) -> Optional[PeriodResult]:
        return self.processor.ship_early()

    def advance_to_next_sprint(self) -> bool:
        """Leave an interim review: clean the board and plan the next sprint."""
        if not self.fsm.advance_to_next_sprint():
            return False

        self.board.return_unfinished_to_backlog()
        self.processor.reset_sprint()
        self.refresh_candidates()
        self.clock.start()
        return True

    def collect_payout(self) -> Optional[float]:
        """Bank the final result and close the contract. Returns cash banked."""
        result = self.fsm.last_result
        if self.fsm.phase is not Phase.REVIEW or result is None or not result.is_final:
            return None
        if not self.fsm.close_contract():
            return None

        earned = result.total_payout
        self.cash = round(self.cash + earned, 2)
        self.board.clear()
        self.processor.reset_sprint()
        self.refresh_candidates()
        logger.info(f"[STUDIO] banked {format_cash(earned)} (grade {result.grade}), cash {format_cash(self.cash)}")
        return earned

    # --- Hiring ---

    def refresh_candidates(self) -> list[Contributor]:
        candidates = generate_candidates(
            self.rng,
            self.roster.contributors,
            self.archetypes,
            self.config.candidates_per_batch,
        )
        self.roster.set_candidates(candidates)
        return candidates

    def hire(self, candidate_id: str) -> Optional[Contributor]:
        """Hire from the job board. Not allowed mid-sprint."""
        if self.fsm.phase is Phase.ACTIVE:
            logger.info("[STUDIO] hiring is closed during an active sprint")
            return None

        candidate = self.roster.find_candidate(candidate_id)
        if candidate is None:
            return None
        if self.roster.size >= self.config.max_team_size:
            logger.info(f"[STUDIO] team is full ({self.roster.size}/{self.config.max_team_size})")
            return None
        if candidate.hire_cost > self.cash:
            logger.info(f"[STUDIO] cannot afford {candidate.name} ({format_cash(candidate.hire_cost)})")
            return None

        hired = self.roster.hire(candidate_id)
        self.cash = round(self.cash - hired.hire_cost, 2)
        logger.info(f"[STUDIO] hired {hired.name} ({hired.archetype}, {format_velocity(hired.velocity)}) for {format_cash(hired.hire_cost)}")
        return hired
