"""
PM (Project Management) module for sprintsim.

Generates the work (contracts, stories, blockers) and the people
(job board candidates), and defines the contract/result models.
"""

from sprintsim.pm.models import Contract, PeriodResult, ResultKind
from sprintsim.pm.contracts import (
    generate_contract,
    make_blocker,
    make_story,
)
from sprintsim.pm.candidates import generate_candidates

__all__ = [
    "Contract",
    "PeriodResult",
    "ResultKind",
    "generate_contract",
    "make_blocker",
    "make_story",
    "generate_candidates",
]
