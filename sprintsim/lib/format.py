"""Display formatting for cash, days and results."""

import math

from sprintsim.pm.models import PeriodResult


def format_cash(amount: float) -> str:
    """Whole dollars with thousands separators, rounded down. "$1,500"."""
    whole = math.floor(amount)
    if whole < 0:
        return f"-${-whole:,}"
    return f"${whole:,}"


def format_day(current_day: int, total_days: int) -> str:
    return f"Day {current_day}/{total_days}"


def format_percent(ratio: float) -> str:
    """0.85 -> "85%". Rounded to the nearest whole percent."""
    return f"{round(ratio * 100)}%"


def format_velocity(velocity: float) -> str:
    return f"{velocity:.1f} pts/tick"


def format_result_summary(result: PeriodResult) -> str:
    """Multi-line review screen text for a sprint or contract result."""
    header = "Contract complete" if result.is_final else "Sprint complete"
    lines = [
        f"{header} - sprint {result.sprint_number}/{result.total_sprints}",
        f"Grade: {result.grade}",
        f"Stories: {result.tickets_completed}/{result.tickets_total}",
        f"Points: {result.points_completed:g}/{result.points_total:g}",
        f"Contract progress: {format_percent(result.completion_ratio)}",
        f"Blockers dismissed: {result.blockers_dismissed}",
    ]
    if result.days_remaining:
        lines.append(f"Shipped with {result.days_remaining} days to spare")
    if result.is_final:
        lines.append(f"Payout: {format_cash(result.cash_earned)}")
        if result.perfect_bonus:
            lines.append(f"Perfect bonus: {format_cash(result.perfect_bonus)}")
        if result.early_bonus:
            lines.append(f"Early delivery bonus: {format_cash(result.early_bonus)}")
        lines.append(f"Total: {format_cash(result.total_payout)}")
    return "\n".join(lines)
