"""
In-game notifications (toasts) for sprintsim.

Fire-and-forget: the simulation hands a short message and an urgency to a
sink and never waits for delivery. Hosts plug in their own sink (a toast
widget, a queue); the default just logs.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional

from sprintsim.lib import constants

logger = logging.getLogger(__name__)


VALID_URGENCIES = ("low", "normal", "critical")

MAX_NOTIFICATION_LENGTH = 80

NotificationSink = Callable[[str, str], None]


def _log_sink(message: str, urgency: str) -> None:
    level = logging.WARNING if urgency == "critical" else logging.INFO
    logger.log(level, f"[TOAST] {message}")


class Notifier:
    """Delivers toasts to a sink, normalizing urgency and length."""

    def __init__(self, sink: Optional[NotificationSink] = None):
        self.sink = sink or _log_sink

    def notify(self, message: str, urgency: str = "normal") -> None:
        """
        Send a toast.

        Args:
            message: Short user-facing text
            urgency: One of "low", "normal", "critical"
        """
        if urgency not in VALID_URGENCIES:
            logger.warning(f"Invalid urgency '{urgency}', using 'normal'")
            urgency = "normal"

        # Truncate long messages to keep toasts readable
        if len(message) > MAX_NOTIFICATION_LENGTH:
            message = message[:MAX_NOTIFICATION_LENGTH] + "..."

        try:
            self.sink(message, urgency)
        except Exception as e:
            # A broken UI sink must not abort the tick in flight
            logger.warning(f"Notification sink failed: {e}")

    def blocker_spawned(self, title: str) -> None:
        """A blocker appeared and froze the board."""
        logger.debug(f"[TOAST] blocker spawned: {title}")
        self.notify(constants.BLOCKER_TOAST, "critical")

    def early_ship_available(self) -> None:
        """All committed stories are done with days to spare."""
        self.notify(constants.EARLY_SHIP_TOAST, "normal")

    def sprint_ended(self, sprint_number: int, total_sprints: int, grade: str) -> None:
        self.notify(f"Sprint {sprint_number}/{total_sprints} over - grade {grade}", "low")


@dataclass
class RecordingNotifier(Notifier):
    """Notifier that keeps every toast in memory. Useful for headless hosts."""
    messages: list[tuple[str, str]] = field(default_factory=list)

    def __post_init__(self):
        super().__init__(sink=self._record)

    def _record(self, message: str, urgency: str) -> None:
        self.messages.append((message, urgency))

    @property
    def texts(self) -> list[str]:
        return [m for m, _ in self.messages]
