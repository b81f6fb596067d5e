import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class AlertSink(Protocol):
    """Where the poller sends user-facing cues (sound, system alert)."""

    @property
    def permission_granted(self) -> bool: ...

    def play_sound(self) -> None: ...

    def show(self, title: str, body: str, click_target: str) -> None: ...


class LoggingAlertSink:
    def __init__(self, permission_granted: bool = True):
        self._permission_granted = permission_granted

    @property
    def permission_granted(self) -> bool:
        return self._permission_granted

    def play_sound(self) -> None:
        logger.info("Notification sound")

    def show(self, title: str, body: str, click_target: str) -> None:
        logger.info(f"[alert] {title}: {body} -> {click_target}")
