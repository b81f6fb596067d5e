"""
Client-side notification polling.

The poller fetches ``/user/notifications`` on a fixed interval and reacts to
notifications that are unread and newer than the last successful fetch. Only
one fetch is ever in flight; a tick that finds the previous fetch still
running is skipped.
"""
import asyncio
import logging
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from wellbee.utils.timezone import parse_timestamp, utcnow
from .alerts import AlertSink, LoggingAlertSink
from .client import NotificationsClient

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 10.0
APPOINTMENTS_VIEW_POLL_INTERVAL = 5.0
DEFAULT_FETCH_TIMEOUT = 8.0

ALERT_TYPES = ("video", "appointment")
ALERT_TITLES = {
    "video": "Video Call Started",
    "appointment": "New Appointment",
}
ALERT_CLICK_TARGET = "/my-appointments"


class PollerState(str, Enum):
    IDLE = "idle"
    POLLING = "polling"


class NotificationPoller:
    def __init__(
        self,
        client: NotificationsClient,
        alerts: Optional[AlertSink] = None,
        interval: float = DEFAULT_POLL_INTERVAL,
        fetch_timeout: float = DEFAULT_FETCH_TIMEOUT,
        clock: Callable[[], datetime] = utcnow,
    ):
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.client = client
        self.alerts = alerts or LoggingAlertSink()
        self.interval = interval
        self.fetch_timeout = fetch_timeout
        self.clock = clock

        self.state = PollerState.IDLE
        self.watermark: Optional[datetime] = None
        self.unread_count = 0
        self.skipped_ticks = 0
        self._ticker: Optional[asyncio.Task] = None
        self._fetch: Optional[asyncio.Task] = None

    def start(self) -> None:
        """Begin polling; must be called from inside a running event loop."""
        if self.state == PollerState.POLLING:
            return
        if self.watermark is None:
            self.watermark = self.clock()
        self.state = PollerState.POLLING
        self._ticker = asyncio.get_running_loop().create_task(self._run())
        logger.info(f"Notification poller started (interval={self.interval}s)")

    async def stop(self) -> None:
        if self.state == PollerState.IDLE:
            return
        self.state = PollerState.IDLE
        tasks = [t for t in (self._ticker, self._fetch) if t is not None and not t.done()]
        for task in tasks:
            task.cancel()
        self._ticker = None
        self._fetch = None
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        logger.info("Notification poller stopped")

    async def _run(self) -> None:
        while self.state == PollerState.POLLING:
            if self._fetch is None or self._fetch.done():
                self._fetch = asyncio.create_task(self.poll_once())
            else:
                self.skipped_ticks += 1
                logger.debug("Previous notification fetch still running, skipping tick")
            await asyncio.sleep(self.interval)

    async def poll_once(self) -> Optional[List[Dict[str, Any]]]:
        """
        Run a single fetch. Returns the newly seen notifications, or None when
        the fetch failed (the watermark is left where it was).
        """
        issued_at = self.clock()
        try:
            notifications = await asyncio.wait_for(self.client.list(), timeout=self.fetch_timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Notification fetch timed out after {self.fetch_timeout}s")
            return None
        except Exception as e:
            logger.error(f"Error checking for notifications: {e}")
            return None

        new, newest = self._select_new(notifications)
        self.unread_count = sum(1 for n in notifications if not n.get("read"))
        # A notification created while the request was in flight can be newer than
        # issued_at; the watermark must cover it or the next poll alerts it again
        self.watermark = max(t for t in (self.watermark, issued_at, newest) if t is not None)
        if new:
            try:
                self._alert(new)
            except Exception as e:
                logger.error(f"Error raising notification alert: {e}")
        return new

    def _select_new(
        self, notifications: List[Dict[str, Any]]
    ) -> Tuple[List[Dict[str, Any]], Optional[datetime]]:
        """Unread notifications past the watermark, plus the newest createdAt seen."""
        if self.watermark is None:
            self.watermark = self.clock()
        new = []
        newest = None
        for n in notifications:
            try:
                created_at = parse_timestamp(n.get("createdAt"))
            except ValueError:
                logger.warning(f"Skipping notification {n.get('id')} with bad createdAt {n.get('createdAt')!r}")
                continue
            if created_at is None:
                continue
            if newest is None or created_at > newest:
                newest = created_at
            if not n.get("read") and created_at > self.watermark:
                new.append(n)
        return new, newest

    def _alert(self, new: List[Dict[str, Any]]) -> None:
        alertable = [n for n in new if n.get("type") in ALERT_TYPES]
        if not alertable:
            return
        self.alerts.play_sound()
        if not self.alerts.permission_granted:
            return
        for n in alertable:
            title = ALERT_TITLES[n["type"]]
            body = n.get("message") or "You have a new notification"
            self.alerts.show(title, body, ALERT_CLICK_TARGET)
