import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import requests

from wellbee.core.config import settings
from wellbee.core.exceptions import UpstreamProviderError

logger = logging.getLogger(__name__)

# Jitsi room options: skip the prejoin page, start with media on, hide chrome we don't use
FALLBACK_ROOM_OPTIONS = (
    "#config.prejoinPageEnabled=false"
    "&config.startWithVideoMuted=false"
    "&config.startWithAudioMuted=false"
    "&config.disableDeepLinking=true"
    "&config.hideConferenceSubject=true"
    "&config.hideConferenceTimer=true"
    "&config.disableInviteFunctions=true"
)


def room_name(appointment_id: int) -> str:
    return f"appointment-{appointment_id}"


def fallback_meeting_url(appointment_id: int, base_url: Optional[str] = None) -> str:
    """Public meeting URL that only depends on the appointment id."""
    base = (base_url or settings.VIDEO_FALLBACK_BASE_URL).rstrip("/")
    return f"{base}/wellbee-{room_name(appointment_id)}{FALLBACK_ROOM_OPTIONS}"


class DailyRoomProvider:
    """Creates rooms through the Daily.co REST API."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        api_url: Optional[str] = None,
        timeout: Optional[int] = None,
        ttl_minutes: Optional[int] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.DAILY_API_KEY
        self.api_url = (api_url or settings.DAILY_API_URL).rstrip("/")
        self.timeout = timeout or settings.VIDEO_PROVIDER_TIMEOUT
        self.ttl_minutes = ttl_minutes or settings.VIDEO_ROOM_TTL_MINUTES

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def _build_headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }

    def _expiry(self, appointment) -> int:
        # Room expires a while after the booked slot starts
        slot_start = datetime.strptime(appointment.slot_start, "%H:%M").time()
        starts_at = datetime.combine(appointment.date, slot_start, tzinfo=timezone.utc)
        expires_at = starts_at + timedelta(minutes=self.ttl_minutes)
        return int(expires_at.timestamp())

    def create_room(self, appointment) -> str:
        if not self.configured:
            raise UpstreamProviderError("Video provider is not configured", reason="provider unavailable")

        payload: Dict[str, Any] = {
            "name": room_name(appointment.id),
            "properties": {
                "enable_chat": True,
                "enable_screenshare": True,
                "exp": self._expiry(appointment),
                "max_participants": 2,
                "enable_knocking": False,
                "start_video_off": False,
                "start_audio_off": False,
            },
        }
        try:
            r = requests.post(
                f"{self.api_url}/rooms", json=payload, headers=self._build_headers(), timeout=self.timeout
            )
            r.raise_for_status()
            url = r.json().get("url")
        except (requests.RequestException, ValueError) as e:
            raise UpstreamProviderError(f"Failed to create video room: {e}", reason="provider error") from e

        if not url:
            raise UpstreamProviderError("Video provider returned no room url", reason="provider error")
        logger.info(f"Created video room for appointment {appointment.id}: {url}")
        return url
