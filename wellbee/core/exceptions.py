"""
Domain errors raised by the scheduling and notification layers.

Endpoints let these propagate; the handler registered in ``wellbee.main``
turns them into ``{"error": ..., "reason": ..., **detail}`` responses.
"""
from typing import Any, Dict, Optional


class SchedulingError(Exception):
    status_code = 400

    def __init__(self, message: str, reason: Optional[str] = None, detail: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.reason = reason
        self.detail = detail or {}

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"error": self.message}
        if self.reason:
            payload["reason"] = self.reason
        payload.update(self.detail)
        return payload


class Unauthorized(SchedulingError):
    """Wrong actor for the operation (authenticated but not allowed)."""
    status_code = 403


class NotFound(SchedulingError):
    status_code = 404


class ValidationError(SchedulingError):
    status_code = 400


class InvalidTransition(SchedulingError):
    status_code = 400


class UpstreamProviderError(SchedulingError):
    """Video-room provisioning failed. Recovered locally, never returned to clients."""
    status_code = 502
