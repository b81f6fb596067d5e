"""
Best-effort notification creation.

``emit`` writes through its own session so a failure can never roll back or
abort the booking/call-start that triggered it. Errors are logged, counted
and reported in the returned ``EmitResult``; nothing is raised.
"""
import logging
from dataclasses import dataclass
from typing import Callable, Optional

from sqlalchemy.orm import Session

from wellbee import crud
from wellbee.db.session import SessionLocal
from wellbee.models.notification import Notification, NOTIFICATION_TYPES
from .metrics import notifications_emitted_total, notifications_emit_failed_total

logger = logging.getLogger(__name__)


@dataclass
class EmitResult:
    ok: bool
    notification: Optional[Notification] = None
    error: Optional[str] = None


class NotificationEmitter:
    def __init__(self, session_factory: Optional[Callable[[], Session]] = None):
        self.session_factory = session_factory or SessionLocal

    def emit(
        self,
        target_user_id: int,
        from_user_id: int,
        type: str,
        message: str,
        appointment_id: Optional[int] = None,
        post_id: Optional[int] = None,
    ) -> EmitResult:
        db = None
        try:
            if type not in NOTIFICATION_TYPES:
                raise ValueError(f"unknown notification type: {type}")
            db = self.session_factory()
            notification = crud.notification.create(
                db,
                user_id=target_user_id,
                from_user_id=from_user_id,
                type=type,
                message=message,
                appointment_id=appointment_id,
                post_id=post_id,
            )
            notifications_emitted_total.labels(type=type).inc()
            logger.info(f"Notification {notification.id} ({type}) created for user {target_user_id}")
            return EmitResult(ok=True, notification=notification)
        except Exception as e:
            notifications_emit_failed_total.labels(type=str(type)).inc()
            logger.error(f"Failed to create {type} notification for user {target_user_id}: {e!r}")
            if db is not None:
                try:
                    db.rollback()
                except Exception:
                    logger.exception("Rollback after failed notification insert also failed")
            return EmitResult(ok=False, error=str(e))
        finally:
            if db is not None:
                db.close()
