from typing import List, Optional
from sqlalchemy import update
from sqlalchemy.orm import Session, joinedload

from wellbee.models.notification import Notification


class CRUDNotification:
    def create(
        self,
        db: Session,
        *,
        user_id: int,
        from_user_id: int,
        type: str,
        message: Optional[str] = None,
        appointment_id: Optional[int] = None,
        post_id: Optional[int] = None,
    ) -> Notification:
        db_obj = Notification(
            user_id=user_id,
            from_user_id=from_user_id,
            type=type,
            message=message,
            appointment_id=appointment_id,
            post_id=post_id,
            read=False,
        )
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def list_for_user(self, db: Session, *, user_id: int, limit: int = 100) -> List[Notification]:
        return (
            db.query(Notification)
            .options(joinedload(Notification.from_user))
            .filter(Notification.user_id == user_id)
            .order_by(Notification.created_at.desc(), Notification.id.desc())
            .limit(limit)
            .all()
        )

    def count_for_appointment(self, db: Session, *, appointment_id: int, type: Optional[str] = None) -> int:
        query = db.query(Notification).filter(Notification.appointment_id == appointment_id)
        if type:
            query = query.filter(Notification.type == type)
        return query.count()

    def mark_read(self, db: Session, *, user_id: int, notification_id: int) -> int:
        """Mark one of the user's notifications read. Returns rows updated (0 if not theirs)."""
        result = db.execute(
            update(Notification)
            .where(Notification.id == notification_id, Notification.user_id == user_id)
            .values(read=True)
        )
        db.commit()
        return result.rowcount

    def mark_all_read(self, db: Session, *, user_id: int) -> int:
        result = db.execute(
            update(Notification)
            .where(Notification.user_id == user_id, Notification.read == False)  # noqa: E712
            .values(read=True)
        )
        db.commit()
        return result.rowcount


notification = CRUDNotification()
