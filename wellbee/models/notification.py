from sqlalchemy import Column, Integer, String, Boolean, DateTime, Text, ForeignKey, Index
from sqlalchemy.orm import relationship
from wellbee.db.base import Base
from wellbee.utils.timezone import utcnow

NOTIFICATION_TYPES = ("appointment", "video", "like", "comment", "message")


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)  # recipient
    from_user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    type = Column(String, nullable=False)
    post_id = Column(Integer, nullable=True)  # community posts live outside this service
    appointment_id = Column(Integer, ForeignKey("appointments.id"), nullable=True)
    message = Column(Text, nullable=True)
    read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    from_user = relationship("User", foreign_keys=[from_user_id])

    __table_args__ = (
        Index("ix_notifications_user_created", "user_id", "created_at"),
        Index("ix_notifications_read", "read"),
    )
