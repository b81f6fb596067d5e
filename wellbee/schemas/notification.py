from datetime import datetime
from typing import Literal, Optional
from wellbee.schemas.common import CamelModel

NotificationType = Literal["appointment", "video", "like", "comment", "message"]


class Notification(CamelModel):
    id: int
    user_id: int
    from_user_id: int
    type: NotificationType
    post_id: Optional[int] = None
    appointment_id: Optional[int] = None
    message: Optional[str] = None
    read: bool = False
    created_at: datetime


class NotificationMarkRead(CamelModel):
    notification_id: Optional[int] = None


class NotificationMarkReadResult(CamelModel):
    message: str
    updated: int
