from .appointment import appointment
from .user import user
from .doctor import doctor
from .notification import notification

__all__ = ["user", "doctor", "appointment", "notification"]
