from .common import TimeSlot, WorkingHours
from .user import TokenPayload, PatientSummary
from .doctor import DoctorSummary, DoctorPublic, DoctorSlots, DoctorProfile, DoctorProfileUpdate
from .appointment import (
    Appointment,
    AppointmentCreate,
    AppointmentStatusUpdate,
    DoctorAppointment,
    RatingRead,
    VideoRoomCreate,
    VideoRoomResponse,
)
from .notification import Notification, NotificationMarkRead, NotificationMarkReadResult
