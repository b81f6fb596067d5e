from .user import User
from .doctor import Doctor, DoctorRating
from .appointment import Appointment
from .notification import Notification
