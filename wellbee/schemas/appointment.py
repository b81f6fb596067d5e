from typing import Literal, Optional
from datetime import date, datetime
from pydantic import Field
from wellbee.schemas.common import CamelModel, TimeSlot
from wellbee.schemas.doctor import DoctorSummary
from wellbee.schemas.user import PatientSummary

AppointmentStatus = Literal["scheduled", "in-progress", "completed", "cancelled"]
AppointmentType = Literal["video", "in-person", "phone"]


class RatingRead(CamelModel):
    score: int
    review: Optional[str] = None
    date: Optional[datetime] = None


# Properties to receive on appointment creation
class AppointmentCreate(CamelModel):
    doctor_id: int
    date: date
    time_slot: TimeSlot
    symptoms: Optional[str] = None
    type: AppointmentType = "video"


# Properties to receive on status update
class AppointmentStatusUpdate(CamelModel):
    appointment_id: int
    status: AppointmentStatus
    rating: Optional[int] = Field(default=None, ge=1, le=5)
    review: Optional[str] = None


# Properties to return to client
class Appointment(CamelModel):
    id: int
    doctor_id: int
    patient_id: int
    date: date
    time_slot: TimeSlot
    status: AppointmentStatus
    type: AppointmentType
    symptoms: Optional[str] = None
    diagnosis: Optional[str] = None
    prescription: Optional[str] = None
    notes: Optional[str] = None
    meeting_link: Optional[str] = None
    rating: Optional[RatingRead] = None
    doctor: Optional[DoctorSummary] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# A doctor's agenda entry carries who is coming
class DoctorAppointment(Appointment):
    patient: Optional[PatientSummary] = None


class VideoRoomCreate(CamelModel):
    appointment_id: int


class VideoRoomResponse(CamelModel):
    meeting_link: str
    appointment: Appointment
