from datetime import date
from typing import List, Optional
from wellbee.schemas.common import CamelModel, TimeSlot, WorkingHours


class DoctorSummary(CamelModel):
    id: int
    name: str
    specialization: str


class DoctorPublic(DoctorSummary):
    email: str
    qualification: Optional[str] = None
    experience_years: Optional[int] = None
    working_hours: WorkingHours
    available_days: List[str]
    max_appointments_per_day: int
    average_rating: float = 0.0
    about: Optional[str] = None


class DoctorSlots(CamelModel):
    doctor_id: int
    date: date
    slots: List[TimeSlot]


class DoctorProfile(DoctorPublic):
    """What a doctor sees of their own profile."""
    is_available: bool = True


class DoctorProfileUpdate(CamelModel):
    name: Optional[str] = None
    specialization: Optional[str] = None
    qualification: Optional[str] = None
    experience_years: Optional[int] = None
    working_hours: Optional[WorkingHours] = None
    available_days: Optional[List[str]] = None
    max_appointments_per_day: Optional[int] = None
    about: Optional[str] = None
    is_available: Optional[bool] = None
