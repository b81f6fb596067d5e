"""
Checks a proposed booking against a doctor's days, hours and daily capacity.

The checks run in a fixed order and the first failure is the reported reason.
Call ``validate`` inside the same transaction that inserts the appointment,
after the doctor row has been locked, so the capacity count cannot go stale.
"""
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from wellbee import crud
from wellbee.models.doctor import Doctor, WEEKDAYS
from wellbee.schemas.common import TimeSlot

REASON_DAY_UNAVAILABLE = "day unavailable"
REASON_OUTSIDE_HOURS = "outside working hours"
REASON_FULLY_BOOKED = "day fully booked"
REASON_SLOT_TAKEN = "slot already booked"

MESSAGES = {
    REASON_DAY_UNAVAILABLE: "Doctor is not available on this day",
    REASON_OUTSIDE_HOURS: "Appointment time is outside doctor's working hours",
    REASON_FULLY_BOOKED: "Doctor has reached maximum appointments for this day",
    REASON_SLOT_TAKEN: "This time slot is already booked",
}


def weekday_name(day: date) -> str:
    return WEEKDAYS[day.weekday()]


@dataclass
class ValidationResult:
    ok: bool
    reason: Optional[str] = None
    detail: Dict[str, Any] = field(default_factory=dict)

    @property
    def message(self) -> Optional[str]:
        return MESSAGES.get(self.reason) if self.reason else None

    @classmethod
    def accepted(cls) -> "ValidationResult":
        return cls(ok=True)

    @classmethod
    def rejected(cls, reason: str, **detail: Any) -> "ValidationResult":
        return cls(ok=False, reason=reason, detail=detail)


class AvailabilityValidator:
    def __init__(self, db: Session):
        self.db = db

    def validate(self, doctor: Doctor, day: date, slot: TimeSlot) -> ValidationResult:
        if weekday_name(day) not in (doctor.available_days or []):
            return ValidationResult.rejected(REASON_DAY_UNAVAILABLE, availableDays=list(doctor.available_days or []))

        # Zero-padded HH:MM strings compare the same way the times do
        if slot.start < doctor.working_hours_start or slot.end > doctor.working_hours_end:
            return ValidationResult.rejected(REASON_OUTSIDE_HOURS, workingHours=doctor.working_hours)

        booked = crud.appointment.count_for_day(self.db, doctor_id=doctor.id, day=day)
        if booked >= doctor.max_appointments_per_day:
            return ValidationResult.rejected(REASON_FULLY_BOOKED, maxAppointmentsPerDay=doctor.max_appointments_per_day)

        if crud.appointment.slot_taken(self.db, doctor_id=doctor.id, day=day, slot_start=slot.start):
            return ValidationResult.rejected(REASON_SLOT_TAKEN, timeSlot={"start": slot.start, "end": slot.end})

        return ValidationResult.accepted()
