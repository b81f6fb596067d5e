from typing import Any, Dict, List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session
from wellbee.core.config import settings
from wellbee.models.doctor import Doctor, DoctorRating, WEEKDAYS

PROFILE_FIELDS = (
    "name",
    "specialization",
    "qualification",
    "experience_years",
    "max_appointments_per_day",
    "about",
    "is_available",
)


def check_schedule(start: str, end: str, available_days: Optional[List[str]], max_per_day: Optional[int]) -> None:
    """Raise ValueError unless the schedule is one the availability checks can work with."""
    if start >= end:
        raise ValueError("working hours start must be before end")
    if not available_days:
        raise ValueError("at least one available day is required")
    unknown = [d for d in available_days if d not in WEEKDAYS]
    if unknown:
        raise ValueError(f"unknown weekday names: {unknown}")
    if max_per_day is not None and max_per_day < 1:
        raise ValueError("max_appointments_per_day must be at least 1")


class CRUDDoctor:
    def get(self, db: Session, id: int) -> Optional[Doctor]:
        return db.query(Doctor).filter(Doctor.id == id).first()

    def get_for_update(self, db: Session, id: int) -> Optional[Doctor]:
        """Fetch and row-lock the doctor; bookings for one doctor serialize on this lock."""
        return db.query(Doctor).filter(Doctor.id == id).with_for_update().first()

    def get_by_user_id(self, db: Session, user_id: int) -> Optional[Doctor]:
        return db.query(Doctor).filter(Doctor.user_id == user_id).first()

    def get_available_doctors(self, db: Session) -> List[Doctor]:
        return (
            db.query(Doctor)
            .filter(Doctor.is_available.is_(True))
            .order_by(Doctor.average_rating.desc(), Doctor.id.asc())
            .all()
        )

    def create(
        self,
        db: Session,
        *,
        user_id: int,
        name: str,
        email: str,
        specialization: str,
        working_hours_start: str = "09:00",
        working_hours_end: str = "17:00",
        available_days: Optional[List[str]] = None,
        max_appointments_per_day: Optional[int] = None,
        qualification: Optional[str] = None,
        experience_years: int = 0,
        about: Optional[str] = None,
    ) -> Doctor:
        check_schedule(working_hours_start, working_hours_end, available_days, max_appointments_per_day)
        db_obj = Doctor(
            user_id=user_id,
            name=name,
            email=email,
            specialization=specialization,
            qualification=qualification,
            experience_years=experience_years,
            working_hours_start=working_hours_start,
            working_hours_end=working_hours_end,
            available_days=list(available_days),
            max_appointments_per_day=max_appointments_per_day or settings.DEFAULT_MAX_APPOINTMENTS_PER_DAY,
            about=about,
        )
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def update(self, db: Session, *, db_obj: Doctor, obj_in: Dict[str, Any], commit: bool = True) -> Doctor:
        """
        Apply a partial profile update. ``working_hours`` arrives as a
        ``{"start", "end"}`` dict; the merged schedule is checked before any
        attribute is touched.
        """
        hours = obj_in.get("working_hours") or {}
        start = hours.get("start", db_obj.working_hours_start)
        end = hours.get("end", db_obj.working_hours_end)
        days = obj_in.get("available_days", db_obj.available_days)
        max_per_day = obj_in.get("max_appointments_per_day", db_obj.max_appointments_per_day)
        check_schedule(start, end, days, max_per_day)

        db_obj.working_hours_start = start
        db_obj.working_hours_end = end
        for field in PROFILE_FIELDS:
            if field in obj_in:
                setattr(db_obj, field, obj_in[field])
        db_obj.available_days = list(days)
        db.add(db_obj)
        if commit:
            db.commit()
            db.refresh(db_obj)
        else:
            db.flush()
        return db_obj

    def add_rating(
        self, db: Session, *, doctor: Doctor, rating: int, review: Optional[str] = None, appointment_id: Optional[int] = None
    ) -> Doctor:
        """Append a rating and recompute the average over every rating. Caller commits."""
        db.add(DoctorRating(doctor_id=doctor.id, appointment_id=appointment_id, rating=rating, review=review))
        db.flush()
        average = (
            db.query(func.avg(DoctorRating.rating))
            .filter(DoctorRating.doctor_id == doctor.id)
            .scalar()
        )
        doctor.average_rating = float(average or 0.0)
        db.add(doctor)
        return doctor


doctor = CRUDDoctor()
