from datetime import date
from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Session, joinedload

from wellbee.models.appointment import Appointment, STATUS_CANCELLED, STATUS_SCHEDULED
from wellbee.schemas.appointment import AppointmentCreate
from wellbee.utils.timezone import utcnow


class CRUDAppointment:
    def create_with_patient(
        self, db: Session, *, obj_in: AppointmentCreate, patient_id: int, commit: bool = True
    ) -> Appointment:
        db_obj = Appointment(
            doctor_id=obj_in.doctor_id,
            patient_id=patient_id,
            date=obj_in.date,
            slot_start=obj_in.time_slot.start,
            slot_end=obj_in.time_slot.end,
            status=STATUS_SCHEDULED,
            type=obj_in.type or "video",
            symptoms=obj_in.symptoms,
        )
        db.add(db_obj)
        if commit:
            db.commit()
            db.refresh(db_obj)
        else:
            db.flush()
        return db_obj

    def get(self, db: Session, id: int) -> Optional[Appointment]:
        return (
            db.query(Appointment)
            .options(joinedload(Appointment.doctor))
            .filter(Appointment.id == id)
            .first()
        )

    def get_for_update(self, db: Session, id: int) -> Optional[Appointment]:
        return db.query(Appointment).filter(Appointment.id == id).with_for_update().first()

    def get_by_doctor_and_date_range(
        self, db: Session, *, doctor_id: int, start: date, end: date
    ) -> List[Appointment]:
        """Appointments for a doctor with start <= date <= end, earliest first."""
        return (
            db.query(Appointment)
            .options(joinedload(Appointment.patient))
            .filter(Appointment.doctor_id == doctor_id)
            .filter(Appointment.date >= start, Appointment.date <= end)
            .order_by(Appointment.date.asc(), Appointment.slot_start.asc())
            .all()
        )

    def count_for_day(self, db: Session, *, doctor_id: int, day: date) -> int:
        return (
            db.query(Appointment)
            .filter(
                Appointment.doctor_id == doctor_id,
                Appointment.date == day,
                Appointment.status != STATUS_CANCELLED,
            )
            .count()
        )

    def booked_starts(self, db: Session, *, doctor_id: int, day: date) -> List[str]:
        rows = (
            db.query(Appointment.slot_start)
            .filter(
                Appointment.doctor_id == doctor_id,
                Appointment.date == day,
                Appointment.status != STATUS_CANCELLED,
            )
            .all()
        )
        return [r[0] for r in rows]

    def slot_taken(self, db: Session, *, doctor_id: int, day: date, slot_start: str) -> bool:
        return slot_start in self.booked_starts(db, doctor_id=doctor_id, day=day)

    def list_appointments(
        self,
        db: Session,
        *,
        doctor_id: Optional[int] = None,
        patient_id: Optional[int] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[Appointment]:
        # Latest first: newest date, then latest slot within the day
        query = (
            db.query(Appointment)
            .options(joinedload(Appointment.doctor), joinedload(Appointment.patient))
            .order_by(Appointment.date.desc(), Appointment.slot_start.desc())
        )
        if doctor_id is not None:
            query = query.filter(Appointment.doctor_id == doctor_id)
        if patient_id is not None:
            query = query.filter(Appointment.patient_id == patient_id)
        return query.offset(skip).limit(limit).all()

    def list_for_doctor(self, db: Session, *, doctor_id: int, skip: int = 0, limit: int = 100) -> List[Appointment]:
        return self.list_appointments(db, doctor_id=doctor_id, skip=skip, limit=limit)

    def list_for_patient(self, db: Session, *, patient_id: int, skip: int = 0, limit: int = 100) -> List[Appointment]:
        return self.list_appointments(db, patient_id=patient_id, skip=skip, limit=limit)

    def update_status(
        self, db: Session, *, db_obj: Appointment, status: str, extra: Optional[Dict[str, Any]] = None, commit: bool = True
    ) -> Appointment:
        db_obj.status = status
        for field, value in (extra or {}).items():
            setattr(db_obj, field, value)
        db_obj.updated_at = utcnow()
        db.add(db_obj)
        if commit:
            db.commit()
            db.refresh(db_obj)
        return db_obj


appointment = CRUDAppointment()
