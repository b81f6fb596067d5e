"""
Booking, video-call start, status transitions and doctor schedules.

Every operation takes the authenticated ``Principal`` explicitly. The service
is the only writer of ``Appointment.status`` and ``Appointment.meeting_link``.
Notifications are emitted after the triggering write has committed and their
outcome is ignored.
"""
import logging
from datetime import date
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from wellbee import crud
from wellbee.core.exceptions import (
    InvalidTransition,
    NotFound,
    SchedulingError,
    Unauthorized,
    UpstreamProviderError,
    ValidationError,
)
from wellbee.core.security import Principal
from wellbee.models.appointment import (
    Appointment,
    STATUS_CANCELLED,
    STATUS_COMPLETED,
    STATUS_IN_PROGRESS,
    STATUS_SCHEDULED,
)
from wellbee.models.doctor import Doctor
from wellbee.notifications.emitter import NotificationEmitter
from wellbee.schemas.appointment import AppointmentCreate
from wellbee.schemas.common import TimeSlot
from wellbee.utils.timezone import utcnow
from .availability import AvailabilityValidator, REASON_SLOT_TAKEN, MESSAGES, weekday_name
from .metrics import (
    appointments_booked_total,
    appointment_bookings_rejected_total,
    appointment_status_changes_total,
    video_calls_started_total,
    video_room_fallbacks_total,
)
from .slots import SlotCalculator
from .video_rooms import DailyRoomProvider, fallback_meeting_url

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS = {
    STATUS_SCHEDULED: {STATUS_IN_PROGRESS, STATUS_CANCELLED},
    STATUS_IN_PROGRESS: {STATUS_COMPLETED, STATUS_CANCELLED},
    STATUS_COMPLETED: {STATUS_CANCELLED},
    STATUS_CANCELLED: {STATUS_CANCELLED},
}


def can_transition(current: str, new: str) -> bool:
    return new in ALLOWED_TRANSITIONS.get(current, set())


class SchedulingService:
    def __init__(
        self,
        db: Session,
        emitter: Optional[NotificationEmitter] = None,
        video_rooms: Optional[DailyRoomProvider] = None,
        slot_calculator: Optional[SlotCalculator] = None,
    ):
        self.db = db
        self.emitter = emitter or NotificationEmitter()
        self.video_rooms = video_rooms or DailyRoomProvider()
        self.slot_calculator = slot_calculator or SlotCalculator()
        self.validator = AvailabilityValidator(db)

    # --- Booking ---

    def book_appointment(
        self,
        principal: Principal,
        doctor_id: int,
        day: date,
        slot: TimeSlot,
        symptoms: Optional[str] = None,
        type: Optional[str] = "video",
    ) -> Appointment:
        if not principal.is_patient:
            raise Unauthorized("Only patients can book appointments")

        try:
            # Lock the doctor row: capacity check and insert happen in one transaction
            doctor = crud.doctor.get_for_update(self.db, doctor_id)
            if not doctor:
                raise NotFound("Doctor not found")

            result = self.validator.validate(doctor, day, slot)
            if not result.ok:
                appointment_bookings_rejected_total.labels(reason=result.reason).inc()
                logger.info(
                    f"Booking rejected for doctor {doctor_id} on {day} {slot.start}-{slot.end}: {result.reason}"
                )
                raise ValidationError(result.message, reason=result.reason, detail=result.detail)

            obj_in = AppointmentCreate(
                doctor_id=doctor_id, date=day, time_slot=slot, symptoms=symptoms, type=type or "video"
            )
            appointment = crud.appointment.create_with_patient(
                self.db, obj_in=obj_in, patient_id=principal.user_id, commit=False
            )
            self.db.commit()
        except IntegrityError:
            # Another booking for the same live slot won the race
            self.db.rollback()
            appointment_bookings_rejected_total.labels(reason=REASON_SLOT_TAKEN).inc()
            raise ValidationError(
                MESSAGES[REASON_SLOT_TAKEN],
                reason=REASON_SLOT_TAKEN,
                detail={"timeSlot": {"start": slot.start, "end": slot.end}},
            )
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(appointment)
        appointments_booked_total.inc()
        logger.info(f"Appointment {appointment.id} booked with doctor {doctor_id} on {day} at {slot.start}")

        patient = crud.user.get(self.db, principal.user_id)
        patient_name = (patient.full_name if patient else None) or principal.name or "A patient"
        self.emitter.emit(
            target_user_id=doctor.user_id,
            from_user_id=principal.user_id,
            type="appointment",
            message=f"New appointment booked by {patient_name} for {day.isoformat()} at {slot.start}",
            appointment_id=appointment.id,
        )
        return appointment

    # --- Video calls ---

    def _meeting_link(self, appointment: Appointment) -> str:
        if self.video_rooms.configured:
            try:
                return self.video_rooms.create_room(appointment)
            except UpstreamProviderError as e:
                logger.warning(f"Video provider failed for appointment {appointment.id}, using fallback room: {e}")
        else:
            logger.info("Video provider not configured, using fallback meeting URL")
        video_room_fallbacks_total.inc()
        return fallback_meeting_url(appointment.id)

    def start_video_call(self, principal: Principal, appointment_id: int) -> Appointment:
        try:
            appointment = crud.appointment.get_for_update(self.db, appointment_id)
            if not appointment:
                raise NotFound("Appointment not found")

            doctor = appointment.doctor
            if not principal.is_doctor or doctor is None or doctor.user_id != principal.user_id:
                raise Unauthorized("Unauthorized to create room for this appointment")

            if appointment.status == STATUS_IN_PROGRESS and appointment.meeting_link:
                # Already running: hand back the same link, no second notification
                self.db.commit()
                return appointment

            if appointment.status in (STATUS_COMPLETED, STATUS_CANCELLED):
                raise InvalidTransition(
                    f"Cannot start a video call for a {appointment.status} appointment",
                    reason="invalid transition",
                    detail={"from": appointment.status, "to": STATUS_IN_PROGRESS},
                )

            meeting_link = self._meeting_link(appointment)
            crud.appointment.update_status(
                self.db, db_obj=appointment, status=STATUS_IN_PROGRESS, extra={"meeting_link": meeting_link}
            )
        except SchedulingError:
            self.db.rollback()
            raise

        video_calls_started_total.inc()
        appointment_status_changes_total.labels(status=STATUS_IN_PROGRESS).inc()
        logger.info(f"Video call started for appointment {appointment.id}")

        self.emitter.emit(
            target_user_id=appointment.patient_id,
            from_user_id=principal.user_id,
            type="video",
            message=f"Dr. {doctor.name} has started your video consultation. Join now!",
            appointment_id=appointment.id,
        )
        return appointment

    # --- Status updates ---

    def update_status(
        self,
        principal: Principal,
        appointment_id: int,
        new_status: str,
        rating: Optional[int] = None,
        review: Optional[str] = None,
    ) -> Appointment:
        try:
            appointment = crud.appointment.get_for_update(self.db, appointment_id)
            if not appointment:
                raise NotFound("Appointment not found")

            doctor = appointment.doctor
            is_doctor = principal.is_doctor and doctor is not None and doctor.user_id == principal.user_id
            is_patient = appointment.patient_id == principal.user_id
            if not (is_doctor or is_patient):
                raise Unauthorized("Unauthorized to update this appointment")

            if rating is not None and new_status != STATUS_COMPLETED:
                raise ValidationError(
                    "A rating can only be attached when completing an appointment",
                    reason="rating requires completion",
                )

            if not can_transition(appointment.status, new_status):
                raise InvalidTransition(
                    f"Cannot change status from {appointment.status} to {new_status}",
                    reason="invalid transition",
                    detail={"from": appointment.status, "to": new_status},
                )

            extra = {}
            if rating is not None:
                extra = {
                    "rating_score": rating,
                    "rating_review": review,
                    "rating_date": utcnow(),
                }
                locked_doctor = crud.doctor.get_for_update(self.db, doctor.id)
                crud.doctor.add_rating(
                    self.db, doctor=locked_doctor, rating=rating, review=review, appointment_id=appointment.id
                )

            previous = appointment.status
            crud.appointment.update_status(self.db, db_obj=appointment, status=new_status, extra=extra)
        except SchedulingError:
            self.db.rollback()
            raise

        appointment_status_changes_total.labels(status=new_status).inc()
        logger.info(f"Appointment {appointment.id} moved {previous} -> {new_status} by user {principal.user_id}")
        return appointment

    # --- Doctor profile ---

    def _own_doctor(self, principal: Principal) -> Doctor:
        if not principal.is_doctor:
            raise Unauthorized("Only doctors have a doctor profile")
        doctor = crud.doctor.get_by_user_id(self.db, user_id=principal.user_id)
        if not doctor:
            raise NotFound("Doctor profile not found")
        return doctor

    def get_doctor_profile(self, principal: Principal) -> Doctor:
        return self._own_doctor(principal)

    def update_doctor_profile(self, principal: Principal, changes: Dict[str, Any]) -> Doctor:
        """
        Partially update the caller's schedule and profile. The doctor row is
        locked so a booking cannot validate against half-applied hours.
        """
        doctor = self._own_doctor(principal)
        try:
            locked = crud.doctor.get_for_update(self.db, doctor.id)
            crud.doctor.update(self.db, db_obj=locked, obj_in=changes, commit=False)
            self.db.commit()
        except ValueError as e:
            self.db.rollback()
            raise ValidationError(str(e), reason="invalid profile")
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(locked)
        logger.info(f"Doctor {locked.id} updated profile fields: {sorted(changes)}")
        return locked

    def list_doctor_day(self, principal: Principal, day: date) -> List[Appointment]:
        """The caller's appointments on one calendar day, earliest slot first."""
        doctor = self._own_doctor(principal)
        return crud.appointment.get_by_doctor_and_date_range(self.db, doctor_id=doctor.id, start=day, end=day)

    # --- Queries ---

    def list_appointments(
        self, doctor_id: Optional[int] = None, patient_id: Optional[int] = None, skip: int = 0, limit: int = 100
    ) -> List[Appointment]:
        if doctor_id is None and patient_id is None:
            raise ValidationError("doctorId or userId is required", reason="missing filter")
        return crud.appointment.list_appointments(
            self.db, doctor_id=doctor_id, patient_id=patient_id, skip=skip, limit=limit
        )

    def list_doctors(self) -> List[Doctor]:
        return crud.doctor.get_available_doctors(self.db)

    def list_open_slots(self, doctor_id: int, day: date) -> List[TimeSlot]:
        doctor = crud.doctor.get(self.db, doctor_id)
        if not doctor:
            raise NotFound("Doctor not found")
        if weekday_name(day) not in (doctor.available_days or []):
            return []
        if crud.appointment.count_for_day(self.db, doctor_id=doctor.id, day=day) >= doctor.max_appointments_per_day:
            return []
        booked = crud.appointment.booked_starts(self.db, doctor_id=doctor.id, day=day)
        return self.slot_calculator.open_slots(doctor, day, booked)
