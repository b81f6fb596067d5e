from typing import Any, List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from wellbee import crud, schemas
from wellbee.api import deps
from wellbee.core.exceptions import Unauthorized
from wellbee.core.security import Principal
from wellbee.scheduling.service import SchedulingService

router = APIRouter()


@router.post("", response_model=schemas.Appointment)
def create_appointment(
    *,
    appointment_in: schemas.AppointmentCreate,
    principal: Principal = Depends(deps.get_current_principal),
    service: SchedulingService = Depends(deps.get_scheduling_service),
) -> Any:
    """
    Book an appointment with a doctor for the current patient.
    """
    appointment = service.book_appointment(
        principal,
        doctor_id=appointment_in.doctor_id,
        day=appointment_in.date,
        slot=appointment_in.time_slot,
        symptoms=appointment_in.symptoms,
        type=appointment_in.type,
    )
    return schemas.Appointment.model_validate(appointment)


@router.get("", response_model=List[schemas.Appointment])
def read_appointments(
    db: Session = Depends(deps.get_db),
    doctor_id: Optional[int] = Query(None, alias="doctorId"),
    user_id: Optional[int] = Query(None, alias="userId"),
    skip: int = 0,
    limit: int = 100,
    principal: Principal = Depends(deps.get_current_principal),
    service: SchedulingService = Depends(deps.get_scheduling_service),
) -> Any:
    """
    Retrieve appointments, newest date first.

    With no filter the caller's own appointments are returned (as doctor or as
    patient depending on role).
    """
    own_doctor = crud.doctor.get_by_user_id(db, user_id=principal.user_id) if principal.is_doctor else None

    if doctor_id is None and user_id is None:
        if own_doctor:
            doctor_id = own_doctor.id
        else:
            user_id = principal.user_id

    if doctor_id is not None and (own_doctor is None or own_doctor.id != doctor_id):
        raise Unauthorized("Not enough permissions to view this doctor's appointments")
    if user_id is not None and user_id != principal.user_id:
        raise Unauthorized("Not enough permissions to view this user's appointments")

    return service.list_appointments(doctor_id=doctor_id, patient_id=user_id, skip=skip, limit=limit)


@router.patch("", response_model=schemas.Appointment)
def update_appointment_status(
    *,
    update_in: schemas.AppointmentStatusUpdate,
    principal: Principal = Depends(deps.get_current_principal),
    service: SchedulingService = Depends(deps.get_scheduling_service),
) -> Any:
    """
    Move an appointment to a new status, optionally rating a completed one.
    """
    appointment = service.update_status(
        principal,
        appointment_id=update_in.appointment_id,
        new_status=update_in.status,
        rating=update_in.rating,
        review=update_in.review,
    )
    return schemas.Appointment.model_validate(appointment)
