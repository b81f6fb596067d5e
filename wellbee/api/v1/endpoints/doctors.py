from datetime import date
from typing import Any, List

from fastapi import APIRouter, Depends, Query

from wellbee import schemas
from wellbee.api import deps
from wellbee.scheduling.service import SchedulingService

router = APIRouter()


@router.get("", response_model=List[schemas.DoctorPublic])
def list_doctors(
    service: SchedulingService = Depends(deps.get_scheduling_service),
) -> Any:
    """Available doctors, best rated first."""
    return service.list_doctors()


@router.get("/{doctor_id}/slots", response_model=schemas.DoctorSlots)
def list_open_slots(
    doctor_id: int,
    day: date = Query(..., alias="date"),
    service: SchedulingService = Depends(deps.get_scheduling_service),
) -> Any:
    slots = service.list_open_slots(doctor_id, day)
    return {"doctor_id": doctor_id, "date": day, "slots": slots}
