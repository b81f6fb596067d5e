from datetime import date
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, Query

from wellbee import schemas
from wellbee.api import deps
from wellbee.core.security import Principal
from wellbee.scheduling.service import SchedulingService
from wellbee.utils.timezone import utcnow

router = APIRouter()


@router.get("/profile", response_model=schemas.DoctorProfile)
def read_doctor_profile(
    principal: Principal = Depends(deps.get_current_principal),
    service: SchedulingService = Depends(deps.get_scheduling_service),
) -> Any:
    """
    The calling doctor's own profile, including working hours and capacity.
    """
    return schemas.DoctorProfile.model_validate(service.get_doctor_profile(principal))


@router.patch("/profile", response_model=schemas.DoctorProfile)
def update_doctor_profile(
    *,
    profile_in: schemas.DoctorProfileUpdate,
    principal: Principal = Depends(deps.get_current_principal),
    service: SchedulingService = Depends(deps.get_scheduling_service),
) -> Any:
    """
    Update only the fields that were sent; nulls leave the stored value alone.
    """
    changes = profile_in.model_dump(exclude_unset=True, exclude_none=True)
    doctor = service.update_doctor_profile(principal, changes)
    return schemas.DoctorProfile.model_validate(doctor)


@router.get("/appointments", response_model=List[schemas.DoctorAppointment])
def read_doctor_day(
    day: Optional[date] = Query(None, alias="date"),
    principal: Principal = Depends(deps.get_current_principal),
    service: SchedulingService = Depends(deps.get_scheduling_service),
) -> Any:
    # No date means today (UTC)
    appointments = service.list_doctor_day(principal, day or utcnow().date())
    return [schemas.DoctorAppointment.model_validate(a) for a in appointments]
