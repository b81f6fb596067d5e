from typing import Any

from fastapi import APIRouter, Depends

from wellbee import schemas
from wellbee.api import deps
from wellbee.core.security import Principal
from wellbee.scheduling.service import SchedulingService

router = APIRouter()


@router.post("/create-room", response_model=schemas.VideoRoomResponse)
def create_video_room(
    req: schemas.VideoRoomCreate,
    principal: Principal = Depends(deps.get_current_principal),
    service: SchedulingService = Depends(deps.get_scheduling_service),
) -> Any:
    """Start (or rejoin) the video consultation for an appointment. Doctor only."""
    appointment = service.start_video_call(principal, req.appointment_id)
    return {
        "meeting_link": appointment.meeting_link,
        "appointment": schemas.Appointment.model_validate(appointment),
    }
