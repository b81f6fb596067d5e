from fastapi import APIRouter

from wellbee.api.v1.endpoints import appointments
from wellbee.api.v1.endpoints import doctor
from wellbee.api.v1.endpoints import doctors
from wellbee.api.v1.endpoints import notifications
from wellbee.api.v1.endpoints import video

api_router = APIRouter()

api_router.include_router(appointments.router, prefix="/appointments", tags=["appointments"])
api_router.include_router(doctors.router, prefix="/doctors", tags=["doctors"])
api_router.include_router(doctor.router, prefix="/doctor", tags=["doctor"])
api_router.include_router(video.router, prefix="/video", tags=["video"])
api_router.include_router(notifications.router, prefix="/user", tags=["notifications"])
