from typing import Optional
from pydantic import BaseModel
from wellbee.schemas.common import CamelModel


class TokenPayload(BaseModel):
    sub: Optional[int] = None
    role: Optional[str] = "patient"


class PatientSummary(CamelModel):
    id: int
    full_name: Optional[str] = None
    email: str
