from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Union
from jose import jwt
from wellbee.core.config import settings

# Export the algorithm constant for use in other modules
ALGORITHM = settings.ALGORITHM

ROLE_PATIENT = "patient"
ROLE_DOCTOR = "doctor"


@dataclass(frozen=True)
class Principal:
    """The authenticated caller, passed explicitly into every service call."""
    user_id: int
    role: str
    name: Optional[str] = None

    @property
    def is_doctor(self) -> bool:
        return self.role == ROLE_DOCTOR

    @property
    def is_patient(self) -> bool:
        return self.role == ROLE_PATIENT


def create_access_token(subject: Union[str, Any], role: str = ROLE_PATIENT, expires_delta: timedelta = None) -> str:
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode = {"exp": expire, "sub": str(subject), "role": role}
    encoded_jwt = jwt.encode(to_encode, settings.SECRET_KEY, algorithm=ALGORITHM)
    return encoded_jwt


def decode_access_token(token: str) -> Dict[str, Any]:
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
