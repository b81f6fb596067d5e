from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from wellbee import crud, models, schemas
from wellbee.core import security
from wellbee.core.config import settings
from wellbee.db.session import get_db
from wellbee.scheduling.service import SchedulingService

# Tokens are issued by the external identity provider; tokenUrl only feeds the OpenAPI docs
reusable_oauth2 = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_V1_STR}/auth/login"
)


def _credentials_exception() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    db: Session = Depends(get_db), token: str = Depends(reusable_oauth2)
) -> models.User:
    try:
        payload = security.decode_access_token(token)
        token_data = schemas.TokenPayload(**payload)
    except (JWTError, PydanticValidationError):
        raise _credentials_exception()
    if token_data.sub is None:
        raise _credentials_exception()
    user = crud.user.get(db, id=token_data.sub)
    if not user or not crud.user.is_active(user):
        raise _credentials_exception()
    return user


def get_current_principal(
    current_user: models.User = Depends(get_current_user),
) -> security.Principal:
    # Role comes from the stored user, not the token claim
    return security.Principal(user_id=current_user.id, role=current_user.role, name=current_user.full_name)


def get_scheduling_service(db: Session = Depends(get_db)) -> SchedulingService:
    return SchedulingService(db)
