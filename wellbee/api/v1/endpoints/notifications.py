from typing import Any, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from wellbee import crud, models, schemas
from wellbee.api import deps

router = APIRouter()


@router.get("/notifications", response_model=List[schemas.Notification])
def list_notifications(
    db: Session = Depends(deps.get_db),
    limit: int = 100,
    current_user: models.User = Depends(deps.get_current_user),
) -> Any:
    return crud.notification.list_for_user(db, user_id=current_user.id, limit=limit)


@router.patch("/notifications", response_model=schemas.NotificationMarkReadResult)
def mark_notifications_read(
    payload: Optional[schemas.NotificationMarkRead] = None,
    db: Session = Depends(deps.get_db),
    current_user: models.User = Depends(deps.get_current_user),
) -> Any:
    """
    Mark one notification read, or all of the user's notifications when no id is given.
    """
    if payload is not None and payload.notification_id is not None:
        updated = crud.notification.mark_read(
            db, user_id=current_user.id, notification_id=payload.notification_id
        )
        if not updated:
            raise HTTPException(status_code=404, detail="Notification not found")
        return {"message": "Notification marked as read", "updated": updated}

    updated = crud.notification.mark_all_read(db, user_id=current_user.id)
    return {"message": "All notifications marked as read", "updated": updated}
