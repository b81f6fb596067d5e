from typing import Optional
from sqlalchemy.orm import Session
from wellbee.models.user import User


class CRUDUser:
    def get(self, db: Session, id: int) -> Optional[User]:
        return db.query(User).filter(User.id == id).first()

    def create(self, db: Session, *, email: str, full_name: Optional[str] = None, role: str = "patient") -> User:
        db_obj = User(email=email, full_name=full_name, role=role)
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def is_active(self, user: User) -> bool:
        return user.is_active


# Create instance that can be imported directly
user = CRUDUser()
