from typing import Optional
from sqlalchemy.orm import Session

from lms.crud.base import CRUDBase
from lms.models.user import User
from lms.schemas.user import UserCreate

class CRUDUser(CRUDBase[User, UserCreate, UserCreate]):
    def get_by_email(self, db: Session, *, email: str) -> Optional[User]:
        return db.query(User).filter(User.email == email).first()

user = CRUDUser(User)
