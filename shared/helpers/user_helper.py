from typing import Optional
from uuid import UUID

from sqlalchemy.orm import Session

from shared.models.users import Users


def get_user_name(auth_db: Optional[Session], user_id: Optional[UUID]) -> Optional[str]:
    if not user_id or auth_db is None:
        return None

    user = auth_db.query(Users.full_name).filter(
        Users.id == user_id, Users.is_deleted == False).first()
    return user.full_name if user else None

