# stockroom/services/user_service.py
import uuid

from sqlmodel import Session

from stockroom.core.errors import UserNotFoundError
from stockroom.models.user import User
from stockroom.repositories.user_repo import UserRepository
from stockroom.schemas.user import UserRoleUpdate


class UserService:
    """
    Staff accounts. Rows are provisioned by the auth dependency; admins
    can list them and change roles.
    """

    def __init__(self, repo: UserRepository):
        self.repo = repo

    def list_users(self, session: Session, skip: int, limit: int) -> list[User]:
        return self.repo.list_users(session, skip=skip, limit=limit)

    def update_role(
        self,
        session: Session,
        user_id: uuid.UUID,
        payload: UserRoleUpdate,
    ) -> User:
        user = self.repo.get_by_id(session, user_id)
        if not user:
            raise UserNotFoundError("User not found", id=str(user_id))
        user.role = payload.role
        return self.repo.update(session, user)
