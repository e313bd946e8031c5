# stockroom/routers/users.py
import uuid

from fastapi import APIRouter, Depends
from sqlmodel import Session

from stockroom.core.auth import require_auth, require_admin
from stockroom.database import get_session
from stockroom.models.user import User
from stockroom.repositories.user_repo import UserRepository
from stockroom.schemas.user import UserRead, UserRoleUpdate
from stockroom.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["Users"])

repo = UserRepository()
service = UserService(repo)


@router.get("/me", response_model=UserRead)
def read_me(current_user: User = Depends(require_auth)):
    """
    Return the authenticated user's profile (auto-created on first call).
    """
    return current_user


@router.get(
    "",
    response_model=list[UserRead],
    dependencies=[Depends(require_admin)],
)
def list_users(
    session: Session = Depends(get_session),
    skip: int = 0,
    limit: int = 50,
):
    """
    List staff users (admin only). All of them receive low-stock alerts.
    """
    return service.list_users(session, skip, limit)


@router.patch(
    "/{user_id}/role",
    response_model=UserRead,
    dependencies=[Depends(require_admin)],
)
def update_user_role(
    user_id: uuid.UUID,
    payload: UserRoleUpdate,
    session: Session = Depends(get_session),
):
    return service.update_role(session, user_id, payload)
