# stockroom/routers/categories.py
import uuid

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from stockroom.core.auth import require_admin, require_auth
from stockroom.database import get_session
from stockroom.models.soft_delete import DeleteScope
from stockroom.repositories.category_repo import CategoryRepository
from stockroom.schemas.category import CategoryCreate, CategoryRead, CategoryUpdate
from stockroom.services.category_service import CategoryService

router = APIRouter(
    prefix="/categories",
    tags=["Categories"],
    dependencies=[Depends(require_auth)],
)

repo = CategoryRepository()
service = CategoryService(repo)


@router.post("", response_model=CategoryRead, status_code=status.HTTP_201_CREATED)
def create_category(
    payload: CategoryCreate,
    session: Session = Depends(get_session),
):
    """
    Create a category. 409 if the name is already used by an active one.
    """
    return service.create_category(session, payload)


@router.get("", response_model=list[CategoryRead])
def list_categories(
    session: Session = Depends(get_session),
    scope: DeleteScope = DeleteScope.ACTIVE,
    skip: int = 0,
    limit: int = 50,
):
    return service.list(session, scope=scope, skip=skip, limit=limit)


@router.get("/{category_id}", response_model=CategoryRead)
def get_category(
    category_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    return service.get_active(session, category_id)


@router.patch("/{category_id}", response_model=CategoryRead)
def update_category(
    category_id: uuid.UUID,
    payload: CategoryUpdate,
    session: Session = Depends(get_session),
):
    return service.update_category(session, category_id, payload)


@router.delete("/{category_id}", response_model=CategoryRead)
def soft_delete_category(
    category_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    return service.soft_delete(session, category_id)


@router.post("/{category_id}/restore", response_model=CategoryRead)
def restore_category(
    category_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Restore a soft-deleted category. 409 if its name is now taken.
    """
    return service.restore(session, category_id)


@router.delete(
    "/{category_id}/permanent",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_admin)],
)
def permanently_delete_category(
    category_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Irreversible (admin only).
    """
    service.permanently_delete(session, category_id)
    return None
