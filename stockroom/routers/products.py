# stockroom/routers/products.py
import uuid

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from stockroom.core.auth import require_admin, require_auth
from stockroom.database import get_session
from stockroom.models.soft_delete import DeleteScope
from stockroom.repositories.category_repo import CategoryRepository
from stockroom.repositories.product_repo import ProductRepository
from stockroom.schemas.product import ProductCreate, ProductRead, ProductUpdate
from stockroom.services.product_service import ProductService

router = APIRouter(
    prefix="/products",
    tags=["Products"],
    dependencies=[Depends(require_auth)],
)

repo = ProductRepository()
category_repo = CategoryRepository()
service = ProductService(repo, category_repo)


@router.post("", response_model=ProductRead, status_code=status.HTTP_201_CREATED)
def create_product(
    payload: ProductCreate,
    session: Session = Depends(get_session),
):
    """
    Create a product. The product code is generated from the category
    name (e.g. "Footwear" -> FOO001, FOO002, ...).
    """
    return service.create_product(session, payload)


@router.get("", response_model=list[ProductRead])
def list_products(
    session: Session = Depends(get_session),
    scope: DeleteScope = DeleteScope.ACTIVE,
    skip: int = 0,
    limit: int = 50,
):
    return service.list_products(session, scope=scope, skip=skip, limit=limit)


@router.get("/{product_id}", response_model=ProductRead)
def get_product(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    return service.get_product(session, product_id)


@router.patch("/{product_id}", response_model=ProductRead)
def update_product(
    product_id: uuid.UUID,
    payload: ProductUpdate,
    session: Session = Depends(get_session),
):
    return service.update_product(session, product_id, payload)


@router.delete("/{product_id}", response_model=ProductRead)
def soft_delete_product(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    return service.soft_delete_product(session, product_id)


@router.post("/{product_id}/restore", response_model=ProductRead)
def restore_product(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Restore a soft-deleted product. 409 if its code is now used by an
    active product.
    """
    return service.restore_product(session, product_id)


@router.delete(
    "/{product_id}/permanent",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_admin)],
)
def permanently_delete_product(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Irreversible (admin only). Images go with it; fails with 409 while
    stock batches still reference the product.
    """
    service.permanently_delete(session, product_id)
    return None
