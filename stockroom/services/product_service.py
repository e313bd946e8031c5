# stockroom/services/product_service.py
import logging
import uuid

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from stockroom.core.config import get_settings
from stockroom.core.errors import (
    CategoryNotFoundError,
    ConflictError,
    ProductNotFoundError,
    ValidationError,
)
from stockroom.models.product import Product
from stockroom.models.soft_delete import DeleteScope
from stockroom.repositories.category_repo import CategoryRepository
from stockroom.repositories.product_repo import ProductRepository
from stockroom.schemas.product import ProductCreate, ProductRead, ProductUpdate
from stockroom.services.codes import (
    category_prefix,
    is_valid_product_code,
    next_product_code,
)
from stockroom.services.soft_delete import SoftDeleteService

logger = logging.getLogger(__name__)


class ProductService(SoftDeleteService[Product]):
    """
    Business logic for products.

    Responsibilities:
      - product code generation from the category name
      - product code uniqueness among active products (update, restore)
      - image URL list kept in order
    """

    entity_name = "Product"
    not_found_error = ProductNotFoundError

    def __init__(self, repo: ProductRepository, category_repo: CategoryRepository):
        super().__init__(repo)
        self.repo: ProductRepository = repo
        self.category_repo = category_repo

    # ----- Hooks -----

    def _restore_conflict(self, session: Session, obj: Product) -> ConflictError | None:
        if self.repo.get_active_by_code(session, obj.product_code, exclude_id=obj.id):
            return ConflictError(
                "Cannot restore product. Product code now conflicts with an active product.",
                product_code=obj.product_code,
            )
        return None

    def _delete_owned_rows(self, session: Session, obj: Product) -> None:
        self.repo.delete_images(session, obj.id)

    # ----- Helpers -----

    def _get_active_category(self, session: Session, category_id: uuid.UUID):
        category = self.category_repo.get_active(session, category_id)
        if category is None:
            raise CategoryNotFoundError("Category not found", id=str(category_id))
        return category

    def _to_read(self, session: Session, product: Product) -> ProductRead:
        images = self.repo.list_images_for_product(session, product.id)
        return ProductRead(
            **product.model_dump(),
            images=[img.image_url for img in images],
        )

    # ----- Queries -----

    def get_product(self, session: Session, product_id: uuid.UUID) -> ProductRead:
        return self._to_read(session, self.get_active(session, product_id))

    def list_products(
        self,
        session: Session,
        scope: DeleteScope = DeleteScope.ACTIVE,
        skip: int = 0,
        limit: int = 50,
    ) -> list[ProductRead]:
        products = self.list(session, scope=scope, skip=skip, limit=limit)
        return [self._to_read(session, p) for p in products]

    # ----- Commands -----

    def soft_delete_product(self, session: Session, product_id: uuid.UUID) -> ProductRead:
        return self._to_read(session, self.soft_delete(session, product_id))

    def restore_product(self, session: Session, product_id: uuid.UUID) -> ProductRead:
        return self._to_read(session, self.restore(session, product_id))

    def create_product(self, session: Session, payload: ProductCreate) -> ProductRead:
        """
        Create a product with the next free code for its category prefix.

        Reading the highest code and inserting happen in one transaction.
        Two concurrent creations can still compute the same code; the
        partial unique index rejects the second insert, which then rolls
        back and tries again with a fresh read.
        """
        category = self._get_active_category(session, payload.category_id)
        prefix = category_prefix(category.name)
        max_attempts = get_settings().PRODUCT_CODE_MAX_ATTEMPTS

        for attempt in range(1, max_attempts + 1):
            code = next_product_code(
                prefix, self.repo.active_codes_with_prefix(session, prefix)
            )
            product = Product(
                name=payload.name,
                product_code=code,
                description=payload.description,
                category_id=payload.category_id,
                price=payload.price,
            )
            try:
                session.add(product)
                session.flush()
                self.repo.replace_images(session, product.id, payload.images)
                session.commit()
            except IntegrityError:
                session.rollback()
                logger.warning(
                    "Product code %s was taken concurrently (attempt %d/%d)",
                    code,
                    attempt,
                    max_attempts,
                )
                continue

            session.refresh(product)
            logger.info("Created product %s (%s)", product.product_code, product.id)
            return self._to_read(session, product)

        raise ConflictError(
            "Could not allocate a unique product code, please retry",
            prefix=prefix,
        )

    def update_product(
        self,
        session: Session,
        product_id: uuid.UUID,
        payload: ProductUpdate,
    ) -> ProductRead:
        """
        Partial update. The product code is only changed when given
        explicitly; moving a product to another category keeps its code.
        """
        product = self.get_active(session, product_id)
        if payload.category_id is not None:
            self._get_active_category(session, payload.category_id)

        if payload.product_code is not None and payload.product_code != product.product_code:
            if not is_valid_product_code(payload.product_code):
                raise ValidationError(
                    "Product code must be 1-3 letters followed by 3 digits",
                    product_code=payload.product_code,
                )
            if self.repo.get_active_by_code(
                session, payload.product_code, exclude_id=product.id
            ):
                raise ConflictError(
                    "Product code already exists on another product",
                    product_code=payload.product_code,
                )
            product.product_code = payload.product_code

        if payload.category_id is not None:
            product.category_id = payload.category_id

        if payload.name is not None:
            product.name = payload.name

        if payload.description is not None:
            product.description = payload.description

        if payload.price is not None:
            product.price = payload.price

        try:
            session.add(product)
            if payload.images is not None:
                self.repo.replace_images(session, product.id, payload.images)
            session.commit()
        except IntegrityError:
            session.rollback()
            raise ConflictError("Product code already exists on another product")

        session.refresh(product)
        return self._to_read(session, product)
