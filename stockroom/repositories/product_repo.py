# stockroom/repositories/product_repo.py
import uuid

from sqlmodel import Session, col, select

from stockroom.models.product import Product, ProductImage
from stockroom.repositories.base import SoftDeleteRepository


class ProductRepository(SoftDeleteRepository[Product]):
    """
    Data access layer for Product & ProductImage.

    - Pure DB operations, no commits.
    """

    model = Product

    def get_active_by_code(
        self,
        session: Session,
        product_code: str,
        exclude_id: uuid.UUID | None = None,
    ) -> Product | None:
        return self.find_active_by(
            session, "product_code", product_code, exclude_id=exclude_id
        )

    def active_codes_with_prefix(self, session: Session, prefix: str) -> list[str]:
        """
        Product codes of ACTIVE products starting with `prefix`.

        The caller applies the exact ^PREFIX\\d{3}$ match; LIKE only narrows
        the scan.
        """
        stmt = select(Product.product_code).where(
            col(Product.product_code).startswith(prefix),
            col(Product.deleted_at).is_(None),
        )
        return list(session.exec(stmt).all())

    def current_price(self, session: Session, product_id: uuid.UUID) -> float | None:
        """Price as stored right now, not the session's cached copy."""
        stmt = select(Product.price).where(Product.id == product_id)
        return session.exec(stmt).first()

    # ----- Product images -----

    def list_images_for_product(
        self,
        session: Session,
        product_id: uuid.UUID,
    ) -> list[ProductImage]:
        stmt = (
            select(ProductImage)
            .where(ProductImage.product_id == product_id)
            .order_by(col(ProductImage.sort_order))
        )
        return list(session.exec(stmt).all())

    def replace_images(
        self,
        session: Session,
        product_id: uuid.UUID,
        image_urls: list[str],
    ) -> list[ProductImage]:
        """
        Drop existing image rows and store `image_urls` in the given order.
        """
        self.delete_images(session, product_id)
        images = [
            ProductImage(product_id=product_id, image_url=url, sort_order=idx)
            for idx, url in enumerate(image_urls)
        ]
        session.add_all(images)
        session.flush()
        return images

    def delete_images(self, session: Session, product_id: uuid.UUID) -> None:
        for image in self.list_images_for_product(session, product_id):
            session.delete(image)
        session.flush()
