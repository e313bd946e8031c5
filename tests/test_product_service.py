# tests/test_product_service.py

import uuid

import pytest

from stockroom.core.errors import CategoryNotFoundError, ConflictError, ValidationError
from stockroom.repositories.category_repo import CategoryRepository
from stockroom.repositories.product_repo import ProductRepository
from stockroom.schemas.product import ProductCreate, ProductUpdate
from stockroom.services.product_service import ProductService


@pytest.fixture()
def products():
    return ProductService(ProductRepository(), CategoryRepository())


def _create(session, products, category, name="Item", images=None):
    return products.create_product(
        session,
        ProductCreate(name=name, category_id=category.id, images=images or []),
    )


def test_codes_follow_category_prefix(session, products, make_category):
    footwear = make_category("Footwear")

    codes = [_create(session, products, footwear, name=f"Shoe {i}").product_code for i in range(3)]

    assert codes == ["FOO001", "FOO002", "FOO003"]


def test_deleted_code_in_the_middle_is_not_reused(session, products, make_category):
    footwear = make_category("Footwear")
    _create(session, products, footwear)
    second = _create(session, products, footwear)
    _create(session, products, footwear)

    products.soft_delete(session, second.id)

    assert _create(session, products, footwear).product_code == "FOO004"


def test_prefixes_do_not_collide(session, products, make_category):
    _create(session, products, make_category("Footwear"))

    tv = _create(session, products, make_category("Tv"))

    assert tv.product_code == "TV001"


def test_create_in_deleted_category_is_not_found(session, products, make_category):
    category = make_category("Footwear")
    category.deleted_at = category.created_at
    session.add(category)
    session.commit()

    with pytest.raises(CategoryNotFoundError):
        _create(session, products, category)


def test_images_keep_their_order(session, products, make_category):
    product = _create(
        session,
        products,
        make_category(),
        images=["https://cdn.acme.io/b.png", "https://cdn.acme.io/a.png"],
    )

    assert product.images == ["https://cdn.acme.io/b.png", "https://cdn.acme.io/a.png"]

    updated = products.update_product(
        session, product.id, ProductUpdate(images=["https://cdn.acme.io/c.png"])
    )
    assert updated.images == ["https://cdn.acme.io/c.png"]


def test_update_code_to_taken_code_is_a_conflict(session, products, make_category):
    category = make_category()
    first = _create(session, products, category)
    second = _create(session, products, category)

    with pytest.raises(ConflictError):
        products.update_product(session, second.id, ProductUpdate(product_code=first.product_code))


def test_update_code_must_match_format(session, products, make_category):
    product = _create(session, products, make_category())

    with pytest.raises(ValidationError):
        products.update_product(session, product.id, ProductUpdate(product_code="FOOT01"))


def test_update_to_unknown_category_changes_nothing(session, products, make_category):
    product = _create(session, products, make_category(), name="Original")

    with pytest.raises(CategoryNotFoundError):
        products.update_product(
            session,
            product.id,
            ProductUpdate(name="Renamed", category_id=uuid.uuid4()),
        )

    assert products.get_product(session, product.id).name == "Original"


def test_restore_product_conflicts_with_reissued_code(session, products, make_category):
    category = make_category()
    first = _create(session, products, category)
    products.soft_delete(session, first.id)

    # FOO001 is free again among active products
    reissued = _create(session, products, category)
    assert reissued.product_code == first.product_code

    with pytest.raises(ConflictError):
        products.restore_product(session, first.id)


def test_permanent_delete_takes_images_along(session, products, make_category):
    product = _create(session, products, make_category(), images=["https://cdn.acme.io/a.png"])

    products.permanently_delete(session, product.id)

    assert ProductRepository().list_images_for_product(session, product.id) == []


def test_code_taken_between_read_and_insert_is_retried(
    session, products, make_category, monkeypatch
):
    category = make_category("Footwear")
    _create(session, products, category)
    real = products.repo.active_codes_with_prefix
    calls = []

    def stale_then_real(session, prefix):
        calls.append(prefix)
        # first read misses FOO001, so the insert hits the unique index
        if len(calls) == 1:
            return []
        return real(session, prefix)

    monkeypatch.setattr(products.repo, "active_codes_with_prefix", stale_then_real)

    product = _create(session, products, category, name="Second")

    assert product.product_code == "FOO002"
    assert calls == ["FOO", "FOO"]


def test_code_retries_give_up_with_conflict(session, products, make_category, monkeypatch):
    category = make_category("Footwear")
    _create(session, products, category)
    calls = []

    def always_stale(session, prefix):
        calls.append(prefix)
        return []

    monkeypatch.setattr(products.repo, "active_codes_with_prefix", always_stale)

    with pytest.raises(ConflictError):
        _create(session, products, category, name="Second")

    assert len(calls) == 5
    assert [p.product_code for p in products.list(session)] == ["FOO001"]
