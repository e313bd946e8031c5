# tests/test_soft_delete.py

import pytest

from stockroom.core.errors import (
    CategoryNotFoundError,
    ConflictError,
    CustomerNotFoundError,
    ValidationError,
)
from stockroom.models.category import Category
from stockroom.models.customer import Customer
from stockroom.models.soft_delete import DeleteScope
from stockroom.repositories.category_repo import CategoryRepository
from stockroom.repositories.customer_repo import CustomerRepository
from stockroom.schemas.category import CategoryCreate
from stockroom.schemas.customer import CustomerCreate
from stockroom.services.category_service import CategoryService
from stockroom.services.customer_service import CustomerService


@pytest.fixture()
def categories():
    return CategoryService(CategoryRepository())


@pytest.fixture()
def customers():
    return CustomerService(CustomerRepository())


def _customer_payload(email="jane@acme.io"):
    return CustomerCreate(
        first_name="Jane",
        last_name="Doe",
        email=email,
        phone="555-0100",
        address="1 Main St",
        city="Springfield",
        state="IL",
    )


def test_soft_delete_hides_row_from_active_scope(session, categories):
    category = categories.create_category(session, CategoryCreate(name="Footwear"))

    deleted = categories.soft_delete(session, category.id)

    assert deleted.deleted_at is not None
    assert categories.list(session) == []
    assert [c.id for c in categories.list(session, scope=DeleteScope.DELETED)] == [category.id]
    assert [c.id for c in categories.list(session, scope=DeleteScope.ALL)] == [category.id]
    with pytest.raises(CategoryNotFoundError):
        categories.get_active(session, category.id)


def test_soft_delete_twice_is_not_found(session, categories):
    category = categories.create_category(session, CategoryCreate(name="Footwear"))
    categories.soft_delete(session, category.id)

    with pytest.raises(CategoryNotFoundError) as exc:
        categories.soft_delete(session, category.id)
    assert "already deleted" in exc.value.message


def test_restore_brings_back_the_same_row(session, customers):
    customer = customers.create_customer(session, _customer_payload())
    customers.soft_delete(session, customer.id)

    restored = customers.restore(session, customer.id)

    assert restored.id == customer.id
    assert restored.email == "jane@acme.io"
    assert restored.first_name == "Jane"
    assert restored.deleted_at is None
    assert customers.get_active(session, customer.id).id == customer.id


def test_restore_active_row_is_not_found(session, customers):
    customer = customers.create_customer(session, _customer_payload())

    with pytest.raises(CustomerNotFoundError) as exc:
        customers.restore(session, customer.id)
    assert "is not deleted" in exc.value.message


def test_deleted_email_can_be_reused(session, customers):
    first = customers.create_customer(session, _customer_payload())
    customers.soft_delete(session, first.id)

    second = customers.create_customer(session, _customer_payload())

    assert second.id != first.id
    assert second.email == first.email


def test_restore_conflicts_when_key_is_taken(session, customers):
    first = customers.create_customer(session, _customer_payload())
    customers.soft_delete(session, first.id)
    customers.create_customer(session, _customer_payload())

    with pytest.raises(ConflictError) as exc:
        customers.restore(session, first.id)

    assert exc.value.status_code == 409
    # first stays deleted
    session.expire_all()
    assert session.get(Customer, first.id).deleted_at is not None


def test_duplicate_active_category_name_is_a_conflict(session, categories):
    categories.create_category(session, CategoryCreate(name="Footwear"))

    with pytest.raises(ConflictError):
        categories.create_category(session, CategoryCreate(name="Footwear"))


def test_category_name_without_letters_is_rejected(session, categories):
    with pytest.raises(ValidationError):
        categories.create_category(session, CategoryCreate(name="2024"))


def test_permanent_delete_removes_row_in_any_state(session, categories):
    active = categories.create_category(session, CategoryCreate(name="Footwear"))
    deleted = categories.create_category(session, CategoryCreate(name="Hats"))
    categories.soft_delete(session, deleted.id)

    categories.permanently_delete(session, active.id)
    categories.permanently_delete(session, deleted.id)

    assert session.get(Category, active.id) is None
    assert session.get(Category, deleted.id) is None
    with pytest.raises(CategoryNotFoundError):
        categories.permanently_delete(session, active.id)


def test_permanent_delete_of_referenced_row_is_a_conflict(session, categories, make_product):
    category = categories.create_category(session, CategoryCreate(name="Footwear"))
    make_product(category=category)

    with pytest.raises(ConflictError):
        categories.permanently_delete(session, category.id)

    session.expire_all()
    assert session.get(Category, category.id) is not None
