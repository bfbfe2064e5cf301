"""
Unit tests for the back-office services (products, buyers, transactions)

Author: MiniMart Dev Team
Date: 2026-09-21
"""
from decimal import Decimal

import pytest

from minimart.core.errors import (
    ConfirmationRequired,
    InvalidStatusTransition,
    NotFoundError,
    ValidationError,
)
from minimart.repositories import BuyerRepository, ProductRepository, TransactionRepository
from minimart.services.buyer_service import BuyerService, compute_buyer_stats
from minimart.services.product_service import SAMPLE_PRODUCTS, ProductService
from minimart.services.transaction_service import TransactionService


@pytest.fixture
def product_service(data_client):
    return ProductService(ProductRepository(data_client))


@pytest.fixture
def buyer_service(data_client):
    return BuyerService(BuyerRepository(data_client), TransactionRepository(data_client))


@pytest.fixture
def transaction_service(data_client):
    return TransactionService(TransactionRepository(data_client), ProductRepository(data_client))


NEW_PRODUCT = {
    "name": "Ube Halaya",
    "description": "Purple yam jam",
    "price": "60.00",
    "category": "Sweets",
    "stock": 12,
}


class TestCrudFlow:
    """Shared validate / mutate / refresh flow, exercised through ProductService"""

    def test_create_refreshes_list(self, product_service):
        created = product_service.create(NEW_PRODUCT)

        assert created.name == "Ube Halaya"
        assert created.price == Decimal("60.00")
        assert product_service.stale is False
        assert product_service.items[0].id == created.id
        assert len(product_service.items) == 4

    def test_invalid_price_is_rejected_without_remote_call(self, product_service, data_client):
        with pytest.raises(ValidationError) as exc_info:
            product_service.create({**NEW_PRODUCT, "price": "0"})

        assert data_client.calls == []
        assert any(error.startswith("price") for error in exc_info.value.errors)

    def test_missing_required_field(self, product_service, data_client):
        fields = dict(NEW_PRODUCT)
        del fields["category"]

        with pytest.raises(ValidationError):
            product_service.create(fields)
        assert data_client.writes == []

    def test_refresh_failure_marks_list_stale(self, fake_client_factory):
        # Arrange: writes succeed, every product select fails
        client = fake_client_factory(tables={"products": []}, fail_on={("select", "products")})
        service = ProductService(ProductRepository(client))

        # Act
        created = service.create(NEW_PRODUCT)

        # Assert: the save is reported, the list is flagged
        assert created.name == "Ube Halaya"
        assert service.stale is True
        assert len(client.tables["products"]) == 1

    def test_update_applies_only_given_fields(self, product_service, data_client):
        updated = product_service.update("p-chicharon", {"stock": 0})

        assert updated.stock == 0
        assert updated.price == Decimal("25.00")
        assert data_client.tables["products"][0]["name"] == "Chicharon"

    def test_empty_update_is_rejected(self, product_service, data_client):
        with pytest.raises(ValidationError):
            product_service.update("p-chicharon", {})
        assert data_client.writes == []

    def test_update_missing_record(self, product_service):
        with pytest.raises(NotFoundError):
            product_service.update("missing", {"stock": 3})

    def test_delete_requires_confirmation(self, product_service, data_client):
        with pytest.raises(ConfirmationRequired):
            product_service.remove("p-chicharon")

        assert data_client.calls_for("delete") == []
        assert len(data_client.tables["products"]) == 3

    def test_confirmed_delete(self, product_service):
        product_service.remove("p-chicharon", confirm=True)

        assert [p.id for p in product_service.items] == ["p-polvoron", "p-banana"]

    def test_delete_missing_record(self, product_service):
        with pytest.raises(NotFoundError):
            product_service.remove("missing", confirm=True)


class TestSampleProducts:

    def test_seeds_empty_catalog(self, fake_client_factory):
        client = fake_client_factory(tables={"products": []})
        service = ProductService(ProductRepository(client))

        created = service.seed_sample_products()

        assert [p.name for p in created] == [sample["name"] for sample in SAMPLE_PRODUCTS]
        assert len(service.items) == 4

    def test_does_nothing_when_products_exist(self, product_service, data_client):
        assert product_service.seed_sample_products() == []
        assert data_client.calls_for("insert") == []


class TestBuyerStats:

    def test_compute_buyer_stats_skips_cancelled(self, transaction_rows):
        stats = compute_buyer_stats(transaction_rows)

        assert stats == {"b-maria": (2, Decimal("85.00"))}

    def test_list_attaches_derived_counters(self, buyer_service):
        buyers = {buyer.id: buyer for buyer in buyer_service.list()}

        assert buyers["b-maria"].total_orders == 2
        assert buyers["b-maria"].total_spent == Decimal("85.00")
        assert buyers["b-jose"].total_orders == 0
        assert buyers["b-jose"].total_spent == Decimal("0")

    def test_get_attaches_derived_counters(self, buyer_service):
        assert buyer_service.get("b-maria").total_orders == 2

    def test_counters_follow_transaction_changes(self, buyer_service, transaction_service):
        transaction_service.update("t-2", {"status": "cancelled"})

        assert buyer_service.get("b-maria").total_spent == Decimal("50.00")

    def test_create_rejects_invalid_email(self, buyer_service, data_client):
        with pytest.raises(ValidationError):
            buyer_service.create({"full_name": "Ana Reyes", "email": "ana-at-example"})
        assert data_client.writes == []


class TestTransactionService:

    def test_unit_price_defaults_to_product_price(self, transaction_service, data_client):
        created = transaction_service.create({"buyer_id": "b-jose", "product_id": "p-polvoron", "quantity": 3})

        assert created.unit_price == Decimal("35.00")
        assert created.total_amount == Decimal("105.00")
        assert created.transaction_date is not None

    def test_total_is_computed_not_taken_from_caller(self, transaction_service):
        created = transaction_service.create({
            "buyer_id": "b-jose",
            "product_id": "p-chicharon",
            "quantity": 2,
            "unit_price": "20.00",
            "total_amount": "1.00"
        })

        assert created.total_amount == Decimal("40.00")

    def test_unknown_product_without_unit_price(self, transaction_service, data_client):
        with pytest.raises(NotFoundError):
            transaction_service.create({"buyer_id": "b-jose", "product_id": "p-gone"})
        assert data_client.calls_for("insert") == []

    def test_quantity_change_recomputes_total(self, transaction_service):
        updated = transaction_service.update("t-2", {"quantity": 2})

        assert updated.total_amount == Decimal("70.00")
        assert updated.updated_at is not None

    def test_product_change_takes_new_product_price(self, transaction_service, data_client):
        # t-2 is 1 x Polvoron at 35.00
        updated = transaction_service.update("t-2", {"product_id": "p-chicharon"})

        assert updated.unit_price == Decimal("25.00")
        assert updated.total_amount == Decimal("25.00")

    def test_product_change_keeps_explicit_unit_price(self, transaction_service):
        updated = transaction_service.update("t-2", {"product_id": "p-chicharon", "unit_price": "30.00", "quantity": 2})

        assert updated.unit_price == Decimal("30.00")
        assert updated.total_amount == Decimal("60.00")

    def test_product_change_to_unknown_product(self, transaction_service, data_client):
        with pytest.raises(NotFoundError):
            transaction_service.update("t-2", {"product_id": "p-gone"})
        assert data_client.calls_for("update") == []

    def test_allowed_status_change(self, transaction_service):
        assert transaction_service.update("t-2", {"status": "processing"}).status == "processing"

    def test_disallowed_status_change(self, transaction_service, data_client):
        with pytest.raises(InvalidStatusTransition) as exc_info:
            transaction_service.update("t-3", {"status": "pending"})

        assert exc_info.value.current == "cancelled"
        assert data_client.calls_for("update") == []

    def test_list_includes_joins(self, transaction_service):
        transactions = transaction_service.list()

        assert [t.id for t in transactions] == ["t-3", "t-2", "t-1"]
        assert transactions[0].product.name == "Banana Chips"
