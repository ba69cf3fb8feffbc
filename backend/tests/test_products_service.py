"""
Inventory service tests.

Covers stock adjustment, SKU uniqueness, low-stock selection, search and the
copy semantics of listings.
"""

import pytest

from voltmanager.services import products_service
from voltmanager.validation import ConflictError, NotFoundError, ValidationError


class TestUpdateStock:
    def test_positive_delta_receives_stock(self, product_a):
        updated = products_service.update_stock(product_id="p-a", delta=7)
        assert updated["stock"] == 12

    def test_negative_delta_removes_stock(self, product_a):
        updated = products_service.update_stock(product_id="p-a", delta=-5)
        assert updated["stock"] == 0

    def test_cannot_go_below_zero(self, product_a):
        """A removal larger than on-hand stock is rejected and changes nothing."""
        with pytest.raises(ValidationError):
            products_service.update_stock(product_id="p-a", delta=-6)

        assert products_service.get_product("p-a")["stock"] == 5

    def test_unknown_product(self, app):
        with pytest.raises(NotFoundError):
            products_service.update_stock(product_id="missing", delta=1)

    def test_rejects_non_integer_delta(self, product_a):
        with pytest.raises(ValidationError):
            products_service.update_stock(product_id="p-a", delta="3")


class TestCreateAndUpdate:
    def _patch(self, **overrides):
        patch = {
            "sku": "CBL-USB-C",
            "name": "USB-C Cable",
            "category": "Cables",
            "price_cents": 1299,
            "cost_cents": 500,
            "stock": 10,
            "min_stock": 3,
        }
        patch.update(overrides)
        return patch

    def test_create_assigns_id_and_appends(self, product_a):
        created = products_service.create_product(patch=self._patch())

        assert created["id"]
        assert created["id"] != "p-a"
        ids = [p["id"] for p in products_service.list_products()]
        assert ids == ["p-a", created["id"]]

    def test_duplicate_sku_conflicts(self, product_a):
        with pytest.raises(ConflictError):
            products_service.create_product(patch=self._patch(sku="PROD-A-001"))

    def test_update_merges_fields(self, product_a):
        updated = products_service.update_product(product_id="p-a", patch={"price_cents": 1100})

        assert updated["price_cents"] == 1100
        assert updated["name"] == "Product A"
        assert updated["stock"] == 5

    def test_update_to_taken_sku_conflicts(self, product_a, product_b):
        with pytest.raises(ConflictError):
            products_service.update_product(product_id="p-b", patch={"sku": "PROD-A-001"})

    def test_update_ignores_id(self, product_a):
        updated = products_service.update_product(product_id="p-a", patch={"id": "other"})
        assert updated["id"] == "p-a"

    def test_update_unknown_product(self, app):
        with pytest.raises(NotFoundError):
            products_service.update_product(product_id="nope", patch={"name": "x"})

    def test_delete(self, product_a):
        assert products_service.delete_product(product_id="p-a") is True
        assert products_service.get_product("p-a") is None

        with pytest.raises(NotFoundError):
            products_service.delete_product(product_id="p-a")


class TestLowStock:
    def test_low_stock_selection(self, product_a, product_b):
        """stock <= min_stock is low; stock 2 / min 5 is in, 5 / 2 is out."""
        low = products_service.get_low_stock_products()
        assert [p["id"] for p in low] == ["p-b"]

    def test_equal_to_minimum_counts_as_low(self, product_a):
        products_service.update_product(product_id="p-a", patch={"min_stock": 5})
        assert [p["id"] for p in products_service.get_low_stock_products()] == ["p-a"]


class TestSearch:
    def test_query_matches_name_sku_or_category(self, product_a, product_b):
        assert [p["id"] for p in products_service.search_products("batter")] == ["p-b"]
        assert [p["id"] for p in products_service.search_products("prod-a")] == ["p-a"]

    def test_category_and_stock_filters(self, product_a, product_b):
        assert [p["id"] for p in products_service.search_products(category="Accessories")] == ["p-a"]
        assert [p["id"] for p in products_service.search_products(stock_filter="low")] == ["p-b"]
        assert products_service.search_products(stock_filter="out") == []

    def test_unknown_stock_filter(self, product_a):
        with pytest.raises(ValidationError):
            products_service.search_products(stock_filter="plenty")

    def test_categories_first_seen_order(self, product_a, product_b):
        assert products_service.list_categories() == ["Accessories", "Batteries"]


class TestSnapshots:
    def test_list_is_a_copy(self, product_a):
        """Mutating a listing never touches the store."""
        first = products_service.list_products()
        first[0]["stock"] = 999
        first.clear()

        second = products_service.list_products()
        assert len(second) == 1
        assert second[0]["stock"] == 5

    def test_repeated_reads_are_equal(self, product_a, product_b):
        assert products_service.list_products() == products_service.list_products()
