from datetime import date

from voltmanager.services import analytics_service, restock_service


def _product(pid, *, price=1000, cost=500, stock=10, min_stock=2, name=None):
    return {
        "id": pid,
        "name": name or f"Product {pid}",
        "price_cents": price,
        "cost_cents": cost,
        "stock": stock,
        "min_stock": min_stock,
    }


def _invoice(total, items):
    return {
        "total_cents": total,
        "items": [{"product_id": pid, "quantity": qty} for pid, qty in items],
    }


class TestRevenueSummary:
    def test_figures(self):
        products = [
            _product("a", price=1000, cost=400, stock=5, min_stock=2),
            _product("b", price=2500, cost=1500, stock=2, min_stock=5),
        ]
        invoices = [_invoice(10000, []), _invoice(6000, [])]

        summary = analytics_service.revenue_summary(products, invoices)

        assert summary["total_revenue_cents"] == 16000
        assert summary["inventory_value_cents"] == 5 * 1000 + 2 * 2500
        # (16000 - (2000 + 3000)) / 16000
        assert summary["margin_percent"] == 68.75
        assert summary["low_stock_count"] == 1
        assert summary["total_orders"] == 2

    def test_no_revenue_means_zero_margin(self):
        summary = analytics_service.revenue_summary([_product("a")], [])
        assert summary["margin_percent"] == 0
        assert summary["total_revenue_cents"] == 0


class TestTopSellers:
    def test_ranked_by_quantity(self):
        products = [_product("a"), _product("b"), _product("c")]
        invoices = [
            _invoice(0, [("a", 1), ("b", 3)]),
            _invoice(0, [("c", 2), ("a", 1)]),
        ]

        rows = analytics_service.top_selling_products(products, invoices)

        assert [(r["product_id"], r["quantity"]) for r in rows] == [("b", 3), ("a", 2), ("c", 2)]

    def test_deleted_product_placeholder(self):
        rows = analytics_service.top_selling_products([], [_invoice(0, [("gone", 4)])])

        assert rows[0]["name"] == "Unknown Product"
        assert rows[0]["product"] is None

    def test_limit(self):
        products = [_product(str(i)) for i in range(8)]
        invoices = [_invoice(0, [(str(i), i + 1) for i in range(8)])]

        rows = analytics_service.top_selling_products(products, invoices)

        assert len(rows) == 5
        assert rows[0]["product_id"] == "7"


class TestStockBuckets:
    def test_buckets(self):
        products = [
            _product("well", stock=10, min_stock=4),   # 10 > 6
            _product("edge", stock=6, min_stock=4),    # neither well nor low
            _product("low", stock=3, min_stock=4),
            _product("out", stock=0, min_stock=4),
        ]
        assert analytics_service.stock_buckets(products) == {
            "well_stocked": 1,
            "low_stock": 1,
            "out_of_stock": 1,
        }


class TestConfidenceLabel:
    def test_thresholds(self):
        assert restock_service.confidence_label(0.8) == "High"
        assert restock_service.confidence_label(0.79) == "Medium"
        assert restock_service.confidence_label(0.6) == "Medium"
        assert restock_service.confidence_label(0.59) == "Low"


class TestSeededViews:
    def test_analytics(self, seeded_app):
        data = analytics_service.build_analytics()

        summary = data["summary"]
        assert summary["total_revenue_cents"] == 16197 + 4857 + 7018
        assert summary["low_stock_count"] == 3
        assert summary["total_orders"] == 3

        assert [r["product_id"] for r in data["top_products"]] == ["3", "5", "1", "2"]
        assert data["stock_status"] == {"well_stocked": 5, "low_stock": 2, "out_of_stock": 1}
        assert [p["confidence_label"] for p in data["predictions"]] == ["High", "Medium", "Medium", "Low"]

    def test_dashboard(self, seeded_app):
        data = analytics_service.build_dashboard(date(2024, 1, 15))

        assert data == {
            "todays_revenue_cents": 16197 + 4857,
            "low_stock_count": 3,
            "pending_repairs": 2,
            "total_products": 8,
        }
