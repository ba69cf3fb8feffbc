from voltmanager.services import products_service


class TestInventoryCommands:
    def test_low_stock_lists_products(self, app, product_a, product_b):
        result = app.test_cli_runner().invoke(args=["inventory", "low-stock"])

        assert result.exit_code == 0
        assert "PROD-B-001" in result.output
        assert "PROD-A-001" not in result.output

    def test_adjust_by_sku(self, app, product_a):
        result = app.test_cli_runner().invoke(args=["inventory", "adjust", "PROD-A-001", "4"])

        assert result.exit_code == 0
        assert products_service.get_product("p-a")["stock"] == 9

    def test_adjust_below_zero_fails(self, app, product_a):
        result = app.test_cli_runner().invoke(args=["inventory", "adjust", "--", "PROD-A-001", "-9"])

        assert result.exit_code != 0
        assert products_service.get_product("p-a")["stock"] == 5

    def test_adjust_unknown_sku(self, app):
        result = app.test_cli_runner().invoke(args=["inventory", "adjust", "NOPE", "1"])
        assert result.exit_code != 0


class TestSeedCommands:
    def test_load_and_replace(self, app):
        runner = app.test_cli_runner()

        result = runner.invoke(args=["seed", "load"])
        assert result.exit_code == 0
        assert len(products_service.list_products()) == 8

        result = runner.invoke(args=["seed", "load", "--replace"])
        assert result.exit_code == 0
        assert len(products_service.list_products()) == 8

    def test_load_on_populated_store_is_skipped(self, app):
        runner = app.test_cli_runner()
        runner.invoke(args=["seed", "load"])

        result = runner.invoke(args=["seed", "load"])
        assert result.exit_code == 0
        assert "--replace" in result.output
        assert len(products_service.list_products()) == 8
