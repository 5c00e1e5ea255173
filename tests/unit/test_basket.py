"""
Unit Tests - Basket Service
"""
import asyncio

import pytest
from sqlalchemy import event, insert, text

from storefront.database import basket_lines
from storefront.exceptions import OutOfStock, ProductNotFound, StoreUnavailable
from storefront.services import BasketLine, BasketService


class TestAddItem:
    """Tests for BasketService.add_item"""

    async def test_add_item_decrements_inventory(self, seeded_database, inventory_count, basket_rows):
        """Test a successful add records one line and takes one unit"""
        service = BasketService(seeded_database)

        line = await service.add_item("X1", "u1", "b1")

        assert line == BasketLine(basket_id="b1", product_id="X1", user_id="u1", is_checked_out=False)
        assert await inventory_count("X1") == 1
        assert await basket_rows("u1", "b1") == [("b1", "X1", "u1", False)]

    async def test_add_until_out_of_stock(self, seeded_database, inventory_count, basket_rows):
        """Test two units can be added, the third is refused"""
        service = BasketService(seeded_database)

        await service.add_item("X1", "u1", "b1")
        assert await inventory_count("X1") == 1

        await service.add_item("X1", "u1", "b1")
        assert await inventory_count("X1") == 0

        with pytest.raises(OutOfStock):
            await service.add_item("X1", "u1", "b1")

        assert await inventory_count("X1") == 0
        assert len(await basket_rows("u1", "b1")) == 2

    async def test_out_of_stock_leaves_no_side_effects(self, seeded_database, inventory_count, basket_line_count):
        """Test a product with no stock is refused without writes"""
        service = BasketService(seeded_database)

        with pytest.raises(OutOfStock) as exc_info:
            await service.add_item("X2", "u1", "b1")

        assert exc_info.value.product_id == "X2"
        assert exc_info.value.status_code == 409
        assert await inventory_count("X2") == 0
        assert await basket_line_count() == 0

    async def test_unknown_product(self, seeded_database, basket_line_count):
        """Test a product with no inventory row is not found"""
        service = BasketService(seeded_database)

        with pytest.raises(ProductNotFound) as exc_info:
            await service.add_item("NOPE", "u1", "b1")

        assert exc_info.value.status_code == 404
        assert await basket_line_count() == 0

    async def test_duplicate_adds_create_separate_lines(self, seeded_database, basket_rows):
        """Test the same product added twice yields two lines"""
        service = BasketService(seeded_database)

        await service.add_item("X1", "u1", "b1")
        await service.add_item("X1", "u1", "b1")

        rows = await basket_rows("u1", "b1")
        assert rows == [("b1", "X1", "u1", False), ("b1", "X1", "u1", False)]

    async def test_concurrent_adds_on_last_unit(self, seeded_database, inventory_count, basket_line_count):
        """Test only one of two racing adds gets the last unit"""
        service = BasketService(seeded_database)

        results = await asyncio.gather(
            service.add_item("X3", "u1", "b1"),
            service.add_item("X3", "u2", "b2"),
            return_exceptions=True,
        )

        succeeded = [r for r in results if isinstance(r, BasketLine)]
        refused = [r for r in results if isinstance(r, OutOfStock)]

        assert len(succeeded) == 1
        assert len(refused) == 1
        assert await inventory_count("X3") == 0
        assert await basket_line_count() == 1

    async def test_store_failure_rolls_back(self, seeded_database, inventory_count):
        """Test a failed insert leaves the inventory untouched"""
        async with seeded_database.engine.begin() as conn:
            await conn.execute(text('DROP TABLE "Baskets"'))

        service = BasketService(seeded_database)

        with pytest.raises(StoreUnavailable):
            await service.add_item("X1", "u1", "b1")

        assert await inventory_count("X1") == 2


class TestTransaction:
    """Tests for Database.transaction"""

    async def test_rolls_back_on_early_exit(self, database, basket_line_count):
        """Test an exception inside the block discards its writes"""
        with pytest.raises(RuntimeError):
            async with database.transaction() as session:
                await session.execute(
                    insert(basket_lines).values(
                        BasketId="b1", ProductId="X1", UserId="u1", IsCheckedOut=False
                    )
                )
                raise RuntimeError("abort")

        assert await basket_line_count() == 0

    async def test_commits_on_success(self, database, basket_line_count):
        """Test a clean exit commits"""
        async with database.transaction() as session:
            await session.execute(
                insert(basket_lines).values(
                    BasketId="b1", ProductId="X1", UserId="u1", IsCheckedOut=False
                )
            )

        assert await basket_line_count() == 1


class TestGuardedDecrement:
    """Tests for the count > 0 guard on the inventory update"""

    async def test_count_exhausted_after_read(self, seeded_database, inventory_count, basket_line_count):
        """Test the add is refused and rolled back when the count hits zero before the update"""
        engine = seeded_database.engine.sync_engine
        fired = []

        def exhaust_stock(conn, cursor, statement, parameters, context, executemany):
            if not fired and statement.lstrip().startswith('UPDATE "ProductCounts"'):
                fired.append(statement)
                cursor.execute('UPDATE "ProductCounts" SET "count" = 0 WHERE "asin" = ?', ("X3",))

        event.listen(engine, "before_cursor_execute", exhaust_stock)
        try:
            with pytest.raises(OutOfStock):
                await BasketService(seeded_database).add_item("X3", "u1", "b1")
        finally:
            event.remove(engine, "before_cursor_execute", exhaust_stock)

        assert fired
        assert await inventory_count("X3") == 1
        assert await basket_line_count() == 0
