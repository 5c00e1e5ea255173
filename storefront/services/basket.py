"""
Basket Service

Adding an item to a basket is the one transactional operation in the
storefront: the inventory read, the basket line insert and the inventory
decrement commit together or not at all.
"""

from dataclasses import dataclass

import structlog
from sqlalchemy import insert, select, update

from storefront.database.connection import Database
from storefront.database.models import ProductCount, basket_lines
from storefront.exceptions import OutOfStock, ProductNotFound

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class BasketLine:
    """One product added to a user's basket"""
    basket_id: str
    product_id: str
    user_id: str
    is_checked_out: bool = False


class BasketService:
    """Records basket lines against inventory."""

    def __init__(self, database: Database):
        self.database = database

    async def add_item(self, product_id: str, user_id: str, basket_id: str) -> BasketLine:
        """
        Add one unit of a product to a basket.

        Locks the product's inventory row, refuses when nothing is left,
        then inserts the basket line and decrements the count by one.
        Adding the same product again creates another line.

        Args:
            product_id: Catalog key (ASIN) of the product
            user_id: Owner of the basket
            basket_id: Basket to add the line to

        Returns:
            BasketLine: The line that was recorded

        Raises:
            ProductNotFound: No inventory row exists for the product
            OutOfStock: The inventory count is zero
            StoreUnavailable: The store failed; nothing was written
        """
        line = BasketLine(basket_id=basket_id, product_id=product_id, user_id=user_id)

        async with self.database.transaction() as session:
            count = await session.scalar(
                select(ProductCount.count)
                .where(ProductCount.asin == product_id)
                .with_for_update()
            )

            if count is None:
                logger.info("Basket add refused", reason="product_not_found", product_id=product_id)
                raise ProductNotFound(product_id)

            if count <= 0:
                logger.info("Basket add refused", reason="out_of_stock", product_id=product_id)
                raise OutOfStock(product_id)

            await session.execute(
                insert(basket_lines).values(
                    BasketId=line.basket_id,
                    ProductId=line.product_id,
                    UserId=line.user_id,
                    IsCheckedOut=line.is_checked_out,
                )
            )

            # Guarded so a concurrent decrement can never take the count below zero
            result = await session.execute(
                update(ProductCount)
                .where(ProductCount.asin == product_id, ProductCount.count > 0)
                .values(count=ProductCount.count - 1)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                logger.info("Basket add refused", reason="out_of_stock", product_id=product_id)
                raise OutOfStock(product_id)

        logger.info(
            "Item added to basket",
            product_id=product_id,
            user_id=user_id,
            basket_id=basket_id,
            remaining=count - 1,
        )
        return line
