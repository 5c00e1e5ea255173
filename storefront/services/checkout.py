"""
Checkout Service
"""

import structlog
from sqlalchemy import update

from storefront.database.connection import Database
from storefront.database.models import basket_lines

logger = structlog.get_logger(__name__)


class CheckoutService:
    """Marks a user's basket as checked out."""

    def __init__(self, database: Database):
        self.database = database

    async def checkout(self, user_id: str, basket_id: str) -> int:
        """
        Flag every line of the basket as checked out.

        A basket with no lines is not an error, and repeating the call
        leaves the same final state.

        Returns:
            int: Number of lines matched
        """
        async with self.database.transaction() as session:
            result = await session.execute(
                update(basket_lines)
                .where(
                    basket_lines.c.UserId == user_id,
                    basket_lines.c.BasketId == basket_id,
                )
                .values(IsCheckedOut=True)
            )
            matched = result.rowcount

        logger.info("Basket checked out", user_id=user_id, basket_id=basket_id, lines=matched)
        return matched
