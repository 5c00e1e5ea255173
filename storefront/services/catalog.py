"""
Catalog Reader

Read-only queries over the product catalog.
"""

from dataclasses import dataclass
from typing import List

import structlog
from sqlalchemy import select

from storefront.database.connection import Database
from storefront.database.models import Product

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Category:
    """A distinct product category name"""
    name: str


class CatalogReader:
    """Lists categories and the products filed under each."""

    def __init__(self, database: Database):
        self.database = database

    async def list_categories(self) -> List[Category]:
        async with self.database.session() as session:
            result = await session.execute(select(Product.category_name).distinct())
            names = result.scalars().all()

        logger.debug("Listed categories", count=len(names))
        return [Category(name=name) for name in names]

    async def list_products(self, category: str) -> List[Product]:
        """
        Products whose category name matches exactly.

        An unknown category is not an error; it yields an empty list.
        """
        async with self.database.session() as session:
            result = await session.execute(
                select(Product).where(Product.category_name == category)
            )
            products = list(result.scalars().all())

        logger.debug("Listed products", category=category, count=len(products))
        return products
