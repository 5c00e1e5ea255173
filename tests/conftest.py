"""
Test Suite Configuration
"""
from typing import AsyncGenerator, Dict, List

import httpx
import pytest
from sqlalchemy import func, insert, select

from storefront.config import Settings
from storefront.database import Database, Product, ProductCount, basket_lines
from storefront.ingestion import create_schema
from storefront.serving.api import create_api_app


@pytest.fixture
def test_settings() -> Settings:
    """Create test settings"""
    return Settings(
        app_env="testing",
        debug=True,
    )


@pytest.fixture
async def database(tmp_path) -> AsyncGenerator[Database, None]:
    """File-backed SQLite database with the storefront schema"""
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'storefront.db'}")
    await create_schema(db)

    yield db

    await db.dispose()


@pytest.fixture
def sample_products() -> List[Dict]:
    """Catalog rows keyed by column name"""
    return [
        {
            "asin": "X1",
            "title": "Wireless Headphones",
            "imgUrl": "https://img.example.com/x1.jpg",
            "productUrl": "https://shop.example.com/dp/X1",
            "stars": 4.5,
            "reviews": 1200,
            "price": 59.99,
            "isBestSeller": True,
            "boughtInLastMonth": 300,
            "categoryName": "Headphones",
        },
        {
            "asin": "X2",
            "title": "Studio Monitor Headphones",
            "imgUrl": "https://img.example.com/x2.jpg",
            "productUrl": "https://shop.example.com/dp/X2",
            "stars": 4.8,
            "reviews": 85,
            "price": 149.0,
            "isBestSeller": False,
            "boughtInLastMonth": 0,
            "categoryName": "Headphones",
        },
        {
            "asin": "X3",
            "title": "13in Laptop Sleeve",
            "imgUrl": "https://img.example.com/x3.jpg",
            "productUrl": "https://shop.example.com/dp/X3",
            "stars": 3.9,
            "reviews": 12,
            "price": 19.5,
            "isBestSeller": False,
            "boughtInLastMonth": 50,
            "categoryName": "Laptop Accessories",
        },
    ]


@pytest.fixture
def sample_counts() -> Dict[str, int]:
    """Starting inventory: X1 has two units, X2 none, X3 one"""
    return {"X1": 2, "X2": 0, "X3": 1}


@pytest.fixture
async def seeded_database(database, sample_products, sample_counts) -> Database:
    """Database loaded with the sample catalog and inventory"""
    async with database.transaction() as session:
        await session.execute(insert(Product.__table__), sample_products)
        await session.execute(
            insert(ProductCount.__table__),
            [{"asin": asin, "count": count} for asin, count in sample_counts.items()],
        )
    return database


@pytest.fixture
def inventory_count(database):
    """Read the current inventory count of a product"""
    async def read(asin: str):
        async with database.session() as session:
            return await session.scalar(
                select(ProductCount.count).where(ProductCount.asin == asin)
            )
    return read


@pytest.fixture
def basket_rows(database):
    """Read basket lines as (BasketId, ProductId, UserId, IsCheckedOut) tuples"""
    async def read(user_id: str = None, basket_id: str = None):
        query = select(basket_lines)
        if user_id is not None:
            query = query.where(basket_lines.c.UserId == user_id)
        if basket_id is not None:
            query = query.where(basket_lines.c.BasketId == basket_id)
        async with database.session() as session:
            result = await session.execute(query)
            return [tuple(row) for row in result.all()]
    return read


@pytest.fixture
def basket_line_count(database):
    """Count every basket line in the store"""
    async def read() -> int:
        async with database.session() as session:
            return await session.scalar(select(func.count()).select_from(basket_lines))
    return read


@pytest.fixture
async def client(seeded_database, test_settings) -> AsyncGenerator[httpx.AsyncClient, None]:
    """HTTP client bound to the API app"""
    app = create_api_app(test_settings, database=seeded_database)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
