"""
Catalog Seeding

Creates the storefront tables and loads the product catalog from a CSV
export, giving every product the same starting inventory count. Rows that
already exist are left untouched, so seeding can be re-run safely.

Usage:
    python -m storefront.ingestion.seed_db data/products.csv --initial-count 100
"""

import argparse
import asyncio
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import polars as pl
import structlog
from sqlalchemy import Table
from sqlalchemy.dialects import postgresql, sqlite

from storefront.config import get_settings
from storefront.config.logging import configure_logging
from storefront.database.connection import Database, create_database
from storefront.database.models import Base, Product, ProductCount

logger = structlog.get_logger(__name__)

CATALOG_COLUMNS = [
    "asin",
    "title",
    "imgUrl",
    "productUrl",
    "stars",
    "reviews",
    "price",
    "isBestSeller",
    "boughtInLastMonth",
    "categoryName",
]

CHUNK_SIZE = 1000


async def create_schema(database: Database) -> None:
    """Create the Products, ProductCounts and Baskets tables if missing."""
    async with database.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Schema created", tables=sorted(Base.metadata.tables))


def load_products_frame(path: Union[str, Path]) -> pl.DataFrame:
    """
    Read a products CSV into a frame with the catalog columns.

    Column names are matched case-insensitively (exports spell productUrl
    as productURL). Numeric columns that fail to parse become zero, rows
    without an asin are dropped and duplicate asins keep their first row.
    """
    df = pl.read_csv(path, infer_schema_length=10000)

    by_lower = {column.lower(): column for column in df.columns}
    missing = [name for name in CATALOG_COLUMNS if name.lower() not in by_lower]
    if missing:
        raise ValueError(f"Products file {path} is missing columns: {missing}")

    df = df.select([pl.col(by_lower[name.lower()]).alias(name) for name in CATALOG_COLUMNS])

    df = df.with_columns(
        pl.col("asin").cast(pl.Utf8).str.strip_chars(),
        pl.col("title").cast(pl.Utf8).fill_null(""),
        pl.col("imgUrl").cast(pl.Utf8),
        pl.col("productUrl").cast(pl.Utf8),
        pl.col("stars").cast(pl.Float64, strict=False).fill_null(0.0),
        pl.col("reviews").cast(pl.Int64, strict=False).fill_null(0),
        pl.col("price").cast(pl.Float64, strict=False).fill_null(0.0),
        pl.col("isBestSeller")
        .cast(pl.Utf8)
        .str.to_lowercase()
        .is_in(["true", "1", "yes"])
        .fill_null(False),
        pl.col("boughtInLastMonth").cast(pl.Int64, strict=False).fill_null(0),
        pl.col("categoryName").cast(pl.Utf8).fill_null(""),
    )

    df = df.filter(pl.col("asin").is_not_null() & (pl.col("asin") != ""))
    df = df.unique(subset=["asin"], keep="first", maintain_order=True)

    logger.info("Loaded products file", path=str(path), rows=df.height)
    return df


def _insert_ignoring_conflicts(database: Database, table: Table):
    if database.backend == "postgresql":
        return postgresql.insert(table).on_conflict_do_nothing()
    if database.backend == "sqlite":
        return sqlite.insert(table).on_conflict_do_nothing()
    raise ValueError(f"Unsupported database backend for seeding: {database.backend}")


async def _insert_records(database: Database, table: Table, records: List[Dict[str, Any]]) -> None:
    if not records:
        return

    stmt = _insert_ignoring_conflicts(database, table)
    async with database.transaction() as session:
        for i in range(0, len(records), CHUNK_SIZE):
            await session.execute(stmt, records[i:i + CHUNK_SIZE])

    logger.info(f"Inserted {len(records)} records into {table.name}")


async def seed_catalog(
    database: Database,
    path: Union[str, Path],
    initial_count: int = 100,
) -> int:
    """
    Load products and their starting inventory counts.

    Args:
        database: Target database
        path: Products CSV file
        initial_count: Inventory count given to each newly seeded product

    Returns:
        int: Number of products read from the file
    """
    if initial_count < 0:
        raise ValueError("initial_count must not be negative")

    df = load_products_frame(path)
    products = df.to_dicts()
    counts = [{"asin": row["asin"], "count": initial_count} for row in products]

    await _insert_records(database, Product.__table__, products)
    await _insert_records(database, ProductCount.__table__, counts)

    return len(products)


async def main(path: Path, initial_count: int, database_url: Optional[str] = None) -> None:
    settings = get_settings()
    database = create_database(settings.database, url=database_url)

    logger.info("Starting catalog seeding...", path=str(path))
    try:
        await database.connect()
        await create_schema(database)
        seeded = await seed_catalog(database, path, initial_count)
        logger.info("Catalog seeding completed", products=seeded, initial_count=initial_count)
    finally:
        await database.dispose()


def cli(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Seed the storefront product catalog")
    parser.add_argument("csv", type=Path, help="Products CSV file")
    parser.add_argument(
        "--initial-count",
        type=int,
        default=100,
        help="Inventory count for each product (default: 100)",
    )
    parser.add_argument(
        "--database-url",
        default=None,
        help="Connection string (default: DATABASE_URL from the environment)",
    )
    args = parser.parse_args(argv)

    configure_logging()
    asyncio.run(main(args.csv, args.initial_count, args.database_url))


if __name__ == "__main__":
    cli()
