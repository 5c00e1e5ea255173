"""
Database Models

Three tables back the storefront:

- Products: the product catalog, seeded out-of-band and read-only here
- ProductCounts: one inventory count per product
- Baskets: one row per item added to a user's basket

Table and column names are quoted, case-sensitive identifiers so the models
map onto the existing schema as-is.
"""

from typing import Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Float,
    Index,
    Integer,
    String,
    Table,
    false,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all database models"""
    pass


class Product(Base):
    """
    Product Catalog Table

    Categories are not stored separately: a category is the distinct
    value of category_name.
    """
    __tablename__ = "Products"

    asin: Mapped[str] = mapped_column("asin", String, primary_key=True)
    title: Mapped[str] = mapped_column("title", String, nullable=False)
    img_url: Mapped[Optional[str]] = mapped_column("imgUrl", String)
    product_url: Mapped[Optional[str]] = mapped_column("productUrl", String)
    stars: Mapped[float] = mapped_column("stars", Float, default=0.0)
    reviews: Mapped[int] = mapped_column("reviews", Integer, default=0)
    price: Mapped[float] = mapped_column("price", Float, default=0.0)
    is_best_seller: Mapped[bool] = mapped_column("isBestSeller", Boolean, default=False)
    bought_in_last_month: Mapped[int] = mapped_column("boughtInLastMonth", Integer, default=0)
    category_name: Mapped[str] = mapped_column("categoryName", String, nullable=False)

    __table_args__ = (
        Index("ix_products_category_name", "categoryName"),
    )


class ProductCount(Base):
    """Inventory count per product, decremented as items are added to baskets"""
    __tablename__ = "ProductCounts"

    asin: Mapped[str] = mapped_column("asin", String, primary_key=True)
    count: Mapped[int] = mapped_column("count", Integer, nullable=False, default=0)

    __table_args__ = (
        CheckConstraint('"count" >= 0', name="ck_product_counts_non_negative"),
    )


# Basket lines carry no primary key: the same product may be added to the
# same basket any number of times, one row per addition.
basket_lines = Table(
    "Baskets",
    Base.metadata,
    Column("BasketId", String, nullable=False),
    Column("ProductId", String, nullable=False),
    Column("UserId", String, nullable=False),
    Column("IsCheckedOut", Boolean, nullable=False, default=False, server_default=false()),
    Index("ix_baskets_user_basket", "UserId", "BasketId"),
)
