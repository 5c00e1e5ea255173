"""
Database Module
"""
from .connection import Database, create_database
from .models import Base, Product, ProductCount, basket_lines

__all__ = [
    "Database",
    "create_database",
    "Base",
    "Product",
    "ProductCount",
    "basket_lines",
]
