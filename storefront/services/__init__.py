"""
Services Module
"""
from .basket import BasketLine, BasketService
from .catalog import CatalogReader, Category
from .checkout import CheckoutService

__all__ = [
    "BasketLine",
    "BasketService",
    "CatalogReader",
    "Category",
    "CheckoutService",
]
