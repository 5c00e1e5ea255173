"""
API Routes Module
"""
from .basket import router as basket_router
from .catalog import router as catalog_router
from .health import router as health_router

__all__ = [
    "basket_router",
    "catalog_router",
    "health_router",
]
