"""
Ingestion Module
"""
from .seed_db import create_schema, load_products_frame, seed_catalog

__all__ = [
    "create_schema",
    "load_products_frame",
    "seed_catalog",
]
