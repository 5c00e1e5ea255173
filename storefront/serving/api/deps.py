"""
FastAPI Dependencies

The Database handle lives on the application state; services are built per
request around it.
"""

from fastapi import Depends, Request

from storefront.config import Settings
from storefront.database.connection import Database
from storefront.services import BasketService, CatalogReader, CheckoutService


def get_database(request: Request) -> Database:
    """Database handle created by the application lifespan."""
    return request.app.state.database


def get_app_settings(request: Request) -> Settings:
    """Settings the application was created with."""
    return request.app.state.settings


def get_catalog_reader(database: Database = Depends(get_database)) -> CatalogReader:
    return CatalogReader(database)


def get_basket_service(database: Database = Depends(get_database)) -> BasketService:
    return BasketService(database)


def get_checkout_service(database: Database = Depends(get_database)) -> CheckoutService:
    return CheckoutService(database)
