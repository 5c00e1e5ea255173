"""
Storefront Error Taxonomy

Every failure surfaced to an HTTP caller derives from StorefrontError and
carries the status code it is reported with.
"""

from typing import Optional


class StorefrontError(Exception):
    """Base class for errors surfaced to API callers"""

    status_code: int = 500
    message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)

    @property
    def detail(self) -> str:
        return str(self)


class InvalidPayload(StorefrontError):
    """Request body is malformed or missing required fields"""

    status_code = 400
    message = "Invalid request payload"


class ProductNotFound(StorefrontError):
    """No inventory row exists for the requested product"""

    status_code = 404
    message = "product not found"

    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__(f"product not found: {product_id}")


class OutOfStock(StorefrontError):
    """Inventory count for the product is exhausted"""

    status_code = 409
    message = "product out of stock"

    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__(f"product out of stock: {product_id}")


class StoreUnavailable(StorefrontError):
    """Connection or query failure in the relational store"""

    status_code = 500
    message = "store unavailable"
