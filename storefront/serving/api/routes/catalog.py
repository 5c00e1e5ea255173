"""
Catalog API Endpoints

Category listing and per-category product listing.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from storefront.serving.api.deps import get_catalog_reader
from storefront.services import CatalogReader

router = APIRouter()


class CategoryResponse(BaseModel):
    """Category response"""
    name: str


class ProductResponse(BaseModel):
    """Product as stored in the catalog"""
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    asin: str
    title: str
    img_url: Optional[str] = Field(default=None, alias="imgUrl")
    product_url: Optional[str] = Field(default=None, alias="productUrl")
    stars: float
    reviews: int
    price: float
    is_best_seller: bool = Field(alias="isBestSeller")
    bought_in_last_month: int = Field(alias="boughtInLastMonth")
    category_name: str = Field(alias="categoryName")


@router.get("", response_model=List[CategoryResponse])
async def list_categories(
    catalog: CatalogReader = Depends(get_catalog_reader),
) -> List[CategoryResponse]:
    """List all distinct product categories."""
    categories = await catalog.list_categories()
    return [CategoryResponse(name=category.name) for category in categories]


@router.get("/{category}", response_model=List[ProductResponse])
async def list_products(
    category: str,
    catalog: CatalogReader = Depends(get_catalog_reader),
) -> List[ProductResponse]:
    """List the products in a category. Unknown categories return an empty list."""
    products = await catalog.list_products(category)
    return [ProductResponse.model_validate(p) for p in products]
