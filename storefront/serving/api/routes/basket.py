"""
Basket API Endpoints

Adding items to a basket and checking the basket out.
"""

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, ConfigDict, Field

from storefront.serving.api.deps import get_basket_service, get_checkout_service
from storefront.services import BasketService, CheckoutService

router = APIRouter()


class AddItemRequest(BaseModel):
    """Add-item request body"""
    model_config = ConfigDict(populate_by_name=True)

    product_id: str = Field(alias="product-id")
    user_id: str = Field(alias="user-id")
    basket_id: str = Field(alias="basket-id")


class CheckoutRequest(BaseModel):
    """Checkout request body"""
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(alias="user-id")
    basket_id: str = Field(alias="basket-id")


class MessageResponse(BaseModel):
    message: str


@router.post(
    "/add-item-to-basket",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_item_to_basket(
    payload: AddItemRequest,
    baskets: BasketService = Depends(get_basket_service),
) -> MessageResponse:
    """
    Add one unit of a product to a basket.

    Fails with 404 for an unknown product and 409 when it is out of stock.
    """
    await baskets.add_item(payload.product_id, payload.user_id, payload.basket_id)
    return MessageResponse(message="Item added to basket")


@router.post("/checkout-basket", response_model=MessageResponse)
async def checkout_basket(
    payload: CheckoutRequest,
    checkout: CheckoutService = Depends(get_checkout_service),
) -> MessageResponse:
    """Mark every line of the basket as checked out."""
    await checkout.checkout(payload.user_id, payload.basket_id)
    return MessageResponse(message="Basket checked out successfully")
