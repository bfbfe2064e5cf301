"""
Cart API Endpoints
Cart state for the signed-in identity

Anonymous callers see an empty cart; every mutation requires sign-in.

Author: MiniMart Dev Team
Date: 2026-09-18
"""
import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from minimart.api.deps import get_cart, http_error
from minimart.core.errors import MiniMartError
from minimart.services.cart_service import CartSynchronizer

logger = logging.getLogger(__name__)

router = APIRouter()


class AddToCartRequest(BaseModel):
    product_id: str = Field(..., min_length=1)


class QuantityUpdateRequest(BaseModel):
    quantity: int = Field(..., description="New quantity; 0 or less removes the entry")


def cart_payload(cart: CartSynchronizer) -> dict:
    summary = cart.summary()
    return {
        "status": "success",
        "count": len(summary.entries),
        "data": summary.to_dict(),
        "product_ids": sorted(cart.product_ids)
    }


@router.get("/")
def get_cart_contents(cart: CartSynchronizer = Depends(get_cart)):
    """
    Get the cart with totals

    Returns entries (newest first), total items, total price, the delivery
    fee (only when the cart has items) and the grand total.
    """
    try:
        cart.refresh()
    except MiniMartError as e:
        raise http_error(e)
    return cart_payload(cart)


@router.post("/items")
def add_item(request: AddToCartRequest, cart: CartSynchronizer = Depends(get_cart)):
    """Add one unit of a product, incrementing the existing entry if present"""
    try:
        cart.refresh()
        entry = cart.add_to_cart(request.product_id)
    except MiniMartError as e:
        raise http_error(e)

    response = cart_payload(cart)
    response["entry"] = entry.to_dict()
    return response


@router.patch("/items/{entry_id}")
def update_item(entry_id: str, request: QuantityUpdateRequest, cart: CartSynchronizer = Depends(get_cart)):
    try:
        cart.refresh()
        entry = cart.update_quantity(entry_id, request.quantity)
    except MiniMartError as e:
        raise http_error(e)

    response = cart_payload(cart)
    response["entry"] = entry.to_dict() if entry else None
    return response


@router.delete("/items/{entry_id}")
def remove_item(entry_id: str, cart: CartSynchronizer = Depends(get_cart)):
    try:
        cart.refresh()
        cart.remove_item(entry_id)
    except MiniMartError as e:
        raise http_error(e)
    return cart_payload(cart)
