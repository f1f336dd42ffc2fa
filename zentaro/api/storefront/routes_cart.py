from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from zentaro.domain.entities import AuthUser, CartSnapshot

from .common import CartResponse, QuantityIn, get_cart_repo, get_current_user, get_product_repo

router = APIRouter(prefix="/cart", tags=["cart"])


def _cart_response(cart, user_id: str) -> CartResponse:
    return CartResponse.from_snapshot(CartSnapshot(tuple(cart.load_cart(user_id))))


@router.get("", response_model=CartResponse)
def get_cart(user: AuthUser = Depends(get_current_user), cart=Depends(get_cart_repo)):
    return _cart_response(cart, user.id)


@router.put("/{product_id}", response_model=CartResponse)
def set_quantity(
    product_id: str,
    body: QuantityIn,
    user: AuthUser = Depends(get_current_user),
    cart=Depends(get_cart_repo),
    products=Depends(get_product_repo),
):
    """Write an absolute quantity; zero or less removes the product."""
    if body.quantity <= 0:
        cart.delete_item(user.id, product_id)
    else:
        if products.get_product(product_id) is None:
            raise HTTPException(status_code=404, detail="Product not found")
        cart.upsert_item(user.id, product_id, body.quantity)
    return _cart_response(cart, user.id)


@router.delete("/{product_id}", response_model=CartResponse)
def remove_item(
    product_id: str,
    user: AuthUser = Depends(get_current_user),
    cart=Depends(get_cart_repo),
):
    cart.delete_item(user.id, product_id)
    return _cart_response(cart, user.id)


@router.delete("", response_model=CartResponse)
def clear_cart(user: AuthUser = Depends(get_current_user), cart=Depends(get_cart_repo)):
    cart.clear(user.id)
    return CartResponse(items=[], total_items=0, total_price=0)
