from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from zentaro.core.constants import MAX_PRODUCTS_PAGE
from zentaro.domain.entities import Product

from .common import get_product_repo

router = APIRouter(prefix="/products", tags=["products"])


@router.get("", response_model=list[Product])
def list_products(
    category: Optional[str] = Query(None, description="Category slug"),
    limit: int = Query(50, ge=1, le=MAX_PRODUCTS_PAGE),
    products=Depends(get_product_repo),
):
    """In-stock products with their specifications."""
    return products.list_products(category=category, limit=limit)


@router.get("/{product_id}", response_model=Product)
def get_product(product_id: str, products=Depends(get_product_repo)):
    product = products.get_product(product_id)
    if product is None:
        raise HTTPException(status_code=404, detail="Product not found")
    return product
