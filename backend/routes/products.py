# backend/routes/products.py
from typing import Optional, List
from fastapi import APIRouter, Depends, HTTPException, Query

from schemas.user import User
import schemas.product as product_schemas
from services.catalog import filter_inventory, find_product, search_products
from store import Store, get_store
from utils.tokenJWT import capability_required

router = APIRouter(prefix="/products", tags=["Products"])


# Stock / inventory listing with optional free-text filter
@router.get("", response_model=product_schemas.ProductList)
def list_products(
    q: Optional[str] = Query(None, description="Name, brand, category, barcode or IMEI"),
    store: Store = Depends(get_store),
    current_user: User = Depends(capability_required("inventory:read")),
):
    items = filter_inventory(store.get_products(), q)
    return {"items": items, "total": len(items)}


# Billing quick search (top matches only)
@router.get("/search", response_model=List[product_schemas.Product])
def quick_search(
    q: str = Query("", description="Name, id, barcode, brand or IMEI fragment"),
    limit: int = Query(10, ge=1, le=50),
    store: Store = Depends(get_store),
    current_user: User = Depends(capability_required("billing")),
):
    return search_products(store.get_products(), q, limit=limit)


@router.get("/{product_id}", response_model=product_schemas.Product)
def get_product(
    product_id: str,
    store: Store = Depends(get_store),
    current_user: User = Depends(capability_required("inventory:read")),
):
    product = find_product(store.get_products(), product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product
