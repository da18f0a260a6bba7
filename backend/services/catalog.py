# backend/services/catalog.py
from typing import List, Optional, Tuple

from schemas.product import Product


def _serials(product: Product) -> List[str]:
    return product.available_imeis or []


def search_products(products: List[Product], query: str, limit: int = 10) -> List[Product]:
    """Quick search used while billing: name, id, barcode, brand or a serial."""
    if not query:
        return []
    lower = query.lower()
    hits = [
        p for p in products
        if lower in p.name.lower()
        or lower in p.id.lower()
        or (p.barcode and lower in p.barcode.lower())
        or (p.brand and lower in p.brand.lower())
        or any(lower in s.lower() for s in _serials(p))
    ]
    return hits[:limit]


def filter_inventory(products: List[Product], query: Optional[str]) -> List[Product]:
    # Stock page filter; an empty query lists everything
    if not query:
        return list(products)
    lower = query.lower()
    return [
        p for p in products
        if lower in p.name.lower()
        or (p.brand and lower in p.brand.lower())
        or lower in p.category.lower()
        or (p.barcode and lower in p.barcode.lower())
        or any(query in s for s in _serials(p))
    ]


def resolve_scan(products: List[Product], code: str) -> Optional[Tuple[Product, Optional[str]]]:
    """
    Map scanner (or Enter-key) input to a product.

    Tried in order: an exact IMEI/serial match (the serial is bound to the
    line), an exact barcode or id match, then a single quick-search hit.
    Returns None when the input is ambiguous or unknown.
    """
    for p in products:
        if code in _serials(p):
            return p, code

    for p in products:
        if p.barcode == code or p.id == code:
            return p, None

    hits = search_products(products, code)
    if len(hits) == 1:
        p = hits[0]
        return p, (code if code in _serials(p) else None)
    return None


def low_stock(products: List[Product], threshold: int) -> List[Product]:
    return sorted((p for p in products if p.stock < threshold), key=lambda p: p.stock)


def find_product(products: List[Product], product_id: str) -> Optional[Product]:
    return next((p for p in products if p.id == product_id), None)
