# backend/schemas/product.py
from pydantic import Field
from typing import Optional, List

from schemas.common import CamelModel


# Catalog entry; serialized goods carry a pool of unsold IMEI/serial numbers
class Product(CamelModel):
    id: str
    name: str
    brand: str = ""
    category: str = ""
    hsn: str = ""
    price: float = Field(ge=0)
    cost: float = Field(default=0, ge=0)
    gst_percent: float = Field(default=0, ge=0, le=100)
    stock: int
    unit: str = "pcs"
    barcode: Optional[str] = None
    available_imeis: Optional[List[str]] = None


class ProductList(CamelModel):
    items: List[Product]
    total: int
