from pydantic import Field
from typing import List, Optional

from schemas.common import CamelModel, PaymentMode
from schemas.product import Product
from schemas.customer import Customer, CustomerCreate


# A product snapshot taken when it was added to the cart.
# cart_id identifies the line; a serial-bound line always has quantity 1.
class CartItem(Product):
    cart_id: str
    quantity: int = Field(default=1, ge=1)
    discount: float = Field(default=0, ge=0, le=100)
    selected_imei: Optional[str] = None


# Totals derived from the cart lines (grand_total is what gets charged)
class CartTotals(CamelModel):
    subtotal: float = 0.0
    total_discount: float = 0.0
    total_tax: float = 0.0
    net_total: float = 0.0
    round_off: float = 0.0
    grand_total: float = 0.0


# Request schema for adding a product, optionally bound to a serial
class CartAddItem(CamelModel):
    product_id: str
    serial: Optional[str] = None


# Request schema for barcode / IMEI scanner input
class CartScan(CamelModel):
    code: str


# Request schema for incrementing or decrementing a line
class CartQuantityUpdate(CamelModel):
    delta: int


# Request schema for a line discount (percent, clamped to 0..100)
class CartDiscountUpdate(CamelModel):
    discount: float


class CartCustomerSelect(CamelModel):
    customer_id: str


class CartPaymentMode(CamelModel):
    payment_mode: PaymentMode


class CartCustomerCreate(CustomerCreate):
    pass


# Response schema for the whole billing screen state
class CartOut(CamelModel):
    items: List[CartItem]
    totals: CartTotals
    customer: Optional[Customer] = None
    payment_mode: PaymentMode = PaymentMode.CASH
    product_search: str = ""
