# backend/services/cart.py
import uuid
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Optional

from schemas.cart import CartItem, CartTotals
from schemas.common import PaymentMode
from schemas.customer import Customer
from schemas.product import Product


def round_half_away(value: float) -> float:
    # Nearest whole unit, ties away from zero (built-in round() is banker's)
    return float(Decimal(repr(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def compute_totals(items: List[CartItem]) -> CartTotals:
    """
    Price the cart.

    Per line: base = price * qty, discount = base * discount% / 100,
    taxable = base - discount, tax = taxable * gst% / 100.
    The charged amount is the net total rounded to a whole unit; the signed
    difference is reported as round_off.
    """
    subtotal = 0.0
    total_tax = 0.0
    total_discount = 0.0

    for item in items:
        base_price = item.price * item.quantity
        discount_amount = (base_price * item.discount) / 100
        taxable_value = base_price - discount_amount
        tax_amount = (taxable_value * item.gst_percent) / 100

        subtotal += taxable_value
        total_discount += discount_amount
        total_tax += tax_amount

    net_total = subtotal + total_tax
    grand_total = round_half_away(net_total)

    return CartTotals(
        subtotal=subtotal,
        total_discount=total_discount,
        total_tax=total_tax,
        net_total=net_total,
        round_off=grand_total - net_total,
        grand_total=grand_total,
    )


def _new_line(product: Product, serial: Optional[str] = None) -> CartItem:
    return CartItem(
        **product.model_dump(),
        cart_id=str(uuid.uuid4()),
        quantity=1,
        discount=0,
        selected_imei=serial,
    )


class CartEngine:
    """
    The sale in progress.

    Mutations never raise on bad input: they return a warning for the
    cashier (or None) and leave the cart unchanged when rejected.
    """

    def __init__(self, items: Optional[List[CartItem]] = None):
        self.items: List[CartItem] = list(items or [])
        self.product_search = ""

    def get(self, cart_id: str) -> Optional[CartItem]:
        return next((i for i in self.items if i.cart_id == cart_id), None)

    def add_item(self, product: Product, serial: Optional[str] = None) -> Optional[str]:
        if product.stock <= 0:
            return "Product is out of stock!"

        warning = self._add(product, serial)
        self.product_search = ""
        return warning

    def _add(self, product: Product, serial: Optional[str]) -> Optional[str]:
        # A scanned serial is always its own line
        if serial:
            if any(i.selected_imei == serial for i in self.items):
                return "This specific IMEI is already in the cart."
            self.items.append(_new_line(product, serial))
            return None

        existing = next((i for i in self.items if i.id == product.id and not i.selected_imei), None)
        if existing:
            if existing.quantity >= product.stock:
                return f"Cannot add more. Only {product.stock} in stock."
            existing.quantity += 1
            return None

        self.items.append(_new_line(product))
        return None

    def update_quantity(self, cart_id: str, delta: int) -> Optional[str]:
        item = self.get(cart_id)
        if item is None:
            return None
        if item.selected_imei and delta > 0:
            return None

        new_qty = max(1, item.quantity + delta)
        # Checked against the stock captured when the line was added
        if new_qty > item.stock:
            return f"Insufficient stock! Available: {item.stock}"
        item.quantity = new_qty
        return None

    def update_discount(self, cart_id: str, discount: float) -> None:
        item = self.get(cart_id)
        if item is not None:
            item.discount = min(100, max(0, discount))

    def remove(self, cart_id: str) -> None:
        self.items = [i for i in self.items if i.cart_id != cart_id]

    def clear(self) -> None:
        self.items = []

    def totals(self) -> CartTotals:
        return compute_totals(self.items)


class BillingSession:
    """Billing-screen state of one logged-in user: cart, customer, payment mode."""

    def __init__(self):
        self.cart = CartEngine()
        self.customer: Optional[Customer] = None
        self.payment_mode = PaymentMode.CASH


# One billing session per username, held in process memory only
_sessions: Dict[str, BillingSession] = {}


def billing_session_for(username: str) -> BillingSession:
    if username not in _sessions:
        _sessions[username] = BillingSession()
    return _sessions[username]


def discard_billing_session(username: str) -> None:
    _sessions.pop(username, None)
