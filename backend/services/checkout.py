# backend/services/checkout.py
import logging
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Set, Tuple

from config import settings
from schemas.cart import CartItem
from schemas.common import InvoiceStatus, PaymentMode
from schemas.customer import Customer
from schemas.invoice import Invoice
from schemas.product import Product
from services.cart import CartEngine
from store import Store

logger = logging.getLogger(__name__)


def _next_invoice_id(store: Store, taken: Set[str]) -> str:
    # Persisted counter; ids already in history (e.g. from a restore) are skipped
    while True:
        candidate = f"{settings.INVOICE_PREFIX}{store.next_invoice_number():06d}"
        if candidate not in taken:
            return candidate


def apply_sale(products: List[Product], items: Iterable[CartItem]) -> List[Product]:
    """Decrement stock for each sold line and drop sold serials from the pool."""
    by_id = {p.id: p for p in products}
    for item in items:
        product = by_id.get(item.id)
        if product is None:
            continue
        product.stock -= item.quantity
        if item.selected_imei and product.available_imeis:
            product.available_imeis = [s for s in product.available_imeis if s != item.selected_imei]
    return products


def checkout(
    store: Store,
    cart: CartEngine,
    customer: Optional[Customer],
    payment_mode: PaymentMode,
    now: Optional[datetime] = None,
) -> Tuple[Optional[Invoice], Optional[str]]:
    """
    Turn the cart into a Paid invoice.

    Returns (invoice, None) on success or (None, warning) when the cart is
    empty or no customer is selected. The invoice write, the stock and serial
    updates and the counter bump happen in one store transaction; the cart is
    cleared only after it commits.
    """
    if not cart.items:
        return None, "Cart is empty"
    if customer is None:
        return None, "Please select a customer"

    totals = cart.totals()
    now = now or datetime.now(timezone.utc)

    with store.atomic():
        invoices = store.get_invoices()
        invoice = Invoice(
            id=_next_invoice_id(store, {inv.id for inv in invoices}),
            date=now.isoformat(timespec="milliseconds"),
            customer_name=customer.name,
            customer_mobile=customer.mobile,
            items=[item.model_copy(deep=True) for item in cart.items],
            subtotal=totals.subtotal,
            total_discount=totals.total_discount,
            total_tax=totals.total_tax,
            total_amount=totals.grand_total,
            round_off=totals.round_off,
            payment_mode=payment_mode,
            status=InvoiceStatus.PAID,
        )
        invoices.insert(0, invoice)
        store.save_invoices(invoices)
        store.save_products(apply_sale(store.get_products(), invoice.items))

    cart.clear()
    logger.info("Invoice %s committed: %s lines, total %s", invoice.id, len(invoice.items), invoice.total_amount)
    return invoice, None
