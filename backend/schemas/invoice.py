# schemas/invoice.py
from typing import List

from schemas.common import CamelModel, PaymentMode, InvoiceStatus
from schemas.cart import CartItem


# Immutable record of a completed sale. Customer name and mobile are
# snapshots, not references, so later edits never rewrite history.
class Invoice(CamelModel):
    id: str
    date: str
    customer_name: str
    customer_mobile: str = ""
    items: List[CartItem]
    subtotal: float
    total_discount: float
    total_tax: float
    total_amount: float
    round_off: float = 0.0
    payment_mode: PaymentMode
    status: InvoiceStatus = InvoiceStatus.PAID


# Paginated response wrapper for invoice history
class InvoiceListPage(CamelModel):
    items: List[Invoice]
    total: int
    page: int
    page_size: int


# Outbound share links built from the message templates
class ShareLinks(CamelModel):
    whatsapp: str
    email: str
    whatsapp_text: str
    email_subject: str
    email_body: str
