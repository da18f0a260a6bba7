# backend/utils/templates.py
from typing import List
from urllib.parse import quote

from schemas.customer import Customer
from schemas.invoice import Invoice, ShareLinks
from schemas.shop import ShopSettings

# Used when the corresponding settings template is blank
FALLBACK_WHATSAPP = "Hello {customer}, your invoice {id} is generated. Total: {total}"
FALLBACK_EMAIL_SUBJECT = "Invoice {id}"
FALLBACK_EMAIL_BODY = "Here is your invoice {id}"


def _format_total(total: float) -> str:
    # Whole amounts print without a trailing ".0"
    return str(int(total)) if float(total).is_integer() else str(total)


def render_template(template: str, invoice: Invoice, shop_name: str) -> str:
    """
    Fill the five message placeholders with literal string replacement.

    Tokens are case-sensitive and replaced everywhere they occur; any other
    text in braces is left as written.
    """
    return (
        template
        .replace("{customer}", invoice.customer_name)
        .replace("{id}", invoice.id)
        .replace("{total}", _format_total(invoice.total_amount))
        .replace("{date}", invoice.date.split("T")[0])
        .replace("{shopName}", shop_name)
    )


def build_share_links(invoice: Invoice, shop: ShopSettings, customers: List[Customer]) -> ShareLinks:
    text = render_template(shop.whatsapp_template or FALLBACK_WHATSAPP, invoice, shop.shop_name)
    subject = render_template(shop.email_subject or FALLBACK_EMAIL_SUBJECT, invoice, shop.shop_name)
    body = render_template(shop.email_body or FALLBACK_EMAIL_BODY, invoice, shop.shop_name)

    # The invoice only keeps a mobile snapshot; the email comes from the directory
    customer = next((c for c in customers if c.mobile == invoice.customer_mobile), None)
    email = customer.email if customer else ""

    return ShareLinks(
        whatsapp=f"https://wa.me/{invoice.customer_mobile}?text={quote(text, safe='')}",
        email=f"mailto:{email}?subject={quote(subject, safe='')}&body={quote(body, safe='')}",
        whatsapp_text=text,
        email_subject=subject,
        email_body=body,
    )
