from typing import Optional

from schemas.common import CamelModel


# Shop identity printed on receipts plus the outbound message templates.
# Templates accept {customer}, {id}, {total}, {date} and {shopName}.
class ShopSettings(CamelModel):
    shop_name: str
    address: str = ""
    phone: str = ""
    gstin: str = ""
    footer_message: str = ""
    whatsapp_template: Optional[str] = None
    email_subject: Optional[str] = None
    email_body: Optional[str] = None
