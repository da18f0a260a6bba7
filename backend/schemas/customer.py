from pydantic import Field
from typing import Optional, List

from schemas.common import CamelModel


# Billing party; "Walk-in Customer" is the seeded default
class Customer(CamelModel):
    id: str
    name: str
    mobile: str = ""
    email: str = ""
    address: str = ""
    gstin: Optional[str] = None


# Input for the add-customer form (name and mobile are required)
class CustomerCreate(CamelModel):
    name: str = ""
    mobile: str = ""
    email: str = ""
    address: str = ""
    gstin: Optional[str] = None


class CustomerList(CamelModel):
    items: List[Customer]
    total: int = Field(ge=0)
