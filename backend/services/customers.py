# backend/services/customers.py
import uuid
from typing import List, Optional, Tuple

from schemas.customer import Customer, CustomerCreate
from store import Store
from utils.seed import WALK_IN_NAME


def search_customers(customers: List[Customer], query: Optional[str]) -> List[Customer]:
    # Name is matched case-insensitively, mobile literally; storage order is kept
    if not query:
        return list(customers)
    lower = query.lower()
    return [c for c in customers if lower in c.name.lower() or query in c.mobile]


def default_customer(customers: List[Customer]) -> Optional[Customer]:
    return next((c for c in customers if c.name == WALK_IN_NAME), None)


def find_customer(customers: List[Customer], customer_id: str) -> Optional[Customer]:
    return next((c for c in customers if c.id == customer_id), None)


def add_customer(store: Store, data: CustomerCreate) -> Tuple[Optional[Customer], Optional[str]]:
    if not data.name.strip() or not data.mobile.strip():
        return None, "Name and Mobile are required"

    customer = Customer(id=str(uuid.uuid4()), **data.model_dump())
    store.add_customer(customer)
    return customer, None
