# backend/routes/customers.py
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session

from database import get_db
from schemas.user import User
from schemas.customer import Customer, CustomerCreate, CustomerList
from services.customers import add_customer, search_customers
from store import Store, get_store
from utils.audit import write_log
from utils.tokenJWT import capability_required

router = APIRouter(prefix="/customers", tags=["Customers"])


@router.get("", response_model=CustomerList)
def list_customers(
    q: Optional[str] = Query(None, description="Name or mobile fragment"),
    store: Store = Depends(get_store),
    current_user: User = Depends(capability_required("customers")),
):
    items = search_customers(store.get_customers(), q)
    return {"items": items, "total": len(items)}


@router.post("", response_model=Customer, status_code=status.HTTP_201_CREATED)
def create_customer(
    payload: CustomerCreate,
    request: Request,
    db: Session = Depends(get_db),
    store: Store = Depends(get_store),
    current_user: User = Depends(capability_required("customers")),
):
    customer, warning = add_customer(store, payload)
    if warning:
        raise HTTPException(status_code=400, detail=warning)

    write_log(
        db,
        username=current_user.username,
        action="CUSTOMER_CREATE",
        resource="customers",
        status="SUCCESS",
        ip=request.client.host if request.client else None,
        meta={"customer_id": customer.id},
    )
    return customer
