# backend/routes/cart.py
from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session

from database import get_db
from schemas.user import User
from schemas.invoice import Invoice
from schemas.cart import (
    CartAddItem, CartScan, CartQuantityUpdate, CartDiscountUpdate,
    CartCustomerSelect, CartCustomerCreate, CartPaymentMode, CartOut,
)
from services.cart import BillingSession, billing_session_for
from services.catalog import find_product, resolve_scan
from services.checkout import checkout
from services.customers import add_customer, default_customer, find_customer
from store import Store, get_store
from utils.audit import write_log
from utils.tokenJWT import capability_required

router = APIRouter(prefix="/cart", tags=["Cart"])

billing_user = capability_required("billing")


def _ip(request: Request):
    return request.client.host if request.client else None

def _get_session(store: Store, user: User) -> BillingSession:
    # Retrieve the user's billing session; Walk-in is selected by default
    session = billing_session_for(user.username)
    if session.customer is None:
        session.customer = default_customer(store.get_customers())
    return session

def _cart_to_out(session: BillingSession) -> CartOut:
    return CartOut(
        items=session.cart.items,
        totals=session.cart.totals(),
        customer=session.customer,
        payment_mode=session.payment_mode,
        product_search=session.cart.product_search,
    )

def _ensure_line(session: BillingSession, cart_id: str):
    if session.cart.get(cart_id) is None:
        raise HTTPException(status_code=404, detail="Cart item not found")

def _reject_on(warning):
    # Cart warnings are shown to the cashier; nothing was changed
    if warning:
        raise HTTPException(status_code=400, detail=warning)


@router.get("", response_model=CartOut)
def get_cart(
    store: Store = Depends(get_store),
    current_user: User = Depends(billing_user),
):
    return _cart_to_out(_get_session(store, current_user))


@router.post("/add", response_model=CartOut)
def add_to_cart(
    payload: CartAddItem,
    request: Request,
    db: Session = Depends(get_db),
    store: Store = Depends(get_store),
    current_user: User = Depends(billing_user),
):
    session = _get_session(store, current_user)

    product = find_product(store.get_products(), payload.product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    if payload.serial and payload.serial not in (product.available_imeis or []):
        raise HTTPException(status_code=400, detail=f"IMEI {payload.serial} is not available for {product.name}")

    _reject_on(session.cart.add_item(product, payload.serial))

    out = _cart_to_out(session)
    write_log(
        db,
        username=current_user.username,
        action="CART_ADD",
        resource="cart",
        status="SUCCESS",
        ip=_ip(request),
        meta={"product_id": product.id, "serial": payload.serial, "cart_items": len(out.items), "total": out.totals.grand_total},
    )
    return out


# Scanner / Enter-key input: IMEI first, then barcode or id, then a unique search hit
@router.post("/scan", response_model=CartOut)
def scan_into_cart(
    payload: CartScan,
    request: Request,
    db: Session = Depends(get_db),
    store: Store = Depends(get_store),
    current_user: User = Depends(billing_user),
):
    session = _get_session(store, current_user)
    session.cart.product_search = payload.code

    match = resolve_scan(store.get_products(), payload.code)
    if match is None:
        raise HTTPException(status_code=404, detail=f"No product matches '{payload.code}'")
    product, serial = match

    _reject_on(session.cart.add_item(product, serial))

    out = _cart_to_out(session)
    write_log(
        db,
        username=current_user.username,
        action="CART_SCAN",
        resource="cart",
        status="SUCCESS",
        ip=_ip(request),
        meta={"code": payload.code, "product_id": product.id, "serial": serial},
    )
    return out


@router.patch("/items/{cart_id}/quantity", response_model=CartOut)
def update_quantity(
    cart_id: str,
    payload: CartQuantityUpdate,
    request: Request,
    db: Session = Depends(get_db),
    store: Store = Depends(get_store),
    current_user: User = Depends(billing_user),
):
    session = _get_session(store, current_user)
    _ensure_line(session, cart_id)
    _reject_on(session.cart.update_quantity(cart_id, payload.delta))

    out = _cart_to_out(session)
    write_log(
        db,
        username=current_user.username,
        action="CART_UPDATE",
        resource="cart",
        status="SUCCESS",
        ip=_ip(request),
        meta={"cart_id": cart_id, "delta": payload.delta, "total": out.totals.grand_total},
    )
    return out


@router.patch("/items/{cart_id}/discount", response_model=CartOut)
def update_discount(
    cart_id: str,
    payload: CartDiscountUpdate,
    request: Request,
    db: Session = Depends(get_db),
    store: Store = Depends(get_store),
    current_user: User = Depends(billing_user),
):
    session = _get_session(store, current_user)
    _ensure_line(session, cart_id)
    session.cart.update_discount(cart_id, payload.discount)

    out = _cart_to_out(session)
    write_log(
        db,
        username=current_user.username,
        action="CART_DISCOUNT",
        resource="cart",
        status="SUCCESS",
        ip=_ip(request),
        meta={"cart_id": cart_id, "discount": session.cart.get(cart_id).discount},
    )
    return out


@router.delete("/items/{cart_id}", response_model=CartOut)
def delete_cart_item(
    cart_id: str,
    request: Request,
    db: Session = Depends(get_db),
    store: Store = Depends(get_store),
    current_user: User = Depends(billing_user),
):
    session = _get_session(store, current_user)
    _ensure_line(session, cart_id)
    session.cart.remove(cart_id)

    out = _cart_to_out(session)
    write_log(
        db,
        username=current_user.username,
        action="CART_DELETE",
        resource="cart",
        status="SUCCESS",
        ip=_ip(request),
        meta={"cart_id": cart_id, "cart_items": len(out.items), "total": out.totals.grand_total},
    )
    return out


@router.delete("", response_model=CartOut)
def clear_cart(
    request: Request,
    confirm: bool = Query(False, description="Must be true to clear the cart"),
    db: Session = Depends(get_db),
    store: Store = Depends(get_store),
    current_user: User = Depends(billing_user),
):
    if not confirm:
        raise HTTPException(status_code=400, detail="Clearing the cart requires confirmation")

    session = _get_session(store, current_user)
    session.cart.clear()

    write_log(db, username=current_user.username, action="CART_CLEAR", resource="cart",
              status="SUCCESS", ip=_ip(request))
    return _cart_to_out(session)


@router.put("/customer", response_model=CartOut)
def select_customer(
    payload: CartCustomerSelect,
    store: Store = Depends(get_store),
    current_user: User = Depends(billing_user),
):
    session = _get_session(store, current_user)
    customer = find_customer(store.get_customers(), payload.customer_id)
    if not customer:
        raise HTTPException(status_code=404, detail="Customer not found")
    session.customer = customer
    return _cart_to_out(session)


# Ad-hoc customer from the billing screen; becomes the selected party
@router.post("/customer", response_model=CartOut, status_code=status.HTTP_201_CREATED)
def create_and_select_customer(
    payload: CartCustomerCreate,
    request: Request,
    db: Session = Depends(get_db),
    store: Store = Depends(get_store),
    current_user: User = Depends(billing_user),
):
    session = _get_session(store, current_user)
    customer, warning = add_customer(store, payload)
    _reject_on(warning)
    session.customer = customer

    write_log(db, username=current_user.username, action="CUSTOMER_CREATE", resource="customers",
              status="SUCCESS", ip=_ip(request), meta={"customer_id": customer.id, "source": "billing"})
    return _cart_to_out(session)


@router.put("/payment-mode", response_model=CartOut)
def set_payment_mode(
    payload: CartPaymentMode,
    store: Store = Depends(get_store),
    current_user: User = Depends(billing_user),
):
    session = _get_session(store, current_user)
    session.payment_mode = payload.payment_mode
    return _cart_to_out(session)


@router.post("/checkout", response_model=Invoice, status_code=status.HTTP_201_CREATED)
def checkout_cart(
    request: Request,
    db: Session = Depends(get_db),
    store: Store = Depends(get_store),
    current_user: User = Depends(billing_user),
):
    session = _get_session(store, current_user)
    invoice, warning = checkout(store, session.cart, session.customer, session.payment_mode)

    if warning:
        write_log(db, username=current_user.username, action="CHECKOUT", resource="invoices",
                  status="FAIL", ip=_ip(request), meta={"reason": warning})
        raise HTTPException(status_code=400, detail=warning)

    write_log(
        db,
        username=current_user.username,
        action="CHECKOUT",
        resource="invoices",
        status="SUCCESS",
        ip=_ip(request),
        meta={"invoice_id": invoice.id, "total": invoice.total_amount, "mode": invoice.payment_mode.value},
    )
    return invoice
