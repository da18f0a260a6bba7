# backend/routes/stats.py

from fastapi import APIRouter, Depends
from datetime import datetime, timedelta, timezone
from pydantic import BaseModel
from typing import List

from config import settings
from schemas.product import Product
from schemas.user import User
from services.catalog import low_stock
from store import Store, get_store
from utils.tokenJWT import capability_required

router = APIRouter(
    prefix="/stats",
    tags=["Stats"]
)

# === Pydantic Response Schemas ===

class StatsSummary(BaseModel):
    total_sales: float
    today_sales: float
    total_invoices: int
    low_stock_products: int

class DailySales(BaseModel):
    date: str
    sales: float

class DailySalesResponse(BaseModel):
    data: List[DailySales]


def _today() -> str:
    return datetime.now(timezone.utc).date().isoformat()


# === Endpoint 1: Dashboard Summary ===

@router.get("/summary", response_model=StatsSummary)
def get_stats_summary(
    store: Store = Depends(get_store),
    current_user: User = Depends(capability_required("dashboard")),
):
    invoices = store.get_invoices()
    today = _today()

    return StatsSummary(
        total_sales=sum(inv.total_amount for inv in invoices),
        today_sales=sum(inv.total_amount for inv in invoices if inv.date.startswith(today)),
        total_invoices=len(invoices),
        low_stock_products=len(low_stock(store.get_products(), settings.LOW_STOCK_THRESHOLD)),
    )

# === Endpoint 2: Chart Data ===

@router.get("/daily-sales", response_model=DailySalesResponse)
def get_daily_sales(
    store: Store = Depends(get_store),
    current_user: User = Depends(capability_required("dashboard")),
):
    invoices = store.get_invoices()
    today = datetime.now(timezone.utc).date()

    # Last seven days, oldest first, zero-filled
    result_data = []
    for i in range(6, -1, -1):
        day = (today - timedelta(days=i)).isoformat()
        total = sum(inv.total_amount for inv in invoices if inv.date.startswith(day))
        result_data.append(DailySales(date=day[5:], sales=total))

    return DailySalesResponse(data=result_data)

# === Endpoint 3: Stock running out ===

@router.get("/low-stock", response_model=List[Product])
def get_low_stock(
    store: Store = Depends(get_store),
    current_user: User = Depends(capability_required("dashboard")),
):
    # Eight lowest stock levels across the whole catalog
    return sorted(store.get_products(), key=lambda p: p.stock)[:8]
