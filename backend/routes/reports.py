# routes/reports.py
from collections import defaultdict
from datetime import datetime, timezone
from typing import Optional, List

from fastapi import APIRouter, Depends, HTTPException, Query

from schemas.user import User
from schemas.reports import SalesSummaryResponse, SalesSummaryItem, PaymentModeTotal
from store import Store, get_store
from utils.tokenJWT import capability_required

router = APIRouter(prefix="/reports", tags=["Reports"])


def _parse_iso(s: Optional[str], end_of_day: bool = False) -> Optional[datetime]:
    if not s:
        return None
    # A bare date as upper bound covers the whole day
    if end_of_day and len(s) == 10:
        s += "T23:59:59.999999"
    try:
        dt = datetime.fromisoformat(s.replace("Z", "+00:00"))
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Bad datetime format: {s}")
    # Naive bounds are taken as UTC, like invoice timestamps
    return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)


# Sales per day and per payment mode (Admin only)
@router.get("/sales-summary", response_model=SalesSummaryResponse)
def report_sales_summary(
    date_from: Optional[str] = Query(None, description="ISO datetime from"),
    date_to: Optional[str] = Query(None, description="ISO datetime to"),
    store: Store = Depends(get_store),
    current_user: User = Depends(capability_required("reports")),
):
    fdt = _parse_iso(date_from)
    tdt = _parse_iso(date_to, end_of_day=True)

    selected = []
    for inv in store.get_invoices():
        ts = _parse_iso(inv.date)
        if fdt and ts < fdt:
            continue
        if tdt and ts > tdt:
            continue
        selected.append((ts, inv))

    per_day = defaultdict(lambda: [0, 0.0])
    per_mode = defaultdict(lambda: [0, 0.0])
    for ts, inv in selected:
        per_day[ts.date()][0] += 1
        per_day[ts.date()][1] += inv.total_amount
        per_mode[inv.payment_mode.value][0] += 1
        per_mode[inv.payment_mode.value][1] += inv.total_amount

    items: List[SalesSummaryItem] = [
        SalesSummaryItem(date=d, invoices=count, total_amount=total)
        for d, (count, total) in sorted(per_day.items())
    ]
    by_mode: List[PaymentModeTotal] = [
        PaymentModeTotal(payment_mode=mode, invoices=count, total_amount=total)
        for mode, (count, total) in sorted(per_mode.items())
    ]

    return SalesSummaryResponse(
        items=items,
        by_payment_mode=by_mode,
        total_invoices=len(selected),
        total_amount=sum(inv.total_amount for _, inv in selected),
        total_tax=round(sum(inv.total_tax for _, inv in selected), 2),
        total_discount=round(sum(inv.total_discount for _, inv in selected), 2),
        date_from=fdt,
        date_to=tdt,
    )
