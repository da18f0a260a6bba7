# schemas/reports.py
from datetime import datetime, date
from typing import List, Optional
from pydantic import BaseModel

# Schemas for sales performance summaries
class SalesSummaryItem(BaseModel):
    date: date
    invoices: int
    total_amount: float

class PaymentModeTotal(BaseModel):
    payment_mode: str
    invoices: int
    total_amount: float

class SalesSummaryResponse(BaseModel):
    items: List[SalesSummaryItem]
    by_payment_mode: List[PaymentModeTotal]
    total_invoices: int
    total_amount: float
    total_tax: float
    total_discount: float
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None
