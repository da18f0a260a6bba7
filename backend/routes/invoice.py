# backend/routes/invoice.py
from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import FileResponse

from schemas import invoice as invoice_schemas
from schemas.user import User
from store import Store, get_store
from utils.pdf import generate_invoice_pdf, get_pdf_path
from utils.templates import build_share_links
from utils.tokenJWT import capability_required

router = APIRouter(prefix="/invoices", tags=["Invoices"])

billing_user = capability_required("billing")


def _get_invoice(store: Store, invoice_id: str) -> invoice_schemas.Invoice:
    invoice = next((inv for inv in store.get_invoices() if inv.id == invoice_id), None)
    if not invoice:
        raise HTTPException(status_code=404, detail="Invoice not found")
    return invoice


# =========================
# LIST (most recent first)
# =========================
@router.get("", response_model=invoice_schemas.InvoiceListPage)
def list_invoices(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    store: Store = Depends(get_store),
    current_user: User = Depends(billing_user),
):
    invoices = store.get_invoices()
    start = (page - 1) * page_size
    return {"items": invoices[start:start + page_size], "total": len(invoices), "page": page, "page_size": page_size}


@router.get("/{invoice_id}", response_model=invoice_schemas.Invoice)
def get_invoice(
    invoice_id: str,
    store: Store = Depends(get_store),
    current_user: User = Depends(billing_user),
):
    return _get_invoice(store, invoice_id)


# =========================
# PRINT
# =========================
@router.get("/{invoice_id}/pdf")
def download_invoice_pdf(
    invoice_id: str,
    store: Store = Depends(get_store),
    current_user: User = Depends(billing_user),
):
    invoice = _get_invoice(store, invoice_id)
    pdf_path = get_pdf_path(invoice.id)
    generate_invoice_pdf(invoice, store.get_settings(), pdf_path)

    return FileResponse(pdf_path, media_type="application/pdf", filename=f"{invoice.id}.pdf")


# =========================
# SHARE (WhatsApp / email)
# =========================
@router.get("/{invoice_id}/share", response_model=invoice_schemas.ShareLinks)
def share_invoice(
    invoice_id: str,
    store: Store = Depends(get_store),
    current_user: User = Depends(billing_user),
):
    invoice = _get_invoice(store, invoice_id)
    return build_share_links(invoice, store.get_settings(), store.get_customers())
