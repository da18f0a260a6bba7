# backend/utils/pdf.py

from datetime import datetime
from pathlib import Path

from config import settings
from schemas.invoice import Invoice
from schemas.shop import ShopSettings

# Path configuration
STORAGE_DIR = Path(settings.RECEIPT_DIR)
FONT_DIR = Path("assets/fonts")
FONT_REGULAR_PATH = FONT_DIR / "DejaVuSans.ttf"
FONT_BOLD_PATH = FONT_DIR / "DejaVuSans-Bold.ttf"

# Built-in fonts unless DejaVu (needed for the rupee sign) is installed
FONT_REGULAR_NAME = "Helvetica"
FONT_BOLD_NAME = "Helvetica-Bold"
CURRENCY = "Rs."

# Lowest baseline (mm) for the grand total; the footer rule sits at 31 mm
SUMMARY_FLOOR_MM = 40

def ensure_storage_dir() -> None:
    STORAGE_DIR.mkdir(parents=True, exist_ok=True)

def get_pdf_path(invoice_id: str) -> Path:
    """Returns the receipt PDF path for an invoice."""
    ensure_storage_dir()
    return STORAGE_DIR / f"{invoice_id}.pdf"

_fonts_inited = False
def _init_fonts():
    """Registers DejaVu fonts with ReportLab when they are available."""
    global _fonts_inited, FONT_REGULAR_NAME, FONT_BOLD_NAME, CURRENCY
    if _fonts_inited:
        return
    _fonts_inited = True

    from reportlab.pdfbase import pdfmetrics
    from reportlab.pdfbase.ttfonts import TTFont

    if not FONT_REGULAR_PATH.exists():
        return

    pdfmetrics.registerFont(TTFont("DejaVuSans", str(FONT_REGULAR_PATH)))
    FONT_REGULAR_NAME = "DejaVuSans"
    FONT_BOLD_NAME = "DejaVuSans"
    if FONT_BOLD_PATH.exists():
        pdfmetrics.registerFont(TTFont("DejaVuSans-Bold", str(FONT_BOLD_PATH)))
        FONT_BOLD_NAME = "DejaVuSans-Bold"
    CURRENCY = "₹"

def _money(value: float) -> str:
    return f"{value:,.2f}"

def generate_invoice_pdf(invoice: Invoice, shop: ShopSettings, out_path: Path) -> None:
    """
    Renders a printable receipt:
    - Shop header (name, address, phone, GSTIN)
    - Bill-to block and invoice number / date / payment mode
    - Item table (serial under the item name)
    - Subtotal, tax, discount, round-off and total
    - Footer message
    """
    from reportlab.lib.pagesizes import A4
    from reportlab.pdfgen import canvas
    from reportlab.lib.units import mm

    _init_fonts()
    ensure_storage_dir()

    c = canvas.Canvas(str(out_path), pagesize=A4)
    width, height = A4

    def draw_text(x, y, text, font=FONT_REGULAR_NAME, size=10, align="left", color=(0, 0, 0)):
        c.setFillColorRGB(*color)
        c.setFont(font, size)
        text_str = str(text) if text is not None else ""
        if align == "right":
            c.drawRightString(x, y, text_str)
        elif align == "center":
            c.drawCentredString(x, y, text_str)
        else:
            c.drawString(x, y, text_str)
        c.setFillColorRGB(0, 0, 0)

    # --- 1. Shop header ---
    y = height - 20 * mm
    draw_text(width / 2, y, shop.shop_name, font=FONT_BOLD_NAME, size=16, align="center")
    y -= 6 * mm
    if shop.address:
        draw_text(width / 2, y, shop.address, size=9, align="center", color=(0.3, 0.3, 0.3))
        y -= 5 * mm
    draw_text(width / 2, y, f"Phone: {shop.phone} | GSTIN: {shop.gstin}", size=9, align="center", color=(0.3, 0.3, 0.3))

    y -= 6 * mm
    c.setLineWidth(0.5)
    c.line(20 * mm, y, 190 * mm, y)
    y -= 8 * mm

    # --- 2. Bill-to and invoice details ---
    draw_text(20 * mm, y, "Invoice To:", size=9, color=(0.4, 0.4, 0.4))
    draw_text(190 * mm, y, f"INVOICE #{invoice.id}", font=FONT_BOLD_NAME, size=11, align="right")
    y -= 5 * mm
    draw_text(20 * mm, y, invoice.customer_name, font=FONT_BOLD_NAME)
    try:
        issued = datetime.fromisoformat(invoice.date.replace("Z", "+00:00")).strftime("%d/%m/%Y")
    except ValueError:
        issued = invoice.date.split("T")[0]
    draw_text(190 * mm, y, f"Date: {issued}", size=9, align="right")
    y -= 5 * mm
    if invoice.customer_mobile:
        draw_text(20 * mm, y, f"Mobile: {invoice.customer_mobile}", size=9)
    draw_text(190 * mm, y, f"Mode: {invoice.payment_mode.value}", size=9, align="right")
    y -= 10 * mm

    # --- 3. Item table ---
    c.setFillColorRGB(0.95, 0.95, 0.95)
    c.rect(20 * mm, y - 2 * mm, 170 * mm, 8 * mm, fill=1, stroke=0)
    c.setFillColorRGB(0, 0, 0)

    c.setFont(FONT_BOLD_NAME, 9)
    c.drawString(22 * mm, y, "Item")
    c.drawRightString(120 * mm, y, "Qty")
    c.drawRightString(150 * mm, y, "Price")
    c.drawRightString(185 * mm, y, "Total")
    y -= 8 * mm

    for item in invoice.items:
        c.setFont(FONT_REGULAR_NAME, 9)
        c.drawString(22 * mm, y, item.name[:50])
        c.drawRightString(120 * mm, y, str(item.quantity))
        c.drawRightString(150 * mm, y, _money(item.price))
        c.drawRightString(185 * mm, y, _money(item.price * item.quantity))
        if item.selected_imei:
            y -= 4 * mm
            draw_text(22 * mm, y, f"IMEI/SN: {item.selected_imei}", size=7, color=(0.4, 0.4, 0.4))

        c.setLineWidth(0.1)
        c.line(20 * mm, y - 2 * mm, 190 * mm, y - 2 * mm)
        y -= 6 * mm

        # New page when the table runs off the bottom
        if y < 50 * mm:
            c.showPage()
            y = height - 20 * mm

    # --- 4. Summary ---
    rows = [
        ("Subtotal:", _money(invoice.subtotal)),
        ("Tax (GST):", _money(invoice.total_tax)),
        ("Discount:", f"-{_money(invoice.total_discount)}"),
    ]
    if invoice.round_off:
        rows.append(("Round off:", f"{invoice.round_off:+.2f}"))

    # Summary and total must stay clear of the footer band
    summary_height = (4 + 5 * len(rows) + 1) * mm
    if y - summary_height < SUMMARY_FLOOR_MM * mm:
        c.showPage()
        y = height - 20 * mm

    y -= 4 * mm
    for label, value in rows:
        draw_text(150 * mm, y, label, size=9, align="right")
        draw_text(185 * mm, y, value, size=9, align="right")
        y -= 5 * mm

    y -= 1 * mm
    draw_text(150 * mm, y, "Total:", font=FONT_BOLD_NAME, size=12, align="right")
    draw_text(185 * mm, y, f"{CURRENCY} {_money(invoice.total_amount)}", font=FONT_BOLD_NAME, size=12, align="right")

    # --- 5. Footer ---
    y_footer = 25 * mm
    c.setLineWidth(0.5)
    c.line(20 * mm, y_footer + 6 * mm, 190 * mm, y_footer + 6 * mm)
    draw_text(width / 2, y_footer, shop.footer_message, size=8, align="center")
    draw_text(width / 2, y_footer - 5 * mm, "Generated by ShopFlow", size=7, align="center", color=(0.5, 0.5, 0.5))

    c.showPage()
    c.save()
