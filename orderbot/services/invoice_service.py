import time
from decimal import Decimal
from pathlib import Path
from typing import Callable, Optional
from uuid import uuid4

from fpdf import FPDF

from orderbot.logging_config import get_logger
from orderbot.schemas.order import Invoice, PricedOrder
from orderbot.services.result import DeliveryError

logger = get_logger("invoice_service")

INVOICE_URL_PREFIX = "/invoices"


def _latin1(s: str) -> str:
    # core PDF fonts only cover latin-1
    return (s or "").encode("latin-1", "replace").decode("latin-1")


def format_money(amount: Decimal, currency: str) -> str:
    return f"{currency} {amount:,.2f}"


def format_quantity(quantity: Decimal) -> str:
    text = format(quantity, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


class InvoiceRenderer:
    """Renders a priced order into a one-page PDF and returns where it can be fetched."""

    def __init__(
        self,
        invoice_dir: str,
        public_base_url: str,
        currency: str = "INR",
        clock: Callable[[], float] = time.time,
    ):
        self.invoice_dir = Path(invoice_dir)
        self.public_base_url = public_base_url.rstrip("/")
        self.currency = currency
        self.clock = clock

    def new_file_name(self) -> str:
        return f"invoice-{int(self.clock() * 1000)}-{uuid4().hex[:8]}.pdf"

    def url_for(self, file_name: str) -> str:
        return f"{self.public_base_url}{INVOICE_URL_PREFIX}/{file_name}"

    def _build_pdf(self, order: PricedOrder, invoice_no: str) -> FPDF:
        pdf = FPDF()
        pdf.set_auto_page_break(auto=True, margin=15)
        pdf.set_margins(15, 15, 15)
        pdf.add_page()

        pdf.set_font("Helvetica", "B", 20)
        pdf.cell(0, 12, "Invoice", align="C", new_x="LMARGIN", new_y="NEXT")
        pdf.ln(4)

        pdf.set_font("Helvetica", "", 10)
        pdf.cell(0, 6, _latin1(f"Invoice No: {invoice_no}"), new_x="LMARGIN", new_y="NEXT")
        pdf.cell(
            0,
            6,
            time.strftime("Date: %Y-%m-%d %H:%M UTC", time.gmtime(self.clock())),
            new_x="LMARGIN",
            new_y="NEXT",
        )
        pdf.ln(6)

        pdf.set_font("Helvetica", "", 14)
        quantity = f"{format_quantity(order.quantity)} {order.unit}".strip()
        lines = [
            f"Product: {order.product}",
            f"Quantity: {quantity}",
            f"Price: {format_money(order.unit_price, self.currency)}",
            f"Total: {format_money(order.total, self.currency)}",
        ]
        for line in lines:
            pdf.cell(0, 9, _latin1(line), new_x="LMARGIN", new_y="NEXT")
        return pdf

    def render(self, order: PricedOrder, file_name: Optional[str] = None) -> Invoice:
        file_name = file_name or self.new_file_name()
        path = self.invoice_dir / file_name
        try:
            self.invoice_dir.mkdir(parents=True, exist_ok=True)
            pdf = self._build_pdf(order, invoice_no=Path(file_name).stem)
            pdf.output(str(path))
        except Exception as e:
            logger.error(f"Invoice rendering failed: {e}", exc_info=True)
            raise DeliveryError(f"Invoice rendering failed: {e}") from e

        invoice = Invoice(file_name=file_name, path=str(path), url=self.url_for(file_name))
        logger.info("Invoice rendered", extra={"context": {"file_name": file_name, "total": str(order.total)}})
        return invoice
