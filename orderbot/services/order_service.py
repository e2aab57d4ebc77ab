from dataclasses import dataclass
from enum import Enum
from typing import Optional

from orderbot.config import Settings
from orderbot.logging_config import ContextAdapter, get_logger, mask_recipient
from orderbot.schemas.order import Invoice, PricedOrder
from orderbot.services.catalog import Catalog
from orderbot.services.invoice_service import InvoiceRenderer, format_money, format_quantity
from orderbot.services.llm import build_llm_provider
from orderbot.services.order_extractor import OrderExtractor
from orderbot.services.pricing import price_order
from orderbot.services.result import OrderError
from orderbot.services.whatsapp_service import WhatsAppService

logger = ContextAdapter(get_logger("order_service"), {})

MSG_NOT_UNDERSTOOD = "Sorry, I couldn't understand the order."
MSG_PRODUCT_NOT_FOUND = "Product not found."
MSG_INVALID_QUANTITY = 'Please send a valid quantity, for example "2 kg sugar".'
INVOICE_CAPTION = "Your Invoice"

ERROR_MESSAGES = {
    OrderError.EXTRACTION_FAILED: MSG_NOT_UNDERSTOOD,
    OrderError.PRODUCT_NOT_FOUND: MSG_PRODUCT_NOT_FOUND,
    OrderError.INVALID_QUANTITY: MSG_INVALID_QUANTITY,
}


class OrderOutcome(str, Enum):
    PRICED = "priced"
    EXTRACTION_FAILED = OrderError.EXTRACTION_FAILED.value
    PRODUCT_NOT_FOUND = OrderError.PRODUCT_NOT_FOUND.value
    INVALID_QUANTITY = OrderError.INVALID_QUANTITY.value


@dataclass
class ProcessResult:
    outcome: OrderOutcome
    reply: str
    order: Optional[PricedOrder] = None
    invoice: Optional[Invoice] = None


def format_confirmation(order: PricedOrder, currency: str) -> str:
    quantity = f"{format_quantity(order.quantity)} {order.unit}".strip()
    return (
        f"Order confirmed: {quantity} {order.product} x "
        f"{format_money(order.unit_price, currency)} = {format_money(order.total, currency)}"
    )


class OrderService:
    """Runs one inbound message through extract -> price -> invoice -> reply."""

    def __init__(
        self,
        extractor: OrderExtractor,
        catalog: Catalog,
        renderer: InvoiceRenderer,
        notifier: WhatsAppService,
        currency: str = "INR",
    ):
        self.extractor = extractor
        self.catalog = catalog
        self.renderer = renderer
        self.notifier = notifier
        self.currency = currency

    @classmethod
    def from_settings(cls, settings: Settings) -> "OrderService":
        extractor = OrderExtractor(
            build_llm_provider(settings),
            model=settings.llm_model,
            timeout_seconds=settings.llm_timeout_seconds,
        )
        renderer = InvoiceRenderer(
            invoice_dir=settings.invoice_dir,
            public_base_url=settings.public_base_url,
            currency=settings.currency,
        )
        notifier = WhatsAppService(
            token=settings.whatsapp_token,
            phone_id=settings.whatsapp_phone_id,
            api_version=settings.graph_api_version,
            timeout_seconds=settings.whatsapp_timeout_seconds,
        )
        return cls(extractor, Catalog(settings.catalog), renderer, notifier, currency=settings.currency)

    def _reject(self, log: ContextAdapter, sender: str, code: str) -> ProcessResult:
        error = OrderError(code)
        outcome = OrderOutcome(error.value)
        reply = ERROR_MESSAGES[error]
        log.info("Order rejected", context={"outcome": outcome.value})
        self.notifier.send_message(sender, reply)
        return ProcessResult(outcome=outcome, reply=reply)

    def process_message(self, sender: str, text: str) -> ProcessResult:
        """
        Process a single inbound message and reply to its sender.

        Business failures are answered with a message and returned as outcomes.
        DeliveryError from rendering or sending propagates to the caller.
        """
        log = logger.bind(sender=mask_recipient(sender))
        log.info("Message received", context={"text": (text or "")[:200]})

        priced = self.extractor.extract(text).and_then(lambda candidate: price_order(candidate, self.catalog))
        if not priced.ok:
            return self._reject(log, sender, priced.error_code)

        order = priced.value
        invoice = self.renderer.render(order)

        reply = format_confirmation(order, self.currency)
        self.notifier.send_message(sender, reply)
        self.notifier.send_document(sender, invoice.url, caption=INVOICE_CAPTION, filename=invoice.file_name)

        log.info(
            "Order priced",
            context={
                "product": order.product,
                "quantity": str(order.quantity),
                "total": str(order.total),
                "invoice": invoice.file_name,
            },
        )
        return ProcessResult(outcome=OrderOutcome.PRICED, reply=reply, order=order, invoice=invoice)
