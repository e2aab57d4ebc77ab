from orderbot.schemas.order import CandidateOrder, Invoice, PricedOrder
from orderbot.schemas.webhook import InboundMessage, WebhookResponse

__all__ = ["CandidateOrder", "PricedOrder", "Invoice", "InboundMessage", "WebhookResponse"]
