from orderbot.services.catalog import Catalog, CatalogEntry
from orderbot.services.order_extractor import OrderExtractor
from orderbot.services.order_service import OrderOutcome, OrderService, ProcessResult
from orderbot.services.pricing import parse_quantity, price_order
from orderbot.services.result import DeliveryError, OrderError, Result
