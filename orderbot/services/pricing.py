from decimal import Decimal, DecimalException, Inexact, InvalidOperation, Overflow, localcontext
from typing import Any, Optional

from orderbot.logging_config import get_logger
from orderbot.schemas.order import CandidateOrder, PricedOrder
from orderbot.services.catalog import Catalog
from orderbot.services.result import OrderError, Result

logger = get_logger("pricing")


def parse_quantity(value: Any) -> Optional[Decimal]:
    """Return value as a finite positive Decimal, or None if it is not one."""
    if isinstance(value, bool) or value is None:
        return None

    if isinstance(value, Decimal):
        quantity = value
    elif isinstance(value, (int, float)):
        # str() keeps 1.5 as Decimal("1.5") instead of its binary expansion
        quantity = Decimal(str(value))
    elif isinstance(value, str):
        try:
            quantity = Decimal(value.strip())
        except InvalidOperation:
            return None
    else:
        return None

    if not quantity.is_finite() or quantity <= 0:
        return None
    return quantity


def _exact_total(unit_price: Decimal, quantity: Decimal) -> Decimal:
    """Multiply without rounding; raises DecimalException if the exact product is unrepresentable."""
    with localcontext() as ctx:
        # an exact product never needs more digits than both factors together
        ctx.prec = len(unit_price.as_tuple().digits) + len(quantity.as_tuple().digits)
        ctx.traps[Inexact] = True
        ctx.traps[Overflow] = True
        return unit_price * quantity


def price_order(candidate: CandidateOrder, catalog: Catalog) -> Result[PricedOrder]:
    """Validate a candidate order against the catalog and compute its total."""
    entry = catalog.lookup(candidate.product)
    if entry is None:
        logger.info("Product not found", extra={"context": {"product": candidate.product}})
        return Result.failure(f"Product not found: {candidate.product}", OrderError.PRODUCT_NOT_FOUND)

    quantity = parse_quantity(candidate.quantity)
    if quantity is None:
        logger.info("Invalid quantity", extra={"context": {"quantity": repr(candidate.quantity)}})
        return Result.failure(f"Invalid quantity: {candidate.quantity!r}", OrderError.INVALID_QUANTITY)

    try:
        total = _exact_total(entry.unit_price, quantity)
    except DecimalException:
        logger.info("Quantity out of range", extra={"context": {"quantity": str(quantity)}})
        return Result.failure(f"Quantity out of range: {quantity}", OrderError.INVALID_QUANTITY)

    priced = PricedOrder(
        product=entry.name,
        quantity=quantity,
        unit=candidate.unit,
        unit_price=entry.unit_price,
        total=total,
    )
    return Result.success(priced)
