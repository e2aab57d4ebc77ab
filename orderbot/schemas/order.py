from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict


class CandidateOrder(BaseModel):
    """Order as extracted from free text. Nothing here is validated yet."""

    model_config = ConfigDict(frozen=True)

    product: str
    quantity: Any = None
    unit: str = ""


class PricedOrder(BaseModel):
    model_config = ConfigDict(frozen=True)

    product: str
    quantity: Decimal
    unit: str
    unit_price: Decimal
    total: Decimal


class Invoice(BaseModel):
    file_name: str
    path: str
    url: str
