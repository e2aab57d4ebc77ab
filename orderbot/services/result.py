from dataclasses import dataclass
from enum import Enum
from typing import Callable, Generic, Optional, TypeVar

T = TypeVar("T")
U = TypeVar("U")


class OrderError(str, Enum):
    """Business outcomes that end an order without an invoice."""

    EXTRACTION_FAILED = "extraction_failed"
    PRODUCT_NOT_FOUND = "product_not_found"
    INVALID_QUANTITY = "invalid_quantity"


class DeliveryError(Exception):
    """Rendering the invoice or sending a reply failed."""


@dataclass(frozen=True)
class Result(Generic[T]):
    ok: bool
    value: Optional[T] = None
    error: Optional[str] = None
    error_code: Optional[str] = None

    @staticmethod
    def success(value: T) -> "Result[T]":
        return Result(ok=True, value=value)

    @staticmethod
    def failure(error: str, code: str = "unknown") -> "Result[T]":
        return Result(ok=False, error=error, error_code=code)

    def and_then(self, fn: Callable[[T], "Result[U]"]) -> "Result[U]":
        """Chain the next step on success; a failure passes through with its code."""
        if not self.ok:
            return Result(ok=False, error=self.error, error_code=self.error_code)
        return fn(self.value)
