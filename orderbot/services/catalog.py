from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from types import MappingProxyType
from typing import Mapping, Optional


@dataclass(frozen=True)
class CatalogEntry:
    name: str
    unit_price: Decimal


class Catalog:
    """Read-only product price list keyed by case-insensitive name."""

    def __init__(self, prices: Mapping[str, object]):
        entries: dict[str, CatalogEntry] = {}
        for raw_name, raw_price in prices.items():
            name = (raw_name or "").strip()
            if not name:
                raise ValueError("Catalog product name must not be empty")

            key = name.casefold()
            if key in entries:
                raise ValueError(f"Duplicate catalog product: {name}")

            try:
                price = Decimal(str(raw_price))
            except (InvalidOperation, ValueError):
                raise ValueError(f"Invalid price for {name}: {raw_price!r}")
            if not price.is_finite() or price <= 0:
                raise ValueError(f"Price for {name} must be positive, got {raw_price!r}")

            entries[key] = CatalogEntry(name=name, unit_price=price)

        self._entries = MappingProxyType(entries)

    def lookup(self, name: Optional[str]) -> Optional[CatalogEntry]:
        if not isinstance(name, str):
            return None
        return self._entries.get(name.strip().casefold())

    def __len__(self) -> int:
        return len(self._entries)
