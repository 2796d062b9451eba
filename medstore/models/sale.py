"""Cart line and sale ledger models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

from medstore import config
from medstore.models.medicine import new_id, now_ms


@dataclass
class CartLine:
    medicine_id: str
    name: str
    unit_price: float
    quantity: int

    @property
    def line_total(self) -> float:
        return self.unit_price * self.quantity


@dataclass(frozen=True)
class SaleItem:
    medicine_id: str
    name: str
    quantity: int
    unit_price: float
    line_total: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "medicineId": self.medicine_id,
            "name": self.name,
            "quantity": self.quantity,
            "unitPrice": self.unit_price,
            "lineTotal": self.line_total,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SaleItem":
        quantity = int(data.get("quantity", 0))
        unit_price = float(data.get("unitPrice", 0.0))
        return cls(
            medicine_id=str(data.get("medicineId", "")),
            name=str(data.get("name", "")),
            quantity=quantity,
            unit_price=unit_price,
            line_total=float(data.get("lineTotal", quantity * unit_price)),
        )


@dataclass(frozen=True)
class Sale:
    """Immutable ledger entry; total is fixed at commit time."""

    items: Tuple[SaleItem, ...]
    total: float
    id: str = field(default_factory=new_id)
    timestamp: int = field(default_factory=now_ms)

    @classmethod
    def from_lines(cls, lines: List[CartLine], timestamp: int | None = None) -> "Sale":
        items = tuple(
            SaleItem(
                medicine_id=line.medicine_id,
                name=line.name,
                quantity=line.quantity,
                unit_price=line.unit_price,
                line_total=line.line_total,
            )
            for line in lines
        )
        total = sum(item.line_total for item in items)
        if timestamp is None:
            return cls(items=items, total=total)
        return cls(items=items, total=total, timestamp=timestamp)

    @property
    def total_quantity(self) -> int:
        return sum(item.quantity for item in self.items)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "items": [item.to_dict() for item in self.items],
            "total": self.total,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Sale":
        return cls(
            id=str(data.get("id", "")),
            timestamp=int(data.get("timestamp", 0)),
            items=tuple(SaleItem.from_dict(item) for item in data.get("items", [])),
            total=float(data.get("total", 0.0)),
        )


def format_currency(amount: float) -> str:
    """Return amount with the store currency symbol and two decimals."""
    return f"{config.CURRENCY_SYMBOL}{amount:,.2f}"
