"""Dataclass representing a catalog medicine."""

from __future__ import annotations

import random
import string
import time
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, Optional

from medstore import config

_ID_ALPHABET = string.digits + string.ascii_lowercase


def new_id(length: int = 8) -> str:
    """Return a short random base-36 identifier."""
    return "".join(random.choices(_ID_ALPHABET, k=length))


def now_ms() -> int:
    return int(time.time() * 1000)


def to_float(value, default: float) -> float:
    if value in (None, ""):
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def to_int(value, default: int) -> int:
    if value in (None, ""):
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


@dataclass
class Medicine:
    name: str
    price: float = 0.0
    stock: int = 0
    category: str = ""
    batch: str = ""
    expiry: str = ""
    supplier: str = ""
    mrp: float = 0.0
    id: str = field(default_factory=new_id)
    created_at: int = field(default_factory=now_ms)

    @property
    def effective_expiry(self) -> str:
        return self.expiry or config.FAR_FUTURE_EXPIRY

    def is_expired(self, today: Optional[date] = None) -> bool:
        """True when the expiry date is strictly before today."""
        today = today or date.today()
        return self.effective_expiry < today.isoformat()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "batch": self.batch,
            "expiry": self.expiry,
            "supplier": self.supplier,
            "price": self.price,
            "mrp": self.mrp,
            "stock": self.stock,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Medicine":
        return cls(
            id=str(data.get("id") or ""),
            name=str(data.get("name") or ""),
            category=str(data.get("category") or ""),
            batch=str(data.get("batch") or ""),
            expiry=str(data.get("expiry") or ""),
            supplier=str(data.get("supplier") or ""),
            price=to_float(data.get("price"), default=0.0),
            mrp=to_float(data.get("mrp"), default=0.0),
            stock=to_int(data.get("stock"), default=0),
            created_at=to_int(data.get("createdAt"), default=now_ms()),
        )
