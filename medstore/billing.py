"""Cart and sale commit logic for the billing counter."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from medstore.data.catalog_repo import CatalogRepository
from medstore.data.ledger_repo import LedgerRepository
from medstore.errors import (
    EmptyCartError,
    InsufficientStockError,
    NotFoundError,
    ValidationError,
)
from medstore.models.sale import CartLine, Sale

logger = logging.getLogger(__name__)


@dataclass
class Cart:
    lines: List[CartLine] = field(default_factory=list)

    def find(self, medicine_id: str) -> Optional[CartLine]:
        for line in self.lines:
            if line.medicine_id == medicine_id:
                return line
        return None

    def add_line(self, line: CartLine) -> None:
        """Add or merge a line by medicine id."""
        existing = self.find(line.medicine_id)
        if existing:
            existing.quantity += line.quantity
            return
        self.lines.append(line)

    def remove(self, medicine_id: str) -> None:
        self.lines = [line for line in self.lines if line.medicine_id != medicine_id]

    def total(self) -> float:
        return sum(line.line_total for line in self.lines)

    def total_quantity(self) -> int:
        return sum(line.quantity for line in self.lines)

    def clear(self) -> None:
        self.lines = []


class SaleSession:
    """One billing session: owns a cart and commits it against the catalog.

    Stock is checked when a line is added and again at commit, because the
    catalog may change while the cart is open. Quantities are not reserved
    between the two checks.

    Commit writes the catalog first and the ledger second. If the process
    dies between the two writes, stock is deducted with no sale recorded.
    """

    def __init__(self, catalog: CatalogRepository, ledger: LedgerRepository) -> None:
        self.catalog = catalog
        self.ledger = ledger
        self.cart = Cart()

    @property
    def lines(self) -> List[CartLine]:
        return list(self.cart.lines)

    @property
    def is_empty(self) -> bool:
        return not self.cart.lines

    def add_line(self, medicine_id: str, quantity: int) -> CartLine:
        """Add quantity of a medicine to the cart, snapshotting its name and price."""
        if quantity < 1:
            raise ValidationError("Quantity must be at least 1.")
        medicine = self.catalog.get(medicine_id)
        if medicine is None:
            raise NotFoundError(medicine_id)
        if quantity > medicine.stock:
            logger.info(
                "Rejected %s x%d, only %d in stock", medicine.name, quantity, medicine.stock
            )
            raise InsufficientStockError(medicine.name, quantity, medicine.stock)

        self.cart.add_line(
            CartLine(
                medicine_id=medicine.id,
                name=medicine.name,
                unit_price=medicine.price,
                quantity=quantity,
            )
        )
        return self.cart.find(medicine.id)

    def remove_line(self, medicine_id: str) -> None:
        self.cart.remove(medicine_id)

    def total(self) -> float:
        return self.cart.total()

    def total_quantity(self) -> int:
        return self.cart.total_quantity()

    def clear(self) -> None:
        self.cart.clear()

    def commit(self) -> Sale:
        """Deduct stock for every line, record the sale and empty the cart."""
        if self.is_empty:
            raise EmptyCartError()

        medicines = self.catalog.list()
        by_id = {m.id: m for m in medicines}
        for line in self.cart.lines:
            medicine = by_id.get(line.medicine_id)
            available = medicine.stock if medicine else 0
            if medicine is None or line.quantity > available:
                logger.info(
                    "Commit blocked on %s x%d, %d available", line.name, line.quantity, available
                )
                raise InsufficientStockError(line.name, line.quantity, available)

        for line in self.cart.lines:
            by_id[line.medicine_id].stock -= line.quantity
        self.catalog.save_all(medicines)

        sale = Sale.from_lines(self.cart.lines)
        self.ledger.append(sale)
        logger.info(
            "Committed sale %s: %d line(s), total %.2f", sale.id, len(sale.items), sale.total
        )
        self.cart.clear()
        return sale
