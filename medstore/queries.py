"""Read-only views over the catalog and the sales ledger."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Iterable, List, Optional

from medstore import config
from medstore.models.medicine import Medicine
from medstore.models.sale import Sale


class StockState(str, Enum):
    ANY = ""
    IN_STOCK = "in"
    LOW = "low"
    OUT = "out"
    EXPIRED = "expired"


@dataclass(frozen=True)
class SalesSummary:
    revenue: float
    quantity: int
    count: int


@dataclass(frozen=True)
class DashboardCounts:
    total: int
    low: int
    out: int
    expired: int


def is_low_stock(medicine: Medicine) -> bool:
    return 0 < medicine.stock <= config.LOW_STOCK_THRESHOLD


def _matches_stock_state(medicine: Medicine, state: StockState, today: date) -> bool:
    if state is StockState.IN_STOCK:
        return medicine.stock > 0
    if state is StockState.LOW:
        return is_low_stock(medicine)
    if state is StockState.OUT:
        return medicine.stock <= 0
    if state is StockState.EXPIRED:
        return medicine.is_expired(today)
    return True


def filter_medicines(
    medicines: Iterable[Medicine],
    search: str = "",
    category: str = "",
    stock_state: StockState = StockState.ANY,
    today: Optional[date] = None,
) -> List[Medicine]:
    """Return medicines matching every given criterion, in input order."""
    today = today or date.today()
    search = search.strip().lower()
    category = category.strip().lower()
    state = StockState(stock_state)

    result: List[Medicine] = []
    for medicine in medicines:
        if search and not any(
            search in value.lower()
            for value in (medicine.name, medicine.batch, medicine.supplier)
        ):
            continue
        if category and category not in medicine.category.lower():
            continue
        if not _matches_stock_state(medicine, state, today):
            continue
        result.append(medicine)
    return result


def sort_by_name(medicines: Iterable[Medicine]) -> List[Medicine]:
    return sorted(medicines, key=lambda m: m.name.lower())


def sale_date(sale: Sale) -> date:
    """Local calendar date of the sale timestamp."""
    return datetime.fromtimestamp(sale.timestamp / 1000).date()


def filter_sales(
    sales: Iterable[Sale],
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    search: str = "",
) -> List[Sale]:
    """Sales within the inclusive date range containing search in an item name, newest first."""
    search = search.strip().lower()
    result: List[Sale] = []
    for sale in sales:
        day = sale_date(sale)
        if date_from and day < date_from:
            continue
        if date_to and day > date_to:
            continue
        if search and not any(search in item.name.lower() for item in sale.items):
            continue
        result.append(sale)
    result.sort(key=lambda s: s.timestamp, reverse=True)
    return result


def summarize_sales(sales: Iterable[Sale]) -> SalesSummary:
    sales = list(sales)
    return SalesSummary(
        revenue=sum(sale.total for sale in sales),
        quantity=sum(sale.total_quantity for sale in sales),
        count=len(sales),
    )


def dashboard_counts(medicines: Iterable[Medicine], today: Optional[date] = None) -> DashboardCounts:
    today = today or date.today()
    medicines = list(medicines)
    return DashboardCounts(
        total=len(medicines),
        low=sum(1 for m in medicines if is_low_stock(m)),
        out=sum(1 for m in medicines if m.stock <= 0),
        expired=sum(1 for m in medicines if m.is_expired(today)),
    )
