"""Append-only ledger of completed sales."""

from __future__ import annotations

import logging
from typing import List

from medstore import config
from medstore.models.sale import Sale
from medstore.storage import KeyValueStore

logger = logging.getLogger(__name__)


class LedgerRepository:
    def __init__(self, store: KeyValueStore, key: str | None = None) -> None:
        self.store = store
        self.key = key or config.SALES_KEY

    def _raw(self) -> list:
        raw = self.store.get(self.key, [])
        if not isinstance(raw, list):
            logger.warning("Ledger under %s is not a list, ignoring", self.key)
            return []
        return raw

    def list(self) -> List[Sale]:
        sales: List[Sale] = []
        for entry in self._raw():
            try:
                sales.append(Sale.from_dict(entry))
            except (AttributeError, TypeError, ValueError):
                logger.warning("Skipping malformed sale entry: %r", entry)
        return sales

    def append(self, sale: Sale) -> None:
        # Stored entries stay verbatim, unreadable ones included.
        raw = self._raw()
        raw.append(sale.to_dict())
        self.store.set(self.key, raw)
