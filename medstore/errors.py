"""Domain errors raised by the catalog, cart and storage layers."""

from __future__ import annotations


class MedStoreError(Exception):
    """Base class for errors shown to the user at the point of the action."""


class ValidationError(MedStoreError):
    """Bad user input: empty name, negative numbers, zero quantity."""


class NotFoundError(MedStoreError):
    """A referenced medicine id is not in the catalog."""

    def __init__(self, medicine_id: str) -> None:
        super().__init__(f"Medicine '{medicine_id}' not found.")
        self.medicine_id = medicine_id


class InsufficientStockError(MedStoreError):
    """Requested quantity exceeds the stock on hand."""

    def __init__(self, name: str, requested: int, available: int) -> None:
        super().__init__(
            f"Insufficient stock for '{name}'. "
            f"Available: {available}, requested: {requested}."
        )
        self.name = name
        self.requested = requested
        self.available = available


class EmptyCartError(MedStoreError):
    """Commit attempted on a cart with no lines."""

    def __init__(self) -> None:
        super().__init__("Bill is empty.")


class DeserializationError(MedStoreError):
    """A stored value could not be parsed."""

    def __init__(self, key: str, reason: str) -> None:
        super().__init__(f"Could not read '{key}': {reason}")
        self.key = key
        self.reason = reason
