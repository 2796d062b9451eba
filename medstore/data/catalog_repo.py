"""Catalog repository for the medicine collection."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, List, Optional

from medstore import config
from medstore.errors import NotFoundError, ValidationError
from medstore.models.medicine import Medicine, new_id, now_ms
from medstore.storage import KeyValueStore

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("name", "category", "batch", "expiry", "supplier", "price", "mrp", "stock")


def validate_fields(fields: Dict[str, Any]) -> None:
    """Raise ValidationError for an empty name, a negative number or a bad expiry."""
    if not str(fields.get("name") or "").strip():
        raise ValidationError("Name is required.")
    for key in ("price", "mrp", "stock"):
        value = fields.get(key)
        if value is None:
            continue
        if not isinstance(value, (int, float)):
            raise ValidationError(f"{key.capitalize()} must be a number.")
        if value < 0:
            raise ValidationError(f"{key.capitalize()} cannot be negative.")
    expiry = str(fields.get("expiry") or "")
    if expiry:
        try:
            date.fromisoformat(expiry)
        except ValueError:
            raise ValidationError("Expiry must be a date in YYYY-MM-DD format.") from None


def _clean(fields: Dict[str, Any]) -> Dict[str, Any]:
    unknown = set(fields) - set(EDITABLE_FIELDS)
    if unknown:
        raise ValidationError(f"Unknown fields: {', '.join(sorted(unknown))}")
    cleaned = dict(fields)
    for key in ("name", "category", "batch", "expiry", "supplier"):
        if key in cleaned:
            cleaned[key] = str(cleaned[key] or "").strip()
    if "stock" in cleaned and isinstance(cleaned["stock"], float):
        if not cleaned["stock"].is_integer():
            raise ValidationError("Stock must be a whole number.")
        cleaned["stock"] = int(cleaned["stock"])
    return cleaned


class CatalogRepository:
    """CRUD over medicines stored under a single key."""

    def __init__(self, store: KeyValueStore, key: str | None = None) -> None:
        self.store = store
        self.key = key or config.MEDICINES_KEY

    def list(self) -> List[Medicine]:
        """Return all medicines in stored order."""
        raw = self.store.get(self.key, [])
        if not isinstance(raw, list):
            logger.warning("Catalog under %s is not a list, ignoring", self.key)
            return []
        medicines: List[Medicine] = []
        for entry in raw:
            if not isinstance(entry, dict) or not entry.get("id"):
                logger.warning("Skipping malformed catalog entry: %r", entry)
                continue
            medicines.append(Medicine.from_dict(entry))
        return medicines

    def get(self, medicine_id: str) -> Optional[Medicine]:
        """Return the medicine or None if not found."""
        for medicine in self.list():
            if medicine.id == medicine_id:
                return medicine
        return None

    def save_all(self, medicines: List[Medicine]) -> None:
        self.store.set(self.key, [m.to_dict() for m in medicines])

    def add(self, medicine: Medicine) -> None:
        medicines = self.list()
        medicines.append(medicine)
        self.save_all(medicines)

    def update(self, medicine: Medicine) -> None:
        """Replace the entry with the same id; keeps its original createdAt."""
        medicines = self.list()
        for idx, existing in enumerate(medicines):
            if existing.id == medicine.id:
                medicine.created_at = existing.created_at
                medicines[idx] = medicine
                self.save_all(medicines)
                return

    def delete(self, medicine_id: str) -> None:
        medicines = self.list()
        remaining = [m for m in medicines if m.id != medicine_id]
        if len(remaining) != len(medicines):
            self.save_all(remaining)
            logger.info("Deleted medicine %s", medicine_id)

    def create(self, **fields: Any) -> Medicine:
        """Validate add-form fields and append a new medicine with a fresh id."""
        return self.create_many([fields])[0]

    def create_many(self, rows: List[Dict[str, Any]]) -> List[Medicine]:
        """Validate every row, then append them all in one write.

        A single invalid row raises ValidationError and nothing is added.
        """
        cleaned_rows = []
        for fields in rows:
            cleaned = _clean(fields)
            validate_fields(cleaned)
            cleaned_rows.append(cleaned)

        medicines = self.list()
        taken = {m.id for m in medicines}
        created: List[Medicine] = []
        for cleaned in cleaned_rows:
            medicine_id = new_id()
            while medicine_id in taken:
                medicine_id = new_id()
            taken.add(medicine_id)
            created.append(Medicine(id=medicine_id, created_at=now_ms(), **cleaned))
        self.save_all(medicines + created)
        for medicine in created:
            logger.info("Added medicine %s (%s)", medicine.id, medicine.name)
        return created

    def edit(self, medicine_id: str, **fields: Any) -> Medicine:
        """Apply edit-form fields to an existing medicine."""
        existing = self.get(medicine_id)
        if existing is None:
            raise NotFoundError(medicine_id)
        merged = {key: getattr(existing, key) for key in EDITABLE_FIELDS}
        merged.update(_clean(fields))
        validate_fields(merged)
        medicine = Medicine(id=existing.id, created_at=existing.created_at, **merged)
        self.update(medicine)
        logger.info("Updated medicine %s (%s)", medicine.id, medicine.name)
        return medicine
