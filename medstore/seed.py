"""Sample catalog written on first run."""

from __future__ import annotations

import logging

from medstore import config
from medstore.models.medicine import Medicine
from medstore.storage import KeyValueStore

logger = logging.getLogger(__name__)


def sample_medicines():
    return [
        Medicine(
            name="Paracetamol 500mg",
            category="Tablet",
            batch="PARA-01",
            expiry="2026-03-31",
            supplier="ACME Pharma",
            price=18.5,
            mrp=25,
            stock=120,
        ),
        Medicine(
            name="Cough Syrup 100ml",
            category="Syrup",
            batch="CS-22A",
            expiry="2026-11-30",
            supplier="Wellness Labs",
            price=55,
            mrp=70,
            stock=60,
        ),
        Medicine(
            name="Vitamin C 1000mg",
            category="Tablet",
            batch="VC-1000",
            expiry="2027-01-15",
            supplier="NutriCare",
            price=3.2,
            mrp=5,
            stock=500,
        ),
    ]


def ensure_seed(store: KeyValueStore) -> bool:
    """Write sample data when the catalog is empty; returns True if seeded."""
    seeded = False
    medicines = store.get(config.MEDICINES_KEY, None)
    if not isinstance(medicines, list) or not medicines:
        store.set(config.MEDICINES_KEY, [m.to_dict() for m in sample_medicines()])
        logger.info("Seeded catalog with sample medicines")
        seeded = True
    if store.get(config.SALES_KEY, None) is None:
        store.set(config.SALES_KEY, [])
    return seeded
