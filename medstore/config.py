"""Configuration constants for the Medical Store Manager."""

import os
from pathlib import Path

# JSON file standing in for browser local storage.
STORAGE_PATH: Path = Path(os.getenv("MEDSTORE_STORAGE_PATH", "data/localstorage.json"))

# Storage keys for the two persisted collections.
MEDICINES_KEY: str = "ms_medicines_v1"
SALES_KEY: str = "ms_sales_v1"

# Stock at or below this (and above zero) counts as low.
LOW_STOCK_THRESHOLD: int = 5

# Expiry used for medicines without one.
FAR_FUTURE_EXPIRY: str = "9999-12-31"

CURRENCY_SYMBOL: str = "₹"

# Sheet name inside workbooks used for catalog import.
EXCEL_SHEET_NAME: str = "Medicines"

# Window title.
STORE_HEADER: str = "Medical Store Manager"

LOG_LEVEL: str = os.getenv("MEDSTORE_LOG_LEVEL", "INFO")

MEDICINES_CSV: str = "medicines.csv"
MEDICINES_JSON: str = "medicines.json"
SALES_CSV: str = "sales.csv"
SALES_JSON: str = "sales.json"
