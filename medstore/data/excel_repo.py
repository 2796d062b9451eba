"""Excel workbook import for the medicine catalog."""

from __future__ import annotations

import logging
import zipfile
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Dict, List, Optional

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException
from openpyxl.worksheet.worksheet import Worksheet

from medstore import config
from medstore.data.catalog_repo import CatalogRepository
from medstore.models.medicine import to_float, to_int

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ["Name", "Price", "Stock"]


@dataclass
class ExcelColumnMap:
    """Column indexes for known fields; optional ones may be absent."""

    name: int
    price: int
    stock: int
    category: Optional[int] = None
    batch: Optional[int] = None
    expiry: Optional[int] = None
    supplier: Optional[int] = None
    mrp: Optional[int] = None


class ExcelCatalogImporter:
    """Reads medicines from an Excel sheet for bulk loading into the catalog."""

    def __init__(self, path: Path | str, sheet_name: Optional[str] = None) -> None:
        self.path = Path(path)
        self.sheet_name = sheet_name or config.EXCEL_SHEET_NAME
        if not self.path.exists():
            raise FileNotFoundError(f"Excel file not found: {self.path}")
        try:
            self._workbook = load_workbook(self.path, data_only=True)
        except (zipfile.BadZipFile, InvalidFileException, KeyError) as exc:
            raise ValueError(f"Not a readable Excel workbook: {self.path} ({exc})") from exc
        if self.sheet_name not in self._workbook.sheetnames:
            raise ValueError(f"Sheet '{self.sheet_name}' not found in Excel file.")
        self._sheet: Worksheet = self._workbook[self.sheet_name]
        self._columns = self._detect_columns()

    def _detect_columns(self) -> ExcelColumnMap:
        """Detect columns from header row; raises if required ones are missing."""
        headers: Dict[str, int] = {}
        for row in self._sheet.iter_rows(min_row=1, max_row=1, values_only=True):
            for idx, value in enumerate(row, start=1):
                if value is not None:
                    headers[str(value).strip()] = idx

        missing = [col for col in REQUIRED_COLUMNS if col not in headers]
        if missing:
            raise ValueError(f"Missing required columns in Excel: {', '.join(missing)}")

        return ExcelColumnMap(
            name=headers["Name"],
            price=headers["Price"],
            stock=headers["Stock"],
            category=headers.get("Category"),
            batch=headers.get("Batch"),
            expiry=headers.get("Expiry"),
            supplier=headers.get("Supplier"),
            mrp=headers.get("MRP"),
        )

    @staticmethod
    def _cell(row, index: Optional[int]):
        if index is None or index > len(row):
            return None
        return row[index - 1]

    def read_rows(self) -> List[dict]:
        """Return add-form fields for every named row."""
        rows: List[dict] = []
        cols = self._columns
        for row in self._sheet.iter_rows(min_row=2, values_only=True):
            name = self._cell(row, cols.name)
            if name in (None, ""):
                continue
            rows.append(
                {
                    "name": str(name),
                    "category": self._to_text(self._cell(row, cols.category)),
                    "batch": self._to_text(self._cell(row, cols.batch)),
                    "expiry": self._to_iso_date(self._cell(row, cols.expiry)),
                    "supplier": self._to_text(self._cell(row, cols.supplier)),
                    "price": to_float(self._cell(row, cols.price), default=0.0),
                    "mrp": to_float(self._cell(row, cols.mrp), default=0.0),
                    "stock": to_int(self._cell(row, cols.stock), default=0),
                }
            )
        return rows

    def import_into(self, catalog: CatalogRepository) -> int:
        """Add every row to the catalog, or none if any row is invalid; returns the count."""
        rows = self.read_rows()
        catalog.create_many(rows)
        logger.info("Imported %d medicine(s) from %s", len(rows), self.path)
        return len(rows)

    @staticmethod
    def _to_text(value) -> str:
        return "" if value is None else str(value).strip()

    @staticmethod
    def _to_iso_date(value) -> str:
        if value in (None, ""):
            return ""
        if isinstance(value, datetime):
            return value.date().isoformat()
        if isinstance(value, date):
            return value.isoformat()
        return str(value).strip()
