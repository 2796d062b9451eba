"""CSV and JSON export of the catalog and the sales ledger."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Sequence, Tuple

from medstore import config
from medstore.models.medicine import Medicine
from medstore.models.sale import Sale


def _escape(value: Any) -> str:
    text = "" if value is None else str(value)
    return text.replace('"', '""').replace("\r\n", " ").replace("\n", " ").replace("\r", " ")


def to_delimited_text(rows: Sequence[Mapping[str, Any]]) -> str:
    """Comma-separated text with a header row taken from the first row's keys."""
    if not rows:
        return ""
    headers = list(rows[0].keys())
    lines = [",".join(headers)]
    for row in rows:
        lines.append(",".join(f'"{_escape(row.get(h))}"' for h in headers))
    return "\n".join(lines)


def to_structured_text(value: Any) -> str:
    """Indented JSON."""
    return json.dumps(value, indent=2, ensure_ascii=False)


def _iso_from_ms(ms: int) -> str:
    stamp = datetime.fromtimestamp(ms / 1000, tz=timezone.utc)
    return stamp.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def medicine_rows(medicines: Iterable[Medicine]) -> List[Dict[str, Any]]:
    rows = []
    for m in medicines:
        row = m.to_dict()
        row["createdAt"] = _iso_from_ms(m.created_at)
        rows.append(row)
    return rows


def sale_rows(sales: Iterable[Sale]) -> List[Dict[str, Any]]:
    """One row per sold item, repeating the sale id, time and bill total."""
    rows = []
    for sale in sales:
        for item in sale.items:
            rows.append(
                {
                    "saleId": sale.id,
                    "ts": _iso_from_ms(sale.timestamp),
                    "item": item.name,
                    "qty": item.quantity,
                    "price": item.unit_price,
                    "total": item.line_total,
                    "billTotal": sale.total,
                }
            )
    return rows


def export_medicines_csv(medicines: Iterable[Medicine]) -> Tuple[str, str]:
    return config.MEDICINES_CSV, to_delimited_text(medicine_rows(medicines))


def export_medicines_json(medicines: Iterable[Medicine]) -> Tuple[str, str]:
    return config.MEDICINES_JSON, to_structured_text([m.to_dict() for m in medicines])


def export_sales_csv(sales: Iterable[Sale]) -> Tuple[str, str]:
    return config.SALES_CSV, to_delimited_text(sale_rows(sales))


def export_sales_json(sales: Iterable[Sale]) -> Tuple[str, str]:
    return config.SALES_JSON, to_structured_text([s.to_dict() for s in sales])


def write_export(directory: Path | str, filename: str, text: str) -> Path:
    """Write an export file into directory and return its path."""
    target = Path(directory) / filename
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(text, encoding="utf-8")
    return target
