"""
Catalog file formats: JSON backup/restore, CSV export/import, quotation CSV.

Restore and import are all-or-nothing: they either return a complete list of
validated items or raise CatalogImportError, and never touch the repository
themselves.
"""
import csv
import io
import json
import logging
import math
from datetime import datetime, timezone
from typing import List, Sequence, Union

import pandas as pd
from pydantic import ValidationError

from app.models.catalog_schema import CatalogItem, CatalogItemInput
from app.services.errors import CatalogImportError
from app.services.tender_engine import TenderQuotation

logger = logging.getLogger("smartrate-catalog")

CATALOG_CSV_COLUMNS = ["Item Name", "Unit", "Rate (₹)", "Scope of Work", "Source Reference", "Date Added"]

TENDER_CSV_COLUMNS = [
    "Tender Item", "Quantity", "Requested Scope", "Estimated Rate (₹)",
    "Quoted Rate (₹)", "Unit", "Total Quoted (₹)", "Matched Database Item",
    "Source", "Status",
]


def _to_text(raw: Union[bytes, str]) -> str:
    if isinstance(raw, bytes):
        try:
            return raw.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise CatalogImportError("File is not UTF-8 text") from e
    return raw


def _to_csv(df: pd.DataFrame) -> str:
    # Excel needs the BOM to pick up ₹ and m³
    return "\ufeff" + df.to_csv(index=False, quoting=csv.QUOTE_ALL, lineterminator="\r\n")


def backup_filename(prefix: str = "smartrate_backup", ext: str = "json") -> str:
    return f"{prefix}_{datetime.now(timezone.utc).date().isoformat()}.{ext}"


# ── JSON backup ──────────────────────────────────────────────────────────────

def export_json(items: Sequence[CatalogItem]) -> str:
    return json.dumps([i.to_store() for i in items], ensure_ascii=False, indent=2)


def parse_backup(raw: Union[bytes, str]) -> List[CatalogItem]:
    """
    Validate a JSON backup. Only a JSON array of catalog objects is accepted;
    entries without id/timestamp get fresh ones.
    """
    try:
        data = json.loads(_to_text(raw))
    except json.JSONDecodeError as e:
        raise CatalogImportError(f"Invalid backup file: {e.msg}") from e

    if not isinstance(data, list):
        raise CatalogImportError(f"Invalid backup file: expected a JSON array, got {type(data).__name__}")

    items: List[CatalogItem] = []
    for idx, row in enumerate(data):
        try:
            items.append(CatalogItem.model_validate(row))
        except ValidationError as e:
            raise CatalogImportError(f"Invalid backup file: entry {idx} is not a catalog item ({e.error_count()} errors)") from e

    ids = [i.id for i in items]
    if len(set(ids)) != len(ids):
        raise CatalogImportError("Invalid backup file: duplicate item ids")
    return items


# ── CSV ──────────────────────────────────────────────────────────────────────

def export_csv(items: Sequence[CatalogItem]) -> str:
    rows = [
        [
            i.name,
            i.unit,
            i.rate,
            i.scope_of_work,
            i.source,
            datetime.fromtimestamp(i.timestamp / 1000, tz=timezone.utc).date().isoformat(),
        ]
        for i in items
    ]
    return _to_csv(pd.DataFrame(rows, columns=CATALOG_CSV_COLUMNS))


def parse_csv(raw: Union[bytes, str]) -> List[CatalogItemInput]:
    """Read a catalog CSV (export column layout; Date Added is ignored)."""
    text = _to_text(raw)
    try:
        df = pd.read_csv(io.StringIO(text), dtype=str, keep_default_na=False)
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise CatalogImportError(f"Invalid CSV file: {e}") from e

    df.columns = [c.strip() for c in df.columns]
    missing = [c for c in CATALOG_CSV_COLUMNS[:5] if c not in df.columns]
    if missing:
        raise CatalogImportError(f"Invalid CSV file: missing columns {', '.join(missing)}")

    items: List[CatalogItemInput] = []
    for idx, row in df.iterrows():
        line_no = int(idx) + 2  # header is line 1
        try:
            rate = float(str(row["Rate (₹)"]).replace(",", "").strip())
        except ValueError as e:
            raise CatalogImportError(f"Invalid CSV file: line {line_no} has a non-numeric rate") from e
        if not math.isfinite(rate):
            raise CatalogImportError(f"Invalid CSV file: line {line_no} has a non-finite rate")
        try:
            items.append(CatalogItemInput(
                name=row["Item Name"],
                unit=row["Unit"],
                rate=rate,
                scope_of_work=row["Scope of Work"],
                source=row["Source Reference"],
            ))
        except ValidationError as e:
            raise CatalogImportError(f"Invalid CSV file: line {line_no} is not a valid item") from e

    logger.info(f"Parsed {len(items)} items from CSV")
    return items


def export_tender_csv(quotation: TenderQuotation) -> str:
    rows = []
    for i in quotation.items:
        m = i.matched_rate
        rows.append([
            i.name,
            i.quantity,
            i.requested_scope,
            i.estimated_rate if i.estimated_rate is not None else "N/A",
            m.rate if m is not None else "N/A",
            m.unit if m is not None else "N/A",
            f"{i.total_quoted:.2f}",
            m.name if m is not None else "N/A",
            m.source if m is not None else "",
            i.status.upper(),
        ])
    return _to_csv(pd.DataFrame(rows, columns=TENDER_CSV_COLUMNS))
