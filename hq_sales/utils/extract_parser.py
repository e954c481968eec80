"""
Parser for the POS sales extract (single-sheet workbook exported by the store
billing system).

Each row is one bill line. Columns are a fixed contract with the export:
    Bill Date, STORE, Bill No, Net Amt, Qty                 (required)
    Sales Person No, Sales Person Name, Bill Time           (optional)

Row-level defects never fail the run:
  - a Bill Date that does not parse, or a blank STORE, excludes the row
  - numeric cells that are blank or non-numeric read as 0
Only an unreadable document, or a header missing a required column, raises.
"""

import io
import logging
import math
import re
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

import pandas as pd

logger = logging.getLogger(__name__)

COL_BILL_DATE = "Bill Date"
COL_STORE = "STORE"
COL_BILL_NO = "Bill No"
COL_NET_AMT = "Net Amt"
COL_QTY = "Qty"
COL_SALESMAN_NO = "Sales Person No"
COL_SALESMAN_NAME = "Sales Person Name"
COL_BILL_TIME = "Bill Time"

REQUIRED_COLUMNS = [COL_BILL_DATE, COL_STORE, COL_BILL_NO, COL_NET_AMT, COL_QTY]

# Excel serial day 0 (accounts for the 1900 leap-year bug)
_EXCEL_EPOCH = date(1899, 12, 30)
_SERIAL_RE = re.compile(r"^\d{5}(\.\d+)?$")

# Only empty cells are missing; pandas would otherwise read "NA", "NULL", "None" as NaN
_NA = {"keep_default_na": False, "na_values": [""]}


# =============================================================================
# Exceptions
# =============================================================================

class ExtractParseError(ValueError):
    """Raised when the extract cannot be opened as tabular data at all."""


class ColumnMismatchError(ValueError):
    """Raised when a required column is absent from the extract header."""

    def __init__(self, missing: list[str], found: list[str]):
        self.missing = missing
        self.found = found
        super().__init__(
            f"Missing required columns: {missing}. "
            f"Columns found in extract: {found}"
        )


# =============================================================================
# Records
# =============================================================================

@dataclass(frozen=True)
class RawSalesLine:
    sale_date: date
    store_code: str
    net_amount: Decimal
    quantity: Decimal
    bill_number: str
    salesman_no: Optional[str] = None
    salesman_name: Optional[str] = None
    bill_time: Optional[time] = None


@dataclass
class ParsedExtract:
    lines: list[RawSalesLine] = field(default_factory=list)
    rows_read: int = 0
    rows_skipped: int = 0
    has_salesman: bool = False


# =============================================================================
# Cell helpers
# =============================================================================

def _s(val: Any) -> str:
    # Only real nulls are blank; text such as "NA" or "NULL" is a value
    if val is None or (isinstance(val, float) and math.isnan(val)):
        return ""
    return str(val).strip()


def _d(val: Any) -> Decimal:
    """Numeric cell → Decimal. Blank, null or non-numeric → 0."""
    text = _s(val).replace(",", "").replace("₹", "")
    if not text:
        return Decimal(0)
    try:
        num = Decimal(text)
    except InvalidOperation:
        return Decimal(0)
    return num if num.is_finite() else Decimal(0)


def parse_bill_date(val: Any) -> Optional[date]:
    """Bill Date cell → date, or None when it cannot be read as a date."""
    if val is None:
        return None
    if isinstance(val, datetime):
        return val.date()
    if isinstance(val, date):
        return val
    text = _s(val)
    if not text:
        return None
    if _SERIAL_RE.match(text):
        return _EXCEL_EPOCH + timedelta(days=int(float(text)))
    parsed = pd.to_datetime(text, errors="coerce")
    if pd.isna(parsed):
        return None
    return parsed.date()


def parse_bill_time(val: Any) -> Optional[time]:
    if val is None:
        return None
    if isinstance(val, datetime):
        return val.time()
    if isinstance(val, time):
        return val
    text = _s(val)
    if not text:
        return None
    for fmt in ("%H:%M:%S", "%H:%M", "%I:%M %p", "%I:%M:%S %p"):
        try:
            return datetime.strptime(text, fmt).time()
        except ValueError:
            continue
    parsed = pd.to_datetime(text, errors="coerce")
    if pd.isna(parsed):
        return None
    return parsed.time()


# =============================================================================
# Document reading
# =============================================================================

def _read_frame(content: bytes, filename: str) -> pd.DataFrame:
    # Detect real format by magic bytes; exports are sometimes misnamed
    magic = content[:4]
    buf = io.BytesIO(content)
    if magic[:2] == b"PK":          # ZIP container → xlsx
        return pd.read_excel(buf, sheet_name=0, dtype=str, engine="openpyxl", **_NA)
    if magic[:2] == b"\xd0\xcf":    # BIFF container → legacy xls
        return pd.read_excel(buf, sheet_name=0, dtype=str, engine="xlrd", **_NA)
    if filename.lower().endswith((".xlsx", ".xls")):
        return pd.read_excel(buf, sheet_name=0, dtype=str, **_NA)
    for enc in ("utf-8-sig", "utf-8", "latin-1"):
        try:
            return pd.read_csv(io.BytesIO(content), dtype=str, encoding=enc, **_NA)
        except UnicodeDecodeError:
            continue
    raise ExtractParseError(f"Could not decode {filename}; tried utf-8-sig, utf-8, latin-1")


def _clean(df: pd.DataFrame) -> pd.DataFrame:
    df.columns = [str(c).strip() for c in df.columns]
    return df.astype(object).where(pd.notna(df), None)


def parse_sales_extract(content: bytes, filename: str = "extract.xlsx") -> ParsedExtract:
    """
    Parse the extract bytes into RawSalesLine records.

    Raises ExtractParseError if the document cannot be read as a table and
    ColumnMismatchError if the header lacks a required column.
    """
    if not content:
        raise ExtractParseError(f"{filename} is empty")
    try:
        df = _read_frame(content, filename)
    except ExtractParseError:
        raise
    except pd.errors.EmptyDataError:
        return ParsedExtract()
    except Exception as exc:
        raise ExtractParseError(f"Could not open {filename} as a spreadsheet: {exc}") from exc

    df = _clean(df)
    if df.empty and len(df.columns) == 0:
        return ParsedExtract()

    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise ColumnMismatchError(missing=missing, found=sorted(df.columns.tolist()))

    has_salesman = COL_SALESMAN_NO in df.columns
    has_time = COL_BILL_TIME in df.columns

    result = ParsedExtract(has_salesman=has_salesman)
    for row in df.to_dict("records"):
        result.rows_read += 1
        sale_date = parse_bill_date(row.get(COL_BILL_DATE))
        store_code = _s(row.get(COL_STORE))
        if sale_date is None or not store_code:
            result.rows_skipped += 1
            continue

        salesman_no = _s(row.get(COL_SALESMAN_NO)) if has_salesman else ""
        salesman_name = _s(row.get(COL_SALESMAN_NAME)) if has_salesman else ""
        result.lines.append(RawSalesLine(
            sale_date=sale_date,
            store_code=store_code,
            net_amount=_d(row.get(COL_NET_AMT)),
            quantity=_d(row.get(COL_QTY)),
            bill_number=_s(row.get(COL_BILL_NO)),
            salesman_no=salesman_no or None,
            salesman_name=salesman_name or None,
            bill_time=parse_bill_time(row.get(COL_BILL_TIME)) if has_time else None,
        ))

    if result.rows_skipped:
        logger.info(
            "Extract %s: %d of %d rows skipped (bad date or blank store)",
            filename, result.rows_skipped, result.rows_read,
        )
    return result
