"""
Daily rollups over parsed extract lines, plus the achievement-percentage rule
shared by every read-model figure.
"""
from collections import Counter, defaultdict
from dataclasses import dataclass
from datetime import date, time
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional

from .extract_parser import RawSalesLine


@dataclass(frozen=True)
class StoreRollup:
    sale_date: date
    store_code: str
    net_sales: Decimal
    qty: Decimal
    bill_count: int

    def as_row(self) -> dict:
        return {
            "sale_date": self.sale_date,
            "store_code": self.store_code,
            "net_sales": self.net_sales,
            "qty": self.qty,
            "bill_count": self.bill_count,
        }


@dataclass(frozen=True)
class SalesmanRollup:
    sale_date: date
    store_code: str
    salesman_no: str
    salesman_name: Optional[str]
    net_sales: Decimal
    qty: Decimal
    bill_count: int

    def as_row(self) -> dict:
        return {
            "sale_date": self.sale_date,
            "store_code": self.store_code,
            "salesman_no": self.salesman_no,
            "salesman_name": self.salesman_name,
            "net_sales": self.net_sales,
            "qty": self.qty,
            "bill_count": self.bill_count,
        }


class _Bucket:
    __slots__ = ("net_sales", "qty", "bills", "names")

    def __init__(self):
        self.net_sales = Decimal(0)
        self.qty = Decimal(0)
        self.bills: set[str] = set()
        self.names: Counter = Counter()

    def add(self, line: RawSalesLine) -> None:
        self.net_sales += line.net_amount
        self.qty += line.quantity
        # Lines without a bill number count toward sums only
        if line.bill_number:
            self.bills.add(line.bill_number)


def aggregate_store_rollups(lines: Iterable[RawSalesLine]) -> list[StoreRollup]:
    """One rollup per (sale_date, store_code); output sorted by key."""
    buckets: dict[tuple, _Bucket] = defaultdict(_Bucket)
    for line in lines:
        buckets[(line.sale_date, line.store_code)].add(line)

    return [
        StoreRollup(
            sale_date=sale_date,
            store_code=store_code,
            net_sales=b.net_sales,
            qty=b.qty,
            bill_count=len(b.bills),
        )
        for (sale_date, store_code), b in sorted(buckets.items())
    ]


def _pick_name(names: Counter) -> Optional[str]:
    # Most frequent spelling wins; ties go to the alphabetically first
    if not names:
        return None
    return sorted(names.items(), key=lambda kv: (-kv[1], kv[0]))[0][0]


def aggregate_salesman_rollups(lines: Iterable[RawSalesLine]) -> list[SalesmanRollup]:
    """One rollup per (sale_date, store_code, salesman_no); lines without a salesman are ignored."""
    buckets: dict[tuple, _Bucket] = defaultdict(_Bucket)
    for line in lines:
        if not line.salesman_no:
            continue
        bucket = buckets[(line.sale_date, line.store_code, line.salesman_no)]
        bucket.add(line)
        if line.salesman_name:
            bucket.names[line.salesman_name] += 1

    return [
        SalesmanRollup(
            sale_date=sale_date,
            store_code=store_code,
            salesman_no=salesman_no,
            salesman_name=_pick_name(b.names),
            net_sales=b.net_sales,
            qty=b.qty,
            bill_count=len(b.bills),
        )
        for (sale_date, store_code, salesman_no), b in sorted(buckets.items())
    ]


def latest_bill_times(lines: Iterable[RawSalesLine]) -> dict[date, time]:
    """Latest bill time seen per sale date (dates with no bill time are omitted)."""
    latest: dict[date, time] = {}
    for line in lines:
        if line.bill_time is None:
            continue
        current = latest.get(line.sale_date)
        if current is None or line.bill_time > current:
            latest[line.sale_date] = line.bill_time
    return latest


def achievement_pct(sales, target) -> int:
    """
    round(sales / target × 100), half away from zero; 0 when target <= 0.
    Computed from the full-precision amounts.
    """
    target = Decimal(str(target or 0))
    if target <= 0:
        return 0
    pct = Decimal(str(sales or 0)) / target * 100
    return int(pct.quantize(Decimal(1), rounding=ROUND_HALF_UP))
