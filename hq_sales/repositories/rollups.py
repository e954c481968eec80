"""
Read/upsert access to the daily rollup tables.
"""
from datetime import date, datetime, time, timezone
from decimal import Decimal
from typing import Iterable, Optional
from zoneinfo import ZoneInfo

from sqlalchemy import func
from sqlalchemy.orm import Session

from ..config import settings
from ..database import upsert
from ..models.sales import DailySalesMeta, DailySalesmanSales, DailyStoreSales
from ..utils.aggregation import SalesmanRollup, StoreRollup


def _dec(val) -> Decimal:
    return Decimal(str(val)) if val is not None else Decimal(0)


class RollupRepository:
    def __init__(self, db: Session):
        self.db = db

    # ── reads ────────────────────────────────────────────────────────────────

    def latest_sale_date(self, store_codes: list[str]) -> Optional[date]:
        if not store_codes:
            return None
        return (
            self.db.query(func.max(DailyStoreSales.sale_date))
            .filter(DailyStoreSales.store_code.in_(store_codes))
            .scalar()
        )

    def store_rollups(self, sale_date: date, store_codes: list[str]) -> list[StoreRollup]:
        if not store_codes:
            return []
        rows = (
            self.db.query(DailyStoreSales)
            .filter(
                DailyStoreSales.sale_date == sale_date,
                DailyStoreSales.store_code.in_(store_codes),
            )
            .order_by(DailyStoreSales.store_code)
            .all()
        )
        return [
            StoreRollup(
                sale_date=r.sale_date,
                store_code=r.store_code,
                net_sales=_dec(r.net_sales),
                qty=_dec(r.qty),
                bill_count=r.bill_count or 0,
            )
            for r in rows
        ]

    def salesman_rollups(self, sale_date: date, store_code: str) -> list[SalesmanRollup]:
        rows = (
            self.db.query(DailySalesmanSales)
            .filter(
                DailySalesmanSales.sale_date == sale_date,
                DailySalesmanSales.store_code == store_code,
            )
            .order_by(DailySalesmanSales.net_sales.desc(), DailySalesmanSales.salesman_no)
            .all()
        )
        return [
            SalesmanRollup(
                sale_date=r.sale_date,
                store_code=r.store_code,
                salesman_no=r.salesman_no,
                salesman_name=r.salesman_name,
                net_sales=_dec(r.net_sales),
                qty=_dec(r.qty),
                bill_count=r.bill_count or 0,
            )
            for r in rows
        ]

    def salesmen_for_store(self, store_code: str) -> list[tuple[str, Optional[str]]]:
        """(salesman_no, latest known name) for every salesman seen at the store."""
        rows = (
            self.db.query(
                DailySalesmanSales.salesman_no,
                DailySalesmanSales.salesman_name,
            )
            .filter(DailySalesmanSales.store_code == store_code)
            .order_by(DailySalesmanSales.sale_date)
            .all()
        )
        names: dict[str, Optional[str]] = {}
        for no, name in rows:
            if name or no not in names:
                names[no] = name
        return list(names.items())

    def sales_meta(self, sale_date: date) -> Optional[tuple[Optional[time], Optional[datetime]]]:
        row = self.db.get(DailySalesMeta, sale_date)
        if row is None:
            return None
        return row.sales_till, row.sales_till_ts

    # ── writes (caller commits) ──────────────────────────────────────────────

    def upsert_store_rollups(self, rollups: Iterable[StoreRollup], updated_at: datetime) -> int:
        rows = [{**r.as_row(), "updated_at": updated_at} for r in rollups]
        return upsert(
            self.db, DailyStoreSales, rows,
            conflict_cols=["sale_date", "store_code"],
            update_cols=["net_sales", "qty", "bill_count", "updated_at"],
        )

    def upsert_salesman_rollups(self, rollups: Iterable[SalesmanRollup], updated_at: datetime) -> int:
        rows = [{**r.as_row(), "updated_at": updated_at} for r in rollups]
        return upsert(
            self.db, DailySalesmanSales, rows,
            conflict_cols=["sale_date", "store_code", "salesman_no"],
            update_cols=["salesman_name", "net_sales", "qty", "bill_count", "updated_at"],
        )

    def upsert_sales_meta(self, bill_times: dict[date, time], updated_at: datetime) -> int:
        """sales_till_ts is stored as naive UTC; sales_till as business-local time of day."""
        tz = ZoneInfo(settings.business_timezone)
        rows = [
            {
                "sale_date": d,
                "sales_till": t,
                "sales_till_ts": (
                    datetime.combine(d, t, tzinfo=tz)
                    .astimezone(timezone.utc)
                    .replace(tzinfo=None)
                ),
                "updated_at": updated_at,
            }
            for d, t in sorted(bill_times.items())
        ]
        return upsert(
            self.db, DailySalesMeta, rows,
            conflict_cols=["sale_date"],
            update_cols=["sales_till", "sales_till_ts", "updated_at"],
        )

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()
