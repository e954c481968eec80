"""
Read/upsert access to store, salesman and special targets.
"""
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from ..database import upsert
from ..models.targets import DailySalesmanTarget, DailyStoreTarget, SpecialTarget


def _stamped(rows: list[dict], updated_at: Optional[datetime]) -> list[dict]:
    # onupdate hooks do not fire for ON CONFLICT DO UPDATE
    stamp = updated_at or datetime.now(timezone.utc).replace(tzinfo=None)
    return [{**r, "updated_at": stamp} for r in rows]


class TargetRepository:
    def __init__(self, db: Session):
        self.db = db

    def store_targets(self, target_date: date, store_codes: list[str]) -> dict[str, Decimal]:
        if not store_codes:
            return {}
        rows = (
            self.db.query(DailyStoreTarget.store_code, DailyStoreTarget.target_amount)
            .filter(
                DailyStoreTarget.target_date == target_date,
                DailyStoreTarget.store_code.in_(store_codes),
            )
            .all()
        )
        return {code: Decimal(str(amount or 0)) for code, amount in rows}

    def salesman_targets(self, target_date: date, store_code: str) -> dict[str, Decimal]:
        rows = (
            self.db.query(DailySalesmanTarget.salesman_no, DailySalesmanTarget.target_amount)
            .filter(
                DailySalesmanTarget.target_date == target_date,
                DailySalesmanTarget.store_code == store_code,
            )
            .all()
        )
        return {str(no): Decimal(str(amount or 0)) for no, amount in rows}

    def special_targets(self, active_on: Optional[date] = None, store_code: Optional[str] = None) -> list[SpecialTarget]:
        q = self.db.query(SpecialTarget)
        if active_on:
            q = q.filter(SpecialTarget.start_date <= active_on, SpecialTarget.end_date >= active_on)
        if store_code:
            # chain-wide targets apply to every store
            q = q.filter(or_(SpecialTarget.store_code == store_code, SpecialTarget.store_code.is_(None)))
        return q.order_by(SpecialTarget.start_date.desc(), SpecialTarget.id.desc()).all()

    def upsert_store_targets(self, rows: list[dict], updated_at: Optional[datetime] = None) -> int:
        """rows: {target_date, store_code, target_amount}. Caller commits."""
        return upsert(
            self.db, DailyStoreTarget, _stamped(rows, updated_at),
            conflict_cols=["target_date", "store_code"],
            update_cols=["target_amount", "updated_at"],
        )

    def upsert_salesman_targets(self, rows: list[dict], updated_at: Optional[datetime] = None) -> int:
        """rows: {target_date, store_code, salesman_no, target_amount}. Caller commits."""
        return upsert(
            self.db, DailySalesmanTarget, _stamped(rows, updated_at),
            conflict_cols=["target_date", "store_code", "salesman_no"],
            update_cols=["target_amount", "updated_at"],
        )

    def insert_special_target(self, row: dict) -> SpecialTarget:
        target = SpecialTarget(**row)
        self.db.add(target)
        self.db.flush()
        return target

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()
