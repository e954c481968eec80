"""
Target entry: single-row upserts, period (daily/weekly/monthly) bulk writes
and special quantity targets.

Validation happens before any write; a TargetValidationError carries a
message meant for the HQ user.
"""
import logging
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Optional
from zoneinfo import ZoneInfo

from ..config import settings
from ..models.targets import SPECIAL_DIMENSIONS
from ..schemas.targets import (
    ALL_STORES,
    GoalType,
    PeriodTargetResult,
    SalesmanTargetIn,
    StoreTargetIn,
    UpsertResult,
)
from ..utils.periods import Period, each_day, expand_period

logger = logging.getLogger(__name__)

DEFAULT_SPECIAL_TITLE = "Special Target"


class TargetValidationError(ValueError):
    """User-actionable validation failure; nothing has been written."""


def business_today() -> date:
    return datetime.now(ZoneInfo(settings.business_timezone)).date()


def _amount(value, label: str = "Target amount") -> Decimal:
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise TargetValidationError(f"{label} must be a number.")
    if not amount.is_finite():
        raise TargetValidationError(f"{label} must be a number.")
    if amount < 0:
        raise TargetValidationError(f"{label} cannot be negative.")
    return amount


def _period(value) -> Period:
    try:
        return Period(value)
    except ValueError:
        raise TargetValidationError(
            f"Unknown period {value!r}; expected one of {[p.value for p in Period]}."
        )


def _resolve_stores(stores, store_selector: str) -> list[str]:
    selector = str(store_selector or "").strip()
    if not selector:
        raise TargetValidationError("Store is required.")
    if selector.upper() == ALL_STORES:
        # Stores known right now; stores added later are not included
        return stores.store_codes()
    return [selector]


# =============================================================================
# Row upserts
# =============================================================================

def upsert_store_targets(targets, rows: list[StoreTargetIn]) -> UpsertResult:
    if not rows:
        return UpsertResult(count=0)
    payload = []
    for r in rows:
        code = r.store_code.strip()
        if not code:
            raise TargetValidationError("Store is required.")
        payload.append({
            "target_date": r.target_date,
            "store_code": code,
            "target_amount": _amount(r.target_amount),
        })
    count = targets.upsert_store_targets(payload)
    targets.commit()
    return UpsertResult(count=count)


def upsert_salesman_targets(targets, rows: list[SalesmanTargetIn]) -> UpsertResult:
    if not rows:
        return UpsertResult(count=0)
    payload = []
    for r in rows:
        code = r.store_code.strip()
        salesman_no = str(r.salesman_no or "").strip()
        if not code:
            raise TargetValidationError("Store is required.")
        if not salesman_no:
            raise TargetValidationError("Salesperson is required.")
        payload.append({
            "target_date": r.target_date,
            "store_code": code,
            "salesman_no": salesman_no,
            "target_amount": _amount(r.target_amount),
        })
    count = targets.upsert_salesman_targets(payload)
    targets.commit()
    return UpsertResult(count=count)


# =============================================================================
# Period targets
# =============================================================================

def create_period_target(
    targets,
    stores,
    goal_type: GoalType | str,
    period: Period | str,
    store_selector: str,
    target_amount,
    anchor_date: Optional[date] = None,
    salesman_no: Optional[str] = None,
) -> PeriodTargetResult:
    """
    Expand the period around anchor_date into days and upsert one target row
    per (day × selected store). Re-running with the same arguments rewrites
    the same rows.
    """
    try:
        goal_type = GoalType(goal_type)
    except ValueError:
        raise TargetValidationError(f"Unknown goal type {goal_type!r}.")
    period = _period(period)
    amount = _amount(target_amount)
    spno = str(salesman_no or "").strip()
    if goal_type == GoalType.SALESPERSON and not spno:
        raise TargetValidationError("Salesperson is required.")

    start, end = expand_period(period, anchor_date or business_today())
    days = each_day(start, end)
    store_codes = _resolve_stores(stores, store_selector)

    if goal_type == GoalType.STORE:
        rows = [
            {"target_date": d, "store_code": sc, "target_amount": amount}
            for sc in store_codes
            for d in days
        ]
        count = targets.upsert_store_targets(rows)
    else:
        rows = [
            {"target_date": d, "store_code": sc, "salesman_no": spno, "target_amount": amount}
            for sc in store_codes
            for d in days
        ]
        count = targets.upsert_salesman_targets(rows)
    targets.commit()

    logger.info(
        "%s %s target %s → %s for %d store(s): %d rows",
        period.value, goal_type.value, start, end, len(store_codes), count,
    )
    return PeriodTargetResult(start=start, end=end, count=count)


def create_store_daily_target(targets, stores, store_code: str, target_date: date, target_amount) -> PeriodTargetResult:
    return create_period_target(
        targets, stores,
        goal_type=GoalType.STORE,
        period=Period.DAILY,
        store_selector=store_code,
        target_amount=target_amount,
        anchor_date=target_date,
    )


def create_salesman_daily_target(
    targets, stores, store_code: str, target_date: date, salesman_no: str, target_amount,
) -> PeriodTargetResult:
    return create_period_target(
        targets, stores,
        goal_type=GoalType.SALESPERSON,
        period=Period.DAILY,
        store_selector=store_code,
        target_amount=target_amount,
        anchor_date=target_date,
        salesman_no=salesman_no,
    )


# =============================================================================
# Special targets
# =============================================================================

def create_special_target(
    targets,
    store_selector: str,
    period: Period | str,
    dimension: str,
    dimension_value: str,
    target_qty,
    anchor_date: Optional[date] = None,
    title: Optional[str] = None,
):
    """
    Insert one special quantity target. "ALL" makes it chain-wide
    (store_code NULL). Never upserts: each call adds a row.
    """
    period = _period(period)
    dimension = getattr(dimension, "value", dimension)
    if dimension not in SPECIAL_DIMENSIONS:
        raise TargetValidationError(
            f"Unknown dimension {dimension!r}; expected one of {list(SPECIAL_DIMENSIONS)}."
        )
    value = str(dimension_value or "").strip()
    if not value:
        raise TargetValidationError("Special target value is required.")
    qty = _amount(target_qty, label="Target quantity")

    selector = str(store_selector or "").strip()
    if not selector:
        raise TargetValidationError("Store is required.")

    start, end = expand_period(period, anchor_date or business_today())
    row = {
        "title": (title or "").strip() or DEFAULT_SPECIAL_TITLE,
        "store_code": None if selector.upper() == ALL_STORES else selector,
        "start_date": start,
        "end_date": end,
        "dimension": dimension,
        "dimension_value": value,
        "metric": "qty",
        "target_value": qty,
    }
    created = targets.insert_special_target(row)
    targets.commit()
    return created


def create_special_daily_target(
    targets,
    store_code: str,
    target_date: date,
    dimension: str,
    dimension_value: str,
    target_qty,
    title: Optional[str] = None,
):
    return create_special_target(
        targets,
        store_selector=store_code,
        period=Period.DAILY,
        dimension=dimension,
        dimension_value=dimension_value,
        target_qty=target_qty,
        anchor_date=target_date,
        title=title,
    )
