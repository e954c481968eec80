"""
Store performance read-model.

Every figure is computed for the "current" sale date: the most recent date with
at least one store rollup among the requested stores. No rollup at all is not
an error; it yields empty/zero figures.

Functions take repositories rather than a session so the read-model can be
exercised over in-memory fakes.
"""
import logging
from datetime import date, time, timezone
from decimal import Decimal
from typing import Optional
from zoneinfo import ZoneInfo

from ..config import settings
from ..schemas.performance import (
    SalesmanLite,
    SalesmanPerformance,
    SalesmanPerfRow,
    StoreOut,
    StorePerfRow,
    TodayPerformance,
)
from ..utils.aggregation import achievement_pct

logger = logging.getLogger(__name__)

SALESMAN_SORTS = ("net_sales", "percentage", "name")


def get_current_sale_date(rollups, store_codes: list[str]) -> Optional[date]:
    if not store_codes:
        return None
    return rollups.latest_sale_date(store_codes)


def fetch_today_performance(rollups, targets, store_codes: list[str]) -> TodayPerformance:
    sale_date = get_current_sale_date(rollups, store_codes)
    if sale_date is None:
        return TodayPerformance(sale_date=None, total_sales=0, total_target=0, percentage=0)

    total_sales = sum((r.net_sales for r in rollups.store_rollups(sale_date, store_codes)), Decimal(0))
    total_target = sum(targets.store_targets(sale_date, store_codes).values(), Decimal(0))

    return TodayPerformance(
        sale_date=sale_date,
        total_sales=float(total_sales),
        total_target=float(total_target),
        percentage=achievement_pct(total_sales, total_target),
    )


def fetch_store_leaderboard(rollups, targets, stores: list[StoreOut]) -> list[StorePerfRow]:
    """
    One row per requested store for the current sale date, ordered by
    achievement % then raw sales (both descending).
    """
    codes = [s.code for s in stores]
    sale_date = get_current_sale_date(rollups, codes)
    if sale_date is None:
        return []

    sales_map = {r.store_code: r.net_sales for r in rollups.store_rollups(sale_date, codes)}
    target_map = targets.store_targets(sale_date, codes)

    out = []
    for s in stores:
        sales = sales_map.get(s.code, Decimal(0))
        target = target_map.get(s.code, Decimal(0))
        out.append((
            achievement_pct(sales, target),
            sales,
            StorePerfRow(
                store_code=s.code,
                store_name=s.name,
                sales=float(sales),
                target=float(target),
                percentage=achievement_pct(sales, target),
            ),
        ))

    out.sort(key=lambda t: (t[0], t[1]), reverse=True)
    return [row for _, _, row in out]


def fetch_salesman_performance(
    rollups,
    targets,
    store_code: str,
    sale_date: Optional[date],
    sort_by: str = "net_sales",
) -> SalesmanPerformance:
    """
    Join salesman rollups with salesman targets on salesman_no for one
    store/date. The store's own target is surfaced for the team percentage.
    """
    if not store_code or sale_date is None:
        return SalesmanPerformance(
            store_code=store_code or "", sale_date=sale_date, rows=[],
            store_target=0, team_sales=0, team_percentage=0,
        )
    if sort_by not in SALESMAN_SORTS:
        raise ValueError(f"sort_by must be one of {SALESMAN_SORTS}")

    sales_rows = rollups.salesman_rollups(sale_date, store_code)
    target_map = targets.salesman_targets(sale_date, store_code)
    store_target = targets.store_targets(sale_date, [store_code]).get(store_code, Decimal(0))

    rows = []
    team_sales = Decimal(0)
    for r in sales_rows:
        target = target_map.get(r.salesman_no, Decimal(0))
        team_sales += r.net_sales
        rows.append((
            r.net_sales,
            SalesmanPerfRow(
                salesman_no=r.salesman_no,
                salesman_name=r.salesman_name or f"#{r.salesman_no}",
                net_sales=float(r.net_sales),
                qty=float(r.qty),
                bill_count=r.bill_count,
                target_amount=float(target),
                percentage=achievement_pct(r.net_sales, target),
            ),
        ))

    if sort_by == "net_sales":
        rows.sort(key=lambda t: t[0], reverse=True)
    elif sort_by == "percentage":
        rows.sort(key=lambda t: (t[1].percentage, t[0]), reverse=True)
    else:
        rows.sort(key=lambda t: t[1].salesman_name.lower())

    return SalesmanPerformance(
        store_code=store_code,
        sale_date=sale_date,
        rows=[row for _, row in rows],
        store_target=float(store_target),
        team_sales=float(team_sales),
        team_percentage=achievement_pct(team_sales, store_target),
    )


def fetch_salesmen_for_store(rollups, store_code: str) -> list[SalesmanLite]:
    if not store_code:
        return []
    out = [
        SalesmanLite(salesman_no=no, salesman_name=name or f"#{no}")
        for no, name in rollups.salesmen_for_store(store_code)
        if no
    ]
    return sorted(out, key=lambda s: (s.salesman_name.lower(), s.salesman_no))


def _label(t: time) -> str:
    return t.strftime("%I:%M %p")


def fetch_sales_till_label(rollups, sale_date: Optional[date]) -> Optional[str]:
    """
    "Sales till" label for the sale date, e.g. "05:35 PM".
    Prefers the stored time of day; falls back to the UTC timestamp rendered
    in the business timezone.
    """
    if sale_date is None:
        return None
    meta = rollups.sales_meta(sale_date)
    if meta is None:
        return None
    till, till_ts = meta
    if till is not None:
        return _label(till)
    if till_ts is not None:
        if till_ts.tzinfo is None:
            till_ts = till_ts.replace(tzinfo=timezone.utc)
        local = till_ts.astimezone(ZoneInfo(settings.business_timezone))
        return _label(local.time())
    return None
