from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ..repositories import RollupRepository, StoreRepository, TargetRepository
from ..schemas.performance import (
    SalesmanLite, SalesmanPerformance, SalesTill, StoreOut, StorePerfRow, TodayPerformance,
)
from ..services import performance as svc
from .deps import get_rollups, get_stores, get_targets

router = APIRouter()


def _codes(store_codes: Optional[List[str]], stores: StoreRepository) -> list[str]:
    # No filter = every active store
    if store_codes:
        return [c.strip() for c in store_codes if c.strip()]
    return stores.store_codes()


@router.get("/current-date", response_model=Optional[date])
def current_sale_date(
    store_codes: Optional[List[str]] = Query(None, alias="store_code"),
    rollups: RollupRepository = Depends(get_rollups),
    stores: StoreRepository = Depends(get_stores),
):
    return svc.get_current_sale_date(rollups, _codes(store_codes, stores))


@router.get("/today", response_model=TodayPerformance)
def today_performance(
    store_codes: Optional[List[str]] = Query(None, alias="store_code"),
    rollups: RollupRepository = Depends(get_rollups),
    targets: TargetRepository = Depends(get_targets),
    stores: StoreRepository = Depends(get_stores),
):
    return svc.fetch_today_performance(rollups, targets, _codes(store_codes, stores))


@router.get("/leaderboard", response_model=List[StorePerfRow])
def store_leaderboard(
    store_codes: Optional[List[str]] = Query(None, alias="store_code"),
    rollups: RollupRepository = Depends(get_rollups),
    targets: TargetRepository = Depends(get_targets),
    stores: StoreRepository = Depends(get_stores),
):
    known = [StoreOut.model_validate(s) for s in stores.list_stores()]
    if store_codes:
        wanted = set(_codes(store_codes, stores))
        names = {s.code: s.name for s in known}
        known = [StoreOut(code=c, name=names.get(c, c)) for c in sorted(wanted)]
    return svc.fetch_store_leaderboard(rollups, targets, known)


@router.get("/salesmen", response_model=List[SalesmanLite])
def salesmen_for_store(
    store_code: str = Query(...),
    rollups: RollupRepository = Depends(get_rollups),
):
    return svc.fetch_salesmen_for_store(rollups, store_code)


@router.get("/salesman-performance", response_model=SalesmanPerformance)
def salesman_performance(
    store_code: str = Query(...),
    sale_date: Optional[date] = Query(None, description="Defaults to the store's current sale date"),
    sort_by: str = Query("net_sales", description="'net_sales', 'percentage' or 'name'"),
    rollups: RollupRepository = Depends(get_rollups),
    targets: TargetRepository = Depends(get_targets),
):
    if sort_by not in svc.SALESMAN_SORTS:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"message": f"sort_by must be one of {list(svc.SALESMAN_SORTS)}"},
        )
    if sale_date is None:
        sale_date = svc.get_current_sale_date(rollups, [store_code])
    return svc.fetch_salesman_performance(rollups, targets, store_code, sale_date, sort_by=sort_by)


@router.get("/sales-till", response_model=Optional[SalesTill])
def sales_till(
    sale_date: date = Query(...),
    rollups: RollupRepository = Depends(get_rollups),
):
    return SalesTill(sale_date=sale_date, label=svc.fetch_sales_till_label(rollups, sale_date))
