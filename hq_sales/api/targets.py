"""
Target entry API.

POST /api/targets/store      upsert store daily target rows
POST /api/targets/salesman   upsert salesman daily target rows
POST /api/targets/period     bulk daily/weekly/monthly target for one store or ALL
POST /api/targets/special    add a special quantity target
GET  /api/targets/special    list special targets
"""
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ..repositories import StoreRepository, TargetRepository
from ..schemas.targets import (
    PeriodTargetIn, PeriodTargetResult, SalesmanTargetIn, SpecialTargetIn,
    SpecialTargetOut, StoreTargetIn, UpsertResult,
)
from ..services import targets as svc
from .deps import get_stores, get_targets

router = APIRouter()


def _invalid(exc: svc.TargetValidationError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        detail={"message": str(exc)},
    )


@router.post("/store", response_model=UpsertResult)
def upsert_store_targets(
    rows: List[StoreTargetIn],
    targets: TargetRepository = Depends(get_targets),
):
    try:
        return svc.upsert_store_targets(targets, rows)
    except svc.TargetValidationError as exc:
        raise _invalid(exc)


@router.post("/salesman", response_model=UpsertResult)
def upsert_salesman_targets(
    rows: List[SalesmanTargetIn],
    targets: TargetRepository = Depends(get_targets),
):
    try:
        return svc.upsert_salesman_targets(targets, rows)
    except svc.TargetValidationError as exc:
        raise _invalid(exc)


@router.post("/period", response_model=PeriodTargetResult)
def create_period_target(
    body: PeriodTargetIn,
    targets: TargetRepository = Depends(get_targets),
    stores: StoreRepository = Depends(get_stores),
):
    try:
        return svc.create_period_target(
            targets, stores,
            goal_type=body.goal_type,
            period=body.period,
            store_selector=body.store_code,
            target_amount=body.target_amount,
            anchor_date=body.anchor_date,
            salesman_no=body.salesman_no,
        )
    except svc.TargetValidationError as exc:
        raise _invalid(exc)


@router.post("/special", response_model=SpecialTargetOut, status_code=status.HTTP_201_CREATED)
def create_special_target(
    body: SpecialTargetIn,
    targets: TargetRepository = Depends(get_targets),
):
    try:
        return svc.create_special_target(
            targets,
            store_selector=body.store_code,
            period=body.period,
            dimension=body.dimension,
            dimension_value=body.dimension_value,
            target_qty=body.target_qty,
            anchor_date=body.anchor_date,
            title=body.title,
        )
    except svc.TargetValidationError as exc:
        raise _invalid(exc)


@router.get("/special", response_model=List[SpecialTargetOut])
def list_special_targets(
    active_on: Optional[date] = Query(None),
    store_code: Optional[str] = Query(None),
    targets: TargetRepository = Depends(get_targets),
):
    return targets.special_targets(active_on=active_on, store_code=store_code)
