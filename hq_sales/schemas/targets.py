"""
Pydantic schemas for target entry.
"""
from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from ..utils.periods import Period

ALL_STORES = "ALL"


class GoalType(str, Enum):
    STORE = "store"
    SALESPERSON = "salesperson"


class SpecialDimension(str, Enum):
    DEPT = "dept"
    SECTION = "section"
    MARK = "mark"
    STYLE_NO = "style_no"
    BARCODE = "barcode"


class StoreTargetIn(BaseModel):
    target_date: date
    store_code: str
    target_amount: float = Field(ge=0)


class SalesmanTargetIn(BaseModel):
    target_date: date
    store_code: str
    salesman_no: str
    target_amount: float = Field(ge=0)


class PeriodTargetIn(BaseModel):
    goal_type: GoalType
    period: Period = Period.DAILY
    anchor_date: Optional[date] = None      # defaults to today in the business timezone
    store_code: str                         # store code, or "ALL"
    salesman_no: Optional[str] = None       # required when goal_type = salesperson
    target_amount: float


class SpecialTargetIn(BaseModel):
    title: Optional[str] = None
    store_code: str                         # store code, or "ALL" for chain-wide
    period: Period = Period.DAILY
    anchor_date: Optional[date] = None
    dimension: SpecialDimension
    dimension_value: str
    target_qty: float


class UpsertResult(BaseModel):
    count: int


class PeriodTargetResult(BaseModel):
    start: date
    end: date
    count: int


class SpecialTargetOut(BaseModel):
    id: int
    title: str
    store_code: Optional[str] = None
    start_date: date
    end_date: date
    dimension: str
    dimension_value: str
    metric: str
    target_value: float

    class Config:
        from_attributes = True
