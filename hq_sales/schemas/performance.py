from datetime import date
from typing import Optional, List
from pydantic import BaseModel


class StoreOut(BaseModel):
    code: str
    name: str

    class Config:
        from_attributes = True


class TodayPerformance(BaseModel):
    sale_date: Optional[date] = None        # None = no rollup for any requested store
    total_sales: float
    total_target: float
    percentage: int


class StorePerfRow(BaseModel):
    store_code: str
    store_name: str
    sales: float
    target: float                           # 0 if not set
    percentage: int


class SalesmanLite(BaseModel):
    salesman_no: str
    salesman_name: str


class SalesmanPerfRow(BaseModel):
    salesman_no: str
    salesman_name: str
    net_sales: float
    qty: float
    bill_count: int
    target_amount: float                    # 0 if not set
    percentage: int


class SalesmanPerformance(BaseModel):
    store_code: str
    sale_date: Optional[date] = None
    rows: List[SalesmanPerfRow]
    store_target: float
    team_sales: float
    team_percentage: int


class SalesTill(BaseModel):
    sale_date: date
    label: Optional[str] = None             # e.g. "05:35 PM"
