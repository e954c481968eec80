from .performance import (
    StoreOut, TodayPerformance, StorePerfRow, SalesmanLite,
    SalesmanPerfRow, SalesmanPerformance, SalesTill,
)
from .targets import (
    GoalType, SpecialDimension, StoreTargetIn, SalesmanTargetIn, PeriodTargetIn,
    SpecialTargetIn, UpsertResult, PeriodTargetResult, SpecialTargetOut,
)
from .sync import SyncResult

__all__ = [
    "StoreOut", "TodayPerformance", "StorePerfRow", "SalesmanLite",
    "SalesmanPerfRow", "SalesmanPerformance", "SalesTill",
    "GoalType", "SpecialDimension", "StoreTargetIn", "SalesmanTargetIn", "PeriodTargetIn",
    "SpecialTargetIn", "UpsertResult", "PeriodTargetResult", "SpecialTargetOut",
    "SyncResult",
]
