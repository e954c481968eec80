from ..database import Base
from .stores import Store
from .sales import DailyStoreSales, DailySalesmanSales, DailySalesMeta
from .targets import DailyStoreTarget, DailySalesmanTarget, SpecialTarget, SPECIAL_DIMENSIONS
from .sync import SyncLog

__all__ = [
    "Base",
    # Dimensions
    "Store",
    # Rollups
    "DailyStoreSales", "DailySalesmanSales", "DailySalesMeta",
    # Targets
    "DailyStoreTarget", "DailySalesmanTarget", "SpecialTarget", "SPECIAL_DIMENSIONS",
    # Audit
    "SyncLog",
]
