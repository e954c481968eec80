from datetime import date
from typing import List, Optional
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class SyncResult(BaseModel):
    """Summary of one sales sync run. Serialised with camelCase keys."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    ok: bool
    rows_written: int = 0
    salesman_rows_written: int = 0
    rows_skipped: int = 0
    sale_dates_touched: List[date] = []
    stores_touched: List[str] = []
    error: Optional[str] = None
    sync_log_id: Optional[int] = None
