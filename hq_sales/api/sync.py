from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.sync import SyncResult
from ..services.sales_sync import run_sales_sync

router = APIRouter()


@router.post(
    "/sales",
    response_model=SyncResult,
    response_model_exclude_none=True,
    summary="Sync sales rollups from the POS extract",
    description=(
        "Download the configured extract, recompute daily store and salesman rollups "
        "and upsert them. Safe to re-run. Returns 500 with ok=false on failure."
    ),
)
def sync_sales(db: Session = Depends(get_db)):
    result = run_sales_sync(db, trigger="manual")
    if not result.ok:
        return JSONResponse(
            status_code=500,
            content=result.model_dump(mode="json", by_alias=True, exclude_none=True),
        )
    return result
