from fastapi import Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..repositories import RollupRepository, StoreRepository, TargetRepository


def get_rollups(db: Session = Depends(get_db)) -> RollupRepository:
    return RollupRepository(db)


def get_targets(db: Session = Depends(get_db)) -> TargetRepository:
    return TargetRepository(db)


def get_stores(db: Session = Depends(get_db)) -> StoreRepository:
    return StoreRepository(db)
