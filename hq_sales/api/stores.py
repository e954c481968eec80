from typing import List

from fastapi import APIRouter, Depends

from ..repositories import StoreRepository
from ..schemas.performance import StoreOut
from .deps import get_stores

router = APIRouter()


@router.get("", response_model=List[StoreOut])
def list_stores(stores: StoreRepository = Depends(get_stores)):
    return stores.list_stores()
