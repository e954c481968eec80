from .rollups import RollupRepository
from .targets import TargetRepository
from .stores import StoreRepository

__all__ = ["RollupRepository", "TargetRepository", "StoreRepository"]
