from fastapi import APIRouter
from .performance import router as performance_router
from .targets import router as targets_router
from .sync import router as sync_router
from .stores import router as stores_router

api_router = APIRouter()
api_router.include_router(performance_router, prefix="/performance", tags=["Performance"])
api_router.include_router(targets_router,     prefix="/targets",     tags=["Targets"])
api_router.include_router(sync_router,        prefix="/sync",        tags=["Sync"])
api_router.include_router(stores_router,      prefix="/stores",      tags=["Stores"])
