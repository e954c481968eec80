"""
HQ Sales API.

    uvicorn hq_sales.main:app --reload

Routers live under /api (see api/__init__.py). /health reports whether the
database answers a trivial query, so a load balancer can tell a dead DB from
a dead process.
"""
import logging

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.orm import Session

from . import models  # noqa: F401  (registers tables on Base.metadata)
from .api import api_router
from .config import settings
from .database import Base, engine, get_db

logger = logging.getLogger(__name__)


def init_schema() -> bool:
    """Create missing tables. A DB that is down at startup is logged, not fatal."""
    try:
        Base.metadata.create_all(bind=engine)
        return True
    except Exception as exc:
        logger.warning("Schema init skipped, database not reachable: %s", exc)
        return False


def create_app() -> FastAPI:
    app = FastAPI(
        title="HQ Sales API",
        description="Store sales rollups, targets and performance read-model for HQ",
        version="1.0.0",
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(api_router, prefix="/api")

    @app.get("/health", tags=["Health"])
    def health(db: Session = Depends(get_db)):
        try:
            db.execute(text("SELECT 1"))
            database = "ok"
        except Exception as exc:
            logger.error("Health check: database unreachable: %s", exc)
            database = "unreachable"
        return {"status": "ok", "database": database}

    return app


init_schema()
app = create_app()
