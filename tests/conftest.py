import os

# Must be set before hq_sales.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SLACK_WEBHOOK_URL", "")


import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from hq_sales import models  # noqa: F401
from hq_sales.database import Base, get_db
from hq_sales.models.stores import Store


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=eng)
    yield eng
    Base.metadata.drop_all(bind=eng)
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def seeded_stores(db):
    db.add_all([
        Store(code="S1", name="Store One"),
        Store(code="S2", name="Store Two"),
        Store(code="S3", name="Store Three"),
        Store(code="S9", name="Closed Store", is_active=False),
    ])
    db.commit()
    return ["S1", "S2", "S3"]


@pytest.fixture
def client(session_factory):
    from hq_sales.main import app

    def _override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
