from sqlalchemy import create_engine
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import sessionmaker, declarative_base
from .config import settings

_DB_URL = settings.get_db_url()

if _DB_URL.startswith("sqlite"):
    engine = create_engine(_DB_URL, connect_args={"check_same_thread": False})
else:
    engine = create_engine(
        _DB_URL,
        pool_pre_ping=True,
        pool_size=10,
        max_overflow=20,
        connect_args={"sslmode": "require"} if settings.db_ssl else {},
    )

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def dedupe_by_key(rows: list[dict], key_cols: list[str]) -> list[dict]:
    """Keep the last row for each key, in first-seen key order."""
    latest: dict[tuple, dict] = {}
    for row in rows:
        latest[tuple(row[c] for c in key_cols)] = row
    return list(latest.values())


def upsert(db, model, rows: list[dict], conflict_cols: list[str], update_cols: list[str]) -> int:
    """
    Bulk upsert rows into a model table with INSERT … ON CONFLICT DO UPDATE.

    Existing rows with the same conflict key are overwritten with the new
    values, never accumulated. Rows are written in batches of
    settings.upsert_batch_size to stay under the bind-parameter limit.
    Rows repeating a conflict key are collapsed first, last one wins;
    PostgreSQL rejects a statement that touches the same row twice.
    Does not commit. Returns the number of distinct rows written.
    """
    rows = dedupe_by_key(rows, conflict_cols)
    if not rows:
        return 0

    dialect = db.get_bind().dialect.name
    insert = sqlite.insert if dialect == "sqlite" else postgresql.insert

    batch_size = max(1, settings.upsert_batch_size)
    for i in range(0, len(rows), batch_size):
        batch = rows[i : i + batch_size]
        stmt = insert(model.__table__).values(batch)
        stmt = stmt.on_conflict_do_update(
            index_elements=conflict_cols,
            set_={col: getattr(stmt.excluded, col) for col in update_cols},
        )
        db.execute(stmt)
    return len(rows)
