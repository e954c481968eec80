from datetime import date

from hq_sales import database
from hq_sales.database import dedupe_by_key, upsert
from hq_sales.models.stores import Store
from hq_sales.models.targets import DailyStoreTarget

D = date(2024, 6, 1)


def test_dedupe_by_key_keeps_last_row_per_key():
    rows = [
        {"target_date": D, "store_code": "S1", "target_amount": 100},
        {"target_date": D, "store_code": "S2", "target_amount": 50},
        {"target_date": D, "store_code": "S1", "target_amount": 250},
    ]
    assert dedupe_by_key(rows, ["target_date", "store_code"]) == [
        {"target_date": D, "store_code": "S1", "target_amount": 250},
        {"target_date": D, "store_code": "S2", "target_amount": 50},
    ]


def test_upsert_sends_each_key_once(db):
    statements = []
    execute = db.execute

    def spy(stmt, *args, **kwargs):
        statements.append(stmt)
        return execute(stmt, *args, **kwargs)

    db.execute = spy
    written = upsert(
        db, Store,
        [{"code": "S1", "name": "Old"}, {"code": "S1", "name": "New"}],
        conflict_cols=["code"], update_cols=["name"],
    )
    db.commit()

    assert written == 1
    assert len(statements) == 1
    assert db.query(Store).one().name == "New"


def test_upsert_batches_distinct_rows(db, monkeypatch):
    monkeypatch.setattr(database.settings, "upsert_batch_size", 2)

    rows = [{"target_date": date(2024, 6, d), "store_code": "S1", "target_amount": d} for d in range(1, 6)]
    assert upsert(db, DailyStoreTarget, rows, ["target_date", "store_code"], ["target_amount"]) == 5
    db.commit()

    assert db.query(DailyStoreTarget).count() == 5
