from datetime import date, datetime
from decimal import Decimal

import pytest

from hq_sales.models.targets import DailySalesmanTarget, DailyStoreTarget, SpecialTarget
from hq_sales.repositories import StoreRepository, TargetRepository
from hq_sales.schemas.targets import SalesmanTargetIn, StoreTargetIn
from hq_sales.services import targets as svc
from hq_sales.services.targets import TargetValidationError
from tests.fakes import FakeStores, FakeTargets

ANCHOR = date(2024, 6, 19)


def test_weekly_all_stores_writes_one_row_per_day_and_store():
    targets, stores = FakeTargets(), FakeStores(["S1", "S2", "S3"])

    result = svc.create_period_target(
        targets, stores, goal_type="store", period="weekly",
        store_selector="ALL", target_amount=1000, anchor_date=ANCHOR,
    )

    assert (result.start, result.end, result.count) == (date(2024, 6, 17), date(2024, 6, 23), 21)
    assert len(targets.store) == 21
    assert set(targets.store.values()) == {Decimal(1000)}
    assert targets.commits == 1


def test_all_selector_is_case_insensitive():
    targets = FakeTargets()
    result = svc.create_period_target(
        targets, FakeStores(["S1", "S2"]), goal_type="store", period="daily",
        store_selector="all", target_amount=5, anchor_date=ANCHOR,
    )
    assert result.count == 2


def test_monthly_salesperson_target():
    targets = FakeTargets()
    result = svc.create_period_target(
        targets, FakeStores(["S1"]), goal_type="salesperson", period="monthly",
        store_selector="S1", target_amount="2500.50", anchor_date=ANCHOR, salesman_no=" 7 ",
    )

    assert result.count == 30
    assert (date(2024, 6, 30), "S1", "7") in targets.salesman
    assert targets.salesman[(date(2024, 6, 1), "S1", "7")] == Decimal("2500.50")


@pytest.mark.parametrize("salesman_no", [None, "", "   "])
def test_salesperson_target_requires_salesperson(salesman_no):
    targets = FakeTargets()
    with pytest.raises(TargetValidationError, match="Salesperson is required"):
        svc.create_period_target(
            targets, FakeStores(["S1"]), goal_type="salesperson", period="daily",
            store_selector="S1", target_amount=100, anchor_date=ANCHOR, salesman_no=salesman_no,
        )
    assert targets.salesman == {}
    assert targets.commits == 0


@pytest.mark.parametrize("kwargs,message", [
    ({"target_amount": -1}, "cannot be negative"),
    ({"target_amount": "lots"}, "must be a number"),
    ({"period": "yearly"}, "Unknown period"),
    ({"goal_type": "region"}, "Unknown goal type"),
    ({"store_selector": "  "}, "Store is required"),
])
def test_period_target_validation(kwargs, message):
    args = dict(
        goal_type="store", period="daily", store_selector="S1",
        target_amount=100, anchor_date=ANCHOR,
    )
    args.update(kwargs)
    targets = FakeTargets()
    with pytest.raises(TargetValidationError, match=message):
        svc.create_period_target(targets, FakeStores(["S1"]), **args)
    assert targets.store == {}


def test_daily_wrappers():
    targets, stores = FakeTargets(), FakeStores(["S1"])
    svc.create_store_daily_target(targets, stores, "S1", ANCHOR, 300)
    svc.create_salesman_daily_target(targets, stores, "S1", ANCHOR, "7", 120)

    assert targets.store == {(ANCHOR, "S1"): Decimal(300)}
    assert targets.salesman == {(ANCHOR, "S1", "7"): Decimal(120)}


def test_upsert_store_targets_validates_before_writing():
    targets = FakeTargets()
    rows = [
        StoreTargetIn(target_date=ANCHOR, store_code="S1", target_amount=10),
        StoreTargetIn(target_date=ANCHOR, store_code=" ", target_amount=10),
    ]
    with pytest.raises(TargetValidationError):
        svc.upsert_store_targets(targets, rows)
    assert targets.store == {}


def test_upsert_salesman_targets_requires_salesperson():
    targets = FakeTargets()
    rows = [SalesmanTargetIn(target_date=ANCHOR, store_code="S1", salesman_no="", target_amount=10)]
    with pytest.raises(TargetValidationError, match="Salesperson is required"):
        svc.upsert_salesman_targets(targets, rows)


def test_special_target_chain_wide():
    targets = FakeTargets()
    row = svc.create_special_target(
        targets, store_selector="ALL", period="weekly", dimension="mark",
        dimension_value=" Zara ", target_qty=40, anchor_date=ANCHOR,
    )

    assert row["store_code"] is None
    assert row["title"] == "Special Target"
    assert row["metric"] == "qty"
    assert row["dimension_value"] == "Zara"
    assert (row["start_date"], row["end_date"]) == (date(2024, 6, 17), date(2024, 6, 23))


def test_special_target_requires_value():
    targets = FakeTargets()
    with pytest.raises(TargetValidationError, match="value is required"):
        svc.create_special_target(
            targets, store_selector="S1", period="daily", dimension="dept",
            dimension_value="  ", target_qty=5, anchor_date=ANCHOR,
        )
    with pytest.raises(TargetValidationError, match="Unknown dimension"):
        svc.create_special_target(
            targets, store_selector="S1", period="daily", dimension="colour",
            dimension_value="red", target_qty=5, anchor_date=ANCHOR,
        )
    assert targets.special == []


# =============================================================================
# Against the database
# =============================================================================

def test_weekly_all_stores_rerun_keeps_21_rows(db, seeded_stores):
    targets, stores = TargetRepository(db), StoreRepository(db)
    for _ in range(2):
        svc.create_period_target(
            targets, stores, goal_type="store", period="weekly",
            store_selector="ALL", target_amount=1000, anchor_date=ANCHOR,
        )

    rows = db.query(DailyStoreTarget).all()
    assert len(rows) == 21
    assert {r.store_code for r in rows} == {"S1", "S2", "S3"}
    assert all(Decimal(str(r.target_amount)) == Decimal(1000) for r in rows)


def test_store_target_upsert_replaces_amount(db):
    targets = TargetRepository(db)
    svc.upsert_store_targets(targets, [StoreTargetIn(target_date=ANCHOR, store_code="S1", target_amount=100)])
    svc.upsert_store_targets(targets, [StoreTargetIn(target_date=ANCHOR, store_code="S1", target_amount=250)])

    assert targets.store_targets(ANCHOR, ["S1"]) == {"S1": Decimal(250)}
    assert db.query(DailyStoreTarget).count() == 1


def test_salesman_target_upsert(db):
    targets = TargetRepository(db)
    svc.upsert_salesman_targets(targets, [
        SalesmanTargetIn(target_date=ANCHOR, store_code="S1", salesman_no="7", target_amount=100),
        SalesmanTargetIn(target_date=ANCHOR, store_code="S1", salesman_no="9", target_amount=80),
    ])
    svc.upsert_salesman_targets(targets, [
        SalesmanTargetIn(target_date=ANCHOR, store_code="S1", salesman_no="7", target_amount=120),
    ])

    assert targets.salesman_targets(ANCHOR, "S1") == {"7": Decimal(120), "9": Decimal(80)}
    assert db.query(DailySalesmanTarget).count() == 2


def test_special_targets_always_insert(db):
    targets = TargetRepository(db)
    for _ in range(2):
        svc.create_special_daily_target(targets, "S1", ANCHOR, "barcode", "8901234", 12)
    svc.create_special_target(
        targets, store_selector="ALL", period="monthly", dimension="dept",
        dimension_value="Footwear", target_qty=300, anchor_date=ANCHOR, title="June push",
    )

    assert db.query(SpecialTarget).count() == 3
    active = targets.special_targets(active_on=ANCHOR, store_code="S2")
    assert [t.title for t in active] == ["June push"]
    assert active[0].store_code is None
    assert len(targets.special_targets(active_on=ANCHOR, store_code="S1")) == 3


def test_target_upsert_refreshes_updated_at(db):
    targets = TargetRepository(db)
    first, second = datetime(2024, 6, 1, 8, 0), datetime(2024, 6, 2, 9, 30)

    targets.upsert_store_targets([{"target_date": ANCHOR, "store_code": "S1", "target_amount": 100}], updated_at=first)
    targets.upsert_salesman_targets(
        [{"target_date": ANCHOR, "store_code": "S1", "salesman_no": "7", "target_amount": 50}], updated_at=first,
    )
    targets.commit()
    targets.upsert_store_targets([{"target_date": ANCHOR, "store_code": "S1", "target_amount": 200}], updated_at=second)
    targets.upsert_salesman_targets(
        [{"target_date": ANCHOR, "store_code": "S1", "salesman_no": "7", "target_amount": 60}], updated_at=second,
    )
    targets.commit()
    db.expire_all()

    assert db.query(DailyStoreTarget).one().updated_at == second
    assert db.query(DailySalesmanTarget).one().updated_at == second


def test_service_upsert_stamps_updated_at(db):
    svc.upsert_store_targets(TargetRepository(db), [StoreTargetIn(target_date=ANCHOR, store_code="S1", target_amount=10)])
    assert db.query(DailyStoreTarget).one().updated_at is not None
