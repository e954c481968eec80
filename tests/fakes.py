"""In-memory stand-ins for the repositories used by the read-model and target services."""
from datetime import date
from decimal import Decimal

from hq_sales.utils.aggregation import SalesmanRollup, StoreRollup


class FakeRollups:
    def __init__(self, store_rows=(), salesman_rows=(), meta=None):
        self.store_rows = list(store_rows)
        self.salesman_rows = list(salesman_rows)
        self.meta = meta or {}

    def latest_sale_date(self, store_codes):
        dates = [r.sale_date for r in self.store_rows if r.store_code in store_codes]
        return max(dates) if dates else None

    def store_rollups(self, sale_date, store_codes):
        return [r for r in self.store_rows if r.sale_date == sale_date and r.store_code in store_codes]

    def salesman_rollups(self, sale_date, store_code):
        rows = [r for r in self.salesman_rows if r.sale_date == sale_date and r.store_code == store_code]
        return sorted(rows, key=lambda r: r.net_sales, reverse=True)

    def salesmen_for_store(self, store_code):
        seen = {}
        for r in self.salesman_rows:
            if r.store_code == store_code:
                seen[r.salesman_no] = r.salesman_name
        return list(seen.items())

    def sales_meta(self, sale_date):
        return self.meta.get(sale_date)


class FakeTargets:
    def __init__(self, store=None, salesman=None):
        self.store = store or {}          # {(date, code): amount}
        self.salesman = salesman or {}    # {(date, code, no): amount}
        self.special = []
        self.commits = 0

    def store_targets(self, target_date, store_codes):
        return {
            code: Decimal(str(amount))
            for (d, code), amount in self.store.items()
            if d == target_date and code in store_codes
        }

    def salesman_targets(self, target_date, store_code):
        return {
            no: Decimal(str(amount))
            for (d, code, no), amount in self.salesman.items()
            if d == target_date and code == store_code
        }

    def upsert_store_targets(self, rows):
        for r in rows:
            self.store[(r["target_date"], r["store_code"])] = r["target_amount"]
        return len(rows)

    def upsert_salesman_targets(self, rows):
        for r in rows:
            self.salesman[(r["target_date"], r["store_code"], r["salesman_no"])] = r["target_amount"]
        return len(rows)

    def insert_special_target(self, row):
        self.special.append(dict(row))
        return row

    def commit(self):
        self.commits += 1

    def rollback(self):
        pass


class FakeStores:
    def __init__(self, codes):
        self.codes = list(codes)

    def store_codes(self):
        return list(self.codes)


def store_rollup(d, code, net, qty=0, bills=0):
    return StoreRollup(
        sale_date=d, store_code=code,
        net_sales=Decimal(str(net)), qty=Decimal(str(qty)), bill_count=bills,
    )


def salesman_rollup(d, code, no, name, net, qty=0, bills=0):
    return SalesmanRollup(
        sale_date=d, store_code=code, salesman_no=no, salesman_name=name,
        net_sales=Decimal(str(net)), qty=Decimal(str(qty)), bill_count=bills,
    )


JUNE_1 = date(2024, 6, 1)
JUNE_2 = date(2024, 6, 2)
