"""
Seed or update the stores table from a CSV with columns: code, name[, is_active].

Usage:
    python scripts/seed_stores.py --file data/stores.csv
"""
import argparse
import logging
import os
import sys

import pandas as pd

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from hq_sales.database import SessionLocal, upsert
from hq_sales.models.stores import Store

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s — %(message)s",
)
logger = logging.getLogger("seed_stores")


def load_store_rows(path: str) -> list[dict]:
    df = pd.read_csv(path, dtype=str)
    df.columns = [str(c).strip().lower() for c in df.columns]
    rows = []
    for rec in df.to_dict("records"):
        code = str(rec.get("code") or "").strip()
        if not code or code.lower() == "nan":
            continue
        name = str(rec.get("name") or "").strip()
        active = str(rec.get("is_active", "true")).strip().lower() not in ("false", "0", "no")
        rows.append({"code": code, "name": name if name and name.lower() != "nan" else code, "is_active": active})
    return rows


def main():
    parser = argparse.ArgumentParser(description="Seed stores from CSV.")
    parser.add_argument("--file", required=True)
    args = parser.parse_args()

    rows = load_store_rows(args.file)
    db = SessionLocal()
    try:
        n = upsert(db, Store, rows, conflict_cols=["code"], update_cols=["name", "is_active"])
        db.commit()
        logger.info("Upserted %d stores", n)
    finally:
        db.close()


if __name__ == "__main__":
    main()
