"""
Print the HQ performance read-model: chain total, store leaderboard and,
optionally, one store's team.

Usage:
    python scripts/performance_report.py
    python scripts/performance_report.py --store S001
    python scripts/performance_report.py --watch        # refresh at REFRESH_MINUTES past the hour
"""
import argparse
import asyncio
import logging
import os
import sys

from dotenv import load_dotenv

# Ensure project root is on the path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
load_dotenv()

from hq_sales.config import settings
from hq_sales.database import SessionLocal
from hq_sales.repositories import RollupRepository, StoreRepository, TargetRepository
from hq_sales.schemas.performance import StoreOut
from hq_sales.services import performance as svc
from hq_sales.services.refresh import RefreshScheduler

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s — %(message)s",
)
logger = logging.getLogger("performance_report")


def print_report(store_code: str | None = None) -> None:
    db = SessionLocal()
    try:
        rollups, targets, stores = RollupRepository(db), TargetRepository(db), StoreRepository(db)
        known = [StoreOut.model_validate(s) for s in stores.list_stores()]
        codes = [s.code for s in known]

        today = svc.fetch_today_performance(rollups, targets, codes)
        till = svc.fetch_sales_till_label(rollups, today.sale_date)
        print("\n" + "=" * 60)
        if today.sale_date is None:
            print("No sales rollups yet.")
            print("=" * 60)
            return
        print(f"Sale date : {today.sale_date}" + (f"  (sales till {till})" if till else ""))
        print(f"Sales     : {today.total_sales:,.2f}")
        print(f"Target    : {today.total_target:,.2f}")
        print(f"Achieved  : {today.percentage}%")
        print("-" * 60)
        for i, row in enumerate(svc.fetch_store_leaderboard(rollups, targets, known), 1):
            print(f"{i:>3}. {row.store_code:<8} {row.store_name[:24]:<24} "
                  f"{row.sales:>12,.0f} / {row.target:>10,.0f}  {row.percentage:>4}%")

        if store_code:
            team = svc.fetch_salesman_performance(rollups, targets, store_code, today.sale_date)
            print("-" * 60)
            print(f"Team {store_code}: {team.team_sales:,.0f} / {team.store_target:,.0f}  {team.team_percentage}%")
            for r in team.rows:
                print(f"     {r.salesman_no:<8} {r.salesman_name[:24]:<24} "
                      f"{r.net_sales:>12,.0f} / {r.target_amount:>10,.0f}  {r.percentage:>4}%")
        print("=" * 60)
    finally:
        db.close()


def main():
    parser = argparse.ArgumentParser(description="Print the HQ store performance read-model.")
    parser.add_argument("--store", help="Also show salesman performance for this store code")
    parser.add_argument("--watch", action="store_true", help="Refresh at the configured minutes past each hour")
    args = parser.parse_args()

    print_report(args.store)
    if not args.watch:
        return

    scheduler = RefreshScheduler(
        lambda: print_report(args.store),
        minutes=settings.refresh_offsets(),
        buffer_seconds=settings.refresh_buffer_seconds,
        name="performance-report",
    )
    try:
        asyncio.run(scheduler.run())
    except KeyboardInterrupt:
        logger.info("Stopped.")


if __name__ == "__main__":
    main()
