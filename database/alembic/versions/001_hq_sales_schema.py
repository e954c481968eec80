"""HQ sales schema: stores, daily rollups, targets, sync audit

Revision ID: 001_hq_sales_schema
Revises:
Create Date: 2026-10-18
"""
from alembic import op

revision = "001_hq_sales_schema"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE IF NOT EXISTS stores (
            id         SERIAL PRIMARY KEY,
            code       VARCHAR(20)  NOT NULL UNIQUE,
            name       VARCHAR(200) NOT NULL,
            is_active  BOOLEAN      NOT NULL DEFAULT TRUE,
            created_at TIMESTAMP    NOT NULL DEFAULT NOW()
        );
    """)

    # ── Rollups ──────────────────────────────────────────────────────────────
    op.execute("""
        CREATE TABLE IF NOT EXISTS daily_store_sales (
            id         SERIAL PRIMARY KEY,
            sale_date  DATE          NOT NULL,
            store_code VARCHAR(20)   NOT NULL,
            net_sales  NUMERIC(14,2) NOT NULL DEFAULT 0,
            qty        NUMERIC(12,2) NOT NULL DEFAULT 0,
            bill_count INTEGER       NOT NULL DEFAULT 0,
            updated_at TIMESTAMP     NOT NULL DEFAULT NOW(),
            CONSTRAINT daily_store_sales_sale_date_store_code_key
                UNIQUE (sale_date, store_code)
        );
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS idx_store_sales_store_date
        ON daily_store_sales (store_code, sale_date DESC);
    """)
    op.execute("""
        CREATE TABLE IF NOT EXISTS daily_salesman_sales (
            id            SERIAL PRIMARY KEY,
            sale_date     DATE          NOT NULL,
            store_code    VARCHAR(20)   NOT NULL,
            salesman_no   VARCHAR(50)   NOT NULL,
            salesman_name VARCHAR(200),
            net_sales     NUMERIC(14,2) NOT NULL DEFAULT 0,
            qty           NUMERIC(12,2) NOT NULL DEFAULT 0,
            bill_count    INTEGER       NOT NULL DEFAULT 0,
            updated_at    TIMESTAMP     NOT NULL DEFAULT NOW(),
            CONSTRAINT daily_salesman_sales_sale_date_store_code_salesman_no_key
                UNIQUE (sale_date, store_code, salesman_no)
        );
    """)
    op.execute("""
        CREATE TABLE IF NOT EXISTS daily_sales_meta (
            sale_date     DATE PRIMARY KEY,
            sales_till    TIME,
            sales_till_ts TIMESTAMP,
            updated_at    TIMESTAMP NOT NULL DEFAULT NOW()
        );
    """)

    # ── Targets ──────────────────────────────────────────────────────────────
    op.execute("""
        CREATE TABLE IF NOT EXISTS daily_store_targets (
            id            SERIAL PRIMARY KEY,
            target_date   DATE          NOT NULL,
            store_code    VARCHAR(20)   NOT NULL,
            target_amount NUMERIC(14,2) NOT NULL DEFAULT 0,
            updated_at    TIMESTAMP     DEFAULT NOW(),
            CONSTRAINT daily_store_targets_target_date_store_code_key
                UNIQUE (target_date, store_code)
        );
    """)
    op.execute("""
        CREATE TABLE IF NOT EXISTS daily_salesman_targets (
            id            SERIAL PRIMARY KEY,
            target_date   DATE          NOT NULL,
            store_code    VARCHAR(20)   NOT NULL,
            salesman_no   VARCHAR(50)   NOT NULL,
            target_amount NUMERIC(14,2) NOT NULL DEFAULT 0,
            updated_at    TIMESTAMP     DEFAULT NOW(),
            CONSTRAINT daily_salesman_targets_date_store_salesman_key
                UNIQUE (target_date, store_code, salesman_no)
        );
    """)
    op.execute("""
        CREATE TABLE IF NOT EXISTS special_targets (
            id              SERIAL PRIMARY KEY,
            title           VARCHAR(200)  NOT NULL,
            store_code      VARCHAR(20),
            start_date      DATE          NOT NULL,
            end_date        DATE          NOT NULL,
            dimension       VARCHAR(20)   NOT NULL,
            dimension_value VARCHAR(200)  NOT NULL,
            metric          VARCHAR(20)   NOT NULL DEFAULT 'qty',
            target_value    NUMERIC(12,2) NOT NULL,
            created_at      TIMESTAMP     NOT NULL DEFAULT NOW(),
            CHECK (end_date >= start_date),
            CHECK (dimension IN ('dept', 'section', 'mark', 'style_no', 'barcode'))
        );
    """)

    # ── Audit ────────────────────────────────────────────────────────────────
    op.execute("""
        CREATE TABLE IF NOT EXISTS sync_logs (
            id              SERIAL PRIMARY KEY,
            source          VARCHAR(500) NOT NULL,
            trigger         VARCHAR(20)  NOT NULL DEFAULT 'manual',
            start_time      TIMESTAMP    NOT NULL DEFAULT NOW(),
            end_time        TIMESTAMP,
            status          VARCHAR(20)  NOT NULL DEFAULT 'running',
            rows_parsed     INTEGER      DEFAULT 0,
            rows_skipped    INTEGER      DEFAULT 0,
            records_written INTEGER      DEFAULT 0,
            error_message   TEXT
        );
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS idx_sync_logs_start
        ON sync_logs (start_time DESC);
    """)


def downgrade() -> None:
    for table in (
        "sync_logs", "special_targets", "daily_salesman_targets", "daily_store_targets",
        "daily_sales_meta", "daily_salesman_sales", "daily_store_sales", "stores",
    ):
        op.execute(f"DROP TABLE IF EXISTS {table};")
