from sqlalchemy import (
    Column, Integer, String, Date, DateTime, Time,
    Numeric, func, UniqueConstraint, Index,
)
from ..database import Base


class DailyStoreSales(Base):
    """
    Grain: (sale_date, store_code)
    Source: POS extract, recomputed on every sync run.
    bill_count is the number of distinct bill numbers, not line items.
    """
    __tablename__ = "daily_store_sales"

    id         = Column(Integer, primary_key=True)
    sale_date  = Column(Date, nullable=False)
    store_code = Column(String(20), nullable=False)
    net_sales  = Column(Numeric(14, 2), nullable=False, default=0)
    qty        = Column(Numeric(12, 2), nullable=False, default=0)
    bill_count = Column(Integer, nullable=False, default=0)
    updated_at = Column(DateTime, server_default=func.now(), nullable=False)

    __table_args__ = (
        UniqueConstraint("sale_date", "store_code"),
        Index("idx_store_sales_store_date", "store_code", "sale_date"),
    )


class DailySalesmanSales(Base):
    """
    Grain: (sale_date, store_code, salesman_no)
    Same replace-on-rerun rule as DailyStoreSales, one level finer.
    """
    __tablename__ = "daily_salesman_sales"

    id            = Column(Integer, primary_key=True)
    sale_date     = Column(Date, nullable=False)
    store_code    = Column(String(20), nullable=False)
    salesman_no   = Column(String(50), nullable=False)
    salesman_name = Column(String(200))
    net_sales     = Column(Numeric(14, 2), nullable=False, default=0)
    qty           = Column(Numeric(12, 2), nullable=False, default=0)
    bill_count    = Column(Integer, nullable=False, default=0)
    updated_at    = Column(DateTime, server_default=func.now(), nullable=False)

    __table_args__ = (
        UniqueConstraint("sale_date", "store_code", "salesman_no"),
    )


class DailySalesMeta(Base):
    """Latest bill time contained in the extract for each sale date."""
    __tablename__ = "daily_sales_meta"

    sale_date     = Column(Date, primary_key=True)
    sales_till    = Column(Time)
    sales_till_ts = Column(DateTime)
    updated_at    = Column(DateTime, server_default=func.now(), nullable=False)
