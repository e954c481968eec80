from sqlalchemy import (
    Column, Integer, String, Date, DateTime,
    Numeric, func, UniqueConstraint, CheckConstraint,
)
from ..database import Base

SPECIAL_DIMENSIONS = ("dept", "section", "mark", "style_no", "barcode")


class DailyStoreTarget(Base):
    __tablename__ = "daily_store_targets"

    id            = Column(Integer, primary_key=True)
    target_date   = Column(Date, nullable=False)
    store_code    = Column(String(20), nullable=False)
    target_amount = Column(Numeric(14, 2), nullable=False, default=0)
    updated_at    = Column(DateTime, server_default=func.now())

    __table_args__ = (
        UniqueConstraint("target_date", "store_code"),
    )


class DailySalesmanTarget(Base):
    __tablename__ = "daily_salesman_targets"

    id            = Column(Integer, primary_key=True)
    target_date   = Column(Date, nullable=False)
    store_code    = Column(String(20), nullable=False)
    salesman_no   = Column(String(50), nullable=False)
    target_amount = Column(Numeric(14, 2), nullable=False, default=0)
    updated_at    = Column(DateTime, server_default=func.now())

    __table_args__ = (
        UniqueConstraint("target_date", "store_code", "salesman_no"),
    )


class SpecialTarget(Base):
    """
    Quantity goal on a product dimension over a date range.
    store_code NULL means chain-wide. Every creation inserts a new row.
    """
    __tablename__ = "special_targets"

    id              = Column(Integer, primary_key=True)
    title           = Column(String(200), nullable=False)
    store_code      = Column(String(20))
    start_date      = Column(Date, nullable=False)
    end_date        = Column(Date, nullable=False)
    dimension       = Column(String(20), nullable=False)
    dimension_value = Column(String(200), nullable=False)
    metric          = Column(String(20), nullable=False, default="qty")
    target_value    = Column(Numeric(12, 2), nullable=False)
    created_at      = Column(DateTime, server_default=func.now(), nullable=False)

    __table_args__ = (
        CheckConstraint("end_date >= start_date"),
        CheckConstraint(
            "dimension IN ('dept', 'section', 'mark', 'style_no', 'barcode')"
        ),
    )
