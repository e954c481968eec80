from sqlalchemy import Column, Integer, String, DateTime, Text, func
from ..database import Base


class SyncLog(Base):
    """
    Audit log for sales sync runs (scheduled, manual, or local file).
    """
    __tablename__ = "sync_logs"

    id               = Column(Integer, primary_key=True)
    source           = Column(String(500), nullable=False)   # storage key or file path
    trigger          = Column(String(20), nullable=False, default="manual")  # 'manual' | 'schedule' | 'file'
    start_time       = Column(DateTime, server_default=func.now(), nullable=False)
    end_time         = Column(DateTime)
    status           = Column(String(20), nullable=False, default="running")
    rows_parsed      = Column(Integer, default=0)
    rows_skipped     = Column(Integer, default=0)
    records_written  = Column(Integer, default=0)
    error_message    = Column(Text)
