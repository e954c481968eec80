from sqlalchemy import Column, Integer, String, Boolean, DateTime, func
from ..database import Base


class Store(Base):
    __tablename__ = "stores"

    id         = Column(Integer, primary_key=True)
    code       = Column(String(20), unique=True, nullable=False)
    name       = Column(String(200), nullable=False)
    is_active  = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
