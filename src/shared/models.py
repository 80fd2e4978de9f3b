from datetime import datetime
from sqlalchemy import Column, DateTime, Integer
from src.database import Base

class IntegerIDMixin:
    id = Column(Integer, primary_key=True, autoincrement=True)

class TimestampMixin:
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

class AuditMixin(IntegerIDMixin, TimestampMixin):
    """Combines integer id and timestamps for standard entities."""
    pass
