from sqlalchemy import Column, Integer, String, DateTime, JSON, func
from database import Base
from models.base import utcnow

# One row per mutating API call on products or orders, successful or not
class Log(Base):
    __tablename__ = "logs"

    id = Column(Integer, primary_key=True, index=True)

    # Set in Python so rows written within the same second keep their order
    ts = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), index=True)
    action = Column(String(50), nullable=False, index=True)
    resource = Column(String(50), nullable=False, index=True)
    status = Column(String(20), nullable=False, index=True)
    ip = Column(String(64), nullable=True)

    # Identifiers and request details of the action
    meta = Column(JSON, nullable=True)
