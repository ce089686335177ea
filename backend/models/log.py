from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, JSON
from database import Base

# Audit trail of mutating requests (who changed what is out of scope, so no user column)
class Log(Base):
    __tablename__ = "logs"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)

    # Event timestamp and core action details
    ts = Column(DateTime, default=datetime.now, index=True)
    action = Column(String(50), index=True)
    resource = Column(String(50), index=True)
    status = Column(String(20), index=True)
    ip = Column(String(64), nullable=True)

    # JSON container for flexible context data
    meta = Column(JSON, nullable=True)
