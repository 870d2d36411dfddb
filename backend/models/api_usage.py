from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey
from database import Base, utcnow


class APIUsage(Base):
    __tablename__ = "api_usage"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    provider = Column(String(50), nullable=False)
    model = Column(String(100), nullable=True)
    units = Column(Integer, default=0)  # estimated calls, one per scored entry
    estimated_cents = Column(Float, nullable=True)
    timestamp = Column(DateTime, default=utcnow)
