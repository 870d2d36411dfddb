from sqlalchemy import Column, Integer, Boolean, DateTime, ForeignKey
from database import Base, utcnow


class FeatureSelection(Base):
    __tablename__ = "feature_selections"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    calendar = Column(Boolean, default=True)
    journal = Column(Boolean, default=True)
    ai_workout = Column(Boolean, default=True)
    sleep = Column(Boolean, default=False)
    created_at = Column(DateTime, default=utcnow)
