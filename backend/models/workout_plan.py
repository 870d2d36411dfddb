from sqlalchemy import Column, Integer, JSON, DateTime, ForeignKey
from database import Base, utcnow


class AIWorkoutPlan(Base):
    __tablename__ = "ai_workout_plans"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    request_payload = Column(JSON, nullable=False)
    response_payload = Column(JSON, nullable=False)
    created_at = Column(DateTime, default=utcnow)
