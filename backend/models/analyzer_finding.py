from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from database import Base, utcnow


class AnalyzerFinding(Base):
    __tablename__ = "analyzer_findings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    type = Column(String(20), nullable=False)  # ALERT/REINFORCEMENT
    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    severity = Column(Integer, nullable=False)  # 1-5
    created_at = Column(DateTime, default=utcnow)
