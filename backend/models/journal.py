from sqlalchemy import Column, Integer, String, Float, Text, DateTime, ForeignKey
from database import Base, utcnow


class JournalEntry(Base):
    __tablename__ = "journal_entries"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime, default=utcnow, index=True)
    sentiment = Column(Float, nullable=True)  # -1..1, set by the analyzer
    positivity_tag = Column(String(120), nullable=True)  # e.g. "Negative • anxious"
