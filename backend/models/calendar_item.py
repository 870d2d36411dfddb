from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey
from database import Base


class CalendarItem(Base):
    __tablename__ = "calendar_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(300), nullable=False)
    due_date = Column(DateTime, nullable=False)
    completed = Column(Boolean, default=False)
