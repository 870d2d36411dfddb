"""
store.py - Store Gateway
Thin async facade over SQLAlchemy: one Collection per entity, each exposing
the generic find/create/update/delete operations the analyzer relies on.
"""

import logging

from sqlalchemy.orm import Session

from models.user import User
from models.feature_selection import FeatureSelection
from models.journal import JournalEntry
from models.workout_log import WorkoutLog
from models.calendar_item import CalendarItem
from models.analyzer_finding import AnalyzerFinding
from models.api_usage import APIUsage
from models.workout_plan import AIWorkoutPlan

logger = logging.getLogger(__name__)


class Collection:
    """Typed read/write operations over a single model."""

    def __init__(self, db: Session, model):
        self.db = db
        self.model = model

    def _query(self, criteria, filters):
        query = self.db.query(self.model)
        if filters:
            query = query.filter_by(**filters)
        if criteria:
            query = query.filter(*criteria)
        return query

    def _commit(self):
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            logger.error("Store write failed on %s", self.model.__tablename__)
            raise

    async def find_many(self, *criteria, order_by=None, limit: int | None = None, **filters) -> list:
        query = self._query(criteria, filters)
        if order_by is not None:
            query = query.order_by(order_by)
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    async def find_first(self, *criteria, order_by=None, **filters):
        query = self._query(criteria, filters)
        if order_by is not None:
            query = query.order_by(order_by)
        return query.first()

    async def create(self, data: dict):
        record = self.model(**data)
        self.db.add(record)
        self._commit()
        self.db.refresh(record)
        return record

    async def create_many(self, rows: list[dict]) -> int:
        records = [self.model(**row) for row in rows]
        self.db.add_all(records)
        self._commit()
        return len(records)

    async def update(self, record_id: int, data: dict):
        record = self.db.get(self.model, record_id)
        if record is None:
            return None
        for key, value in data.items():
            setattr(record, key, value)
        self._commit()
        self.db.refresh(record)
        return record

    async def update_many(self, data: dict, *criteria, **filters) -> int:
        count = self._query(criteria, filters).update(data, synchronize_session="fetch")
        self._commit()
        return count

    async def delete_many(self, *criteria, **filters) -> int:
        count = self._query(criteria, filters).delete(synchronize_session="fetch")
        self._commit()
        return count


class Store:
    """One Collection per persisted entity, all sharing a session."""

    def __init__(self, db: Session):
        self.db = db
        self.users = Collection(db, User)
        self.feature_selections = Collection(db, FeatureSelection)
        self.journal_entries = Collection(db, JournalEntry)
        self.workout_logs = Collection(db, WorkoutLog)
        self.calendar_items = Collection(db, CalendarItem)
        self.findings = Collection(db, AnalyzerFinding)
        self.api_usage = Collection(db, APIUsage)
        self.workout_plans = Collection(db, AIWorkoutPlan)
