"""
usage_tracker.py - Estimated AI Usage
Per-run counter of estimated provider units. Nothing here throttles calls;
the totals are flushed to the api_usage table for reporting.
"""

from datetime import datetime, timedelta

from database import utcnow
from models.api_usage import APIUsage
from services.store import Store


class UsageTracker:
    def __init__(self, provider: str = "openai", model: str | None = None, user_id: int | None = None):
        self.provider = provider
        self.model = model
        self.user_id = user_id
        self.units = 0

    def track(self, units: int) -> int:
        self.units += units
        return self.units

    async def flush(self, store: Store, now: datetime | None = None):
        """Persist the units counted so far as one api_usage row and reset."""
        if self.units <= 0:
            return None
        record = await store.api_usage.create({
            "user_id": self.user_id,
            "provider": self.provider,
            "model": self.model,
            "units": self.units,
            "estimated_cents": float(self.units),
            "timestamp": now or utcnow(),
        })
        self.units = 0
        return record

    @staticmethod
    async def spent_today(store: Store, now: datetime | None = None) -> int:
        now = now or utcnow()
        day_start = now.replace(hour=0, minute=0, second=0, microsecond=0)
        rows = await store.api_usage.find_many(
            APIUsage.timestamp >= day_start,
            APIUsage.timestamp < day_start + timedelta(days=1),
        )
        return sum(row.units or 0 for row in rows)
