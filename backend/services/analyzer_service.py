"""
analyzer_service.py - Analyzer Run
Sequences one analyzer pass for an owner: score recent journals, aggregate
signals, decide on a finding, and report a summary. Each call is independent;
everything it needs is read back from the store.
"""

import logging
from datetime import datetime

from config import OPENAI_MAX_DAILY_CENTS
from database import utcnow
from providers.base import BaseProvider
from services.finding_engine import decide, upsert_finding
from services.journal_scorer import JournalScorer
from services.sentiment_classifier import SentimentClassifier
from services.signal_aggregator import SignalAggregator, SignalVector
from services.store import Store
from services.usage_tracker import UsageTracker
from services.user_service import get_demo_user

logger = logging.getLogger(__name__)


def build_summary(signals: SignalVector, scored: int, finding: dict | None, units: int, spent_today: int) -> dict:
    return {
        "sentimentAverage": signals.sentiment_average,
        "negativeEntries": signals.negative_entries,
        "overdueWorkoutCount": len(signals.overdue_workouts),
        "overdueTaskCount": len(signals.overdue_tasks),
        "urgentJournalEntryCount": len(signals.urgent_entries),
        "intenseToneEntryCount": len(signals.intense_tone_entries),
        "topStressors": list(signals.top_stressors),
        "scoredEntries": scored,
        "finding": finding,
        "estimatedUnits": units,
        "spentTodayCents": spent_today,
        "budgetCents": OPENAI_MAX_DAILY_CENTS,
    }


class AnalyzerService:
    def __init__(self, store: Store, provider: BaseProvider, model: str | None = None):
        self.store = store
        self.provider = provider
        self.classifier = SentimentClassifier(provider, model)

    async def run(self, user_id: int | None = None, now: datetime | None = None) -> dict:
        """Run the analyzer once for an owner (the demo user when none is given)."""
        now = now or utcnow()
        if user_id is None:
            user_id = (await get_demo_user(self.store)).id

        tracker = UsageTracker(provider=self.provider.name, model=self.classifier.model, user_id=user_id)

        try:
            analyses = await JournalScorer(self.store, self.classifier, tracker).score(user_id, now)
            signals = await SignalAggregator(self.store).aggregate(user_id, analyses, now)

            finding = None
            decision = decide(signals, now)
            if decision is not None:
                record, refreshed = await upsert_finding(self.store, user_id, decision, now)
                finding = {
                    "id": record.id,
                    "type": record.type,
                    "title": record.title,
                    "severity": record.severity,
                    "refreshed": refreshed,
                }
        finally:
            # Classifier calls already made are recorded even when the run fails.
            units = tracker.units
            await tracker.flush(self.store, now)

        spent = await UsageTracker.spent_today(self.store, now)
        summary = build_summary(signals, len(analyses), finding, units, spent)
        logger.info("Analyzer run complete %s", summary)
        return summary
