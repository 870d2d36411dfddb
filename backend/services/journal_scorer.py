"""
journal_scorer.py - Journal Sentiment Scoring
Scores the oldest recent journal entries one at a time and writes the derived
sentiment and positivity tag back to each entry.
"""

import logging
from datetime import datetime, timedelta

from database import utcnow
from models.journal import JournalEntry
from services.sentiment_classifier import JournalAnalysisResult, SentimentClassifier
from services.store import Store
from services.usage_tracker import UsageTracker

logger = logging.getLogger(__name__)

SCORING_WINDOW_DAYS = 3
BATCH_LIMIT = 5


class JournalScorer:
    def __init__(self, store: Store, classifier: SentimentClassifier, tracker: UsageTracker | None = None):
        self.store = store
        self.classifier = classifier
        self.tracker = tracker

    async def select_entries(self, user_id: int, now: datetime | None = None) -> list[JournalEntry]:
        """Entries from the last 3 days, oldest first, capped at the batch limit."""
        since = (now or utcnow()) - timedelta(days=SCORING_WINDOW_DAYS)
        return await self.store.journal_entries.find_many(
            JournalEntry.created_at >= since,
            user_id=user_id,
            order_by=JournalEntry.created_at.asc(),
            limit=BATCH_LIMIT,
        )

    async def score(self, user_id: int, now: datetime | None = None) -> list[JournalAnalysisResult]:
        entries = await self.select_entries(user_id, now)
        if not entries:
            return []

        if self.tracker is not None:
            self.tracker.track(len(entries))

        results: list[JournalAnalysisResult] = []
        for entry in entries:
            # Store write failures are not caught here so they abort the run
            try:
                payload = await self.classifier.classify(entry.content)
            except Exception as e:
                logger.error("Failed to score journal entry %s: %s", entry.id, e)
                continue

            await self.store.journal_entries.update(entry.id, {
                "sentiment": payload.sentiment,
                "positivity_tag": payload.positivity_tag,
            })
            results.append(JournalAnalysisResult(
                entry_id=entry.id,
                sentiment=payload.sentiment,
                label=payload.label,
                tones=payload.tones,
                stressors=payload.stressors,
                urgency=payload.urgency,
                summary=payload.summary,
            ))

        return results
