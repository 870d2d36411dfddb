"""
signal_aggregator.py - Multi-source Signal Vector
Combines the week's journal sentiment, overdue workouts and tasks, and this
run's tone analysis into the signals the finding engine decides on.
"""

import re
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from database import utcnow
from models.journal import JournalEntry
from models.workout_log import WorkoutLog
from models.calendar_item import CalendarItem
from services.sentiment_classifier import JournalAnalysisResult
from services.store import Store

AGGREGATION_WINDOW_DAYS = 7
NEGATIVE_SENTIMENT = -0.25
URGENT_LEVELS = {"High", "Critical"}
INTENSE_TONE = re.compile(r"(anxious|overwhelmed|angry|stressed|burned|panic|fear)", re.IGNORECASE)
POSITIVE_TONE = re.compile(r"(calm|grateful|motivated|confident|proud|energized)", re.IGNORECASE)
TOP_STRESSOR_COUNT = 3


@dataclass
class SignalVector:
    sentiment_average: float = 0.0
    negative_entries: int = 0
    overdue_workouts: list[WorkoutLog] = field(default_factory=list)
    overdue_tasks: list[CalendarItem] = field(default_factory=list)
    urgent_entries: list[JournalAnalysisResult] = field(default_factory=list)
    intense_tone_entries: list[JournalAnalysisResult] = field(default_factory=list)
    positive_tone_entries: list[JournalAnalysisResult] = field(default_factory=list)
    top_stressors: list[str] = field(default_factory=list)
    unique_intense_tones: list[str] = field(default_factory=list)
    analyses: list[JournalAnalysisResult] = field(default_factory=list)
    workout_count: int = 0
    calendar_count: int = 0


def average(values: list[float]) -> float:
    if not values:
        return 0.0
    return sum(values) / len(values)


def is_overdue_workout(workout: WorkoutLog, now: datetime) -> bool:
    return not workout.completed and workout.scheduled_date < now


def is_overdue_task(item: CalendarItem, now: datetime) -> bool:
    # Day granularity: anything due today or earlier counts.
    return not item.completed and item.due_date.date() <= now.date()


def top_stressors(analyses: list[JournalAnalysisResult], limit: int = TOP_STRESSOR_COUNT) -> list[str]:
    counts = Counter()
    for analysis in analyses:
        for stressor in analysis.stressors:
            key = stressor.strip()
            if key:
                counts[key] += 1
    # Counter keeps insertion order and sorted() is stable, so ties stay first-seen.
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [label for label, _ in ranked[:limit]]


def unique_intense_tones(analyses: list[JournalAnalysisResult]) -> list[str]:
    seen: dict[str, str] = {}
    for analysis in analyses:
        for tone in analysis.tones:
            if not INTENSE_TONE.search(tone):
                continue
            key = tone.strip().lower()
            if key and key not in seen:
                seen[key] = tone.strip()
    return list(seen.values())


def compute_signals(journals: list[JournalEntry], workouts: list[WorkoutLog],
                    calendar_items: list[CalendarItem], analyses: list[JournalAnalysisResult],
                    now: datetime) -> SignalVector:
    """Pure computation over already-loaded records."""
    sentiments = [entry.sentiment if entry.sentiment is not None else 0.0 for entry in journals]
    intense = [a for a in analyses if any(INTENSE_TONE.search(tone) for tone in a.tones)]

    return SignalVector(
        sentiment_average=average(sentiments),
        negative_entries=sum(1 for value in sentiments if value < NEGATIVE_SENTIMENT),
        overdue_workouts=[w for w in workouts if is_overdue_workout(w, now)],
        overdue_tasks=[c for c in calendar_items if is_overdue_task(c, now)],
        urgent_entries=[a for a in analyses if a.urgency in URGENT_LEVELS],
        intense_tone_entries=intense,
        positive_tone_entries=[
            a for a in analyses
            if a.label == "Positive" or any(POSITIVE_TONE.search(tone) for tone in a.tones)
        ],
        top_stressors=top_stressors(analyses),
        unique_intense_tones=unique_intense_tones(intense),
        analyses=list(analyses),
        workout_count=len(workouts),
        calendar_count=len(calendar_items),
    )


class SignalAggregator:
    def __init__(self, store: Store):
        self.store = store

    async def aggregate(self, user_id: int, analyses: list[JournalAnalysisResult],
                        now: datetime | None = None) -> SignalVector:
        now = now or utcnow()
        journals = await self.store.journal_entries.find_many(
            JournalEntry.created_at >= now - timedelta(days=AGGREGATION_WINDOW_DAYS),
            user_id=user_id,
        )
        # Workouts and tasks are not windowed so old pending items still count.
        workouts = await self.store.workout_logs.find_many(user_id=user_id, order_by=WorkoutLog.id.asc())
        calendar_items = await self.store.calendar_items.find_many(user_id=user_id, order_by=CalendarItem.id.asc())
        return compute_signals(journals, workouts, calendar_items, analyses, now)
