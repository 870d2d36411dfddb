from datetime import timedelta
from types import SimpleNamespace

import pytest

from services.sentiment_classifier import JournalAnalysisResult
from services.signal_aggregator import (
    SignalAggregator,
    compute_signals,
    is_overdue_task,
    top_stressors,
    unique_intense_tones,
)


def analysis(entry_id=1, label="Neutral", tones=(), stressors=(), urgency="Low", summary=""):
    return JournalAnalysisResult(entry_id=entry_id, sentiment=0.0, label=label, tones=list(tones),
                                 stressors=list(stressors), urgency=urgency, summary=summary)


def journal(sentiment):
    return SimpleNamespace(sentiment=sentiment)


def workout(scheduled_date, completed=False):
    return SimpleNamespace(scheduled_date=scheduled_date, completed=completed)


def task(due_date, completed=False):
    return SimpleNamespace(due_date=due_date, completed=completed)


class TestComputeSignals:
    def test_empty_inputs(self, now):
        signals = compute_signals([], [], [], [], now)

        assert signals.sentiment_average == 0.0
        assert signals.negative_entries == 0
        assert signals.overdue_workouts == []
        assert signals.top_stressors == []

    def test_unscored_entries_count_as_zero_sentiment(self, now):
        signals = compute_signals([journal(-0.6), journal(None), journal(-0.3)], [], [], [], now)

        assert signals.sentiment_average == pytest.approx(-0.3)
        assert signals.negative_entries == 2

    def test_negative_threshold_is_strict(self, now):
        signals = compute_signals([journal(-0.25), journal(-0.26)], [], [], [], now)

        assert signals.negative_entries == 1

    def test_overdue_workouts(self, now):
        workouts = [
            workout(now - timedelta(minutes=1)),
            workout(now - timedelta(days=30)),
            workout(now - timedelta(days=2), completed=True),
            workout(now + timedelta(hours=1)),
        ]

        signals = compute_signals([], workouts, [], [], now)

        assert len(signals.overdue_workouts) == 2
        assert signals.workout_count == 4

    def test_overdue_tasks_use_calendar_days(self, now):
        late_today = now.replace(hour=23, minute=59)
        tomorrow = now + timedelta(days=1)

        assert is_overdue_task(task(late_today), now)
        assert is_overdue_task(task(now - timedelta(days=9)), now)
        assert not is_overdue_task(task(tomorrow.replace(hour=0, minute=1)), now)
        assert not is_overdue_task(task(now - timedelta(days=1), completed=True), now)

    def test_urgent_entries(self, now):
        analyses = [analysis(urgency="High"), analysis(urgency="Critical"), analysis(urgency="Medium")]

        assert len(compute_signals([], [], [], analyses, now).urgent_entries) == 2

    def test_intense_tones_match_case_insensitive_substrings(self, now):
        analyses = [
            analysis(1, tones=["Overwhelmed at work", "tired"]),
            analysis(2, tones=["overwhelmed at work", "Panicky"]),
            analysis(3, tones=["content"]),
        ]

        signals = compute_signals([], [], [], analyses, now)

        assert [a.entry_id for a in signals.intense_tone_entries] == [1, 2]
        assert signals.unique_intense_tones == ["Overwhelmed at work", "Panicky"]

    def test_positive_tone_entries(self, now):
        analyses = [
            analysis(1, label="Positive"),
            analysis(2, tones=["Grateful"]),
            analysis(3, tones=["flat"]),
        ]

        signals = compute_signals([], [], [], analyses, now)

        assert [a.entry_id for a in signals.positive_tone_entries] == [1, 2]


class TestStressors:
    def test_top_three_by_frequency_with_first_seen_ties(self):
        analyses = [
            analysis(stressors=["sleep", "work ", "money"]),
            analysis(stressors=["family", "work", "  "]),
            analysis(stressors=["family", "commute"]),
        ]

        assert top_stressors(analyses) == ["work", "family", "sleep"]

    def test_unique_intense_tones_trim_and_keep_first_casing(self):
        analyses = [analysis(tones=[" Stressed ", "ANGRY"]), analysis(tones=["stressed", "angry"])]

        assert unique_intense_tones(analyses) == ["Stressed", "ANGRY"]


class TestSignalAggregator:
    async def test_reads_week_of_journals_and_all_workouts_and_tasks(self, store, user, now):
        await store.journal_entries.create_many([
            {"user_id": user.id, "content": "a", "sentiment": -0.5, "created_at": now - timedelta(days=6)},
            {"user_id": user.id, "content": "b", "sentiment": -0.9, "created_at": now - timedelta(days=8)},
            {"user_id": user.id, "content": "c", "sentiment": 0.1, "created_at": now - timedelta(hours=1)},
        ])
        await store.workout_logs.create_many([
            {"user_id": user.id, "title": "Ancient", "scheduled_date": now - timedelta(days=120)},
            {"user_id": user.id, "title": "Done", "scheduled_date": now - timedelta(days=1), "completed": True},
        ])
        await store.calendar_items.create_many([
            {"user_id": user.id, "title": "Taxes", "due_date": now - timedelta(days=60)},
        ])

        signals = await SignalAggregator(store).aggregate(user.id, [], now)

        assert signals.sentiment_average == pytest.approx(-0.2)
        assert signals.negative_entries == 1
        assert [w.title for w in signals.overdue_workouts] == ["Ancient"]
        assert [t.title for t in signals.overdue_tasks] == ["Taxes"]
        assert signals.workout_count == 2
        assert signals.calendar_count == 1
