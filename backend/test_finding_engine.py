import itertools
from datetime import timedelta
from types import SimpleNamespace

import pytest

from models.analyzer_finding import AnalyzerFinding
from services.finding_engine import (
    ALERT,
    ALERT_FALLBACK,
    ALERT_TITLE,
    REINFORCEMENT,
    REINFORCEMENT_TITLE,
    FindingDecision,
    alert_severity,
    compose_alert_message,
    decide,
    relative_time,
    upsert_finding,
)
from services.sentiment_classifier import JournalAnalysisResult
from services.signal_aggregator import SignalVector


def result(urgency="Low", label="Neutral", tones=(), summary=""):
    return JournalAnalysisResult(entry_id=1, sentiment=0.0, label=label, tones=list(tones),
                                 stressors=[], urgency=urgency, summary=summary)


class TestRelativeTime:
    @pytest.mark.parametrize("delta, expected", [
        (timedelta(seconds=20), "less than a minute ago"),
        (timedelta(minutes=5), "5 minutes ago"),
        (timedelta(hours=2), "about 2 hours ago"),
        (timedelta(hours=30), "1 day ago"),
        (timedelta(days=3), "3 days ago"),
        (timedelta(days=45), "about 1 month ago"),
        (timedelta(days=59), "about 1 month ago"),
        (timedelta(days=70), "2 months ago"),
        (timedelta(days=400), "about 1 year ago"),
        (timedelta(days=548), "over 1 year ago"),
        (timedelta(days=670), "almost 2 years ago"),
        (timedelta(days=730), "about 2 years ago"),
    ])
    def test_past(self, now, delta, expected):
        assert relative_time(now - delta, now) == expected

    def test_future(self, now):
        assert relative_time(now + timedelta(minutes=5), now) == "in 5 minutes"


class TestDecide:
    def test_alert_from_mood_and_negative_entries(self):
        signals = SignalVector(sentiment_average=-0.3, negative_entries=3)

        decision = decide(signals)

        assert decision.type == ALERT
        assert decision.title == ALERT_TITLE
        assert "average sentiment -0.30 across last 7 days" in decision.message
        assert "3 journal entries flagged as negative in the last week." in decision.message
        assert decision.severity == 5

    def test_reinforcement_when_everything_is_on_track(self):
        signals = SignalVector(sentiment_average=0.4, workout_count=1)

        decision = decide(signals)

        assert decision.type == REINFORCEMENT
        assert decision.title == REINFORCEMENT_TITLE
        assert decision.severity == 2
        assert "on track" in decision.message
        assert "no recurring stressors" in decision.message.lower()
        assert "0.40" in decision.message

    def test_no_finding_for_neutral_week(self):
        assert decide(SignalVector(sentiment_average=0.1)) is None

    def test_single_overdue_task_still_allows_reinforcement(self):
        signals = SignalVector(sentiment_average=0.3, overdue_tasks=[object()], calendar_count=2)

        decision = decide(signals)

        assert decision.type == REINFORCEMENT
        assert "Calendar commitments" not in decision.message

    def test_overdue_tasks_alone_never_alert(self):
        signals = SignalVector(sentiment_average=0.0, overdue_tasks=[object()] * 5)

        assert decide(signals) is None

    def test_urgency_sentence_needs_low_urgency_results(self):
        low = decide(SignalVector(sentiment_average=0.5, analyses=[result("None"), result("Low")]))
        empty = decide(SignalVector(sentiment_average=0.5))

        assert "urgency remained low" in low.message
        assert "urgency remained low" not in empty.message

    def test_alert_message_order_and_detail(self, now):
        urgent = result("Critical", tones=["Panic"], summary="Can't keep up.")
        signals = SignalVector(
            sentiment_average=-0.5,
            negative_entries=2,
            overdue_workouts=[SimpleNamespace(scheduled_date=now - timedelta(days=3))] * 2,
            overdue_tasks=[object()] * 3,
            urgent_entries=[urgent],
            intense_tone_entries=[urgent],
            unique_intense_tones=["Panic"],
            top_stressors=["work", "sleep"],
        )

        message = compose_alert_message(signals, now)

        assert message == (
            "Mood trending down with average sentiment -0.50 across last 7 days. "
            "2 journal entries flagged as negative in the last week. "
            "2 workouts overdue. Next session was 3 days ago. "
            "3 tasks are behind schedule. "
            "1 journal entries flagged high urgency by tone analysis. "
            'Most urgent note: "Can\'t keep up." '
            "Intense emotional tones detected (Panic). "
            "Recurring stressors: work, sleep."
        )

    def test_alert_fallback_message(self):
        assert compose_alert_message(SignalVector()) == ALERT_FALLBACK

    def test_alert_and_reinforcement_are_mutually_exclusive(self):
        # Strongly positive mood does not stop an urgent entry from alerting.
        signals = SignalVector(sentiment_average=0.9, urgent_entries=[result("High")], workout_count=3)

        assert decide(signals).type == ALERT

    def test_severity_stays_within_bounds(self):
        for overdue, negatives, urgent, intense in itertools.product(range(4), range(4), range(3), range(3)):
            signals = SignalVector(
                sentiment_average=-0.5,
                negative_entries=negatives,
                overdue_workouts=[object()] * overdue,
                urgent_entries=[result("High")] * urgent,
                intense_tone_entries=[result()] * intense,
            )
            assert 2 <= alert_severity(signals) <= 5


class TestUpsertFinding:
    async def test_repeat_within_a_day_refreshes_in_place(self, store, user, now):
        first, refreshed = await upsert_finding(store, user.id, FindingDecision(ALERT, ALERT_TITLE, "one", 3), now)
        later = now + timedelta(hours=6)
        second, refreshed_again = await upsert_finding(
            store, user.id, FindingDecision(ALERT, ALERT_TITLE, "two", 5), later
        )

        rows = await store.findings.find_many(user_id=user.id, type=ALERT, title=ALERT_TITLE)
        assert refreshed is False
        assert refreshed_again is True
        assert len(rows) == 1
        assert second.id == first.id
        assert rows[0].message == "two"
        assert rows[0].severity == 5
        assert rows[0].created_at == later

    async def test_older_than_a_day_creates_new_row(self, store, user, now):
        await upsert_finding(store, user.id, FindingDecision(ALERT, ALERT_TITLE, "one", 3), now)
        await upsert_finding(store, user.id, FindingDecision(ALERT, ALERT_TITLE, "two", 3), now + timedelta(days=2))

        assert len(await store.findings.find_many(user_id=user.id)) == 2

    async def test_different_type_or_owner_is_not_deduplicated(self, store, user, now):
        other = await store.users.create({"email": "other@example.local"})
        await upsert_finding(store, user.id, FindingDecision(ALERT, ALERT_TITLE, "a", 3), now)
        await upsert_finding(store, user.id, FindingDecision(REINFORCEMENT, REINFORCEMENT_TITLE, "b", 2), now)
        await upsert_finding(store, other.id, FindingDecision(ALERT, ALERT_TITLE, "c", 3), now)

        assert len(await store.findings.find_many()) == 3
        assert await store.findings.find_first(AnalyzerFinding.user_id == other.id) is not None
