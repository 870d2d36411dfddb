"""
finding_engine.py - Alert / Reinforcement Decisions
Rule-based decision over the aggregated signals. At most one finding per run:
ALERT is checked first, REINFORCEMENT only when no alert fired. Persisting a
finding refreshes a same-titled one from the last day instead of duplicating it.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta

from database import utcnow
from models.analyzer_finding import AnalyzerFinding
from services.signal_aggregator import SignalVector
from services.store import Store

logger = logging.getLogger(__name__)

ALERT = "ALERT"
REINFORCEMENT = "REINFORCEMENT"
ALERT_TITLE = "Early Strain Detected"
REINFORCEMENT_TITLE = "Progress Momentum"
ALERT_FALLBACK = "Signals indicate mounting strain across multiple data sources."
REINFORCEMENT_FALLBACK = "Positive adherence detected—keep reinforcing these routines!"
MAX_SEVERITY = 5
REINFORCEMENT_SEVERITY = 2
DEDUP_WINDOW_DAYS = 1


@dataclass
class FindingDecision:
    type: str
    title: str
    message: str
    severity: int


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}" if count == 1 else f"{count} {unit}s"


def relative_time(then: datetime, now: datetime | None = None) -> str:
    """Human distance between two moments, e.g. "3 days ago" or "in about 2 hours"."""
    now = now or utcnow()
    seconds = abs((now - then).total_seconds())
    minutes = round(seconds / 60)

    if seconds < 30:
        distance = "less than a minute"
    elif minutes < 45:
        distance = _plural(max(minutes, 1), "minute")
    elif minutes < 90:
        distance = "about 1 hour"
    elif minutes < 1440:
        distance = f"about {round(minutes / 60)} hours"
    elif minutes < 2520:
        distance = "1 day"
    elif minutes < 43200:
        distance = _plural(round(minutes / 1440), "day")
    elif minutes < 86400:
        distance = "about 1 month"
    elif minutes < 525600:
        distance = _plural(round(minutes / 43200), "month")
    else:
        months = int(minutes // 43200)
        years, leftover = divmod(months, 12)
        if leftover < 3:
            distance = f"about {_plural(years, 'year')}"
        elif leftover < 9:
            distance = f"over {_plural(years, 'year')}"
        else:
            distance = f"almost {years + 1} years"

    return f"{distance} ago" if then <= now else f"in {distance}"


def alert_triggered(signals: SignalVector) -> bool:
    return (
        signals.sentiment_average < -0.2
        or signals.negative_entries >= 2
        or len(signals.overdue_workouts) >= 2
        or len(signals.urgent_entries) > 0
        or len(signals.intense_tone_entries) >= 2
    )


def reinforcement_triggered(signals: SignalVector) -> bool:
    return (
        signals.sentiment_average > 0.25
        and len(signals.overdue_workouts) == 0
        and len(signals.overdue_tasks) <= 1
        and len(signals.urgent_entries) == 0
        and signals.negative_entries == 0
    )


def alert_severity(signals: SignalVector) -> int:
    score = (
        2
        + len(signals.overdue_workouts)
        + signals.negative_entries
        + len(signals.urgent_entries) * 2
        + (1 if signals.intense_tone_entries else 0)
    )
    return min(MAX_SEVERITY, score)


def compose_alert_message(signals: SignalVector, now: datetime | None = None) -> str:
    parts = []
    if signals.sentiment_average < -0.2:
        parts.append(
            f"Mood trending down with average sentiment {signals.sentiment_average:.2f} across last 7 days."
        )
    if signals.negative_entries >= 2:
        parts.append(f"{signals.negative_entries} journal entries flagged as negative in the last week.")
    if len(signals.overdue_workouts) >= 2:
        first = signals.overdue_workouts[0]
        parts.append(
            f"{len(signals.overdue_workouts)} workouts overdue. "
            f"Next session was {relative_time(first.scheduled_date, now)}."
        )
    # Tasks never trigger an alert on their own, they only add detail.
    if len(signals.overdue_tasks) >= 3:
        parts.append(f"{len(signals.overdue_tasks)} tasks are behind schedule.")
    if signals.urgent_entries:
        parts.append(f"{len(signals.urgent_entries)} journal entries flagged high urgency by tone analysis.")
        if signals.urgent_entries[0].summary:
            parts.append(f'Most urgent note: "{signals.urgent_entries[0].summary}"')
    if signals.unique_intense_tones:
        parts.append(f"Intense emotional tones detected ({', '.join(signals.unique_intense_tones)}).")
    if signals.top_stressors:
        parts.append(f"Recurring stressors: {', '.join(signals.top_stressors)}.")
    return " ".join(parts) or ALERT_FALLBACK


def compose_reinforcement_message(signals: SignalVector) -> str:
    parts = []
    if signals.sentiment_average > 0.2:
        parts.append(f"Great emotional momentum with average sentiment {signals.sentiment_average:.2f}.")
    if not signals.overdue_workouts and signals.workout_count > 0:
        parts.append("All scheduled workouts are on track—consistency unlocked.")
    if signals.calendar_count > 0 and not signals.overdue_tasks:
        parts.append("Calendar commitments are all current.")
    if signals.positive_tone_entries:
        parts.append(
            f"{len(signals.positive_tone_entries)} journal entries reflected optimistic or grounded tone."
        )
    if signals.analyses and all(a.urgency in ("None", "Low") for a in signals.analyses):
        parts.append("Journal urgency remained low across recent reflections.")
    if not signals.top_stressors:
        parts.append("No recurring stressors detected in recent journal entries.")
    return " ".join(parts) or REINFORCEMENT_FALLBACK


def decide(signals: SignalVector, now: datetime | None = None) -> FindingDecision | None:
    """ALERT wins outright; REINFORCEMENT is only considered when it did not fire."""
    if alert_triggered(signals):
        return FindingDecision(
            type=ALERT,
            title=ALERT_TITLE,
            message=compose_alert_message(signals, now),
            severity=alert_severity(signals),
        )
    if reinforcement_triggered(signals):
        return FindingDecision(
            type=REINFORCEMENT,
            title=REINFORCEMENT_TITLE,
            message=compose_reinforcement_message(signals),
            severity=REINFORCEMENT_SEVERITY,
        )
    return None


async def upsert_finding(store: Store, user_id: int, decision: FindingDecision,
                         now: datetime | None = None) -> tuple[AnalyzerFinding, bool]:
    """Upsert keyed on (owner, type, title) within the last day.

    Returns the finding and whether an existing row was refreshed in place.
    """
    now = now or utcnow()
    existing = await store.findings.find_first(
        AnalyzerFinding.created_at >= now - timedelta(days=DEDUP_WINDOW_DAYS),
        user_id=user_id,
        type=decision.type,
        title=decision.title,
        order_by=AnalyzerFinding.created_at.desc(),
    )

    if existing:
        finding = await store.findings.update(existing.id, {
            "message": decision.message,
            "severity": decision.severity,
            "created_at": now,
        })
        logger.info("Refreshed %s finding %r (severity %s)", decision.type, decision.title, decision.severity)
        return finding, True

    finding = await store.findings.create({
        "user_id": user_id,
        "type": decision.type,
        "title": decision.title,
        "message": decision.message,
        "severity": decision.severity,
        "created_at": now,
    })
    logger.info("Created %s finding %r (severity %s)", decision.type, decision.title, decision.severity)
    return finding, False
