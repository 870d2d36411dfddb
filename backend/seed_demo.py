#!/usr/bin/env python3
"""
Reset the demo user's data and load a small sample dataset.
"""
import asyncio
import logging
import sys
from datetime import timedelta

from config import LOG_LEVEL
from database import SessionLocal, init_db, utcnow
from services.store import Store
from services.user_service import get_demo_user

logger = logging.getLogger("seed_demo")

SAMPLE_PLAN = {
    "programName": "Adaptation Accelerator",
    "type": "Hybrid Strength",
    "duration": "4 weeks",
    "overview": "Blend foundational strength work with mobility and conditioning to reinforce adaptability across stressful weeks.",
    "days": [
        {
            "day": "Day 1 - Lower Foundation",
            "focus": "Strength + Stability",
            "exercises": [
                {"name": "Back Squat", "sets": 4, "reps": "5", "rest": 150, "notes": "RPE 7. Focus on bracing."},
                {"name": "Romanian Deadlift", "sets": 3, "reps": "8", "rest": 120, "notes": "Tempo 3-1-1."},
            ],
        },
        {
            "day": "Day 2 - Neural Recharge",
            "focus": "Mobility + Aerobic",
            "exercises": [
                {"name": "Couch Stretch", "sets": 3, "reps": "45 sec/side", "rest": 30, "notes": "Breathe deep."},
                {"name": "Zone 2 Bike", "sets": 1, "reps": "20 min", "rest": 0, "notes": "Maintain nasal breathing."},
            ],
        },
    ],
}


async def seed(store: Store) -> dict:
    user = await get_demo_user(store)
    uid = user.id

    for collection in (store.findings, store.calendar_items, store.workout_logs,
                       store.journal_entries, store.workout_plans, store.feature_selections):
        await collection.delete_many(user_id=uid)

    selection = await store.feature_selections.create({
        "user_id": uid, "calendar": True, "journal": True, "ai_workout": True, "sleep": False,
    })

    now = utcnow()
    await store.journal_entries.create_many([
        {"user_id": uid, "sentiment": 0.35, "positivity_tag": "Positive", "created_at": now - timedelta(days=2),
         "content": "Felt focused through most meetings. Afternoon energy dip but recovered after a walk."},
        {"user_id": uid, "sentiment": -0.1, "positivity_tag": "Neutral", "created_at": now - timedelta(days=1),
         "content": "Woke up groggy. Training session felt heavier than usual, but still finished all sets."},
        {"user_id": uid, "sentiment": 0.6, "positivity_tag": "Positive", "created_at": now,
         "content": "Great momentum today, cleared inbox, powered through workout, and had quality time with friends."},
    ])
    await store.workout_logs.create_many([
        {"user_id": uid, "title": "Lower Body Strength", "scheduled_date": now - timedelta(days=1),
         "completed": True, "notes": "Back squats moved well at RPE 7."},
        {"user_id": uid, "title": "Active Recovery Flow", "scheduled_date": now,
         "completed": False, "notes": "Plan: mobility + light conditioning"},
        {"user_id": uid, "title": "Upper Power Session", "scheduled_date": now + timedelta(days=1),
         "completed": False, "notes": "Focus on explosive pressing and pull-ups"},
    ])
    await store.calendar_items.create_many([
        {"user_id": uid, "title": "Therapy check-in", "due_date": now + timedelta(days=2), "completed": False},
        {"user_id": uid, "title": "Project milestone review", "due_date": now + timedelta(days=1), "completed": False},
        {"user_id": uid, "title": "Meal prep for the week", "due_date": now - timedelta(days=1), "completed": True},
    ])
    await store.findings.create_many([
        {"user_id": uid, "type": "REINFORCEMENT", "title": "Momentum Building", "severity": 2,
         "created_at": now - timedelta(days=1),
         "message": "Consistent journaling and on-track workouts indicate strong resilience. Keep stacking these wins!"},
        {"user_id": uid, "type": "ALERT", "title": "Energy Dip Detected", "severity": 3, "created_at": now,
         "message": "Two journal entries mention fatigue and one workout is pending. Consider recovery strategies and scheduling a lighter day."},
    ])
    await store.workout_plans.create({
        "user_id": uid,
        "request_payload": {
            "program_name": "Adaptation Accelerator",
            "training_focus": "General Fitness",
            "program_type": "Mesocycle",
            "session_length_minutes": 60,
            "experience_level": "Intermediate",
            "start_date": now.date().isoformat(),
            "goals": "Maintain resilience during demanding work sprints",
            "equipment": "Commercial gym setup",
            "training_frequency": 4,
        },
        "response_payload": SAMPLE_PLAN,
    })

    return {
        "featureSelectionId": selection.id,
        "journals": 3,
        "workouts": 3,
        "calendarItems": 3,
        "findings": 2,
        "workoutPlan": SAMPLE_PLAN["programName"],
    }


async def main_async() -> dict:
    init_db()
    db = SessionLocal()
    try:
        return await seed(Store(db))
    finally:
        db.close()


def main() -> int:
    logging.basicConfig(level=LOG_LEVEL)
    try:
        summary = asyncio.run(main_async())
    except Exception:
        logger.exception("Seed failed")
        return 1
    logger.info("Seed complete: %s", summary)
    return 0


if __name__ == "__main__":
    sys.exit(main())
