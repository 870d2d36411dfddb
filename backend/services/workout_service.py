"""
workout_service.py - AI Workout Plans
Generates a structured training program through the same structured-output
provider the analyzer uses, validates it, and stores it for the demo user.
"""

import json
import logging
from typing import Literal, Optional, Union

from pydantic import BaseModel, Field, ValidationError

from models.workout_plan import AIWorkoutPlan
from providers.base import BaseProvider
from services.store import Store
from services.usage_tracker import UsageTracker
from services.user_service import get_demo_user

logger = logging.getLogger(__name__)

PLAN_GENERATION_UNITS = 2
RECENT_PLAN_LIMIT = 10


class WorkoutPlanError(Exception):
    """The provider returned no plan, or one that failed validation."""


class PowerliftingStats(BaseModel):
    squat_max: Optional[str] = None
    bench_max: Optional[str] = None
    deadlift_max: Optional[str] = None


class WorkoutGenerationInput(BaseModel):
    program_name: str
    training_focus: Literal["Powerlifting", "Bodybuilding", "General Fitness"] = "General Fitness"
    program_type: Literal["Microcycle", "Mesocycle", "Macrocycle", "Block"]
    session_length_minutes: int = Field(gt=0)
    experience_level: str
    start_date: str
    goals: str
    injuries: Optional[str] = None
    equipment: str
    training_frequency: int = Field(gt=0)
    powerlifting_stats: Optional[PowerliftingStats] = None


class Exercise(BaseModel):
    name: str
    sets: int = Field(ge=0)
    reps: Union[int, str]
    rest: int = Field(ge=0)
    notes: Optional[str] = None


class WorkoutDay(BaseModel):
    day: str
    focus: Optional[str] = None
    exercises: list[Exercise]


class WorkoutPlan(BaseModel):
    program_name: str = Field(alias="programName")
    type: str
    duration: str
    overview: Optional[str] = None
    days: list[WorkoutDay]

    model_config = {"populate_by_name": True}


_EXERCISE_SCHEMA = {
    "type": "object",
    "properties": {
        "name": {"type": "string"},
        "sets": {"type": "integer"},
        "reps": {"anyOf": [{"type": "string"}, {"type": "integer"}]},
        "rest": {"type": "integer"},
        "notes": {"type": "string"},
    },
    "required": ["name", "sets", "reps", "rest", "notes"],
    "additionalProperties": False,
}

WORKOUT_PLAN_SCHEMA = {
    "name": "workout_plan_schema",
    "schema": {
        "type": "object",
        "properties": {
            "programName": {"type": "string"},
            "type": {"type": "string"},
            "duration": {"type": "string"},
            "overview": {"type": "string"},
            "days": {
                "type": "array",
                "items": {
                    "type": "object",
                    "properties": {
                        "day": {"type": "string"},
                        "focus": {"type": "string"},
                        "exercises": {"type": "array", "items": _EXERCISE_SCHEMA},
                    },
                    "required": ["day", "focus", "exercises"],
                    "additionalProperties": False,
                },
            },
        },
        "required": ["programName", "type", "duration", "overview", "days"],
        "additionalProperties": False,
    },
    "strict": True,
}


def build_prompt(data: WorkoutGenerationInput) -> str:
    stats = data.powerlifting_stats.model_dump_json() if data.powerlifting_stats else "N/A"
    return (
        "Generate a structured workout program in JSON format.\n"
        "User context:\n"
        f"- Program Type: {data.program_type}\n"
        f"- Training Focus: {data.training_focus}\n"
        f"- Session Length: {data.session_length_minutes} minutes\n"
        f"- Goals: {data.goals}\n"
        f"- Equipment: {data.equipment}\n"
        f"- Training Frequency: {data.training_frequency} sessions/week\n"
        f"- Injuries: {data.injuries or 'None'}\n"
        f"- Experience: {data.experience_level}\n"
        f"- Start Date: {data.start_date}\n"
        f"- Powerlifting Stats: {stats}\n\n"
        "Please emphasize actionable exercise selections and weekly progression cues when relevant."
    )


class WorkoutService:
    @staticmethod
    async def generate_plan(store: Store, provider: BaseProvider, raw_input: dict,
                            tracker: UsageTracker | None = None) -> dict:
        """Validate the request, ask for a plan, validate the reply and store it.

        Raises pydantic.ValidationError for a bad request and WorkoutPlanError
        for a missing or malformed reply.
        """
        data = WorkoutGenerationInput.model_validate(raw_input)
        user = await get_demo_user(store)

        tracker = tracker or UsageTracker(provider=provider.name, user_id=user.id)
        tracker.track(PLAN_GENERATION_UNITS)

        messages = [
            {"role": "system", "content": "You are an elite strength and wellness coach generating periodized training plans."},
            {"role": "user", "content": build_prompt(data)},
        ]
        result = await provider.structured(messages, WORKOUT_PLAN_SCHEMA)
        await tracker.flush(store)

        text = result.get("text")
        if result.get("status") != "success" or not text:
            raise WorkoutPlanError(result.get("error") or "Response did not contain JSON output")

        try:
            plan = WorkoutPlan.model_validate(json.loads(text))
        except (json.JSONDecodeError, ValidationError) as e:
            logger.error("Rejected workout plan from %s: %s", provider.name, e)
            raise WorkoutPlanError(f"Invalid workout plan: {e}") from e

        record = await store.workout_plans.create({
            "user_id": user.id,
            "request_payload": data.model_dump(),
            "response_payload": plan.model_dump(by_alias=True),
        })
        return {"plan": plan, "record": record}

    @staticmethod
    async def list_plans(store: Store, user_id: int) -> list[AIWorkoutPlan]:
        return await store.workout_plans.find_many(
            user_id=user_id,
            order_by=AIWorkoutPlan.created_at.desc(),
            limit=RECENT_PLAN_LIMIT,
        )

    @staticmethod
    async def get_plan(store: Store, user_id: int, plan_id: int) -> AIWorkoutPlan | None:
        return await store.workout_plans.find_first(id=plan_id, user_id=user_id)
