from fastapi import APIRouter, Depends, HTTPException
from pydantic import ValidationError
from sqlalchemy.orm import Session

from database import get_db
from providers.base import BaseProvider
from providers.openai_provider import get_provider
from services.store import Store
from services.user_service import get_demo_user
from services.workout_service import WorkoutService, WorkoutPlanError

router = APIRouter(prefix="/api/v1/workouts", tags=["Workouts"])


def _serialize(plan) -> dict:
    return {
        "id": plan.id,
        "request": plan.request_payload,
        "plan": plan.response_payload,
        "created_at": plan.created_at.isoformat() if plan.created_at else None,
    }


@router.post("/generate")
async def generate_workout(data: dict, db: Session = Depends(get_db),
                           provider: BaseProvider = Depends(get_provider)):
    try:
        result = await WorkoutService.generate_plan(Store(db), provider, data)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors(include_url=False, include_context=False))
    except WorkoutPlanError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return _serialize(result["record"])


@router.get("/plans")
async def list_workout_plans(db: Session = Depends(get_db)):
    store = Store(db)
    user = await get_demo_user(store)
    return [_serialize(p) for p in await WorkoutService.list_plans(store, user.id)]


@router.get("/plans/{plan_id}")
async def get_workout_plan(plan_id: int, db: Session = Depends(get_db)):
    store = Store(db)
    user = await get_demo_user(store)
    plan = await WorkoutService.get_plan(store, user.id, plan_id)
    if plan is None:
        raise HTTPException(status_code=404, detail="Workout plan not found")
    return _serialize(plan)
