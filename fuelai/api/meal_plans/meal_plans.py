from fastapi import APIRouter, Depends, status, Query, Request, Response
from sqlalchemy.orm import Session
from typing import List
from fuelai.core.database import get_db
from fuelai.core.config import settings
from fuelai.api.auth.auth import get_current_user
from fuelai.models.user import User
from fuelai.schemas.meal_plan import (
    MealPlan as MealPlanSchema,
    MealPlanCreate,
    MealPlanUpdate,
    MealPlanWithSlots,
    MealAssignment,
    AssignmentReport,
    AssignmentStatus
)
from fuelai.services.meal_plan_service import MealPlanService
from fuelai.middleware.rate_limit import limiter

router = APIRouter()

@router.get("/", response_model=List[MealPlanSchema])
async def get_meal_plans(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    meal_plan_service = MealPlanService(db)
    return meal_plan_service.get_user_meal_plans(
        user_id=current_user.id,
        skip=skip,
        limit=limit
    )

@router.post("/", response_model=MealPlanSchema, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.MEAL_PLAN_RATE_LIMIT)
async def create_meal_plan(
    meal_plan: MealPlanCreate,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    meal_plan_service = MealPlanService(db)
    return meal_plan_service.create_meal_plan(meal_plan, current_user.id)

@router.get("/active", response_model=MealPlanWithSlots)
async def get_active_meal_plan(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    meal_plan_service = MealPlanService(db)
    return meal_plan_service.get_active_meal_plan(current_user.id)

@router.delete("/slots/{slot_id}", status_code=status.HTTP_204_NO_CONTENT)
@limiter.limit(settings.MEAL_PLAN_RATE_LIMIT)
async def remove_meal_from_plan(
    slot_id: str,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    meal_plan_service = MealPlanService(db)
    meal_plan_service.remove_slot(slot_id, current_user.id)

@router.get("/{meal_plan_id}", response_model=MealPlanWithSlots)
async def get_meal_plan(
    meal_plan_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    meal_plan_service = MealPlanService(db)
    return meal_plan_service.get_meal_plan_with_slots(meal_plan_id, current_user.id)

@router.put("/{meal_plan_id}", response_model=MealPlanSchema)
@limiter.limit(settings.MEAL_PLAN_RATE_LIMIT)
async def update_meal_plan(
    meal_plan_id: str,
    meal_plan_update: MealPlanUpdate,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    meal_plan_service = MealPlanService(db)
    return meal_plan_service.update_meal_plan(meal_plan_id, meal_plan_update, current_user.id)

@router.delete("/{meal_plan_id}")
@limiter.limit(settings.MEAL_PLAN_RATE_LIMIT)
async def delete_meal_plan(
    meal_plan_id: str,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    meal_plan_service = MealPlanService(db)
    meal_plan_service.delete_meal_plan(meal_plan_id, current_user.id)
    return {"message": "Meal plan deleted successfully"}

@router.post("/{meal_plan_id}/add-meal", response_model=AssignmentReport)
@limiter.limit(settings.MEAL_PLAN_RATE_LIMIT)
async def add_meal_to_plan(
    meal_plan_id: str,
    assignment: MealAssignment,
    request: Request,
    response: Response,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    meal_plan_service = MealPlanService(db)
    report = meal_plan_service.assign_meal(meal_plan_id, assignment, current_user.id)

    if report.failed:
        response.status_code = status.HTTP_207_MULTI_STATUS
    elif not assignment.repeat_for_all_days and report.results[0].status == AssignmentStatus.created:
        response.status_code = status.HTTP_201_CREATED
    return report

@router.post("/{meal_plan_id}/touch", response_model=MealPlanSchema)
@limiter.limit(settings.MEAL_PLAN_RATE_LIMIT)
async def touch_meal_plan(
    meal_plan_id: str,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    meal_plan_service = MealPlanService(db)
    return meal_plan_service.touch_meal_plan(meal_plan_id, current_user.id)
