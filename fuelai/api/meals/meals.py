from fastapi import APIRouter, Depends, status, Query, Request
from sqlalchemy.orm import Session
from typing import List, Optional
from fuelai.core.database import get_db
from fuelai.core.config import settings
from fuelai.api.auth.auth import get_current_user
from fuelai.models.user import User
from fuelai.schemas.meal import Meal as MealSchema, MealCreate
from fuelai.services.meal_service import MealService
from fuelai.middleware.rate_limit import limiter

router = APIRouter()

@router.get("/", response_model=List[MealSchema])
async def get_meals(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=100),
    search: Optional[str] = Query(None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """List the shared meal catalogue."""
    meal_service = MealService(db)
    return meal_service.get_meals(skip=skip, limit=limit, search=search)

@router.post("/", response_model=MealSchema, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.MEAL_RATE_LIMIT)
async def create_meal(
    meal: MealCreate,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Create a meal that any plan can reference."""
    meal_service = MealService(db)
    return meal_service.create_meal(meal)

@router.get("/{meal_id}", response_model=MealSchema)
async def get_meal(
    meal_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    meal_service = MealService(db)
    return meal_service.get_meal(meal_id)
