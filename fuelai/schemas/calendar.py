from pydantic import BaseModel
from typing import Optional, List, Dict
from datetime import date
from fuelai.models.meal_plan import DayOfWeek, MealTime
from fuelai.schemas.meal import Meal
from fuelai.schemas.meal_plan import MealPlan
from fuelai.schemas.task import Task

class DayPlan(BaseModel):
    date: date
    day_of_week: DayOfWeek
    meal_plan: Optional[MealPlan] = None
    # Always holds all four meal times; None marks an empty slot
    meals_by_time: Dict[MealTime, Optional[Meal]]
    tasks_due: List[Task] = []

    class Config:
        from_attributes = True
