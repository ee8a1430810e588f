from fuelai.core.database import Base
from .user import User
from .meal import Meal, NutritionalInfo
from .meal_plan import MealPlan, MealPlanMeal, DayOfWeek, MealTime
from .task import Task, Difficulty

__all__ = [
    "Base", "User", "Meal", "NutritionalInfo",
    "MealPlan", "MealPlanMeal", "DayOfWeek", "MealTime",
    "Task", "Difficulty"
]
