from .user import User
from .meal import Meal, MealCreate, NutritionalInfo
from .meal_plan import (
    MealPlan, MealPlanCreate, MealPlanUpdate, MealPlanSlot, MealPlanWithSlots,
    MealAssignment, AssignmentReport, AssignmentStatus, SlotAssignmentResult
)
from .task import Task, TaskCreate, TaskUpdate, TaskView, Exercise, WorkoutCreate
from .calendar import DayPlan

__all__ = [
    "User",
    "Meal", "MealCreate", "NutritionalInfo",
    "MealPlan", "MealPlanCreate", "MealPlanUpdate", "MealPlanSlot", "MealPlanWithSlots",
    "MealAssignment", "AssignmentReport", "AssignmentStatus", "SlotAssignmentResult",
    "Task", "TaskCreate", "TaskUpdate", "TaskView", "Exercise", "WorkoutCreate",
    "DayPlan"
]
