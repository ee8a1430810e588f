from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional, List
from datetime import datetime
from enum import Enum
from fuelai.models.meal_plan import DayOfWeek, MealTime
from fuelai.schemas.meal import Meal

class MealPlanBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None

class MealPlanCreate(MealPlanBase):
    pass

class MealPlanUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None

    @field_validator('name')
    @classmethod
    def name_not_null(cls, v):
        # Omit the field to keep the current name; a plan always has one
        if v is None:
            raise ValueError("name cannot be null")
        return v

class MealPlan(MealPlanBase):
    id: str
    user_id: str
    last_activated_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class MealPlanSlot(BaseModel):
    id: str
    meal_plan_id: str
    meal_id: str
    day_of_week: DayOfWeek
    meal_time: MealTime
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    meal: Optional[Meal] = None

    class Config:
        from_attributes = True

# Plan with its slots and the meals they point at, for the plan and calendar screens
class MealPlanWithSlots(MealPlan):
    slots: List[MealPlanSlot] = []

class MealAssignment(BaseModel):
    """Assign a meal to one slot, or to one meal time on every day of the week"""
    meal_id: str
    meal_time: MealTime
    day_of_week: Optional[DayOfWeek] = None
    repeat_for_all_days: bool = False

    @model_validator(mode='after')
    def check_selection(self):
        if not self.repeat_for_all_days and self.day_of_week is None:
            raise ValueError("day_of_week is required unless repeat_for_all_days is set")
        return self

class AssignmentStatus(str, Enum):
    created = "created"
    updated = "updated"
    failed = "failed"

class SlotAssignmentResult(BaseModel):
    day_of_week: DayOfWeek
    meal_time: MealTime
    status: AssignmentStatus
    slot: Optional[MealPlanSlot] = None
    error: Optional[str] = None

class AssignmentReport(BaseModel):
    """Per-slot outcome of an assignment; a repeat batch may partially succeed"""
    meal_plan_id: str
    meal_id: str
    results: List[SlotAssignmentResult] = []
    succeeded: int = 0
    failed: int = 0

    @property
    def is_partial(self) -> bool:
        return self.failed > 0 and self.succeeded > 0
