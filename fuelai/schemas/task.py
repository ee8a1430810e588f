from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime, date
from enum import Enum
from fuelai.models.task import Difficulty
from fuelai.utils.date_utils import coerce_calendar_date

class TaskView(str, Enum):
    all = "all"
    tasks = "tasks"
    workouts = "workouts"

class TaskBase(BaseModel):
    title: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    difficulty: Optional[Difficulty] = None
    category: Optional[str] = Field(None, max_length=255)
    deadline: Optional[date] = None

    @field_validator('deadline', mode='before')
    @classmethod
    def parse_deadline(cls, v):
        return coerce_calendar_date(v)

class TaskCreate(TaskBase):
    is_completed: bool = False

class TaskUpdate(BaseModel):
    title: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    difficulty: Optional[Difficulty] = None
    category: Optional[str] = Field(None, max_length=255)
    deadline: Optional[date] = None
    is_completed: Optional[bool] = None

    @field_validator('deadline', mode='before')
    @classmethod
    def parse_deadline(cls, v):
        return coerce_calendar_date(v)

class Task(TaskBase):
    id: str
    user_id: str
    is_completed: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class Exercise(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    sets: Optional[int] = Field(None, ge=1)
    reps: Optional[int] = Field(None, ge=1)

class WorkoutCreate(BaseModel):
    workout_title: str = Field(..., min_length=1, max_length=255)
    exercises: List[Exercise] = Field(..., min_length=1)
    deadline: Optional[date] = None

    @field_validator('deadline', mode='before')
    @classmethod
    def parse_deadline(cls, v):
        return coerce_calendar_date(v)
