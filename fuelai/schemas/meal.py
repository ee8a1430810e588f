from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

class NutritionalInfo(BaseModel):
    calories: Optional[float] = None
    protein: Optional[float] = None
    carbs: Optional[float] = None
    fat: Optional[float] = None

    class Config:
        from_attributes = True

class MealBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None

class MealCreate(MealBase):
    # Flat nutrition fields, as sent by the mobile client
    calories: Optional[float] = Field(None, ge=0)
    protein: Optional[float] = Field(None, ge=0)
    carbs: Optional[float] = Field(None, ge=0)
    fat: Optional[float] = Field(None, ge=0)

class Meal(MealBase):
    id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    nutritional_info: Optional[NutritionalInfo] = None

    class Config:
        from_attributes = True
