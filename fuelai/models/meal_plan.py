from sqlalchemy import Column, String, Text, DateTime, ForeignKey, Enum, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from fuelai.core.database import Base
from fuelai.utils.id_utils import generate_id
import enum

class DayOfWeek(str, enum.Enum):
    Monday = "Monday"
    Tuesday = "Tuesday"
    Wednesday = "Wednesday"
    Thursday = "Thursday"
    Friday = "Friday"
    Saturday = "Saturday"
    Sunday = "Sunday"

class MealTime(str, enum.Enum):
    Breakfast = "Breakfast"
    Lunch = "Lunch"
    Dinner = "Dinner"
    Snack = "Snack"

# Index matches date.weekday(): Monday == 0
DAYS_OF_WEEK = tuple(DayOfWeek)
MEAL_TIMES = tuple(MealTime)

class MealPlan(Base):
    __tablename__ = "meal_plans"

    id = Column(String, primary_key=True, default=generate_id)
    user_id = Column(String, ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text)
    # Set only by an explicit activation; picks the plan shown on the calendar
    last_activated_at = Column(DateTime(timezone=True), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    user = relationship("User", back_populates="meal_plans")
    slots = relationship("MealPlanMeal", back_populates="meal_plan", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<MealPlan(id={self.id}, name={self.name}, user_id={self.user_id})>"

class MealPlanMeal(Base):
    """A slot: one meal assigned to a (plan, day, meal time) triple"""
    __tablename__ = "meal_plan_meals"
    __table_args__ = (
        UniqueConstraint('meal_plan_id', 'day_of_week', 'meal_time', name='uq_meal_plan_slot'),
    )

    id = Column(String, primary_key=True, default=generate_id)
    meal_plan_id = Column(String, ForeignKey('meal_plans.id', ondelete='CASCADE'), nullable=False, index=True)
    meal_id = Column(String, ForeignKey('meals.id', ondelete='CASCADE'), nullable=False)
    day_of_week = Column(Enum(DayOfWeek, name='day_of_week_enum'), nullable=False)
    meal_time = Column(Enum(MealTime, name='meal_time_enum'), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    meal_plan = relationship("MealPlan", back_populates="slots")
    meal = relationship("Meal")
