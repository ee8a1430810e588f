from sqlalchemy import Column, String, Text, Float, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from fuelai.core.database import Base
from fuelai.utils.id_utils import generate_id

class Meal(Base):
    __tablename__ = "meals"

    id = Column(String, primary_key=True, default=generate_id)
    name = Column(String(255), nullable=False, index=True)
    description = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    nutritional_info = relationship(
        "NutritionalInfo",
        back_populates="meal",
        uselist=False,
        cascade="all, delete-orphan"
    )

class NutritionalInfo(Base):
    """Nutrition values supplied alongside a meal; stored as given"""
    __tablename__ = "nutritional_info"

    id = Column(String, primary_key=True, default=generate_id)
    meal_id = Column(String, ForeignKey('meals.id', ondelete='CASCADE'), nullable=False, unique=True)
    calories = Column(Float)
    protein = Column(Float)
    carbs = Column(Float)
    fat = Column(Float)

    meal = relationship("Meal", back_populates="nutritional_info")
