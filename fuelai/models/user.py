from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from fuelai.core.database import Base
from fuelai.utils.id_utils import generate_id

class User(Base):
    __tablename__ = "users"

    id = Column(String, primary_key=True, default=generate_id)
    auth_subject = Column(String, unique=True, nullable=False, index=True)  # `sub` claim from the auth collaborator
    email = Column(String, nullable=True)
    name = Column(String)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    meal_plans = relationship("MealPlan", back_populates="user", cascade="all, delete-orphan")
    tasks = relationship("Task", back_populates="user", cascade="all, delete-orphan")
