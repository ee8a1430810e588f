from sqlalchemy import Column, String, Text, Date, DateTime, Boolean, ForeignKey, Enum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from fuelai.core.database import Base
from fuelai.utils.id_utils import generate_id
import enum

# Category that turns a task into a workout
EXERCISE_CATEGORY = "Exercise"

class Difficulty(str, enum.Enum):
    easy = "easy"
    medium = "medium"
    hard = "hard"

class Task(Base):
    __tablename__ = "tasks"

    id = Column(String, primary_key=True, default=generate_id)
    user_id = Column(String, ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    title = Column(String(255))
    description = Column(Text)
    difficulty = Column(Enum(Difficulty, name='difficulty_enum'), nullable=True)
    category = Column(String(255), index=True)
    is_completed = Column(Boolean, default=False, nullable=False)
    deadline = Column(Date, nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    user = relationship("User", back_populates="tasks")
