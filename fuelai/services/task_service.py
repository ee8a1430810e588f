from sqlalchemy.orm import Session
from sqlalchemy import and_, or_
from datetime import date
from typing import List, Optional
from fuelai.core.exceptions import NotFoundError
from fuelai.models.task import Task, EXERCISE_CATEGORY
from fuelai.schemas.task import TaskCreate, TaskUpdate, TaskView, WorkoutCreate, Exercise

def format_exercise(exercise: Exercise) -> str:
    if exercise.sets and exercise.reps:
        return f"{exercise.name} - {exercise.sets} x {exercise.reps}"
    if exercise.sets:
        return f"{exercise.name} - {exercise.sets} sets"
    if exercise.reps:
        return f"{exercise.name} - {exercise.reps} reps"
    return exercise.name

class TaskService:
    def __init__(self, db: Session):
        self.db = db

    def get_user_tasks(
        self,
        user_id: str,
        view: TaskView = TaskView.all,
        completed: Optional[bool] = None
    ) -> List[Task]:
        """Tasks ordered by deadline, soonest first, undated tasks last."""
        query = self.db.query(Task).filter(Task.user_id == user_id)

        if view == TaskView.workouts:
            query = query.filter(Task.category == EXERCISE_CATEGORY)
        elif view == TaskView.tasks:
            query = query.filter(or_(Task.category.is_(None), Task.category != EXERCISE_CATEGORY))

        if completed is not None:
            query = query.filter(Task.is_completed == completed)

        return query.order_by(
            Task.deadline.is_(None),
            Task.deadline.asc(),
            Task.created_at.asc(),
            Task.id.asc()
        ).all()

    def get_tasks_due(self, user_id: str, due_date: date) -> List[Task]:
        return self.db.query(Task).filter(
            and_(Task.user_id == user_id, Task.deadline == due_date)
        ).order_by(Task.is_completed, Task.created_at, Task.id).all()

    def get_task(self, task_id: str, user_id: str) -> Task:
        task = self.db.query(Task).filter(
            and_(Task.id == task_id, Task.user_id == user_id)
        ).first()
        if not task:
            raise NotFoundError("Task not found", {"task_id": task_id})
        return task

    def create_task(self, task_data: TaskCreate, user_id: str) -> Task:
        task = Task(**task_data.model_dump(), user_id=user_id)

        self.db.add(task)
        self.db.commit()
        self.db.refresh(task)
        return task

    def create_workout(self, workout_data: WorkoutCreate, user_id: str) -> Task:
        task = Task(
            user_id=user_id,
            title=workout_data.workout_title,
            description="\n".join(format_exercise(e) for e in workout_data.exercises),
            category=EXERCISE_CATEGORY,
            deadline=workout_data.deadline,
        )

        self.db.add(task)
        self.db.commit()
        self.db.refresh(task)
        return task

    def update_task(self, task_id: str, task_update: TaskUpdate, user_id: str) -> Task:
        task = self.get_task(task_id, user_id)

        update_data = task_update.model_dump(exclude_unset=True)
        if update_data.get('is_completed') is None:
            update_data.pop('is_completed', None)
        for field, value in update_data.items():
            setattr(task, field, value)

        self.db.commit()
        self.db.refresh(task)
        return task

    def delete_task(self, task_id: str, user_id: str) -> None:
        task = self.get_task(task_id, user_id)

        self.db.delete(task)
        self.db.commit()
