from fastapi import APIRouter, Depends, status, Query, Request
from sqlalchemy.orm import Session
from typing import List, Optional
from fuelai.core.database import get_db
from fuelai.core.config import settings
from fuelai.api.auth.auth import get_current_user
from fuelai.models.user import User
from fuelai.schemas.task import Task as TaskSchema, TaskCreate, TaskUpdate, TaskView, WorkoutCreate
from fuelai.services.task_service import TaskService
from fuelai.middleware.rate_limit import limiter

router = APIRouter()

@router.get("/", response_model=List[TaskSchema])
async def get_tasks(
    view: TaskView = Query(TaskView.all, description="all, tasks (non-workout) or workouts"),
    completed: Optional[bool] = Query(None, description="Filter by completion"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    task_service = TaskService(db)
    return task_service.get_user_tasks(current_user.id, view=view, completed=completed)

@router.post("/", response_model=TaskSchema, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.TASK_RATE_LIMIT)
async def create_task(
    task: TaskCreate,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    task_service = TaskService(db)
    return task_service.create_task(task, current_user.id)

@router.post("/workout", response_model=TaskSchema, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.TASK_RATE_LIMIT)
async def create_workout(
    workout: WorkoutCreate,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Save a workout as an Exercise task."""
    task_service = TaskService(db)
    return task_service.create_workout(workout, current_user.id)

@router.put("/{task_id}", response_model=TaskSchema)
@limiter.limit(settings.TASK_RATE_LIMIT)
async def update_task(
    task_id: str,
    task_update: TaskUpdate,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    task_service = TaskService(db)
    return task_service.update_task(task_id, task_update, current_user.id)

@router.delete("/{task_id}")
@limiter.limit(settings.TASK_RATE_LIMIT)
async def delete_task(
    task_id: str,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    task_service = TaskService(db)
    task_service.delete_task(task_id, current_user.id)
    return {"message": "Task deleted successfully"}
