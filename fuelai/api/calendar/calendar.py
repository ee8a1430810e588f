from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from fuelai.core.database import get_db
from fuelai.api.auth.auth import get_current_user
from fuelai.models.user import User
from fuelai.schemas.calendar import DayPlan
from fuelai.services.calendar_service import CalendarService

router = APIRouter()

@router.get("/{calendar_date}", response_model=DayPlan)
async def get_day(
    calendar_date: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Meals of the active plan for the date's weekday, plus tasks due that date."""
    calendar_service = CalendarService(db)
    return calendar_service.resolve_day(current_user.id, calendar_date)
