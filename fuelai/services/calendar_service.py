from sqlalchemy.orm import Session
from datetime import date
from typing import Union
import logging
from fuelai.models.meal_plan import MEAL_TIMES
from fuelai.services.meal_plan_service import MealPlanService
from fuelai.services.task_service import TaskService
from fuelai.utils.date_utils import parse_calendar_date, day_of_week_for

logger = logging.getLogger(__name__)

class CalendarService:
    """Resolves a calendar date to the active plan's meals and the tasks due that day"""

    def __init__(self, db: Session):
        self.db = db
        self.meal_plans = MealPlanService(db)
        self.tasks = TaskService(db)

    def resolve_day(self, user_id: str, calendar_date: Union[str, date]) -> dict:
        if isinstance(calendar_date, str):
            calendar_date = parse_calendar_date(calendar_date)
        day_of_week = day_of_week_for(calendar_date)

        # Meals and tasks are independent lookups
        meals_by_time = {meal_time: None for meal_time in MEAL_TIMES}
        meal_plan = self.meal_plans.get_most_recent_meal_plan(user_id)
        if meal_plan:
            for slot in self.meal_plans.get_plan_slots(meal_plan.id, day_of_week):
                meals_by_time[slot.meal_time] = slot.meal
        else:
            logger.debug(f"User {user_id} has no meal plans; {calendar_date} has no meals")

        tasks_due = self.tasks.get_tasks_due(user_id, calendar_date)

        return {
            "date": calendar_date,
            "day_of_week": day_of_week,
            "meal_plan": meal_plan,
            "meals_by_time": meals_by_time,
            "tasks_due": tasks_due,
        }
