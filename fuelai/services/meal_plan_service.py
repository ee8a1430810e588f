from sqlalchemy.orm import Session, joinedload
from sqlalchemy import and_, func
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError, IntegrityError
from datetime import datetime, timezone
from typing import List, Optional, Tuple, Union
import logging
from fuelai.core.exceptions import FuelAIError, NotFoundError, ValidationError, UnauthorizedError
from fuelai.models.meal import Meal
from fuelai.models.meal_plan import MealPlan, MealPlanMeal, DayOfWeek, MealTime, DAYS_OF_WEEK, MEAL_TIMES
from fuelai.schemas.meal_plan import (
    MealPlanCreate, MealPlanUpdate, MealAssignment, MealPlanSlot,
    AssignmentReport, AssignmentStatus, SlotAssignmentResult
)
from fuelai.utils.audit_logger import audit_logger
from fuelai.utils.id_utils import generate_id

logger = logging.getLogger(__name__)

_UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}

def _coerce_choice(enum_cls, value, field: str):
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValidationError(f"Invalid {field} '{value}'. Expected one of: {allowed}")

def _slot_sort_key(slot: MealPlanMeal):
    return (DAYS_OF_WEEK.index(slot.day_of_week), MEAL_TIMES.index(slot.meal_time))

class MealPlanService:
    def __init__(self, db: Session):
        self.db = db

    # Plans

    def get_user_meal_plans(
        self,
        user_id: str,
        skip: int = 0,
        limit: int = 100
    ) -> List[MealPlan]:
        return self.db.query(MealPlan).filter(
            MealPlan.user_id == user_id
        ).order_by(
            MealPlan.created_at.desc(), MealPlan.id.desc()
        ).offset(skip).limit(limit).all()

    def get_meal_plan(self, meal_plan_id: str, user_id: str) -> Optional[MealPlan]:
        return self.db.query(MealPlan).filter(
            and_(MealPlan.id == meal_plan_id, MealPlan.user_id == user_id)
        ).first()

    def get_owned_meal_plan(self, meal_plan_id: str, user_id: str) -> MealPlan:
        """Plan owned by the user; plans of other users are reported as missing."""
        meal_plan = self.get_meal_plan(meal_plan_id, user_id)
        if not meal_plan:
            raise NotFoundError("Meal plan not found", {"meal_plan_id": meal_plan_id})
        return meal_plan

    def create_meal_plan(self, meal_plan_data: MealPlanCreate, user_id: str) -> MealPlan:
        meal_plan = MealPlan(**meal_plan_data.model_dump(), user_id=user_id)

        self.db.add(meal_plan)
        self.db.commit()
        self.db.refresh(meal_plan)
        logger.info(f"Created meal plan {meal_plan.id} for user {user_id}")
        return meal_plan

    def update_meal_plan(
        self,
        meal_plan_id: str,
        meal_plan_update: MealPlanUpdate,
        user_id: str
    ) -> MealPlan:
        meal_plan = self.get_owned_meal_plan(meal_plan_id, user_id)

        # Editing a plan never changes which plan is active
        update_data = meal_plan_update.model_dump(exclude_unset=True)
        for field, value in update_data.items():
            setattr(meal_plan, field, value)

        self.db.commit()
        self.db.refresh(meal_plan)
        return meal_plan

    def delete_meal_plan(self, meal_plan_id: str, user_id: str) -> None:
        meal_plan = self.get_owned_meal_plan(meal_plan_id, user_id)

        self.db.delete(meal_plan)
        self.db.commit()
        logger.info(f"Deleted meal plan {meal_plan_id} for user {user_id}")

    def get_plan_slots(self, meal_plan_id: str, day_of_week: Optional[DayOfWeek] = None) -> List[MealPlanMeal]:
        """Slots of a plan with their meals, Monday to Sunday then Breakfast to Snack."""
        query = self.db.query(MealPlanMeal).options(
            joinedload(MealPlanMeal.meal).joinedload(Meal.nutritional_info)
        ).filter(MealPlanMeal.meal_plan_id == meal_plan_id)

        if day_of_week is not None:
            query = query.filter(MealPlanMeal.day_of_week == day_of_week)

        return sorted(query.all(), key=_slot_sort_key)

    def get_meal_plan_with_slots(self, meal_plan_id: str, user_id: str) -> dict:
        meal_plan = self.get_owned_meal_plan(meal_plan_id, user_id)
        return self._with_slots(meal_plan)

    def _with_slots(self, meal_plan: MealPlan) -> dict:
        return {
            "id": meal_plan.id,
            "user_id": meal_plan.user_id,
            "name": meal_plan.name,
            "description": meal_plan.description,
            "last_activated_at": meal_plan.last_activated_at,
            "created_at": meal_plan.created_at,
            "updated_at": meal_plan.updated_at,
            "slots": self.get_plan_slots(meal_plan.id),
        }

    # Activity tracking

    def touch_meal_plan(self, meal_plan_id: str, user_id: str) -> MealPlan:
        """Mark a plan as the one the calendar shows."""
        meal_plan = self.db.get(MealPlan, meal_plan_id)
        if not meal_plan:
            raise NotFoundError("Meal plan not found", {"meal_plan_id": meal_plan_id})

        if meal_plan.user_id != user_id:
            audit_logger.log_ownership_denied(user_id, "meal_plan", meal_plan_id)
            raise UnauthorizedError("Unauthorized", {"meal_plan_id": meal_plan_id})

        meal_plan.last_activated_at = datetime.now(timezone.utc)
        self.db.commit()
        self.db.refresh(meal_plan)

        audit_logger.log_plan_activated(user_id, meal_plan_id)
        return meal_plan

    def get_most_recent_meal_plan(self, user_id: str) -> Optional[MealPlan]:
        """
        The user's active plan: latest activation first, never-activated plans
        after those by creation time, and the highest id on exact ties.
        """
        return self.db.query(MealPlan).filter(
            MealPlan.user_id == user_id
        ).order_by(
            MealPlan.last_activated_at.is_(None),
            func.coalesce(MealPlan.last_activated_at, MealPlan.created_at).desc(),
            MealPlan.id.desc()
        ).first()

    def get_active_meal_plan(self, user_id: str) -> dict:
        """Get the user's currently active meal plan with its slots."""
        meal_plan = self.get_most_recent_meal_plan(user_id)
        if not meal_plan:
            raise NotFoundError("No active meal plan found")
        return self._with_slots(meal_plan)

    # Slots

    def upsert_slot(
        self,
        meal_plan_id: str,
        meal_id: str,
        day_of_week: Union[DayOfWeek, str],
        meal_time: Union[MealTime, str],
        user_id: str
    ) -> Tuple[MealPlanMeal, bool]:
        """
        Assign a meal to a (plan, day, meal time) slot.

        Creates the slot on first assignment and overwrites its meal in place
        afterwards; the write is a single INSERT ... ON CONFLICT DO UPDATE on
        the slot's unique key. The plan's activation time is left alone.

        Returns:
            The slot and whether it was newly created.
        """
        meal_plan = self.get_owned_meal_plan(meal_plan_id, user_id)
        day_of_week = _coerce_choice(DayOfWeek, day_of_week, "day_of_week")
        meal_time = _coerce_choice(MealTime, meal_time, "meal_time")

        if not self.db.get(Meal, meal_id):
            raise ValidationError(f"Meal '{meal_id}' does not exist", {"meal_id": meal_id})

        now = datetime.now(timezone.utc)
        new_id = generate_id()
        insert = self._insert_for_dialect()
        stmt = insert(MealPlanMeal).values(
            id=new_id,
            meal_plan_id=meal_plan.id,
            meal_id=meal_id,
            day_of_week=day_of_week,
            meal_time=meal_time,
            created_at=now,
            updated_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["meal_plan_id", "day_of_week", "meal_time"],
            set_={
                "meal_id": stmt.excluded.meal_id,
                "updated_at": stmt.excluded.updated_at,
            }
        )

        try:
            self.db.execute(stmt)
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.error(f"Slot upsert rejected for plan {meal_plan_id}: {str(e.orig)}")
            raise ValidationError("Meal could not be assigned to this slot", {"meal_id": meal_id})

        slot = self.db.query(MealPlanMeal).options(
            joinedload(MealPlanMeal.meal).joinedload(Meal.nutritional_info)
        ).filter(
            MealPlanMeal.meal_plan_id == meal_plan_id,
            MealPlanMeal.day_of_week == day_of_week,
            MealPlanMeal.meal_time == meal_time
        ).one()

        created = slot.id == new_id
        audit_logger.log_slot_upserted(
            user_id, meal_plan_id, day_of_week.value, meal_time.value, meal_id, created
        )
        return slot, created

    def _insert_for_dialect(self):
        dialect = self.db.get_bind().dialect.name
        insert = _UPSERT_DIALECTS.get(dialect)
        if insert is None:
            raise RuntimeError(f"Slot upserts are not supported on the '{dialect}' dialect")
        return insert

    def remove_slot(self, slot_id: str, user_id: str) -> None:
        slot = self.db.query(MealPlanMeal).join(MealPlan).filter(
            and_(MealPlanMeal.id == slot_id, MealPlan.user_id == user_id)
        ).first()
        if not slot:
            raise NotFoundError("Meal plan meal not found", {"slot_id": slot_id})

        self.db.delete(slot)
        self.db.commit()

    # Assignment

    def assign_meal(
        self,
        meal_plan_id: str,
        assignment: MealAssignment,
        user_id: str
    ) -> AssignmentReport:
        """
        Assign a meal to one slot, or to one meal time on all seven days.

        A single assignment raises its error directly. A repeat assignment
        runs one independently committed upsert per day, Monday to Sunday;
        failed days are recorded in the report and earlier days stay written.
        """
        report = AssignmentReport(meal_plan_id=meal_plan_id, meal_id=assignment.meal_id)

        if not assignment.repeat_for_all_days:
            slot, created = self.upsert_slot(
                meal_plan_id, assignment.meal_id, assignment.day_of_week, assignment.meal_time, user_id
            )
            report.results.append(self._success(slot, created))
            report.succeeded = 1
            return report

        # Nothing can succeed on a plan the user does not own
        self.get_owned_meal_plan(meal_plan_id, user_id)

        for day in DAYS_OF_WEEK:
            try:
                slot, created = self.upsert_slot(
                    meal_plan_id, assignment.meal_id, day, assignment.meal_time, user_id
                )
            except FuelAIError as e:
                self.db.rollback()
                report.results.append(self._failure(day, assignment.meal_time, e.message))
                report.failed += 1
                continue
            except SQLAlchemyError as e:
                self.db.rollback()
                logger.error(f"Storage error assigning {day.value} {assignment.meal_time.value} on plan {meal_plan_id}: {str(e)}")
                report.results.append(self._failure(day, assignment.meal_time, "Storage error"))
                report.failed += 1
                continue

            report.results.append(self._success(slot, created))
            report.succeeded += 1

        if report.failed:
            errors = [f"{r.day_of_week.value}: {r.error}" for r in report.results if r.status == AssignmentStatus.failed]
            logger.warning(
                f"Repeat assignment on plan {meal_plan_id} completed {report.succeeded}/7 days"
            )
            audit_logger.log_partial_assignment(user_id, meal_plan_id, report.succeeded, report.failed, errors)

        return report

    @staticmethod
    def _success(slot: MealPlanMeal, created: bool) -> SlotAssignmentResult:
        return SlotAssignmentResult(
            day_of_week=slot.day_of_week,
            meal_time=slot.meal_time,
            status=AssignmentStatus.created if created else AssignmentStatus.updated,
            slot=MealPlanSlot.model_validate(slot)
        )

    @staticmethod
    def _failure(day: DayOfWeek, meal_time: MealTime, error: str) -> SlotAssignmentResult:
        return SlotAssignmentResult(
            day_of_week=day,
            meal_time=meal_time,
            status=AssignmentStatus.failed,
            error=error
        )
