import unittest
from datetime import date

from tests.base import DatabaseTestCase
from fuelai.core.exceptions import ValidationError
from fuelai.models.meal_plan import DayOfWeek, MealTime
from fuelai.services.calendar_service import CalendarService
from fuelai.services.meal_plan_service import MealPlanService


class TestResolveDay(DatabaseTestCase):
    def setUp(self):
        super().setUp()
        self.user = self.create_user()
        self.plans = MealPlanService(self.db)
        self.calendar = CalendarService(self.db)

    def test_user_without_plans_gets_four_empty_meal_times(self):
        result = self.calendar.resolve_day(self.user.id, "2024-03-01")

        self.assertEqual(result["date"], date(2024, 3, 1))
        self.assertEqual(result["day_of_week"], DayOfWeek.Friday)
        self.assertIsNone(result["meal_plan"])
        self.assertEqual(result["meals_by_time"], {
            MealTime.Breakfast: None,
            MealTime.Lunch: None,
            MealTime.Dinner: None,
            MealTime.Snack: None,
        })
        self.assertEqual(result["tasks_due"], [])

    def test_wednesday_breakfast_resolves_on_a_wednesday(self):
        plan = self.create_plan(self.user)
        meal = self.create_meal("Greek yogurt")
        self.plans.upsert_slot(plan.id, meal.id, "Wednesday", "Breakfast", self.user.id)
        self.plans.touch_meal_plan(plan.id, self.user.id)

        result = self.calendar.resolve_day(self.user.id, "2024-03-06")

        self.assertEqual(result["day_of_week"], DayOfWeek.Wednesday)
        self.assertEqual(result["meal_plan"].id, plan.id)
        self.assertEqual(result["meals_by_time"][MealTime.Breakfast].id, meal.id)
        self.assertIsNone(result["meals_by_time"][MealTime.Lunch])
        self.assertIsNone(result["meals_by_time"][MealTime.Dinner])
        self.assertIsNone(result["meals_by_time"][MealTime.Snack])

    def test_other_weekdays_do_not_leak(self):
        plan = self.create_plan(self.user)
        meal = self.create_meal()
        self.plans.upsert_slot(plan.id, meal.id, "Thursday", "Dinner", self.user.id)

        result = self.calendar.resolve_day(self.user.id, "2024-03-06")
        self.assertTrue(all(m is None for m in result["meals_by_time"].values()))

    def test_uses_most_recently_activated_plan(self):
        old_plan = self.create_plan(self.user, "Old")
        new_plan = self.create_plan(self.user, "New")
        old_meal, new_meal = self.create_meal("Old lunch"), self.create_meal("New lunch")
        self.plans.upsert_slot(old_plan.id, old_meal.id, "Friday", "Lunch", self.user.id)
        self.plans.upsert_slot(new_plan.id, new_meal.id, "Friday", "Lunch", self.user.id)

        self.plans.touch_meal_plan(new_plan.id, self.user.id)
        self.plans.touch_meal_plan(old_plan.id, self.user.id)

        result = self.calendar.resolve_day(self.user.id, "2024-03-01")
        self.assertEqual(result["meals_by_time"][MealTime.Lunch].id, old_meal.id)

    def test_tasks_due_match_deadline_only(self):
        due = self.create_task(self.user, title="Meal prep", deadline=date(2024, 3, 1))
        self.create_task(self.user, title="Someday")
        self.create_task(self.user, title="Next day", deadline=date(2024, 3, 2))

        result = self.calendar.resolve_day(self.user.id, "2024-03-01")
        self.assertEqual([task.id for task in result["tasks_due"]], [due.id])

    def test_completed_tasks_are_still_due(self):
        open_task = self.create_task(self.user, title="Run", deadline=date(2024, 3, 1))
        done_task = self.create_task(self.user, title="Swim", deadline=date(2024, 3, 1), is_completed=True)

        result = self.calendar.resolve_day(self.user.id, "2024-03-01")
        self.assertEqual([task.id for task in result["tasks_due"]], [open_task.id, done_task.id])

    def test_tasks_of_other_users_excluded(self):
        other = self.create_user("user-2")
        self.create_task(other, title="Not mine", deadline=date(2024, 3, 1))

        result = self.calendar.resolve_day(self.user.id, "2024-03-01")
        self.assertEqual(result["tasks_due"], [])

    def test_tasks_resolved_without_any_plan(self):
        task = self.create_task(self.user, title="Stretch", deadline=date(2024, 3, 1))

        result = self.calendar.resolve_day(self.user.id, date(2024, 3, 1))
        self.assertIsNone(result["meal_plan"])
        self.assertEqual([t.id for t in result["tasks_due"]], [task.id])

    def test_malformed_date_rejected(self):
        with self.assertRaises(ValidationError):
            self.calendar.resolve_day(self.user.id, "03/01/2024")


if __name__ == "__main__":
    unittest.main()
