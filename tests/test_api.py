import unittest
from datetime import timedelta
from unittest import mock

from tests.base import ApiTestCase
from fuelai.core.exceptions import ValidationError
from fuelai.core.security import create_access_token
from fuelai.models.meal_plan import DayOfWeek
from fuelai.services.meal_plan_service import MealPlanService


class TestAuth(ApiTestCase):
    def test_health(self):
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": "healthy"})

    def test_security_headers(self):
        response = self.client.get("/health")
        self.assertEqual(response.headers["X-Content-Type-Options"], "nosniff")
        self.assertEqual(response.headers["X-Frame-Options"], "DENY")
        self.assertEqual(response.headers["Cache-Control"], "no-store")

    def test_oversized_body_is_rejected(self):
        response = self.client.post(
            "/api/meals/",
            json={"name": "x" * (2 * 1024 * 1024)},
            headers=self.auth_headers()
        )
        self.assertEqual(response.status_code, 413)

    def test_missing_token_is_rejected(self):
        response = self.client.get("/api/meal-plans/")
        self.assertEqual(response.status_code, 401)

    def test_wrong_scheme_is_rejected(self):
        response = self.client.get("/api/auth/me", headers={"Authorization": "Basic abc"})
        self.assertEqual(response.status_code, 401)

    def test_expired_token_is_rejected(self):
        token = create_access_token("user-1", expires_delta=timedelta(minutes=-10))
        response = self.client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["detail"], "Token expired")

    def test_me_creates_user_on_first_request(self):
        headers = {"Authorization": "Bearer " + create_access_token(
            "user-42", extra_claims={"email": "eater@example.com", "name": "Eater"}
        )}
        first = self.client.get("/api/auth/me", headers=headers)
        second = self.client.get("/api/auth/me", headers=headers)

        self.assertEqual(first.status_code, 200)
        self.assertEqual(first.json()["auth_subject"], "user-42")
        self.assertEqual(first.json()["email"], "eater@example.com")
        self.assertEqual(first.json()["id"], second.json()["id"])


class TestMealPlansApi(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.headers = self.auth_headers()
        meal = self.client.post(
            "/api/meals/",
            json={"name": "Chicken wrap", "calories": 520, "protein": 38},
            headers=self.headers
        )
        self.meal_id = meal.json()["id"]
        plan = self.client.post("/api/meal-plans/", json={"name": "Bulk"}, headers=self.headers)
        self.plan_id = plan.json()["id"]

    def test_plan_crud(self):
        listed = self.client.get("/api/meal-plans/", headers=self.headers)
        self.assertEqual([p["id"] for p in listed.json()], [self.plan_id])

        updated = self.client.put(
            f"/api/meal-plans/{self.plan_id}",
            json={"description": "High protein"},
            headers=self.headers
        )
        self.assertEqual(updated.status_code, 200)
        self.assertEqual(updated.json()["name"], "Bulk")
        self.assertEqual(updated.json()["description"], "High protein")

        deleted = self.client.delete(f"/api/meal-plans/{self.plan_id}", headers=self.headers)
        self.assertEqual(deleted.status_code, 200)

        missing = self.client.get(f"/api/meal-plans/{self.plan_id}", headers=self.headers)
        self.assertEqual(missing.status_code, 404)

    def test_null_name_rejected_and_plan_unchanged(self):
        response = self.client.put(
            f"/api/meal-plans/{self.plan_id}", json={"name": None}, headers=self.headers
        )
        self.assertEqual(response.status_code, 422)

        plan = self.client.get(f"/api/meal-plans/{self.plan_id}", headers=self.headers).json()
        self.assertEqual(plan["name"], "Bulk")

    def test_other_users_cannot_see_plan(self):
        response = self.client.get(f"/api/meal-plans/{self.plan_id}", headers=self.auth_headers("user-2"))
        self.assertEqual(response.status_code, 404)

    def test_add_meal_creates_then_updates(self):
        body = {"meal_id": self.meal_id, "day_of_week": "Monday", "meal_time": "Breakfast"}

        created = self.client.post(f"/api/meal-plans/{self.plan_id}/add-meal", json=body, headers=self.headers)
        self.assertEqual(created.status_code, 201)
        self.assertEqual(created.json()["results"][0]["status"], "created")

        updated = self.client.post(f"/api/meal-plans/{self.plan_id}/add-meal", json=body, headers=self.headers)
        self.assertEqual(updated.status_code, 200)
        self.assertEqual(updated.json()["results"][0]["status"], "updated")

        plan = self.client.get(f"/api/meal-plans/{self.plan_id}", headers=self.headers).json()
        self.assertEqual(len(plan["slots"]), 1)
        self.assertEqual(plan["slots"][0]["meal"]["nutritional_info"]["calories"], 520)

    def test_add_meal_with_invalid_day_is_rejected(self):
        response = self.client.post(
            f"/api/meal-plans/{self.plan_id}/add-meal",
            json={"meal_id": self.meal_id, "day_of_week": "Funday", "meal_time": "Lunch"},
            headers=self.headers
        )
        self.assertEqual(response.status_code, 422)

    def test_add_unknown_meal_is_rejected(self):
        response = self.client.post(
            f"/api/meal-plans/{self.plan_id}/add-meal",
            json={"meal_id": "nope", "day_of_week": "Monday", "meal_time": "Lunch"},
            headers=self.headers
        )
        self.assertEqual(response.status_code, 422)

    def test_repeat_for_all_days(self):
        response = self.client.post(
            f"/api/meal-plans/{self.plan_id}/add-meal",
            json={"meal_id": self.meal_id, "meal_time": "Dinner", "repeat_for_all_days": True},
            headers=self.headers
        )
        self.assertEqual(response.status_code, 200)
        report = response.json()
        self.assertEqual(report["succeeded"], 7)
        self.assertEqual(
            [r["day_of_week"] for r in report["results"]],
            ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]
        )

    def test_partial_repeat_reports_multi_status(self):
        original_upsert = MealPlanService.upsert_slot

        def fail_on_sunday(service, meal_plan_id, meal_id, day_of_week, meal_time, user_id):
            if day_of_week == DayOfWeek.Sunday:
                raise ValidationError("Sunday rejected")
            return original_upsert(service, meal_plan_id, meal_id, day_of_week, meal_time, user_id)

        with mock.patch.object(MealPlanService, "upsert_slot", autospec=True, side_effect=fail_on_sunday):
            response = self.client.post(
                f"/api/meal-plans/{self.plan_id}/add-meal",
                json={"meal_id": self.meal_id, "meal_time": "Snack", "repeat_for_all_days": True},
                headers=self.headers
            )

        self.assertEqual(response.status_code, 207)
        report = response.json()
        self.assertEqual(report["succeeded"], 6)
        self.assertEqual(report["failed"], 1)
        self.assertEqual(report["results"][-1]["status"], "failed")
        self.assertEqual(report["results"][-1]["error"], "Sunday rejected")

    def test_remove_slot(self):
        created = self.client.post(
            f"/api/meal-plans/{self.plan_id}/add-meal",
            json={"meal_id": self.meal_id, "day_of_week": "Tuesday", "meal_time": "Lunch"},
            headers=self.headers
        )
        slot_id = created.json()["results"][0]["slot"]["id"]

        foreign = self.client.delete(f"/api/meal-plans/slots/{slot_id}", headers=self.auth_headers("user-2"))
        self.assertEqual(foreign.status_code, 404)

        removed = self.client.delete(f"/api/meal-plans/slots/{slot_id}", headers=self.headers)
        self.assertEqual(removed.status_code, 204)

    def test_touch_and_active(self):
        no_active = self.client.get("/api/meal-plans/active", headers=self.auth_headers("user-2"))
        self.assertEqual(no_active.status_code, 404)

        second = self.client.post("/api/meal-plans/", json={"name": "Cut"}, headers=self.headers).json()
        self.client.post(f"/api/meal-plans/{self.plan_id}/touch", headers=self.headers)

        active = self.client.get("/api/meal-plans/active", headers=self.headers)
        self.assertEqual(active.json()["id"], self.plan_id)

        touched = self.client.post(f"/api/meal-plans/{second['id']}/touch", headers=self.headers)
        self.assertEqual(touched.status_code, 200)
        self.assertIsNotNone(touched.json()["last_activated_at"])

        active = self.client.get("/api/meal-plans/active", headers=self.headers)
        self.assertEqual(active.json()["id"], second["id"])

    def test_touch_foreign_plan_is_forbidden(self):
        response = self.client.post(f"/api/meal-plans/{self.plan_id}/touch", headers=self.auth_headers("user-2"))
        self.assertEqual(response.status_code, 403)


class TestCalendarApi(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.headers = self.auth_headers()

    def test_empty_day(self):
        response = self.client.get("/api/calendar/2024-03-01", headers=self.headers)
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["date"], "2024-03-01")
        self.assertEqual(body["day_of_week"], "Friday")
        self.assertIsNone(body["meal_plan"])
        self.assertEqual(
            body["meals_by_time"],
            {"Breakfast": None, "Lunch": None, "Dinner": None, "Snack": None}
        )
        self.assertEqual(body["tasks_due"], [])

    def test_day_with_meal_and_task(self):
        meal_id = self.client.post("/api/meals/", json={"name": "Porridge"}, headers=self.headers).json()["id"]
        plan_id = self.client.post("/api/meal-plans/", json={"name": "Week"}, headers=self.headers).json()["id"]
        self.client.post(
            f"/api/meal-plans/{plan_id}/add-meal",
            json={"meal_id": meal_id, "day_of_week": "Wednesday", "meal_time": "Breakfast"},
            headers=self.headers
        )
        self.client.post(
            "/api/tasks/",
            json={"title": "Meal prep", "deadline": "2024-03-06T21:00:00Z"},
            headers=self.headers
        )

        body = self.client.get("/api/calendar/2024-03-06", headers=self.headers).json()

        self.assertEqual(body["meal_plan"]["id"], plan_id)
        self.assertEqual(body["meals_by_time"]["Breakfast"]["name"], "Porridge")
        self.assertIsNone(body["meals_by_time"]["Dinner"])
        self.assertEqual([t["title"] for t in body["tasks_due"]], ["Meal prep"])

    def test_malformed_date(self):
        response = self.client.get("/api/calendar/2024-3-6", headers=self.headers)
        self.assertEqual(response.status_code, 422)


class TestTasksApi(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.headers = self.auth_headers()

    def test_task_lifecycle(self):
        created = self.client.post(
            "/api/tasks/",
            json={"title": "Buy oats", "difficulty": "easy", "category": "Shopping"},
            headers=self.headers
        )
        self.assertEqual(created.status_code, 201)
        task_id = created.json()["id"]

        toggled = self.client.put(f"/api/tasks/{task_id}", json={"is_completed": True}, headers=self.headers)
        self.assertTrue(toggled.json()["is_completed"])

        done = self.client.get("/api/tasks/", params={"completed": "true"}, headers=self.headers)
        self.assertEqual([t["id"] for t in done.json()], [task_id])

        deleted = self.client.delete(f"/api/tasks/{task_id}", headers=self.headers)
        self.assertEqual(deleted.status_code, 200)
        self.assertEqual(self.client.get("/api/tasks/", headers=self.headers).json(), [])

    def test_invalid_difficulty(self):
        response = self.client.post(
            "/api/tasks/", json={"title": "Lift", "difficulty": "brutal"}, headers=self.headers
        )
        self.assertEqual(response.status_code, 422)

    def test_workout_listed_under_workouts(self):
        created = self.client.post(
            "/api/tasks/workout",
            json={
                "workout_title": "Pull day",
                "exercises": [{"name": "Rows", "sets": 3, "reps": 10}],
            },
            headers=self.headers
        )
        self.assertEqual(created.status_code, 201)
        self.assertEqual(created.json()["category"], "Exercise")
        self.assertEqual(created.json()["description"], "Rows - 3 x 10")

        self.client.post("/api/tasks/", json={"title": "Laundry"}, headers=self.headers)

        workouts = self.client.get("/api/tasks/", params={"view": "workouts"}, headers=self.headers).json()
        tasks = self.client.get("/api/tasks/", params={"view": "tasks"}, headers=self.headers).json()
        self.assertEqual([t["title"] for t in workouts], ["Pull day"])
        self.assertEqual([t["title"] for t in tasks], ["Laundry"])

    def test_foreign_task_not_found(self):
        task_id = self.client.post("/api/tasks/", json={"title": "Mine"}, headers=self.headers).json()["id"]
        response = self.client.put(
            f"/api/tasks/{task_id}", json={"is_completed": True}, headers=self.auth_headers("user-2")
        )
        self.assertEqual(response.status_code, 404)


class TestMealsApi(ApiTestCase):
    def test_meal_catalogue(self):
        headers = self.auth_headers()
        created = self.client.post(
            "/api/meals/", json={"name": "Salmon bowl", "fat": 22.5}, headers=headers
        )
        self.assertEqual(created.status_code, 201)
        self.assertEqual(created.json()["nutritional_info"]["fat"], 22.5)

        plain = self.client.post("/api/meals/", json={"name": "Apple"}, headers=headers)
        self.assertIsNone(plain.json()["nutritional_info"])

        found = self.client.get("/api/meals/", params={"search": "salmon"}, headers=headers).json()
        self.assertEqual([m["name"] for m in found], ["Salmon bowl"])

        self.assertEqual(self.client.get("/api/meals/missing", headers=headers).status_code, 404)

    def test_negative_nutrition_rejected(self):
        response = self.client.post(
            "/api/meals/", json={"name": "Mystery", "calories": -5}, headers=self.auth_headers()
        )
        self.assertEqual(response.status_code, 422)


if __name__ == "__main__":
    unittest.main()
