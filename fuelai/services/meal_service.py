from sqlalchemy.orm import Session, selectinload
from sqlalchemy import or_
from typing import List, Optional
from fuelai.core.exceptions import NotFoundError
from fuelai.models.meal import Meal, NutritionalInfo
from fuelai.schemas.meal import MealCreate

NUTRITION_FIELDS = ('calories', 'protein', 'carbs', 'fat')

class MealService:
    def __init__(self, db: Session):
        self.db = db

    def get_meals(
        self,
        skip: int = 0,
        limit: int = 100,
        search: Optional[str] = None
    ) -> List[Meal]:
        query = self.db.query(Meal).options(selectinload(Meal.nutritional_info))

        if search:
            query = query.filter(
                or_(
                    Meal.name.ilike(f"%{search}%"),
                    Meal.description.ilike(f"%{search}%")
                )
            )

        return query.order_by(Meal.name, Meal.id).offset(skip).limit(limit).all()

    def get_meal(self, meal_id: str) -> Meal:
        meal = self.db.query(Meal).options(
            selectinload(Meal.nutritional_info)
        ).filter(Meal.id == meal_id).first()

        if not meal:
            raise NotFoundError("Meal not found", {"meal_id": meal_id})
        return meal

    def create_meal(self, meal_data: MealCreate) -> Meal:
        meal = Meal(**meal_data.model_dump(exclude=set(NUTRITION_FIELDS)))

        # Nutrition values are stored as supplied, only when at least one is given
        nutrition = meal_data.model_dump(include=set(NUTRITION_FIELDS), exclude_none=True)
        if nutrition:
            meal.nutritional_info = NutritionalInfo(**nutrition)

        self.db.add(meal)
        self.db.commit()
        self.db.refresh(meal)
        return meal
