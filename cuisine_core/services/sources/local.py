import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from cuisine_core.core.logging_config import get_logger
from cuisine_core.models import StructuredMeal, UserCulturalProfile
from cuisine_core.services.sources.base import MealSource
from cuisine_core.services.taxonomy_store import slugify
from cuisine_core.utils.meal_estimator import build_structured_meal

logger = get_logger(__name__)

DEFAULT_MEALS_PATH = Path(__file__).resolve().parents[2] / "data" / "cultural_meals.json"


class LocalMealSource(MealSource):
    name = "Local"

    def __init__(self, file_path: Optional[str] = None):
        self.cuisines = self._load_data(str(file_path or DEFAULT_MEALS_PATH))

    def _load_data(self, file_path: str) -> Dict[str, Any]:
        if not os.path.exists(file_path):
            logger.warning(f"{file_path} not found.")
            return {}
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError:
            logger.error(f"Error decoding {file_path}")
            return {}
        if not isinstance(data, dict):
            logger.error(f"{file_path} must map cuisine names to meal lists")
            return {}
        return data

    def get_meals(self, user_id: Optional[str], profile: UserCulturalProfile) -> List[StructuredMeal]:
        """
        Build structured meals for the profile's preferred cuisines,
        or for every cuisine when the profile names none.
        """
        wanted = {label.strip().lower() for label in profile.cultural_preferences}
        meals: List[StructuredMeal] = []
        for cuisine, entry in self.cuisines.items():
            if wanted and cuisine.lower() not in wanted:
                continue
            if not isinstance(entry, dict):
                continue
            traditional = entry.get("traditional_ingredients") or []
            for index, record in enumerate(entry.get("meals") or [], start=1):
                if not isinstance(record, dict) or not record.get("name"):
                    continue
                meals.append(build_structured_meal(
                    record,
                    cuisine=cuisine,
                    traditional_ingredients=traditional,
                    meal_id=f"{slugify(cuisine)}_{index}"
                ))

        logger.info(f"Loaded {len(meals)} candidate meal(s) for user {user_id or 'anonymous'}")
        return meals
