from abc import ABC, abstractmethod
from typing import List, Optional

from cuisine_core.models import StructuredMeal, UserCulturalProfile


class MealSource(ABC):
    name: str = "Unknown"

    @abstractmethod
    def get_meals(self, user_id: Optional[str], profile: UserCulturalProfile) -> List[StructuredMeal]:
        """
        Return the candidate pool for a user.
        Must return canonical `StructuredMeal` objects; callers treat them as read-only.
        """
        pass
