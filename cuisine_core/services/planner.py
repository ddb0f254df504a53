import time
from typing import Any, Dict, List, Optional, Sequence

from cuisine_core.core.logging_config import get_logger
from cuisine_core.core.rules import (
    BASE_NUTRITION,
    CUISINE_CALORIE_MULTIPLIERS,
    MEAL_TYPES,
    PREFERENCE_RESTRICTION_PHRASES,
)
from cuisine_core.models import (
    GeneratedPlanResponse,
    GeneratePlanRequest,
    GenerationMetadata,
    MealNutrition,
    PlannedMeal,
    PlanStructure,
    PriorityWeights,
    RankedMeal,
    StructuredMeal,
    UserCulturalProfile,
)
from cuisine_core.services.culture_parser import CulturalIntentParser, culture_parser
from cuisine_core.services.dietary_validator import DietaryValidator, dietary_validator
from cuisine_core.services.scoring import DIMENSIONS, rank_meals
from cuisine_core.services.sources.base import MealSource
from cuisine_core.services.sources.local import LocalMealSource
from cuisine_core.utils.ingredient_parser import scale_ingredient

logger = get_logger(__name__)

BACKGROUND_PREFERENCE = 0.9
DEFAULT_GOAL_WEIGHT = 0.5


class PlanAssembler:
    def assemble_plan(
        self,
        ranked_meals: Sequence[RankedMeal],
        num_days: int,
        meals_per_day: int,
        serving_size: int = 1
    ) -> PlanStructure:
        """Distribute ranked meals into a day x meal-slot grid.

        Slots are filled row by row (day, then meal index) in ranked order.
        When there are fewer meals than slots the assembler starts again from
        the top of the ranked list instead of failing.

        Args:
            ranked_meals: Meals in ranked order.
            num_days: Number of days ("day_1" ... "day_N").
            meals_per_day: Slots per day, labelled breakfast, lunch, dinner,
                snack, dessert and then "breakfast_2", ...
            serving_size: Multiplier for ingredient quantities and nutrition.

        Returns:
            PlanStructure with the filled grid.
        """
        if not ranked_meals or num_days <= 0 or meals_per_day <= 0:
            return PlanStructure()

        servings = max(1, serving_size)
        labels = meal_slot_labels(meals_per_day)
        total_slots = num_days * meals_per_day
        cycled = total_slots > len(ranked_meals)
        if cycled:
            logger.warning(
                f"Only {len(ranked_meals)} ranked meal(s) for {total_slots} slot(s); repeating from the top of the list"
            )

        meal_plan: Dict[str, Dict[str, PlannedMeal]] = {}
        index = 0
        for day in range(1, num_days + 1):
            day_key = f"day_{day}"
            meal_plan[day_key] = {}
            for label in labels:
                ranked = ranked_meals[index % len(ranked_meals)]
                meal_plan[day_key][label] = self._planned_meal(ranked, servings)
                index += 1

        logger.info(f"Assembled {num_days}-day plan with {total_slots} slot(s)")
        return PlanStructure(
            meal_plan=meal_plan,
            total_slots=total_slots,
            unique_meals=min(len(ranked_meals), total_slots),
            cycled=cycled
        )

    def _planned_meal(self, ranked: RankedMeal, servings: int) -> PlannedMeal:
        meal = ranked.meal
        return PlannedMeal(
            title=meal.name,
            description=meal.description,
            cuisine=meal.cuisine,
            ingredients=[scale_ingredient(i, servings) for i in meal.ingredients],
            instructions=list(meal.instructions),
            cooking_techniques=list(meal.cooking_techniques),
            cook_time_minutes=meal.estimated_prep_time + meal.estimated_cook_time,
            difficulty=meal.difficulty_level,
            nutrition=estimate_nutrition(meal, servings),
            cultural_authenticity=meal.authenticity_score,
            ranking_explanation=ranked.ranking_explanation
        )

    @staticmethod
    def build_user_profile(profile: Dict[str, Any], goal_weights: Optional[Dict[str, Any]] = None) -> UserCulturalProfile:
        """Build a ranking profile from a stored user profile and goal weights.

        Every cultural background entry gets a 0.9 preference; missing goal
        weights default to 0.5. Restrictions are collected from preference
        phrases ("no dairy", "vegan") and household members.
        """
        profile = profile or {}
        goal_weights = goal_weights or {}

        preferences = {
            culture: BACKGROUND_PREFERENCE
            for culture in profile.get("cultural_background") or []
            if isinstance(culture, str) and culture.strip()
        }
        weights = {}
        for dim in DIMENSIONS:
            value = goal_weights.get(dim)
            weights[dim] = DEFAULT_GOAL_WEIGHT if value is None else max(0.0, min(float(value), 1.0))

        phrases = [p for p in profile.get("preferences") or [] if isinstance(p, str)]
        return UserCulturalProfile(
            cultural_preferences=preferences,
            priority_weights=PriorityWeights(**weights),
            dietary_restrictions=_extract_restrictions(phrases, profile.get("members") or []),
            preferences=phrases
        )


def meal_slot_labels(meals_per_day: int) -> List[str]:
    labels = []
    for index in range(meals_per_day):
        base = MEAL_TYPES[index % len(MEAL_TYPES)]
        round_number = index // len(MEAL_TYPES) + 1
        labels.append(base if round_number == 1 else f"{base}_{round_number}")
    return labels


def estimate_nutrition(meal: StructuredMeal, servings: int) -> MealNutrition:
    cuisine = meal.cuisine.strip().lower()
    multiplier = CUISINE_CALORIE_MULTIPLIERS.get(cuisine)
    if multiplier is None:
        multiplier = next((m for name, m in CUISINE_CALORIE_MULTIPLIERS.items() if name in cuisine), 1.0)
    return MealNutrition(
        calories=round(BASE_NUTRITION["calories"] * multiplier * servings),
        protein_g=round(BASE_NUTRITION["protein_g"] * servings),
        carbs_g=round(BASE_NUTRITION["carbs_g"] * servings),
        fat_g=round(BASE_NUTRITION["fat_g"] * servings)
    )


def _extract_restrictions(phrases: List[str], members: List[Any]) -> List[str]:
    restrictions: List[str] = []
    for phrase in phrases:
        lowered = phrase.lower()
        for keywords, restriction in PREFERENCE_RESTRICTION_PHRASES:
            if any(k in lowered for k in keywords) and restriction not in restrictions:
                restrictions.append(restriction)
    for member in members:
        if not isinstance(member, dict):
            continue
        for restriction in member.get("dietary_restrictions") or []:
            normalized = str(restriction).strip().lower()
            if normalized and normalized not in restrictions:
                restrictions.append(normalized)
    return restrictions


class MealPlanPipeline:
    """Runs parser -> source -> ranker -> assembler -> validator for one request."""

    def __init__(
        self,
        parser: Optional[CulturalIntentParser] = None,
        source: Optional[MealSource] = None,
        assembler: Optional[PlanAssembler] = None,
        validator: Optional[DietaryValidator] = None
    ):
        self.parser = parser or culture_parser
        self.source = source or LocalMealSource()
        self.assembler = assembler or PlanAssembler()
        self.validator = validator or dietary_validator

    def generate(self, request: GeneratePlanRequest) -> GeneratedPlanResponse:
        started = time.perf_counter()
        profile = request.profile.model_copy(deep=True)

        culture_tags: List[str] = []
        fallback_used = False
        if request.cultural_text:
            culture = self.parser.parse(request.cultural_text)
            culture_tags = culture.culture_tags
            fallback_used = culture.fallback_used
            for tag in culture_tags:
                profile.cultural_preferences.setdefault(tag, BACKGROUND_PREFERENCE)

        candidates = self.source.get_meals(request.user_id, profile)
        slots = request.num_days * request.meals_per_day
        ranked = rank_meals(profile, candidates, count=slots)
        plan = self.assembler.assemble_plan(ranked, request.num_days, request.meals_per_day, request.serving_size)
        validation = self.validator.validate_meal_plan(plan, profile.dietary_restrictions)

        metadata = GenerationMetadata(
            culture_tags=culture_tags,
            interpreter_fallback_used=fallback_used,
            meals_analyzed=len(candidates),
            meals_selected=len(ranked),
            selection_reasoning=selection_reasoning([r.meal for r in ranked], profile),
            processing_time_ms=round((time.perf_counter() - started) * 1000, 2)
        )
        logger.info(
            f"Generated plan for user {request.user_id or 'anonymous'}: "
            f"{metadata.meals_selected}/{metadata.meals_analyzed} meals selected"
        )
        return GeneratedPlanResponse(plan=plan, validation=validation, metadata=metadata)


def selection_reasoning(meals: List[StructuredMeal], profile: UserCulturalProfile) -> str:
    if not meals:
        return "No candidate meals matched the profile"
    cuisines: List[str] = []
    for meal in meals:
        if meal.cuisine not in cuisines:
            cuisines.append(meal.cuisine)
    average = sum(m.authenticity_score for m in meals) / len(meals)
    weights = profile.priority_weights
    top_priority = max(DIMENSIONS, key=lambda dim: getattr(weights, dim))
    return (
        f"Selected {len(meals)} meals from {', '.join(cuisines)} cuisines. "
        f"Average authenticity: {average * 100:.0f}%. Prioritized {top_priority}-focused selections."
    )


plan_assembler = PlanAssembler()
