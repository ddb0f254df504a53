from typing import Dict, List, Literal, Optional, Union
from pydantic import BaseModel, Field, constr

Severity = Literal["high", "medium", "low"]
DetectedIn = Literal["title", "ingredients", "instructions"]
ConflictType = Literal["ingredient", "cooking_method", "dietary_restriction", "none"]


# --- Cuisine taxonomy ---

class CuisineOrigin(BaseModel):
    primary_region: Optional[str] = None
    countries: List[str] = Field(default_factory=list)
    geographic_tags: List[str] = Field(default_factory=list)


class CuisineCharacteristics(BaseModel):
    flavor_profile: List[str] = Field(default_factory=list)
    cooking_methods: List[str] = Field(default_factory=list)
    key_ingredients: List[str] = Field(default_factory=list)
    signature_dishes: List[str] = Field(default_factory=list)


class CuisineDietaryInfo(BaseModel):
    common_restrictions: List[str] = Field(default_factory=list)
    allergen_considerations: List[str] = Field(default_factory=list)
    health_adaptations: List[str] = Field(default_factory=list)


class CuisineSearchability(BaseModel):
    popularity_score: Optional[float] = None
    difficulty_level: Optional[str] = None
    availability_score: Optional[float] = None
    keywords: List[str] = Field(default_factory=list)


class CuisineMetadata(BaseModel):
    origin: Optional[CuisineOrigin] = None
    characteristics: Optional[CuisineCharacteristics] = None
    dietary_info: Optional[CuisineDietaryInfo] = None
    searchability: Optional[CuisineSearchability] = None


class RegionalVariation(BaseModel):
    name: str
    description: str = ""
    signature_dishes: List[str] = Field(default_factory=list)


class CuisineDefinition(BaseModel):
    id: str
    label: str
    aliases: List[str] = Field(default_factory=list)
    metadata: Optional[CuisineMetadata] = None
    related_cuisines: List[str] = Field(default_factory=list)
    regional_variations: List[RegionalVariation] = Field(default_factory=list)


class TaxonomyCategories(BaseModel):
    by_region: Dict[str, List[str]] = Field(default_factory=dict)
    by_difficulty: Dict[str, List[str]] = Field(default_factory=dict)
    by_dietary: Dict[str, List[str]] = Field(default_factory=dict)


class TaxonomySearchIndexes(BaseModel):
    keywords: Dict[str, List[str]] = Field(default_factory=dict)
    ingredients: Dict[str, List[str]] = Field(default_factory=dict)


class CuisineTaxonomyV2(BaseModel):
    schema_version: str
    last_updated: str
    total_cuisines: int
    description: str = ""
    cuisines: List[CuisineDefinition]
    categories: Optional[TaxonomyCategories] = None
    search_indexes: Optional[TaxonomySearchIndexes] = None


# --- Detailed culinary profile ---

class StapleDish(BaseModel):
    name: str
    description: str = ""
    ingredients: List[str] = Field(default_factory=list)


class MealStructure(BaseModel):
    breakfast: List[str] = Field(default_factory=list)
    lunch: List[str] = Field(default_factory=list)
    dinner: List[str] = Field(default_factory=list)
    snacks: List[str] = Field(default_factory=list)


class HealthySwap(BaseModel):
    original: str
    swap: str


class CuisineData(BaseModel):
    staple_dishes: List[StapleDish] = Field(default_factory=list)
    common_proteins: List[str] = Field(default_factory=list)
    common_carbs: List[str] = Field(default_factory=list)
    common_vegetables: List[str] = Field(default_factory=list)
    meal_structure: MealStructure = Field(default_factory=MealStructure)
    healthy_swaps: List[HealthySwap] = Field(default_factory=list)
    flavor_profiles: List[str] = Field(default_factory=list)
    signature_seasonings: List[str] = Field(default_factory=list)
    dietary_restrictions: List[str] = Field(default_factory=list)
    cooking_methods: List[str] = Field(default_factory=list)


class CultureParserResult(BaseModel):
    culture_tags: List[str] = Field(default_factory=list, max_length=3)
    needs_manual_review: bool = False
    confidence: float = Field(default=0.0, ge=0, le=1)
    detected_regions: Optional[List[str]] = None
    suggested_aliases: Optional[List[str]] = None
    cuisine_data: Optional[Dict[str, CuisineData]] = None
    processing_time_ms: float = 0.0
    fallback_used: bool = False


# --- Conflict resolution ---

class ConflictPattern(BaseModel):
    dietary_family: List[str]
    conflicts_with: List[str]
    substitutions: Dict[str, List[str]] = Field(default_factory=dict)
    cooking_method_alternatives: Dict[str, List[str]] = Field(default_factory=dict)


class IngredientSubstitution(BaseModel):
    original: str
    substitute: str
    reason: str
    cultural_context: Optional[str] = None


class AlternativeSuggestion(BaseModel):
    dish_name: str
    cuisine: str
    description: str
    substitute_ingredients: List[IngredientSubstitution]
    difficulty_rating: float = Field(ge=1, le=5)
    cook_time_minutes: int
    cultural_notes: str = ""
    dietary_compliance: List[str] = Field(default_factory=list)
    cultural_authenticity: float = Field(default=0.0, ge=0, le=1)


class ConflictResolution(BaseModel):
    has_conflict: bool
    conflict_type: ConflictType = "none"
    original_request: str
    suggested_alternatives: List[AlternativeSuggestion] = Field(default_factory=list, max_length=5)
    confidence: float = Field(ge=0, le=1)
    cultural_authenticity: float = Field(ge=0, le=1)
    explanations: List[str] = Field(default_factory=list)


# --- Dietary validation ---

class IngredientItem(BaseModel):
    name: str = ""


class RecipeInput(BaseModel):
    title: str = ""
    ingredients: List[Union[str, IngredientItem]] = Field(default_factory=list)
    instructions: List[str] = Field(default_factory=list)

    def ingredient_names(self) -> List[str]:
        return [item if isinstance(item, str) else item.name for item in self.ingredients]


class DietaryViolation(BaseModel):
    ingredient: str
    restriction_violated: str
    severity: Severity
    alternative_suggestions: List[str] = Field(default_factory=list)
    detected_in: DetectedIn


class RecipeValidationResult(BaseModel):
    is_compliant: bool
    violations: List[DietaryViolation] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)
    confidence: float = Field(ge=0, le=1)
    validation_time_ms: float = 0.0


class PlanValidationResult(BaseModel):
    overall_compliance_percent: int
    total_meals: int
    compliant_meals: int
    violations: Dict[str, RecipeValidationResult] = Field(default_factory=dict)
    summary: List[str] = Field(default_factory=list)


# --- Ranking ---

class PriorityWeights(BaseModel):
    cultural: float = 0.5
    health: float = 0.5
    cost: float = 0.5
    time: float = 0.5
    variety: float = 0.5


class UserCulturalProfile(BaseModel):
    cultural_preferences: Dict[str, float] = Field(default_factory=dict)
    priority_weights: PriorityWeights = Field(default_factory=PriorityWeights)
    dietary_restrictions: List[str] = Field(default_factory=list)
    preferences: List[str] = Field(default_factory=list)


class StructuredMeal(BaseModel):
    id: Optional[str] = None
    name: str
    cuisine: str
    description: str = ""
    authenticity_score: float = Field(default=0.7, ge=0, le=1)
    health_score: float = Field(default=0.5, ge=0, le=1)
    cost_score: float = Field(default=0.5, ge=0, le=1)
    time_score: float = Field(default=0.5, ge=0, le=1)
    ingredients: List[str] = Field(default_factory=list)
    cooking_techniques: List[str] = Field(default_factory=list)
    estimated_prep_time: int = 10
    estimated_cook_time: int = 20
    difficulty_level: float = 2.0
    instructions: List[str] = Field(default_factory=list)


class ComponentScores(BaseModel):
    cultural: float
    health: float
    cost: float
    time: float
    variety: float


class RankedMeal(BaseModel):
    meal: StructuredMeal
    total_score: float
    component_scores: Optional[ComponentScores] = None
    ranking_explanation: str


# --- Plan assembly ---

class MealNutrition(BaseModel):
    calories: int
    protein_g: int
    carbs_g: int
    fat_g: int


class PlannedMeal(BaseModel):
    title: str
    description: str
    cuisine: str
    ingredients: List[str]
    instructions: List[str] = Field(default_factory=list)
    cooking_techniques: List[str] = Field(default_factory=list)
    cook_time_minutes: int
    difficulty: float
    nutrition: MealNutrition
    cultural_authenticity: float
    ranking_explanation: str


class PlanStructure(BaseModel):
    meal_plan: Dict[str, Dict[str, PlannedMeal]] = Field(default_factory=dict)
    total_slots: int = 0
    unique_meals: int = 0
    cycled: bool = False


# --- API request/response wrappers ---

class CulturalIntentRequest(BaseModel):
    text: constr(strip_whitespace=True, min_length=1) = Field(
        ..., description="Free-text description of the user's cultural food background"
    )
    force_refresh: bool = False
    enable_caching: bool = True


class ConflictRequest(BaseModel):
    request: str
    restrictions: List[str] = Field(default_factory=list)
    cultural_background: List[str] = Field(default_factory=list)
    cuisine_data: Optional[Dict[str, CuisineData]] = None


class CuisineDataConflictRequest(BaseModel):
    request: str
    restrictions: List[str] = Field(default_factory=list)
    culture_result: CultureParserResult


class QuickCheckRequest(BaseModel):
    text: str
    restrictions: List[str] = Field(default_factory=list)


class QuickCheckResponse(BaseModel):
    has_conflict: bool


class RecipeValidationRequest(BaseModel):
    recipe: Optional[RecipeInput] = None
    restrictions: List[str] = Field(default_factory=list)


class MealPlanValidationRequest(BaseModel):
    meal_plan: Dict[str, Dict[str, RecipeInput]] = Field(default_factory=dict)
    restrictions: List[str] = Field(default_factory=list)


class RankMealsRequest(BaseModel):
    profile: UserCulturalProfile
    candidates: List[StructuredMeal] = Field(default_factory=list)
    count: int = Field(default=10, ge=0)


class AssemblePlanRequest(BaseModel):
    ranked_meals: List[RankedMeal] = Field(default_factory=list)
    num_days: int = Field(default=3, ge=0, le=31)
    meals_per_day: int = Field(default=3, ge=0, le=10)
    serving_size: int = Field(default=1, ge=1)


class GeneratePlanRequest(BaseModel):
    user_id: Optional[str] = None
    cultural_text: Optional[str] = None
    profile: UserCulturalProfile = Field(default_factory=UserCulturalProfile)
    num_days: int = Field(default=3, ge=1, le=14)
    meals_per_day: int = Field(default=3, ge=1, le=5)
    serving_size: int = Field(default=1, ge=1)


class GenerationMetadata(BaseModel):
    culture_tags: List[str] = Field(default_factory=list)
    interpreter_fallback_used: bool = False
    meals_analyzed: int = 0
    meals_selected: int = 0
    selection_reasoning: str = ""
    processing_time_ms: float = 0.0


class GeneratedPlanResponse(BaseModel):
    plan: PlanStructure
    validation: PlanValidationResult
    metadata: GenerationMetadata
