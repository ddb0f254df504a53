from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
import time
import uuid
from typing import List
from cuisine_core.core.config import get_config
from cuisine_core.core.logging_config import get_logger
from cuisine_core.models import (
    AssemblePlanRequest,
    ConflictRequest,
    ConflictResolution,
    CuisineDataConflictRequest,
    CulturalIntentRequest,
    CultureParserResult,
    GeneratedPlanResponse,
    GeneratePlanRequest,
    MealPlanValidationRequest,
    PlanStructure,
    PlanValidationResult,
    QuickCheckRequest,
    QuickCheckResponse,
    RankedMeal,
    RankMealsRequest,
    RecipeValidationRequest,
    RecipeValidationResult,
)
from cuisine_core.services.conflict_resolver import conflict_resolver
from cuisine_core.services.culture_parser import culture_parser
from cuisine_core.services.dietary_validator import dietary_validator
from cuisine_core.services.planner import MealPlanPipeline, plan_assembler
from cuisine_core.services.scoring import rank_meals
from cuisine_core.services.taxonomy_store import TaxonomyLoadError, taxonomy_store

app = FastAPI(title="Cultural Cuisine Recommendation Core API", version="0.1.0")
logger = get_logger(__name__)
pipeline = MealPlanPipeline()


def require_taxonomy() -> None:
    taxonomy_store.ensure_loaded(strict=get_config().taxonomy_strict)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    request_id = str(uuid.uuid4())
    start = time.time()
    response = await call_next(request)
    duration_ms = (time.time() - start) * 1000.0
    logger.info(
        f"{request.method} {request.url.path} {response.status_code} "
        f"{duration_ms:.1f}ms request_id={request_id}"
    )
    response.headers["X-Request-ID"] = request_id
    return response

@app.exception_handler(TaxonomyLoadError)
async def taxonomy_load_error_handler(request: Request, exc: TaxonomyLoadError):
    logger.error(f"Cuisine taxonomy unavailable: {exc}")
    return JSONResponse(
        status_code=503,
        content={
            "error_code": "TAXONOMY_UNAVAILABLE",
            "message": "The cuisine taxonomy could not be loaded.",
            "paths_tried": exc.paths_tried
        }
    )

@app.get("/")
def read_root():
    return {"message": "Welcome to the Cultural Cuisine Core API. Visit /docs for documentation."}


@app.post("/api/cultural-intent", response_model=CultureParserResult, dependencies=[Depends(require_taxonomy)])
async def parse_cultural_intent(request: CulturalIntentRequest):
    """
    Turn a free-text cultural background into up to three cuisine tags.
    """
    return culture_parser.parse(request.text, force_refresh=request.force_refresh, enable_caching=request.enable_caching)


@app.post("/api/conflicts/resolve", response_model=ConflictResolution, dependencies=[Depends(require_taxonomy)])
async def resolve_conflicts(request: ConflictRequest):
    """
    Detect dietary conflicts in a meal request and suggest culturally anchored alternatives.
    """
    return conflict_resolver.resolve_conflicts(
        request.request, request.restrictions, request.cultural_background, request.cuisine_data
    )


@app.post(
    "/api/conflicts/resolve-with-cuisine-data",
    response_model=ConflictResolution,
    dependencies=[Depends(require_taxonomy)]
)
async def resolve_conflicts_with_cuisine_data(request: CuisineDataConflictRequest):
    return conflict_resolver.resolve_conflicts_with_cuisine_data(
        request.request, request.restrictions, request.culture_result
    )


@app.post("/api/conflicts/quick-check", response_model=QuickCheckResponse)
async def quick_conflict_check(request: QuickCheckRequest):
    return QuickCheckResponse(has_conflict=conflict_resolver.quick_conflict_check(request.text, request.restrictions))


@app.post("/api/validate/recipe", response_model=RecipeValidationResult, dependencies=[Depends(require_taxonomy)])
async def validate_recipe(request: RecipeValidationRequest):
    """
    Check a recipe against dietary restrictions and suggest fixes.
    """
    return dietary_validator.validate_recipe(request.recipe, request.restrictions)


@app.post("/api/validate/meal-plan", response_model=PlanValidationResult, dependencies=[Depends(require_taxonomy)])
async def validate_meal_plan(request: MealPlanValidationRequest):
    return dietary_validator.validate_meal_plan(request.meal_plan, request.restrictions)


@app.post("/api/meals/rank", response_model=List[RankedMeal])
async def rank_candidate_meals(request: RankMealsRequest):
    """
    Rank candidate meals by the profile's weighted priorities.
    """
    return rank_meals(request.profile, request.candidates, request.count)


@app.post("/api/plans/assemble", response_model=PlanStructure)
async def assemble_plan(request: AssemblePlanRequest):
    return plan_assembler.assemble_plan(
        request.ranked_meals, request.num_days, request.meals_per_day, request.serving_size
    )


@app.post("/api/plans/generate", response_model=GeneratedPlanResponse, dependencies=[Depends(require_taxonomy)])
async def generate_plan(request: GeneratePlanRequest):
    """
    Generate a culturally ranked, validated meal plan for a user profile.
    """
    return pipeline.generate(request)
