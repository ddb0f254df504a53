from collections import Counter
from typing import Dict, List, Optional, Sequence, Tuple

from cuisine_core.core.logging_config import get_logger
from cuisine_core.models import (
    ComponentScores,
    PriorityWeights,
    RankedMeal,
    StructuredMeal,
    UserCulturalProfile,
)
from cuisine_core.services.conflict_resolver import ConflictResolver, conflict_resolver

logger = get_logger(__name__)

DIMENSIONS = ("cultural", "health", "cost", "time", "variety")
DEFAULT_CULTURAL_PREFERENCE = 0.5

EXPLANATION_LABELS = {
    "cultural": "High cultural match",
    "health": "Good health score",
    "cost": "Cost-efficient ingredients",
    "time": "Quick preparation",
    "variety": "Adds cuisine variety",
}


def normalize_weights(weights: PriorityWeights) -> Dict[str, float]:
    """Clamp every priority weight into [0, 1]."""
    return {dim: max(0.0, min(float(getattr(weights, dim)), 1.0)) for dim in DIMENSIONS}


def variety_scores(meals: Sequence[StructuredMeal]) -> List[float]:
    """Score each meal by how rare its cuisine is in the pool (1.0 = only one of its kind)."""
    if not meals:
        return []
    counts = Counter(m.cuisine.strip().lower() for m in meals)
    pool = len(meals)
    return [round(1.0 - (counts[m.cuisine.strip().lower()] - 1) / pool, 4) for m in meals]


def cultural_preference(profile: UserCulturalProfile, cuisine: str) -> float:
    wanted = cuisine.strip().lower()
    for label, weight in profile.cultural_preferences.items():
        if label.strip().lower() == wanted:
            return max(0.0, min(float(weight), 1.0))
    return DEFAULT_CULTURAL_PREFERENCE


def score_meal(
    meal: StructuredMeal,
    profile: UserCulturalProfile,
    variety_score: float = 1.0
) -> Tuple[float, ComponentScores]:
    """Score one meal against the profile's priority weights.

    Args:
        meal: Candidate meal.
        profile: User profile with cultural preferences and weights.
        variety_score: Precomputed variety of the meal within its pool.

    Returns:
        Tuple of (weighted total in [0, 1], per-dimension scores).

    Notes:
        - The cultural dimension is the authenticity score scaled by the
          user's preference for the meal's cuisine (0.5 when unknown).
        - The total is divided by the weight sum; all-zero weights count
          every dimension equally.
    """
    components = ComponentScores(
        cultural=cultural_preference(profile, meal.cuisine) * meal.authenticity_score,
        health=meal.health_score,
        cost=meal.cost_score,
        time=meal.time_score,
        variety=max(0.0, min(variety_score, 1.0)),
    )
    weights = normalize_weights(profile.priority_weights)
    weight_sum = sum(weights.values())
    if weight_sum == 0:
        weights = {dim: 1.0 for dim in DIMENSIONS}
        weight_sum = float(len(DIMENSIONS))

    total = sum(weights[dim] * getattr(components, dim) for dim in DIMENSIONS) / weight_sum
    return round(total, 4), components


def explain_ranking(components: ComponentScores, weights: Dict[str, float]) -> str:
    contributions = [(weights[dim] * getattr(components, dim), dim) for dim in DIMENSIONS]
    # Stable sort keeps dimension order on equal contributions.
    contributions.sort(key=lambda c: c[0], reverse=True)
    parts = [
        f"{EXPLANATION_LABELS[dim]} ({getattr(components, dim) * 100:.0f}%)"
        for value, dim in contributions[:2] if value > 0
    ]
    return ", ".join(parts) or "Balanced meal option"


def rank_meals(
    profile: UserCulturalProfile,
    candidates: Sequence[StructuredMeal],
    count: int = 10,
    relevance_threshold: Optional[float] = None,
    resolver: Optional[ConflictResolver] = None
) -> List[RankedMeal]:
    """Rank candidate meals by weighted multi-criteria score.

    Args:
        profile: User profile (preferences, weights, dietary restrictions).
        candidates: Candidate pool; not modified.
        count: Maximum number of meals to return.
        relevance_threshold: Optional fraction of the top score a meal must
            reach to be kept, e.g. 0.5.
        resolver: Conflict resolver used to drop meals that break the
            profile's dietary restrictions.

    Returns:
        RankedMeal list ordered by total score, then authenticity, then pool order.
    """
    if not candidates or count <= 0:
        return []

    resolver = resolver or conflict_resolver
    restrictions = [r for r in profile.dietary_restrictions if r and r.strip()]
    pool = list(candidates)
    if restrictions:
        pool = [
            m for m in pool
            if not resolver.quick_conflict_check(f"{m.name} {' '.join(m.ingredients)}", restrictions)
        ]
        dropped = len(candidates) - len(pool)
        if dropped:
            logger.debug(f"Excluded {dropped} meal(s) conflicting with {restrictions}")

    weights = normalize_weights(profile.priority_weights)
    scored = []
    for meal, variety in zip(pool, variety_scores(pool)):
        total, components = score_meal(meal, profile, variety)
        scored.append(RankedMeal(
            meal=meal,
            total_score=total,
            component_scores=components,
            ranking_explanation=explain_ranking(components, weights)
        ))

    scored.sort(key=lambda r: (-r.total_score, -r.meal.authenticity_score))

    if relevance_threshold is not None and scored:
        floor = scored[0].total_score * relevance_threshold
        scored = [r for r in scored if r.total_score >= floor]

    ranked = scored[:count]
    logger.info(f"Ranked {len(pool)} candidate meal(s), returning top {len(ranked)}")
    return ranked
