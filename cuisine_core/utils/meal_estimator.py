from typing import Any, Dict, Iterable, List, Optional, Tuple

from cuisine_core.models import StructuredMeal

# (keywords, delta) pairs; every matching row applies once.
HEALTH_DESCRIPTION_RULES: List[Tuple[Tuple[str, ...], float]] = [
    (("steamed", "grilled"), 0.3),
    (("fried", "deep-fried"), -0.2),
    (("boiled", "poached"), 0.2),
    (("vegetable", "tofu"), 0.2),
    (("lean", "fish"), 0.25),
    (("oil", "butter"), -0.1),
    (("cream", "cheese"), -0.15),
]
HEALTH_NAME_RULES: List[Tuple[Tuple[str, ...], float]] = [
    (("soup", "salad"), 0.2),
    (("dumpling", "roll"), 0.1),
    (("duck", "pork"), -0.1),
]

COST_DESCRIPTION_RULES: List[Tuple[Tuple[str, ...], float]] = [
    (("duck", "beef"), -0.2),
    (("saffron", "truffle"), -0.3),
    (("wine", "cream"), -0.1),
    (("seafood", "fish"), -0.15),
    (("tofu", "bean"), 0.2),
    (("noodle", "rice"), 0.15),
    (("vegetable", "cabbage"), 0.1),
    (("egg", "chicken"), 0.1),
    (("stir-fry", "steamed"), 0.1),
    (("soup", "boiled"), 0.15),
    (("stuffed", "marinated"), -0.1),
    (("slow-cooked", "braised"), -0.05),
]

TIME_DESCRIPTION_RULES: List[Tuple[Tuple[str, ...], float]] = [
    (("stir-fry", "stir-fried"), 0.4),
    (("grilled", "sauteed"), 0.3),
    (("boiled", "poached"), 0.2),
    (("braised", "slow-cook"), -0.3),
    (("roasted", "baked"), -0.2),
    (("marinated", "cured"), -0.4),
    (("stuffed", "layered"), -0.2),
    (("homemade", "fresh pasta"), -0.1),
]
TIME_NAME_RULES: List[Tuple[Tuple[str, ...], float]] = [
    (("soup", "noodle"), 0.1),
    (("dumpling", "spring roll"), 0.1),
    (("duck", "whole"), -0.3),
    (("risotto", "lasagne"), -0.2),
]

TECHNIQUE_KEYWORDS = [
    "stir-fry", "steam", "boil", "saute", "grill", "roast", "braise",
    "fry", "bake", "simmer", "poach", "blanch"
]

# Ordered: first technique present decides the cook time.
TECHNIQUE_COOK_MINUTES = [("stir-fry", 10), ("steam", 15), ("saute", 12), ("braise", 45), ("roast", 30)]


def build_structured_meal(
    record: Dict[str, Any],
    cuisine: str,
    traditional_ingredients: Optional[Iterable[str]] = None,
    meal_id: Optional[str] = None
) -> StructuredMeal:
    """Derive a rankable StructuredMeal from a raw cached meal record.

    Scores given on the record are kept; missing ones are estimated from the
    name, description and ingredient list.
    """
    name = str(record.get("name") or "").strip()
    description = str(record.get("description") or "")
    ingredients = [str(i) for i in (record.get("ingredients") or []) if str(i).strip()]
    techniques = list(record.get("cooking_techniques") or extract_cooking_techniques(description))
    modifications = record.get("healthy_modifications") or []

    return StructuredMeal(
        id=meal_id or record.get("id"),
        name=name,
        cuisine=cuisine,
        description=description,
        authenticity_score=_given(record, "authenticity_score",
                                  lambda: authenticity_score(name, description, traditional_ingredients or [])),
        health_score=_given(record, "health_score", lambda: health_score(name, description)),
        cost_score=_given(record, "cost_score", lambda: cost_score(description)),
        time_score=_given(record, "time_score", lambda: time_score(name, description)),
        ingredients=ingredients,
        cooking_techniques=techniques,
        estimated_prep_time=estimate_prep_minutes(ingredients),
        estimated_cook_time=estimate_cook_minutes(techniques),
        difficulty_level=estimate_difficulty(techniques, len(ingredients), len(modifications)),
        instructions=[str(s) for s in (record.get("instructions") or []) if str(s).strip()]
    )


def authenticity_score(name: str, description: str, traditional_ingredients: Iterable[str]) -> float:
    text = f"{name} {description}".lower()
    hits = [i for i in traditional_ingredients if i and i.lower() in text]
    return round(min(0.7 + min(len(hits) * 0.1, 0.3), 1.0), 2)


def health_score(name: str, description: str) -> float:
    score = 0.4 + _apply(description, HEALTH_DESCRIPTION_RULES) + _apply(name, HEALTH_NAME_RULES)
    return _bounded(score, 0.3)


def cost_score(description: str) -> float:
    return _bounded(0.7 + _apply(description, COST_DESCRIPTION_RULES), 0.3)


def time_score(name: str, description: str) -> float:
    score = 0.5 + _apply(description, TIME_DESCRIPTION_RULES) + _apply(name, TIME_NAME_RULES)
    lowered = description.lower()
    if "steamed" in lowered and "slow" not in lowered:
        score += 0.3
    if "sauce" in lowered and "from scratch" in lowered:
        score -= 0.15
    return _bounded(score, 0.2)


def extract_cooking_techniques(description: str) -> List[str]:
    text = (description or "").lower()
    techniques = [t for t in TECHNIQUE_KEYWORDS if t in text]
    return techniques or ["saute"]


def estimate_prep_minutes(ingredients: List[str]) -> int:
    count = len(ingredients) or 5
    return min(count * 2, 20)


def estimate_cook_minutes(techniques: List[str]) -> int:
    for technique, minutes in TECHNIQUE_COOK_MINUTES:
        if technique in techniques:
            return minutes
    return 20


def estimate_difficulty(techniques: List[str], ingredient_count: int, modification_count: int = 0) -> float:
    difficulty = 2.0
    if "braise" in techniques or "roast" in techniques:
        difficulty += 1
    if ingredient_count > 10:
        difficulty += 0.5
    if modification_count > 2:
        difficulty += 0.5
    return min(difficulty, 5.0)


def _apply(text: str, rules: List[Tuple[Tuple[str, ...], float]]) -> float:
    lowered = (text or "").lower()
    return sum(delta for keywords, delta in rules if any(k in lowered for k in keywords))


def _bounded(score: float, floor: float) -> float:
    return round(max(floor, min(score, 1.0)), 2)


def _given(record: Dict[str, Any], key: str, estimate) -> float:
    value = record.get(key)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return max(0.0, min(float(value), 1.0))
    return estimate()
