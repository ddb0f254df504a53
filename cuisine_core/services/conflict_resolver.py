import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from cuisine_core.core.logging_config import get_logger
from cuisine_core.core.rules import (
    COMPLEX_SUBSTITUTES,
    CONFLICT_PATTERN_TABLE,
    COOK_TIME_KEYWORDS,
    CULTURAL_SUBSTITUTION_CONTEXT,
    DEFAULT_COOK_TIME_MINUTES,
    MEDIUM_SUBSTITUTES,
    PLANT_PROTEIN_TERMS,
)
from cuisine_core.models import (
    AlternativeSuggestion,
    ConflictPattern,
    ConflictResolution,
    CuisineData,
    CultureParserResult,
    IngredientSubstitution,
)
from cuisine_core.services.taxonomy_store import TaxonomyStore, taxonomy_store

logger = get_logger(__name__)

CONFLICT_PATTERNS: List[ConflictPattern] = [ConflictPattern(**p) for p in CONFLICT_PATTERN_TABLE]

MAX_ALTERNATIVES = 5
SUBSTITUTES_PER_BASE = 2
MAX_STAPLE_BASES = 3
GENERIC_CUISINE = "International"

# Authenticity credit by where a substitute came from, plus a bonus when the
# cuisine is one the taxonomy recognizes.
SOURCE_CREDIT = {"cuisine_data": 0.5, "context": 0.35, "static": 0.0}
RECOGNIZED_CUISINE_CREDIT = 0.5
GENERIC_AUTHENTICITY = 0.5

PLANT_BASED_FAMILIES = {"vegetarian", "vegan"}


def find_conflict_pattern(restriction: str) -> Optional[ConflictPattern]:
    """Return the first pattern with a synonym contained in the restriction string."""
    needle = (restriction or "").strip().lower()
    if not needle:
        return None
    for pattern in CONFLICT_PATTERNS:
        if any(synonym in needle for synonym in pattern.dietary_family):
            return pattern
    return None


def find_conflict_terms(text: str, restriction: str) -> List[str]:
    """Conflicting ingredient terms of a restriction that appear in the text."""
    pattern = find_conflict_pattern(restriction)
    haystack = (text or "").lower()
    if not pattern or not haystack:
        return []
    return [term for term in pattern.conflicts_with if term in haystack]


def get_ingredient_substitutions(ingredient: str, restriction: str) -> List[str]:
    pattern = find_conflict_pattern(restriction)
    if not pattern:
        return []
    return list(pattern.substitutions.get((ingredient or "").strip().lower(), []))


def estimate_difficulty(substitute: str) -> float:
    lowered = substitute.lower()
    if any(term in lowered for term in COMPLEX_SUBSTITUTES):
        return 3.0
    if any(term in lowered for term in MEDIUM_SUBSTITUTES):
        return 2.0
    return 1.5


def estimate_cook_time(dish_name: str) -> int:
    lowered = dish_name.lower()
    for keywords, minutes in COOK_TIME_KEYWORDS:
        if any(k in lowered for k in keywords):
            return minutes
    return DEFAULT_COOK_TIME_MINUTES


@dataclass
class _Conflict:
    restriction: str
    pattern: ConflictPattern
    term: str


@dataclass
class _Substitute:
    value: str
    source: str
    cultural_note: Optional[str] = None
    preparation: Optional[str] = None


class ConflictResolver:
    def __init__(self, store: Optional[TaxonomyStore] = None):
        self.store = store or taxonomy_store

    def quick_conflict_check(self, text: str, restrictions: Optional[Sequence[str]]) -> bool:
        """Cheap pattern-only check: does the text mention anything a restriction forbids?"""
        return bool(self._detect_conflicts((text or "").lower(), restrictions or []))

    def resolve_conflicts(
        self,
        request: str,
        restrictions: Sequence[str],
        cultural_background: Optional[Sequence[str]] = None,
        cuisine_data: Optional[Dict[str, CuisineData]] = None
    ) -> ConflictResolution:
        """Detect dietary conflicts in a meal request and suggest substitute dishes.

        Args:
            request: Meal request or dish title, e.g. "Chinese beef stir-fry".
            restrictions: Dietary restriction strings, e.g. ["vegetarian"].
            cultural_background: Cuisine labels to anchor alternatives in.
            cuisine_data: Optional detailed profiles keyed by cuisine label.

        Returns:
            ConflictResolution with at most five alternatives, most authentic first.
        """
        request = request or ""
        conflicts = self._detect_conflicts(request.lower(), restrictions or [])
        if not conflicts:
            return ConflictResolution(
                has_conflict=False,
                conflict_type="none",
                original_request=request,
                confidence=1.0,
                cultural_authenticity=1.0,
                explanations=["No dietary conflicts detected for the requested meal"]
            )

        explanations = [f"'{c.term}' conflicts with {c.restriction} diet" for c in conflicts]
        explanations.extend(self._method_explanations(request.lower(), conflicts))

        cultures = [c for c in (cultural_background or []) if c and c.strip()]
        if cultures:
            alternatives = self._cultural_alternatives(request, conflicts, cultures, cuisine_data or {})
        else:
            alternatives = self._generic_alternatives(request, conflicts)

        alternatives = self._rank_alternatives(alternatives)
        if alternatives:
            explanations.append(f"Found {len(alternatives)} alternative(s) that remove the conflict")
        else:
            explanations.append("No substitutes are known for the conflicting ingredients")

        authenticity = (
            round(sum(a.cultural_authenticity for a in alternatives) / len(alternatives), 2)
            if alternatives else 0.0
        )
        logger.info(
            f"Resolved {len(conflicts)} conflict(s) for '{request[:40]}' with {len(alternatives)} alternative(s)"
        )
        return ConflictResolution(
            has_conflict=True,
            conflict_type="ingredient",
            original_request=request,
            suggested_alternatives=alternatives,
            confidence=self._confidence(len(alternatives)),
            cultural_authenticity=authenticity,
            explanations=explanations
        )

    def resolve_conflicts_with_cuisine_data(
        self,
        request: str,
        restrictions: Sequence[str],
        culture_result: CultureParserResult
    ) -> ConflictResolution:
        """Resolve conflicts using the detailed cuisine profiles from a parser result."""
        cuisine_data = culture_result.cuisine_data or {}
        if not cuisine_data:
            logger.debug("No cuisine data on parser result; using substitution context only")
        return self.resolve_conflicts(request, restrictions, culture_result.culture_tags, cuisine_data)

    # --- Detection ---

    def _detect_conflicts(self, request_lower: str, restrictions: Sequence[str]) -> List[_Conflict]:
        conflicts: List[_Conflict] = []
        if not request_lower:
            return conflicts
        seen = set()
        for restriction in restrictions:
            pattern = find_conflict_pattern(restriction)
            if not pattern:
                continue
            normalized = restriction.strip().lower()
            for term in find_conflict_terms(request_lower, restriction):
                if (normalized, term) not in seen:
                    seen.add((normalized, term))
                    conflicts.append(_Conflict(normalized, pattern, term))
        return conflicts

    def _method_explanations(self, request_lower: str, conflicts: List[_Conflict]) -> List[str]:
        explanations = []
        for conflict in conflicts:
            for phrase, options in conflict.pattern.cooking_method_alternatives.items():
                method = phrase.rsplit(" ", 1)[0]
                if method in request_lower:
                    text = f"Cooking method alternatives for {method}: {', '.join(options)}"
                    if text not in explanations:
                        explanations.append(text)
        return explanations

    # --- Alternatives ---

    def _cultural_alternatives(
        self,
        request: str,
        conflicts: List[_Conflict],
        cultures: List[str],
        cuisine_data: Dict[str, CuisineData]
    ) -> List[AlternativeSuggestion]:
        alternatives = []
        for raw_culture in cultures:
            cuisine = self.store.find(raw_culture)
            culture = cuisine.label if cuisine else raw_culture.strip()
            data = cuisine_data.get(culture) or cuisine_data.get(raw_culture)
            recognized_bonus = RECOGNIZED_CUISINE_CREDIT if cuisine else 0.0

            for conflict in conflicts:
                substitutes = self._substitutes_for(culture, conflict, data)
                for base in self._bases(request, conflict.term, data):
                    for substitute in substitutes:
                        authenticity = SOURCE_CREDIT[substitute.source] + recognized_bonus
                        alternatives.append(
                            self._build_alternative(base, culture, conflict, substitute, authenticity)
                        )
        return alternatives

    def _generic_alternatives(self, request: str, conflicts: List[_Conflict]) -> List[AlternativeSuggestion]:
        alternatives = []
        for conflict in conflicts:
            options = conflict.pattern.substitutions.get(conflict.term, [])
            if not options:
                continue
            substitute = _Substitute(options[0], "static")
            alternatives.append(
                self._build_alternative(request, GENERIC_CUISINE, conflict, substitute, GENERIC_AUTHENTICITY)
            )
        return alternatives

    def _substitutes_for(
        self,
        culture: str,
        conflict: _Conflict,
        data: Optional[CuisineData]
    ) -> List[_Substitute]:
        """Culture-anchored substitutes first, static table entries to fill up."""
        term = conflict.term
        candidates: List[_Substitute] = []
        if data:
            for swap in data.healthy_swaps:
                if term in swap.original.lower():
                    candidates.append(_Substitute(swap.swap, "cuisine_data", f"Healthy swap used in {culture} cooking"))
            if conflict.pattern.dietary_family[0] in PLANT_BASED_FAMILIES:
                for protein in data.common_proteins:
                    if any(p in protein.lower() for p in PLANT_PROTEIN_TERMS):
                        candidates.append(_Substitute(protein, "cuisine_data", f"Common protein in {culture} cooking"))
                for vegetable in data.common_vegetables[:2]:
                    candidates.append(_Substitute(vegetable, "cuisine_data", f"Staple vegetable in {culture} cooking"))

        context = CULTURAL_SUBSTITUTION_CONTEXT.get(culture, {}).get(term)
        if context:
            candidates.append(
                _Substitute(context["substitute"], "context", context["cultural_note"], context["preparation"])
            )

        for option in conflict.pattern.substitutions.get(term, [])[:SUBSTITUTES_PER_BASE]:
            candidates.append(_Substitute(option, "static"))

        unique: List[_Substitute] = []
        seen = set()
        for candidate in candidates:
            key = candidate.value.strip().lower()
            if not key or key in seen:
                continue
            seen.add(key)
            unique.append(candidate)
        return unique[:SUBSTITUTES_PER_BASE]

    def _bases(self, request: str, term: str, data: Optional[CuisineData]) -> List[str]:
        if data:
            staples = [
                dish.name for dish in data.staple_dishes
                if term in dish.name.lower() or any(term in i.lower() for i in dish.ingredients)
            ]
            if staples:
                return staples[:MAX_STAPLE_BASES]
        return [request]

    def _build_alternative(
        self,
        base: str,
        culture: str,
        conflict: _Conflict,
        substitute: _Substitute,
        authenticity: float
    ) -> AlternativeSuggestion:
        dish_name = self._dish_name(base, conflict.term, substitute.value, culture)
        description = f"{culture} take on {base} using {substitute.value} instead of {conflict.term}"
        if substitute.preparation:
            description += f" ({substitute.preparation})"
        return AlternativeSuggestion(
            dish_name=dish_name,
            cuisine=culture,
            description=description,
            substitute_ingredients=[
                IngredientSubstitution(
                    original=conflict.term,
                    substitute=substitute.value,
                    reason=f"{conflict.term} is not compatible with a {conflict.restriction} diet",
                    cultural_context=substitute.cultural_note
                )
            ],
            difficulty_rating=estimate_difficulty(substitute.value),
            cook_time_minutes=estimate_cook_time(dish_name),
            cultural_notes=substitute.cultural_note or "",
            dietary_compliance=[conflict.restriction],
            cultural_authenticity=round(min(authenticity, 1.0), 2)
        )

    def _dish_name(self, base: str, term: str, substitute: str, culture: str) -> str:
        term_pattern = re.compile(re.escape(term), re.IGNORECASE)
        if term_pattern.search(base):
            name = term_pattern.sub(lambda _: substitute, base)
        else:
            name = f"{base} with {substitute}"
        if culture != GENERIC_CUISINE and culture.lower() not in name.lower():
            name = f"{culture} {name}"
        return name.strip()

    def _rank_alternatives(self, alternatives: List[AlternativeSuggestion]) -> List[AlternativeSuggestion]:
        unique = []
        seen: set = set()
        for alternative in alternatives:
            key: Tuple[str, str] = (alternative.dish_name.lower(), alternative.cuisine)
            if key in seen:
                continue
            seen.add(key)
            unique.append(alternative)
        unique.sort(key=lambda a: a.cultural_authenticity, reverse=True)
        return unique[:MAX_ALTERNATIVES]

    def _confidence(self, count: int) -> float:
        if count == 0:
            return 0.1
        if count >= 3:
            return 0.9
        return 0.7


conflict_resolver = ConflictResolver()
