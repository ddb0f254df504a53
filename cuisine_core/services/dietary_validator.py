import re
import time
from collections import Counter
from typing import Any, Dict, List, Optional, Sequence, Union

from pydantic import BaseModel

from cuisine_core.core.logging_config import get_logger
from cuisine_core.core.rules import MAJOR_ALLERGEN_TERMS, STRICT_RESTRICTIONS
from cuisine_core.models import (
    ConflictPattern,
    DietaryViolation,
    IngredientItem,
    PlanValidationResult,
    RecipeInput,
    RecipeValidationResult,
)
from cuisine_core.services.conflict_resolver import (
    ConflictResolver,
    conflict_resolver,
    find_conflict_pattern,
    find_conflict_terms,
)

logger = get_logger(__name__)

MAX_ALTERNATIVES_PER_VIOLATION = 3
TOP_VIOLATIONS_IN_SUMMARY = 3


class DietaryValidator:
    def __init__(self, resolver: Optional[ConflictResolver] = None):
        self.resolver = resolver or conflict_resolver

    def validate_recipe(self, recipe: Any, restrictions: Optional[Sequence[str]]) -> RecipeValidationResult:
        """Scan a recipe's title, ingredients and instructions for restriction violations.

        Args:
            recipe: RecipeInput, dict with title/ingredients/instructions, or any
                model carrying those fields (e.g. a planned meal).
            restrictions: Dietary restriction strings.

        Returns:
            RecipeValidationResult. A recipe that is not a mapping or model, or
            an empty restriction list, is reported as compliant. Malformed
            fields are skipped and the remaining fields are still scanned.
        """
        started = time.perf_counter()
        parsed = self._coerce(recipe)
        active = [r.strip().lower() for r in (restrictions or []) if r and r.strip()]
        if parsed is None or not active:
            return RecipeValidationResult(is_compliant=True, confidence=1.0, validation_time_ms=_elapsed_ms(started))

        ingredient_names = parsed.ingredient_names()
        instructions_text = " ".join(parsed.instructions)

        violations: List[DietaryViolation] = []
        seen = set()
        for restriction in active:
            pattern = find_conflict_pattern(restriction)
            if not pattern:
                continue
            sources = [("title", parsed.title)] + [("ingredients", name) for name in ingredient_names]
            sources.append(("instructions", instructions_text))
            for location, text in sources:
                for term in find_conflict_terms(text, restriction):
                    key = (term, restriction, location)
                    if key in seen:
                        continue
                    seen.add(key)
                    violations.append(self._violation(term, restriction, pattern, location))

        suggestions = self._suggestions(violations)
        if violations:
            suggestions.extend(self._alternative_dish(parsed.title, active))

        return RecipeValidationResult(
            is_compliant=not violations,
            violations=violations,
            suggestions=suggestions,
            confidence=self._confidence(len(violations), len(ingredient_names), len(parsed.instructions)),
            validation_time_ms=_elapsed_ms(started)
        )

    def validate_meal_plan(self, meal_plan: Any, restrictions: Optional[Sequence[str]]) -> PlanValidationResult:
        """Validate every day/slot of a plan and summarize compliance.

        Accepts a day -> slot -> recipe mapping or an object carrying one under
        ``meal_plan`` (such as an assembled PlanStructure).
        """
        plan = getattr(meal_plan, "meal_plan", meal_plan)
        if isinstance(plan, dict) and isinstance(plan.get("meal_plan"), dict):
            plan = plan["meal_plan"]
        if not isinstance(plan, dict):
            plan = {}

        total = 0
        compliant = 0
        results: Dict[str, RecipeValidationResult] = {}
        ingredient_counts: Counter = Counter()
        violated: List[str] = []

        for day, slots in plan.items():
            if not isinstance(slots, dict):
                continue
            for slot, recipe in slots.items():
                total += 1
                result = self.validate_recipe(recipe, restrictions)
                if result.is_compliant:
                    compliant += 1
                    continue
                results[f"{day}_{slot}"] = result
                for violation in result.violations:
                    ingredient_counts[violation.ingredient] += 1
                    if violation.restriction_violated not in violated:
                        violated.append(violation.restriction_violated)

        percent = round(compliant / total * 100) if total else 100
        summary = [f"{compliant}/{total} meals ({percent}%) comply with dietary restrictions"]
        if violated:
            summary.append(f"Violations found for: {', '.join(violated)}")
            common = ingredient_counts.most_common(TOP_VIOLATIONS_IN_SUMMARY)
            summary.append("Most common violations: " + ", ".join(f"{name} ({count}x)" for name, count in common))
        else:
            summary.append("All meals comply with specified dietary restrictions")

        logger.info(f"Validated meal plan: {compliant}/{total} compliant")
        return PlanValidationResult(
            overall_compliance_percent=percent,
            total_meals=total,
            compliant_meals=compliant,
            violations=results,
            summary=summary
        )

    def has_quick_violation(self, text: str, restrictions: Optional[Sequence[str]]) -> bool:
        return self.resolver.quick_conflict_check(text, restrictions or [])

    def suggest_recipe_fixes(self, recipe: Any, result: RecipeValidationResult) -> Optional[RecipeInput]:
        """Return a copy of the recipe with each violating term swapped for its top substitute."""
        parsed = self._coerce(recipe)
        if parsed is None:
            return None

        title = parsed.title
        ingredients = parsed.ingredient_names()
        for violation in result.violations:
            if not violation.alternative_suggestions:
                continue
            term_pattern = re.compile(re.escape(violation.ingredient), re.IGNORECASE)
            replacement = violation.alternative_suggestions[0]
            title = term_pattern.sub(lambda _: replacement, title)
            ingredients = [term_pattern.sub(lambda _: replacement, i) for i in ingredients]

        return RecipeInput(title=title, ingredients=ingredients, instructions=list(parsed.instructions))

    def _coerce(self, recipe: Any) -> Optional[RecipeInput]:
        """Build a RecipeInput field by field; a malformed field is emptied, not fatal."""
        if isinstance(recipe, RecipeInput):
            return recipe
        if isinstance(recipe, BaseModel):
            recipe = recipe.model_dump()
        if not isinstance(recipe, dict):
            return None

        title = recipe.get("title")
        if not isinstance(title, str):
            if title is not None:
                logger.warning(f"Ignoring non-string recipe title: {title!r}")
            title = ""

        ingredients = recipe.get("ingredients")
        if not isinstance(ingredients, list):
            ingredients = []
        items: List[Union[str, IngredientItem]] = []
        for item in ingredients:
            if isinstance(item, (str, IngredientItem)):
                items.append(item)
            elif isinstance(item, dict) and isinstance(item.get("name"), str):
                items.append(IngredientItem(name=item["name"]))
            else:
                logger.debug(f"Dropping malformed ingredient: {item!r}")

        instructions = recipe.get("instructions")
        if isinstance(instructions, str):
            instructions = re.split(r"[\r\n]+", instructions)
        if not isinstance(instructions, list):
            instructions = []
        steps = [s.strip() for s in instructions if isinstance(s, str) and s.strip()]

        return RecipeInput(title=title, ingredients=items, instructions=steps)

    def _violation(self, term: str, restriction: str, pattern: ConflictPattern, location: str) -> DietaryViolation:
        strict = pattern.dietary_family[0] in STRICT_RESTRICTIONS
        allergen = any(word in term for word in MAJOR_ALLERGEN_TERMS)
        return DietaryViolation(
            ingredient=term,
            restriction_violated=restriction,
            severity="high" if strict and allergen else "medium",
            alternative_suggestions=pattern.substitutions.get(term, [])[:MAX_ALTERNATIVES_PER_VIOLATION],
            detected_in=location
        )

    def _suggestions(self, violations: List[DietaryViolation]) -> List[str]:
        suggestions = []
        for violation in violations:
            top = violation.alternative_suggestions[:2]
            if not top:
                text = f'Remove "{violation.ingredient}" to meet {violation.restriction_violated} requirements'
            else:
                text = f'Replace "{violation.ingredient}" with {" or ".join(top)}'
            if text not in suggestions:
                suggestions.append(text)
        return suggestions

    def _alternative_dish(self, title: str, restrictions: List[str]) -> List[str]:
        if not title:
            return []
        try:
            resolution = self.resolver.resolve_conflicts(title, restrictions, [])
        except Exception as e:
            logger.error(f"Alternative dish lookup failed for '{title}': {e}")
            return []
        if resolution.has_conflict and resolution.suggested_alternatives:
            return [f'Consider alternative: "{resolution.suggested_alternatives[0].dish_name}"']
        return []

    def _confidence(self, violation_count: int, ingredient_count: int, instruction_count: int) -> float:
        confidence = 0.9 - 0.1 * violation_count
        if ingredient_count < 3:
            confidence -= 0.2
        if instruction_count < 2:
            confidence -= 0.1
        return round(max(0.1, min(confidence, 1.0)), 2)


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


dietary_validator = DietaryValidator()
