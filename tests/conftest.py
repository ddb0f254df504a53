import pytest
from typing import List, Optional

from cuisine_core.core.config import DEFAULT_TAXONOMY_DIR, CoreConfig
from cuisine_core.models import RankedMeal, StructuredMeal
from cuisine_core.services.conflict_resolver import ConflictResolver
from cuisine_core.services.culture_parser import CulturalIntentParser
from cuisine_core.services.dietary_validator import DietaryValidator
from cuisine_core.services.interpreters import Interpretation, Interpreter
from cuisine_core.services.parse_cache import ParseCache
from cuisine_core.services.planner import PlanAssembler
from cuisine_core.services.taxonomy_store import TaxonomyStore


class StubInterpreter(Interpreter):
    """Remote interpreter stand-in that records calls and never touches the network."""

    name = "stub"

    def __init__(self, interpretation: Optional[Interpretation] = None, error: Optional[Exception] = None):
        self.interpretation = interpretation or Interpretation()
        self.error = error
        self.calls: List[str] = []

    def interpret(self, text, store):
        self.calls.append(text)
        if self.error:
            raise self.error
        return self.interpretation


@pytest.fixture
def taxonomy_store():
    """Fresh taxonomy store loaded from the packaged data."""
    return TaxonomyStore(DEFAULT_TAXONOMY_DIR).load(strict=True)


@pytest.fixture
def core_config():
    return CoreConfig(interpreter_enabled=False)


@pytest.fixture
def parse_cache():
    return ParseCache(ttl_seconds=1800, max_entries=1000)


@pytest.fixture
def make_parser(taxonomy_store, core_config):
    """Factory for parsers with an optional stub remote interpreter."""
    def _make(remote: Optional[Interpreter] = None, cache: Optional[ParseCache] = None):
        return CulturalIntentParser(
            store=taxonomy_store,
            remote=remote,
            cache=cache or ParseCache(),
            config=core_config
        )
    return _make


@pytest.fixture
def pattern_parser(make_parser):
    """Parser with no remote interpreter (pattern matching only)."""
    return make_parser()


@pytest.fixture
def conflict_resolver(taxonomy_store):
    return ConflictResolver(store=taxonomy_store)


@pytest.fixture
def dietary_validator(conflict_resolver):
    return DietaryValidator(resolver=conflict_resolver)


@pytest.fixture
def plan_assembler():
    return PlanAssembler()


@pytest.fixture
def sample_meals():
    return [
        StructuredMeal(
            id="italian_1", name="Pasta e Fagioli", cuisine="Italian",
            authenticity_score=0.9, health_score=0.7, cost_score=0.8, time_score=0.6,
            ingredients=["1 cup pasta", "2 cups beans"], estimated_prep_time=10, estimated_cook_time=20
        ),
        StructuredMeal(
            id="chinese_1", name="Beef and Broccoli Stir-Fry", cuisine="Chinese",
            authenticity_score=0.8, health_score=0.6, cost_score=0.5, time_score=0.9,
            ingredients=["300 g beef", "2 cups broccoli"], estimated_prep_time=10, estimated_cook_time=10
        ),
        StructuredMeal(
            id="chinese_2", name="Mapo Tofu", cuisine="Chinese",
            authenticity_score=0.95, health_score=0.6, cost_score=0.8, time_score=0.7,
            ingredients=["1 block tofu", "1 tbsp doubanjiang"], estimated_prep_time=5, estimated_cook_time=15
        ),
        StructuredMeal(
            id="indian_1", name="Masoor Dal", cuisine="Indian",
            authenticity_score=0.85, health_score=0.9, cost_score=0.9, time_score=0.5,
            ingredients=["1 cup red lentils", "1 tsp cumin"], estimated_prep_time=5, estimated_cook_time=25
        ),
    ]


@pytest.fixture
def ranked_meals(sample_meals):
    return [
        RankedMeal(meal=meal, total_score=1.0 - i * 0.1, ranking_explanation=f"rank {i}")
        for i, meal in enumerate(sample_meals)
    ]


@pytest.fixture
def stub_interpreter():
    """The StubInterpreter class, for building remotes with canned answers."""
    return StubInterpreter
