import pytest

from cuisine_core.models import PriorityWeights, StructuredMeal, UserCulturalProfile
from cuisine_core.services.scoring import (
    cultural_preference,
    explain_ranking,
    normalize_weights,
    rank_meals,
    score_meal,
    variety_scores,
)


def meal(name, cuisine="Italian", **scores):
    return StructuredMeal(name=name, cuisine=cuisine, **scores)


@pytest.fixture
def profile():
    return UserCulturalProfile(
        cultural_preferences={"Chinese": 0.9, "Italian": 0.6},
        priority_weights=PriorityWeights(cultural=0.8, health=0.5, cost=0.3, time=0.4, variety=0.2)
    )


class TestScoringHelpers:
    def test_normalize_weights_clamps(self):
        weights = normalize_weights(PriorityWeights(cultural=5, health=-1, cost=0.3, time=0, variety=1))
        assert weights == {"cultural": 1.0, "health": 0.0, "cost": 0.3, "time": 0.0, "variety": 1.0}

    def test_variety_scores(self):
        meals = [meal("a", "Italian"), meal("b", "italian "), meal("c", "Chinese")]
        assert variety_scores(meals) == [pytest.approx(0.6667), pytest.approx(0.6667), 1.0]
        assert variety_scores([]) == []

    def test_cultural_preference_is_case_insensitive(self, profile):
        assert cultural_preference(profile, "chinese") == 0.9
        assert cultural_preference(profile, "Thai") == 0.5

    def test_score_meal_is_weighted_average(self):
        profile = UserCulturalProfile(priority_weights=PriorityWeights(cultural=0, health=1, cost=0, time=0, variety=0))
        total, components = score_meal(meal("Salad", health_score=0.8), profile)
        assert total == 0.8
        assert components.health == 0.8

    def test_zero_weights_count_every_dimension_equally(self):
        profile = UserCulturalProfile(priority_weights=PriorityWeights(cultural=0, health=0, cost=0, time=0, variety=0))
        candidate = meal(
            "Soup", authenticity_score=1.0, health_score=1.0, cost_score=0.0, time_score=0.0
        )
        total, _ = score_meal(candidate, profile, variety_score=1.0)
        # cultural = 0.5 (default preference) * 1.0
        assert total == pytest.approx((0.5 + 1.0 + 0.0 + 0.0 + 1.0) / 5, abs=1e-4)

    def test_explain_ranking(self, profile):
        _, components = score_meal(meal("Mapo Tofu", "Chinese", authenticity_score=1.0), profile)
        text = explain_ranking(components, normalize_weights(profile.priority_weights))
        assert text.startswith("High cultural match (90%)")

        zero = {dim: 0.0 for dim in ("cultural", "health", "cost", "time", "variety")}
        assert explain_ranking(components, zero) == "Balanced meal option"


class TestRankMeals:
    def test_ranking_is_deterministic(self, profile, sample_meals):
        first = rank_meals(profile, sample_meals)
        second = rank_meals(profile, sample_meals)
        assert [r.model_dump() for r in first] == [r.model_dump() for r in second]

    def test_scores_are_monotonic_and_bounded(self, profile, sample_meals):
        ranked = rank_meals(profile, sample_meals)
        scores = [r.total_score for r in ranked]
        assert scores == sorted(scores, reverse=True)
        assert all(0.0 <= s <= 1.0 for s in scores)
        assert all(r.component_scores is not None for r in ranked)

    def test_cultural_preference_drives_order(self):
        profile = UserCulturalProfile(
            cultural_preferences={"Italian": 1.0, "Chinese": 0.1},
            priority_weights=PriorityWeights(cultural=1, health=0, cost=0, time=0, variety=0)
        )
        ranked = rank_meals(profile, [meal("Chow Mein", "Chinese"), meal("Lasagna", "Italian")])
        assert [r.meal.name for r in ranked] == ["Lasagna", "Chow Mein"]

    def test_ties_break_on_authenticity_then_pool_order(self):
        profile = UserCulturalProfile(
            priority_weights=PriorityWeights(cultural=0, health=1, cost=0, time=0, variety=0)
        )
        candidates = [
            meal("First", authenticity_score=0.6),
            meal("Second", authenticity_score=0.9),
            meal("Third", authenticity_score=0.6),
        ]
        ranked = rank_meals(profile, candidates)
        assert [r.meal.name for r in ranked] == ["Second", "First", "Third"]

    def test_restricted_meals_are_excluded(self, profile, sample_meals):
        profile.dietary_restrictions = ["vegetarian"]
        ranked = rank_meals(profile, sample_meals)
        names = [r.meal.name for r in ranked]
        assert "Beef and Broccoli Stir-Fry" not in names
        assert len(names) == 3

    def test_count_and_threshold(self, profile, sample_meals):
        assert len(rank_meals(profile, sample_meals, count=2)) == 2
        assert rank_meals(profile, sample_meals, count=0) == []
        assert rank_meals(profile, []) == []

        ranked = rank_meals(profile, sample_meals, relevance_threshold=1.0)
        assert all(r.total_score == ranked[0].total_score for r in ranked)

    def test_candidates_are_not_modified(self, profile, sample_meals):
        before = [m.model_dump() for m in sample_meals]
        rank_meals(profile, sample_meals)
        assert [m.model_dump() for m in sample_meals] == before
