import pytest

from cuisine_core.models import GeneratePlanRequest, StructuredMeal, UserCulturalProfile
from cuisine_core.services.planner import (
    MealPlanPipeline,
    PlanAssembler,
    estimate_nutrition,
    meal_slot_labels,
    selection_reasoning,
)
from cuisine_core.services.sources.local import LocalMealSource


class TestPlanAssembler:
    def test_cycles_when_slots_exceed_meals(self, plan_assembler, ranked_meals):
        plan = plan_assembler.assemble_plan(ranked_meals, num_days=3, meals_per_day=2)

        assert plan.total_slots == 6
        assert plan.unique_meals == 4
        assert plan.cycled is True
        assert list(plan.meal_plan) == ["day_1", "day_2", "day_3"]
        assert list(plan.meal_plan["day_1"]) == ["breakfast", "lunch"]
        assert plan.meal_plan["day_1"]["breakfast"].title == ranked_meals[0].meal.name
        assert plan.meal_plan["day_2"]["lunch"].title == ranked_meals[3].meal.name
        assert plan.meal_plan["day_3"]["breakfast"].title == ranked_meals[0].meal.name
        assert plan.meal_plan["day_3"]["lunch"].title == ranked_meals[1].meal.name

    def test_no_cycling_with_enough_meals(self, plan_assembler, ranked_meals):
        plan = plan_assembler.assemble_plan(ranked_meals, num_days=1, meals_per_day=3)
        assert plan.cycled is False
        assert plan.unique_meals == 3
        titles = [m.title for m in plan.meal_plan["day_1"].values()]
        assert titles == [r.meal.name for r in ranked_meals[:3]]

    def test_empty_inputs_give_empty_plan(self, plan_assembler, ranked_meals):
        assert plan_assembler.assemble_plan([], 3, 2).meal_plan == {}
        assert plan_assembler.assemble_plan(ranked_meals, 0, 2).total_slots == 0
        assert plan_assembler.assemble_plan(ranked_meals, 2, 0).meal_plan == {}

    def test_planned_meal_fields(self, plan_assembler, ranked_meals):
        plan = plan_assembler.assemble_plan(ranked_meals, num_days=1, meals_per_day=1, serving_size=2)
        planned = plan.meal_plan["day_1"]["breakfast"]

        assert planned.ingredients == ["2 cup pasta", "4 cups beans"]
        assert planned.cook_time_minutes == 30
        assert planned.cuisine == "Italian"
        assert planned.cultural_authenticity == 0.9
        assert planned.ranking_explanation == "rank 0"
        assert planned.nutrition.calories == 960
        assert planned.nutrition.protein_g == 50

    def test_slot_labels_wrap_after_five(self):
        assert meal_slot_labels(3) == ["breakfast", "lunch", "dinner"]
        assert meal_slot_labels(7)[5:] == ["breakfast_2", "lunch_2"]


class TestNutrition:
    @pytest.mark.parametrize("cuisine,calories", [
        ("Chinese", 360),
        ("Southern US", 520),
        ("Modern Thai Fusion", 380),
        ("Martian", 400),
    ])
    def test_calories_follow_cuisine_multiplier(self, cuisine, calories):
        meal = StructuredMeal(name="Dish", cuisine=cuisine)
        assert estimate_nutrition(meal, 1).calories == calories


class TestBuildUserProfile:
    def test_builds_weights_preferences_and_restrictions(self):
        profile = PlanAssembler.build_user_profile(
            {
                "cultural_background": ["Italian", " "],
                "preferences": ["No dairy please", "vegan"],
                "members": [{"dietary_restrictions": ["Halal", "vegan"]}, "not a member"]
            },
            {"cultural": 2, "health": 0.8}
        )

        assert profile.cultural_preferences == {"Italian": 0.9}
        assert profile.priority_weights.cultural == 1.0
        assert profile.priority_weights.health == 0.8
        assert profile.priority_weights.cost == 0.5
        assert profile.dietary_restrictions == ["dairy-free", "vegan", "halal"]

    def test_empty_profile(self):
        profile = PlanAssembler.build_user_profile({})
        assert profile.cultural_preferences == {}
        assert profile.dietary_restrictions == []
        assert profile.priority_weights.variety == 0.5


class TestMealPlanPipeline:
    def test_generates_validated_plan_from_cultural_text(self, pattern_parser, plan_assembler, dietary_validator):
        pipeline = MealPlanPipeline(
            parser=pattern_parser,
            source=LocalMealSource(),
            assembler=plan_assembler,
            validator=dietary_validator
        )
        response = pipeline.generate(GeneratePlanRequest(
            user_id="user-1",
            cultural_text="My grandmother from Sicily makes the best pasta",
            profile=UserCulturalProfile(dietary_restrictions=["vegetarian"]),
            num_days=2,
            meals_per_day=2
        ))

        assert response.metadata.culture_tags == ["Italian"]
        assert response.metadata.interpreter_fallback_used is True
        assert response.metadata.meals_analyzed == 3
        assert response.metadata.meals_selected == 2
        assert response.plan.cycled is True
        assert response.validation.overall_compliance_percent == 100
        assert response.validation.total_meals == 4
        titles = {m.title for day in response.plan.meal_plan.values() for m in day.values()}
        assert "Chicken Cacciatore" not in titles

    def test_selection_reasoning(self):
        meals = [
            StructuredMeal(name="A", cuisine="Italian", authenticity_score=0.8),
            StructuredMeal(name="B", cuisine="Greek", authenticity_score=1.0),
        ]
        text = selection_reasoning(meals, UserCulturalProfile())
        assert text.startswith("Selected 2 meals from Italian, Greek cuisines.")
        assert "Average authenticity: 90%" in text
        assert selection_reasoning([], UserCulturalProfile()) == "No candidate meals matched the profile"
