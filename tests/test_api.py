import pytest
from fastapi.testclient import TestClient

from cuisine_core.main import app, require_taxonomy
from cuisine_core.services.culture_parser import culture_parser
from cuisine_core.services.taxonomy_store import TaxonomyLoadError

client = TestClient(app)


@pytest.fixture(autouse=True)
def offline_parser(monkeypatch):
    """Keep the shared parser on pattern matching and start each test with an empty cache."""
    monkeypatch.setattr(culture_parser, "remote", None)
    culture_parser.clear_cache()
    yield
    culture_parser.clear_cache()
    app.dependency_overrides.clear()


def meal_payload(name, cuisine, ingredients):
    return {"name": name, "cuisine": cuisine, "ingredients": ingredients}


class TestApi:
    def test_root_and_request_id(self):
        response = client.get("/")
        assert response.status_code == 200
        assert "Cultural Cuisine" in response.json()["message"]
        assert response.headers["X-Request-ID"]

    def test_openapi_lists_endpoints(self):
        paths = client.get("/openapi.json").json()["paths"]
        for path in [
            "/api/cultural-intent",
            "/api/conflicts/resolve",
            "/api/conflicts/resolve-with-cuisine-data",
            "/api/conflicts/quick-check",
            "/api/validate/recipe",
            "/api/validate/meal-plan",
            "/api/meals/rank",
            "/api/plans/assemble",
            "/api/plans/generate",
        ]:
            assert path in paths

    def test_cultural_intent(self):
        response = client.post("/api/cultural-intent", json={"text": "My grandmother from Sicily makes the best pasta"})
        assert response.status_code == 200
        body = response.json()
        assert body["culture_tags"] == ["Italian"]
        assert body["needs_manual_review"] is False

    def test_cultural_intent_rejects_blank_text(self):
        response = client.post("/api/cultural-intent", json={"text": "   "})
        assert response.status_code == 422

    def test_resolve_conflicts(self):
        response = client.post("/api/conflicts/resolve", json={
            "request": "Chinese beef stir-fry",
            "restrictions": ["vegetarian"],
            "cultural_background": ["Chinese"]
        })
        assert response.status_code == 200
        body = response.json()
        assert body["has_conflict"] is True
        assert body["suggested_alternatives"][0]["cuisine"] == "Chinese"

    def test_resolve_with_cuisine_data(self):
        response = client.post("/api/conflicts/resolve-with-cuisine-data", json={
            "request": "pork tacos",
            "restrictions": ["halal"],
            "culture_result": {"culture_tags": ["Mexican"], "confidence": 0.8}
        })
        assert response.status_code == 200
        assert response.json()["suggested_alternatives"][0]["cuisine"] == "Mexican"

    def test_quick_check(self):
        response = client.post("/api/conflicts/quick-check", json={"text": "Pork buns", "restrictions": ["halal"]})
        assert response.json() == {"has_conflict": True}

    def test_validate_recipe(self):
        response = client.post("/api/validate/recipe", json={
            "recipe": {"title": "Cheese Pizza", "ingredients": ["cheese", "flour"]},
            "restrictions": ["vegan"]
        })
        body = response.json()
        assert body["is_compliant"] is False
        assert any(v["ingredient"] == "cheese" and v["detected_in"] == "ingredients" for v in body["violations"])

    def test_validate_meal_plan(self):
        response = client.post("/api/validate/meal-plan", json={
            "meal_plan": {
                "day_1": {"dinner": {"title": "Chana Masala", "ingredients": ["chickpeas"]}},
                "day_2": {"dinner": {"title": "Masoor Dal", "ingredients": ["red lentils"]}}
            },
            "restrictions": ["vegan"]
        })
        body = response.json()
        assert body["overall_compliance_percent"] == 100
        assert body["summary"][0] == "2/2 meals (100%) comply with dietary restrictions"

    def test_rank_and_assemble(self):
        ranked = client.post("/api/meals/rank", json={
            "profile": {"cultural_preferences": {"Italian": 1.0}, "dietary_restrictions": ["vegetarian"]},
            "candidates": [
                meal_payload("Lasagna", "Italian", ["pasta", "ricotta"]),
                meal_payload("Beef Tacos", "Mexican", ["beef", "tortillas"]),
                meal_payload("Dal", "Indian", ["lentils"]),
            ],
            "count": 5
        }).json()
        assert [r["meal"]["name"] for r in ranked] == ["Lasagna", "Dal"]

        plan = client.post("/api/plans/assemble", json={
            "ranked_meals": ranked, "num_days": 2, "meals_per_day": 2
        }).json()
        assert plan["total_slots"] == 4
        assert plan["cycled"] is True
        assert plan["meal_plan"]["day_2"]["breakfast"]["title"] == "Lasagna"

    def test_generate_plan(self):
        response = client.post("/api/plans/generate", json={
            "cultural_text": "My grandmother from Sicily makes the best pasta",
            "num_days": 1,
            "meals_per_day": 2
        })
        assert response.status_code == 200
        body = response.json()
        assert body["metadata"]["culture_tags"] == ["Italian"]
        assert body["plan"]["total_slots"] == 2
        assert body["validation"]["total_meals"] == 2

    def test_taxonomy_failure_returns_503(self):
        def broken_taxonomy():
            raise TaxonomyLoadError("no taxonomy", ["/tmp/a.json", "/tmp/b.json"])

        app.dependency_overrides[require_taxonomy] = broken_taxonomy
        response = client.post("/api/validate/recipe", json={"recipe": None, "restrictions": []})

        assert response.status_code == 503
        body = response.json()
        assert body["error_code"] == "TAXONOMY_UNAVAILABLE"
        assert body["paths_tried"] == ["/tmp/a.json", "/tmp/b.json"]
