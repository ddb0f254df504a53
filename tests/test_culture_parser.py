import pytest
from unittest.mock import MagicMock

from cuisine_core.models import CuisineData, HealthySwap
from cuisine_core.services.culture_parser import MAX_INPUT_LENGTH, normalize_input
from cuisine_core.services.interpreters import (
    Interpretation,
    InterpretationError,
    PatternInterpreter,
    RemoteInterpreter,
)

SICILY_TEXT = "My grandmother from Sicily makes the best pasta"


class TestNormalizeInput:
    def test_lowercases_and_strips_punctuation(self):
        assert normalize_input("  Nonna's   Sicilian, pasta!! ") == "nonna's sicilian pasta"

    def test_caps_length(self):
        assert len(normalize_input("a" * 1000)) == MAX_INPUT_LENGTH

    def test_handles_none(self):
        assert normalize_input(None) == ""


class TestPatternInterpreter:
    def test_scores_context_terms(self, taxonomy_store):
        interpretation = PatternInterpreter().interpret(normalize_input(SICILY_TEXT), taxonomy_store)
        assert interpretation.labels == ["Italian"]
        assert interpretation.confidence == 0.4
        assert "sicily" in interpretation.detected_regions
        assert "pasta" in interpretation.detected_regions

    def test_label_and_alias_hits_outrank_context(self, taxonomy_store):
        interpretation = PatternInterpreter().interpret("cantonese and some pasta", taxonomy_store)
        assert interpretation.labels[0] == "Chinese"
        assert "Italian" in interpretation.labels

    def test_caps_at_three_labels(self, taxonomy_store):
        text = "thai greek french korean food"
        interpretation = PatternInterpreter().interpret(text, taxonomy_store)
        assert len(interpretation.labels) == 3

    def test_no_match_returns_empty(self, taxonomy_store):
        interpretation = PatternInterpreter().interpret("zzzz qqqq", taxonomy_store)
        assert interpretation.labels == []
        assert interpretation.confidence == 0.0


class TestCulturalIntentParser:
    def test_sicily_pasta_resolves_to_italian(self, pattern_parser):
        result = pattern_parser.parse(SICILY_TEXT)

        assert result.culture_tags == ["Italian"]
        assert result.needs_manual_review is False
        assert result.fallback_used is True
        assert 0.0 <= result.confidence <= 1.0
        assert "Sicilian" in result.suggested_aliases

    def test_empty_input_needs_review(self, pattern_parser):
        result = pattern_parser.parse("   ")
        assert result.culture_tags == []
        assert result.needs_manual_review is True
        assert result.fallback_used is False

    def test_unrecognized_input_needs_review(self, pattern_parser):
        result = pattern_parser.parse("zzzz qqqq xxxx")
        assert result.culture_tags == []
        assert result.needs_manual_review is True
        assert result.fallback_used is True

    def test_remote_result_is_validated_against_taxonomy(self, make_parser, stub_interpreter):
        remote = stub_interpreter(Interpretation(
            labels=["sicilian", "Klingon", "Italian", "Thai"],
            label_confidences=[0.9, 0.8, 0.7, 0.7],
            detected_regions=["Sicily"],
            cuisine_data={"sicilian": CuisineData(common_proteins=["chickpeas"])}
        ))
        result = make_parser(remote=remote).parse(SICILY_TEXT)

        assert result.culture_tags == ["Italian", "Thai"]
        assert result.confidence == 0.8
        assert result.fallback_used is False
        assert result.needs_manual_review is False
        assert result.detected_regions == ["Sicily"]
        assert result.cuisine_data["Italian"].common_proteins == ["chickpeas"]
        assert len(remote.calls) == 1

    def test_remote_low_confidence_needs_review(self, make_parser, stub_interpreter):
        remote = stub_interpreter(Interpretation(labels=["Greek"], label_confidences=[0.2]))
        result = make_parser(remote=remote).parse("something about my family")
        assert result.culture_tags == ["Greek"]
        assert result.needs_manual_review is True

    def test_remote_failure_falls_back_to_patterns(self, make_parser, stub_interpreter):
        remote = stub_interpreter(error=InterpretationError("timeout"))
        result = make_parser(remote=remote).parse(SICILY_TEXT)

        assert result.culture_tags == ["Italian"]
        assert result.fallback_used is True
        assert len(remote.calls) == 1

    def test_remote_without_known_labels_forces_review(self, make_parser, stub_interpreter):
        remote = stub_interpreter(Interpretation(labels=["Klingon"], label_confidences=[0.9]))
        result = make_parser(remote=remote).parse(SICILY_TEXT)

        assert result.culture_tags == ["Italian"]
        assert result.fallback_used is True
        assert result.needs_manual_review is True

    def test_short_input_skips_remote(self, make_parser, stub_interpreter):
        remote = stub_interpreter(Interpretation(labels=["Greek"], label_confidences=[0.9]))
        result = make_parser(remote=remote).parse("Thai")

        assert remote.calls == []
        assert result.culture_tags[0] == "Thai"

    def test_unexpected_error_yields_empty_result(self, make_parser, stub_interpreter):
        remote = stub_interpreter(error=RuntimeError("boom"))
        result = make_parser(remote=remote).parse(SICILY_TEXT)

        assert result.culture_tags == []
        assert result.needs_manual_review is True
        assert result.fallback_used is True

    def test_results_are_cached_by_normalized_text(self, make_parser, stub_interpreter):
        remote = stub_interpreter(Interpretation(labels=["Italian"], label_confidences=[0.9]))
        parser = make_parser(remote=remote)

        first = parser.parse(SICILY_TEXT)
        second = parser.parse(SICILY_TEXT.upper() + "!")

        assert first.culture_tags == second.culture_tags
        assert len(remote.calls) == 1
        assert parser.stats()["cache_size"] == 1
        assert parser.stats()["cache_hit_ratio"] == 0.5

    def test_force_refresh_bypasses_cache(self, make_parser, stub_interpreter):
        remote = stub_interpreter(Interpretation(labels=["Italian"], label_confidences=[0.9]))
        parser = make_parser(remote=remote)
        parser.parse(SICILY_TEXT)
        parser.parse(SICILY_TEXT, force_refresh=True)
        assert len(remote.calls) == 2

    def test_disabled_caching_does_not_store(self, make_parser):
        parser = make_parser()
        parser.parse(SICILY_TEXT, enable_caching=False)
        assert parser.stats()["cache_size"] == 0

    def test_clear_cache(self, pattern_parser):
        pattern_parser.parse(SICILY_TEXT)
        pattern_parser.clear_cache()
        assert pattern_parser.stats()["cache_size"] == 0
        assert pattern_parser.stats()["taxonomy_loaded"] is True


class TestRemoteInterpreter:
    def make_client(self, content):
        client = MagicMock()
        response = MagicMock()
        response.choices = [MagicMock()]
        response.choices[0].message.content = content
        client.chat.completions.create.return_value = response
        return client

    def test_parses_cultures_payload(self, taxonomy_store):
        client = self.make_client(
            '{"cultures": [{"label": "Italian", "confidence": 0.9, '
            '"cuisine_data": {"healthy_swaps": [{"original": "beef", "swap": "lentils"}]}}, '
            '{"label": "Greek", "confidence": "0.5"}], "regional_indicators": ["Sicily"]}'
        )
        interpretation = RemoteInterpreter(client=client, model="test-model").interpret("text", taxonomy_store)

        assert interpretation.labels == ["Italian", "Greek"]
        assert interpretation.label_confidences == [0.9, 0.5]
        assert interpretation.confidence == pytest.approx(0.7)
        assert interpretation.detected_regions == ["Sicily"]
        assert interpretation.cuisine_data["Italian"].healthy_swaps == [HealthySwap(original="beef", swap="lentils")]

        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "test-model"
        assert kwargs["response_format"] == {"type": "json_object"}

    def test_invalid_json_raises_interpretation_error(self, taxonomy_store):
        client = self.make_client("not json")
        with pytest.raises(InterpretationError):
            RemoteInterpreter(client=client).interpret("text", taxonomy_store)

    def test_missing_cultures_raises_interpretation_error(self, taxonomy_store):
        client = self.make_client('{"labels": []}')
        with pytest.raises(InterpretationError):
            RemoteInterpreter(client=client).interpret("text", taxonomy_store)

    def test_unconfigured_client_is_unavailable(self, taxonomy_store, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        interpreter = RemoteInterpreter()
        assert interpreter.available is False
        with pytest.raises(InterpretationError):
            interpreter.interpret("text", taxonomy_store)
