import re
import time
from typing import Any, Dict, List, Optional

from cuisine_core.core.config import CoreConfig, get_config
from cuisine_core.core.logging_config import get_logger
from cuisine_core.models import CuisineData, CultureParserResult
from cuisine_core.services.interpreters import (
    MAX_CULTURE_TAGS,
    InterpretationError,
    Interpreter,
    PatternInterpreter,
    RemoteInterpreter,
)
from cuisine_core.services.parse_cache import ParseCache
from cuisine_core.services.taxonomy_store import TaxonomyStore, taxonomy_store

logger = get_logger(__name__)

MIN_CONFIDENCE = 0.3
MIN_INPUT_LENGTH = 5
MAX_INPUT_LENGTH = 500


def normalize_input(text: Optional[str]) -> str:
    """Lower-case, strip punctuation except apostrophes/hyphens, collapse whitespace, cap length."""
    cleaned = (text or "").strip().lower()
    cleaned = re.sub(r"[^\w\s'-]", " ", cleaned)
    cleaned = re.sub(r"\s+", " ", cleaned).strip()
    return cleaned[:MAX_INPUT_LENGTH]


class CulturalIntentParser:
    def __init__(
        self,
        store: Optional[TaxonomyStore] = None,
        remote: Optional[Interpreter] = None,
        pattern: Optional[Interpreter] = None,
        cache: Optional[ParseCache] = None,
        config: Optional[CoreConfig] = None
    ):
        """
        Build a parser with its own result cache.

        Args:
            store: Taxonomy used for grounding and label validation.
            remote: Primary interpreter. Defaults to the OpenAI-backed one
                when the config enables it.
            pattern: Deterministic fallback interpreter.
            cache: Result cache; a fresh one sized from config by default.
            config: Core config, defaults to the process-wide instance.
        """
        config = config or get_config()
        self.store = store or taxonomy_store
        if remote is None and config.interpreter_enabled:
            remote = RemoteInterpreter(model=config.interpreter_model, timeout_seconds=config.interpreter_timeout_seconds)
        self.remote = remote
        self.pattern = pattern or PatternInterpreter()
        self.cache = cache or ParseCache(
            ttl_seconds=config.parse_cache_ttl_seconds,
            max_entries=config.parse_cache_max_entries
        )

    def parse(self, text: str, force_refresh: bool = False, enable_caching: bool = True) -> CultureParserResult:
        """Parse a free-text cultural background into at most three cuisine tags.

        Args:
            text: User description, e.g. "my grandmother from Sicily makes pasta".
            force_refresh: Skip the cache lookup (the result is still cached).
            enable_caching: Read from and write to the result cache.

        Returns:
            CultureParserResult. Never raises; total failure yields an empty
            result flagged for manual review.
        """
        started = time.perf_counter()
        normalized = normalize_input(text)
        if not normalized:
            return CultureParserResult(needs_manual_review=True, processing_time_ms=_elapsed_ms(started))

        if enable_caching and not force_refresh:
            cached = self.cache.get(normalized)
            if cached is not None:
                logger.debug(f"Cultural intent cache hit for '{normalized[:40]}'")
                cached.processing_time_ms = _elapsed_ms(started)
                return cached

        try:
            result = self._interpret(normalized)
        except Exception as e:
            logger.error(f"Cultural intent parsing failed for '{normalized[:40]}': {e}")
            result = CultureParserResult(needs_manual_review=True, fallback_used=True)

        result.processing_time_ms = _elapsed_ms(started)
        if enable_caching:
            self.cache.set(normalized, result)

        logger.info(
            f"Detected cultures {result.culture_tags} (confidence={result.confidence}, "
            f"fallback={result.fallback_used}, review={result.needs_manual_review})"
        )
        return result

    def _interpret(self, text: str) -> CultureParserResult:
        self.store.ensure_loaded()
        if len(text) < MIN_INPUT_LENGTH:
            return self._pattern_result(text)
        if self.remote is None or not self.remote.available:
            return self._pattern_result(text)

        try:
            interpretation = self.remote.interpret(text, self.store)
        except InterpretationError as e:
            logger.warning(f"Remote interpreter failed, falling back to pattern matching: {e}")
            return self._pattern_result(text)

        labels, confidences, cuisine_data = self._validate_labels(
            interpretation.labels, interpretation.label_confidences, interpretation.cuisine_data
        )
        if not labels:
            logger.warning("Remote interpreter returned no recognizable cuisines; using pattern matching")
            result = self._pattern_result(text)
            result.needs_manual_review = True
            return result

        confidence = round(sum(confidences) / len(confidences), 2)
        return CultureParserResult(
            culture_tags=labels,
            needs_manual_review=confidence < MIN_CONFIDENCE,
            confidence=confidence,
            detected_regions=interpretation.detected_regions or None,
            suggested_aliases=self.store.aliases_for(labels) or None,
            cuisine_data=cuisine_data or None,
            fallback_used=False
        )

    def _pattern_result(self, text: str) -> CultureParserResult:
        interpretation = self.pattern.interpret(text, self.store)
        labels = interpretation.labels[:MAX_CULTURE_TAGS]
        if not labels:
            return CultureParserResult(needs_manual_review=True, fallback_used=True)
        return CultureParserResult(
            culture_tags=labels,
            needs_manual_review=interpretation.confidence < MIN_CONFIDENCE,
            confidence=interpretation.confidence,
            detected_regions=interpretation.detected_regions or None,
            suggested_aliases=self.store.aliases_for(labels) or None,
            fallback_used=True
        )

    def _validate_labels(
        self,
        raw_labels: List[str],
        raw_confidences: List[float],
        raw_data: Dict[str, CuisineData]
    ):
        """Map interpreter labels onto canonical taxonomy labels, dropping unknowns and duplicates."""
        labels: List[str] = []
        confidences: List[float] = []
        cuisine_data: Dict[str, CuisineData] = {}
        for index, raw in enumerate(raw_labels):
            cuisine = self.store.find(raw)
            if cuisine is None:
                logger.debug(f"Discarding unknown cuisine label '{raw}'")
                continue
            if cuisine.label in labels:
                continue
            labels.append(cuisine.label)
            confidences.append(raw_confidences[index] if index < len(raw_confidences) else 0.5)
            if raw in raw_data:
                cuisine_data[cuisine.label] = raw_data[raw]
            if len(labels) == MAX_CULTURE_TAGS:
                break
        return labels, confidences, cuisine_data

    def clear_cache(self) -> None:
        self.cache.clear()

    def stats(self) -> Dict[str, Any]:
        return {
            "cache_size": len(self.cache),
            "taxonomy_loaded": self.store.loaded,
            "cache_hit_ratio": self.cache.hit_ratio
        }


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


culture_parser = CulturalIntentParser()
