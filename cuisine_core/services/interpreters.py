import json
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from openai import OpenAI
from pydantic import ValidationError

from cuisine_core.core.config import get_config
from cuisine_core.core.logging_config import get_logger
from cuisine_core.models import CuisineData
from cuisine_core.services.taxonomy_store import TaxonomyStore

logger = get_logger(__name__)

MAX_CULTURE_TAGS = 3


class InterpretationError(Exception):
    """The remote interpreter was unavailable or returned something unusable."""


@dataclass
class Interpretation:
    labels: List[str] = field(default_factory=list)
    label_confidences: List[float] = field(default_factory=list)
    confidence: float = 0.0
    detected_regions: List[str] = field(default_factory=list)
    cuisine_data: Dict[str, CuisineData] = field(default_factory=dict)


class Interpreter(ABC):
    name: str = "Unknown"

    @property
    def available(self) -> bool:
        return True

    @abstractmethod
    def interpret(self, text: str, store: TaxonomyStore) -> Interpretation:
        """
        Turn normalized user text into candidate culture labels.
        Labels are returned as the interpreter saw them; the caller validates
        them against the taxonomy.
        """
        pass


class RemoteInterpreter(Interpreter):
    name = "remote"

    def __init__(
        self,
        client: Optional[Any] = None,
        model: Optional[str] = None,
        timeout_seconds: Optional[float] = None
    ):
        config = get_config()
        self.model = model or config.interpreter_model
        self.timeout_seconds = timeout_seconds or config.interpreter_timeout_seconds
        if client is not None:
            self.client = client
            return
        api_key = os.getenv("OPENAI_API_KEY")
        if not api_key:
            logger.warning("OPENAI_API_KEY not set. Remote cultural interpretation will be disabled.")
            self.client = None
        else:
            self.client = OpenAI(api_key=api_key, timeout=self.timeout_seconds, max_retries=0)

    @property
    def available(self) -> bool:
        return self.client is not None

    def interpret(self, text: str, store: TaxonomyStore) -> Interpretation:
        if not self.client:
            raise InterpretationError("OpenAI client not configured")

        prompt = self._build_prompt(text, store.grounding_lines())
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": "You are a cultural cuisine expert. Always return valid JSON."},
                    {"role": "user", "content": prompt}
                ],
                temperature=0.1,
                response_format={"type": "json_object"},
                timeout=self.timeout_seconds
            )
            content = response.choices[0].message.content
            data = json.loads(content)
        except Exception as e:
            raise InterpretationError(f"Interpreter call failed: {e}") from e

        return self._parse_payload(data)

    def _build_prompt(self, text: str, grounding: List[str]) -> str:
        cuisines = "\n".join(f"- {line}" for line in grounding)
        return f"""Identify the cultural cuisines a user identifies with from their description.

Known cuisines (label followed by aliases):
{cuisines}

User description: "{text}"

Return a JSON object with this structure:

{{
  "cultures": [
    {{
      "label": "<one of the known cuisine labels>",
      "confidence": <number between 0 and 1>,
      "cuisine_data": {{
        "staple_dishes": [{{"name": "...", "description": "...", "ingredients": ["..."]}}],
        "common_proteins": ["..."],
        "common_carbs": ["..."],
        "common_vegetables": ["..."],
        "meal_structure": {{"breakfast": ["..."], "lunch": ["..."], "dinner": ["..."], "snacks": ["..."]}},
        "healthy_swaps": [{{"original": "...", "swap": "..."}}],
        "flavor_profiles": ["..."],
        "signature_seasonings": ["..."],
        "dietary_restrictions": ["..."],
        "cooking_methods": ["..."]
      }}
    }}
  ],
  "regional_indicators": ["places or regions mentioned"]
}}

Guidelines:
- Return at most {MAX_CULTURE_TAGS} cultures, most relevant first
- Only use labels from the known cuisine list
- Use an empty "cultures" array if no cuisine is indicated
"""

    def _parse_payload(self, data: Any) -> Interpretation:
        if not isinstance(data, dict) or not isinstance(data.get("cultures"), list):
            raise InterpretationError("Interpreter response is missing the cultures array")

        interpretation = Interpretation()
        for item in data["cultures"][:MAX_CULTURE_TAGS]:
            if not isinstance(item, dict) or not isinstance(item.get("label"), str):
                continue
            label = item["label"].strip()
            if not label:
                continue
            interpretation.labels.append(label)
            interpretation.label_confidences.append(_clamp(_as_float(item.get("confidence"), 0.5)))

            raw_data = item.get("cuisine_data")
            if isinstance(raw_data, dict):
                try:
                    interpretation.cuisine_data[label] = CuisineData.model_validate(raw_data)
                except ValidationError as e:
                    logger.debug(f"Discarding malformed cuisine data for {label}: {e}")

        regions = data.get("regional_indicators")
        if isinstance(regions, list):
            interpretation.detected_regions = [r for r in regions if isinstance(r, str) and r.strip()]

        if interpretation.label_confidences:
            interpretation.confidence = sum(interpretation.label_confidences) / len(interpretation.label_confidences)
        return interpretation


class PatternInterpreter(Interpreter):
    """Deterministic keyword scoring against the taxonomy. Never raises."""

    name = "pattern"

    LABEL_WEIGHT = 10
    ALIAS_WEIGHT = 8
    CONTEXT_WEIGHT = 3
    EXPECTED_MAX_SCORE = 15

    def interpret(self, text: str, store: TaxonomyStore) -> Interpretation:
        matches = []
        for cuisine in store.cuisines:
            score = 0
            terms: List[str] = []

            label = cuisine.label.lower()
            if label in text:
                score += self.LABEL_WEIGHT
                terms.append(label)

            matched_aliases = [a.lower() for a in cuisine.aliases if a.lower() in text]
            if matched_aliases:
                score += self.ALIAS_WEIGHT
                terms.extend(matched_aliases)

            for term in store.context_terms(cuisine):
                if term in text:
                    score += self.CONTEXT_WEIGHT
                    terms.append(term)

            if score > 0:
                matches.append((score, cuisine.label, terms))

        matches.sort(key=lambda m: m[0], reverse=True)
        top = matches[:MAX_CULTURE_TAGS]
        if not top:
            return Interpretation()

        average = sum(m[0] for m in top) / len(top)
        regions: List[str] = []
        for _, _, terms in top:
            regions.extend(t for t in terms if t not in regions)
        return Interpretation(
            labels=[m[1] for m in top],
            label_confidences=[_clamp(m[0] / self.EXPECTED_MAX_SCORE) for m in top],
            confidence=round(min(average / self.EXPECTED_MAX_SCORE, 1.0), 2),
            detected_regions=regions
        )


def _as_float(value: Any, default: float) -> float:
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return default
    return default


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))
