import json
import re
from datetime import date
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError

from cuisine_core.core.config import get_config
from cuisine_core.core.cuisine_enrichment import (
    CUISINE_ENHANCEMENTS,
    EMBEDDED_TAXONOMY,
    FALLBACK_CONTEXT_TERMS,
    VEGETARIAN_FRIENDLY_CUISINES,
)
from cuisine_core.core.logging_config import get_logger
from cuisine_core.models import (
    CuisineDefinition,
    CuisineTaxonomyV2,
    TaxonomyCategories,
    TaxonomySearchIndexes,
)

logger = get_logger(__name__)

V2_FILENAME = "cuisine_taxonomy_v2.json"
LEGACY_FILENAME = "cuisine_taxonomy.json"
V2_SCHEMA_VERSION = "2.0.0"

# Fuzzy matching below this length produces too many accidental hits.
MIN_FUZZY_LENGTH = 3


class TaxonomyLoadError(Exception):
    """Raised when no cuisine taxonomy can be read from disk."""

    def __init__(self, message: str, paths_tried: Optional[List[str]] = None):
        super().__init__(message)
        self.paths_tried = paths_tried or []


def slugify(label: str) -> str:
    slug = label.strip().lower().replace(" ", "-")
    return re.sub(r"[^a-z0-9-]", "", slug)


def validate_v2(data: Any) -> List[str]:
    """Return a list of schema problems for a raw v2 taxonomy payload."""
    if not isinstance(data, dict):
        return ["Taxonomy must be a JSON object"]

    errors = []
    if not data.get("schema_version"):
        errors.append("Missing schema_version")
    cuisines = data.get("cuisines")
    if not isinstance(cuisines, list):
        errors.append("Missing or invalid cuisines array")
        return errors

    for index, cuisine in enumerate(cuisines):
        if not isinstance(cuisine, dict):
            errors.append(f"Cuisine {index}: not an object")
            continue
        if not cuisine.get("id"):
            errors.append(f"Cuisine {index}: Missing id")
        if not cuisine.get("label"):
            errors.append(f"Cuisine {index}: Missing label")
        if not isinstance(cuisine.get("aliases"), list):
            errors.append(f"Cuisine {index}: Missing or invalid aliases")
    return errors


def build_categories(cuisines: Iterable[CuisineDefinition]) -> TaxonomyCategories:
    categories = TaxonomyCategories()
    for cuisine in cuisines:
        metadata = cuisine.metadata
        if metadata and metadata.origin and metadata.origin.geographic_tags:
            region = metadata.origin.geographic_tags[0]
            categories.by_region.setdefault(region, []).append(cuisine.label)
        if metadata and metadata.searchability and metadata.searchability.difficulty_level:
            level = metadata.searchability.difficulty_level
            categories.by_difficulty.setdefault(level, []).append(cuisine.label)

        restrictions = []
        if metadata and metadata.dietary_info:
            restrictions = [r.lower() for r in metadata.dietary_info.common_restrictions]
        if cuisine.label in VEGETARIAN_FRIENDLY_CUISINES or any("vegetarian" in r for r in restrictions):
            categories.by_dietary.setdefault("vegetarian_friendly", []).append(cuisine.label)
    return categories


def build_search_indexes(cuisines: Iterable[CuisineDefinition]) -> TaxonomySearchIndexes:
    indexes = TaxonomySearchIndexes()
    for cuisine in cuisines:
        metadata = cuisine.metadata
        if not metadata:
            continue
        if metadata.searchability:
            for keyword in metadata.searchability.keywords:
                indexes.keywords.setdefault(keyword.lower(), []).append(cuisine.label)
        if metadata.characteristics:
            for ingredient in metadata.characteristics.key_ingredients:
                indexes.ingredients.setdefault(ingredient.lower(), []).append(cuisine.label)
    return indexes


def migrate_legacy_to_v2(
    legacy: List[Dict[str, Any]],
    enhancements: Optional[Dict[str, Dict[str, Any]]] = None,
    last_updated: Optional[str] = None
) -> CuisineTaxonomyV2:
    """Build a v2 taxonomy from legacy label/alias entries.

    Each entry gets a slug id and, when the enhancement table knows the label,
    its metadata and related cuisines. Categories and search indexes are
    generated from the merged result.
    """
    enhancements = CUISINE_ENHANCEMENTS if enhancements is None else enhancements
    cuisines = []
    for entry in legacy:
        label = entry.get("label")
        if not label:
            continue
        merged: Dict[str, Any] = {
            "id": slugify(label),
            "label": label,
            "aliases": list(entry.get("aliases") or []),
        }
        merged.update(enhancements.get(label, {}))
        cuisines.append(CuisineDefinition.model_validate(merged))

    return CuisineTaxonomyV2(
        schema_version=V2_SCHEMA_VERSION,
        last_updated=last_updated or date.today().isoformat(),
        total_cuisines=len(cuisines),
        description="Cultural cuisine taxonomy with metadata for matching and recommendations",
        cuisines=cuisines,
        categories=build_categories(cuisines),
        search_indexes=build_search_indexes(cuisines),
    )


class TaxonomyStore:
    """In-memory cuisine taxonomy, loaded once from the data directory."""

    def __init__(self, taxonomy_dir: Optional[Path] = None):
        self.taxonomy_dir = Path(taxonomy_dir) if taxonomy_dir else None
        self.taxonomy: Optional[CuisineTaxonomyV2] = None
        self.source_path: Optional[Path] = None
        self.degraded = False

    @property
    def loaded(self) -> bool:
        return self.taxonomy is not None

    @property
    def cuisines(self) -> List[CuisineDefinition]:
        return self.ensure_loaded().taxonomy.cuisines

    def load(self, strict: bool = False) -> "TaxonomyStore":
        """Load the v2 taxonomy, falling back to the legacy file.

        Args:
            strict: Raise TaxonomyLoadError instead of using the embedded
                taxonomy when neither file is usable.
        """
        directory = self.taxonomy_dir or get_config().taxonomy_dir
        v2_path = directory / V2_FILENAME
        legacy_path = directory / LEGACY_FILENAME

        taxonomy = self._load_v2(v2_path)
        if taxonomy is not None:
            self._set(taxonomy, v2_path, degraded=False)
            logger.info(f"Loaded cuisine taxonomy v{taxonomy.schema_version} with {len(taxonomy.cuisines)} cuisines")
            return self

        taxonomy = self._load_legacy(legacy_path)
        if taxonomy is not None:
            self._set(taxonomy, legacy_path, degraded=False)
            logger.warning(f"Loaded legacy cuisine taxonomy from {legacy_path}; run scripts/migrate_taxonomy.py to upgrade")
            return self

        paths = [str(v2_path), str(legacy_path)]
        if strict:
            raise TaxonomyLoadError(f"No usable cuisine taxonomy found (tried {', '.join(paths)})", paths)

        logger.error(f"No usable cuisine taxonomy found (tried {', '.join(paths)}); using embedded defaults")
        embedded = CuisineTaxonomyV2(
            schema_version=V2_SCHEMA_VERSION,
            last_updated=date.today().isoformat(),
            total_cuisines=len(EMBEDDED_TAXONOMY),
            description="Embedded default taxonomy",
            cuisines=[CuisineDefinition.model_validate(c) for c in EMBEDDED_TAXONOMY],
        )
        self._set(embedded, None, degraded=True)
        return self

    def ensure_loaded(self, strict: bool = False) -> "TaxonomyStore":
        if self.taxonomy is None:
            self.load(strict=strict)
        return self

    def _set(self, taxonomy: CuisineTaxonomyV2, path: Optional[Path], degraded: bool) -> None:
        if taxonomy.categories is None:
            taxonomy.categories = build_categories(taxonomy.cuisines)
        if taxonomy.search_indexes is None:
            taxonomy.search_indexes = build_search_indexes(taxonomy.cuisines)
        self.taxonomy = taxonomy
        self.source_path = path
        self.degraded = degraded

    def _load_v2(self, path: Path) -> Optional[CuisineTaxonomyV2]:
        data = self._read_json(path)
        if data is None:
            return None
        errors = validate_v2(data)
        if errors:
            logger.error(f"Invalid v2 taxonomy at {path}: {'; '.join(errors)}")
            return None
        try:
            return CuisineTaxonomyV2.model_validate(data)
        except ValidationError as e:
            logger.error(f"Invalid v2 taxonomy at {path}: {e}")
            return None

    def _load_legacy(self, path: Path) -> Optional[CuisineTaxonomyV2]:
        data = self._read_json(path)
        if not isinstance(data, list) or not data:
            if data is not None:
                logger.error(f"Legacy taxonomy at {path} is not a non-empty list")
            return None
        try:
            return migrate_legacy_to_v2(data)
        except ValidationError as e:
            logger.error(f"Could not migrate legacy taxonomy at {path}: {e}")
            return None

    def _read_json(self, path: Path) -> Optional[Any]:
        if not path.exists():
            logger.debug(f"{path} not found.")
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Error reading {path}: {e}")
            return None

    # --- Lookups ---

    def labels(self) -> List[str]:
        return [c.label for c in self.cuisines]

    def get(self, label: str) -> Optional[CuisineDefinition]:
        for cuisine in self.cuisines:
            if cuisine.label == label:
                return cuisine
        return None

    def find(self, term: str) -> Optional[CuisineDefinition]:
        """Resolve a label or alias: exact label, then exact alias, then substring either way."""
        needle = (term or "").strip().lower()
        if not needle:
            return None
        cuisines = self.cuisines

        for cuisine in cuisines:
            if cuisine.label.lower() == needle:
                return cuisine
        for cuisine in cuisines:
            if any(alias.lower() == needle for alias in cuisine.aliases):
                return cuisine
        if len(needle) < MIN_FUZZY_LENGTH:
            return None
        for cuisine in cuisines:
            label = cuisine.label.lower()
            if needle in label or label in needle:
                return cuisine
        for cuisine in cuisines:
            for alias in cuisine.aliases:
                alias = alias.lower()
                if needle in alias or alias in needle:
                    return cuisine
        return None

    def aliases_for(self, labels: Iterable[str]) -> List[str]:
        aliases = []
        for label in labels:
            cuisine = self.get(label)
            if cuisine:
                aliases.extend(a for a in cuisine.aliases if a not in aliases)
        return aliases

    def grounding_lines(self) -> List[str]:
        """Return "Label (alias, alias)" lines for interpreter prompts."""
        lines = []
        for cuisine in self.cuisines:
            if cuisine.aliases:
                lines.append(f"{cuisine.label} ({', '.join(cuisine.aliases)})")
            else:
                lines.append(cuisine.label)
        return lines

    def context_terms(self, cuisine: CuisineDefinition) -> List[str]:
        """Keywords that hint at a cuisine without naming it.

        Metadata wins; the static fallback table covers cuisines without any.
        """
        terms: List[str] = []
        metadata = cuisine.metadata
        if metadata:
            if metadata.characteristics:
                terms.extend(metadata.characteristics.key_ingredients)
                terms.extend(metadata.characteristics.signature_dishes)
            if metadata.searchability:
                terms.extend(metadata.searchability.keywords)
            if metadata.origin:
                terms.extend(metadata.origin.countries)
        if not terms:
            terms = FALLBACK_CONTEXT_TERMS.get(cuisine.label, [])

        seen = set()
        unique = []
        for term in terms:
            lowered = term.lower()
            if lowered not in seen:
                seen.add(lowered)
                unique.append(lowered)
        return unique

    def stats(self) -> Dict[str, Any]:
        return {
            "loaded": self.loaded,
            "degraded": self.degraded,
            "source": str(self.source_path) if self.source_path else None,
            "total_cuisines": len(self.taxonomy.cuisines) if self.taxonomy else 0,
        }


taxonomy_store = TaxonomyStore()
