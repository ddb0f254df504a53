import json
import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from cuisine_core.core.logging_config import get_logger

load_dotenv()

logger = get_logger(__name__)

DEFAULT_TAXONOMY_DIR = Path(__file__).resolve().parents[1] / "data"


@dataclass(frozen=True)
class CoreConfig:
    interpreter_enabled: bool = True
    interpreter_model: str = "gpt-4o-mini"
    interpreter_timeout_seconds: float = 10.0
    parse_cache_ttl_seconds: int = 30 * 60
    parse_cache_max_entries: int = 1000
    taxonomy_dir: Path = field(default=DEFAULT_TAXONOMY_DIR)
    taxonomy_strict: bool = False


def _as_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return default


def _as_int(value: Any, default: int) -> int:
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return default
    return default


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


def _config_path() -> Path:
    return Path(__file__).resolve().parents[2] / "config" / "core_config.json"


def _read_file(config_path: Path) -> Dict[str, Any]:
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except json.JSONDecodeError as exc:
        logger.warning(f"Invalid core config JSON at {config_path}: {exc}")
        return {}
    if not isinstance(data, dict):
        logger.warning(f"Core config at {config_path} is not a JSON object; using defaults")
        return {}
    return data


def load_core_config(path: Optional[Path] = None) -> CoreConfig:
    """Load the core config from JSON, then apply environment overrides.

    Environment variables win over the file so deployments can tweak a single
    knob without shipping a new config file.
    """
    data = _read_file(path or _config_path())

    def pick(key: str) -> Any:
        env_value = os.getenv(key.upper())
        return env_value if env_value is not None else data.get(key)

    defaults = CoreConfig()
    taxonomy_dir = pick("taxonomy_dir")
    return CoreConfig(
        interpreter_enabled=_as_bool(pick("interpreter_enabled"), defaults.interpreter_enabled),
        interpreter_model=str(pick("interpreter_model") or defaults.interpreter_model),
        interpreter_timeout_seconds=_as_float(
            pick("interpreter_timeout_seconds"), defaults.interpreter_timeout_seconds
        ),
        parse_cache_ttl_seconds=_as_int(pick("parse_cache_ttl_seconds"), defaults.parse_cache_ttl_seconds),
        parse_cache_max_entries=_as_int(pick("parse_cache_max_entries"), defaults.parse_cache_max_entries),
        taxonomy_dir=Path(taxonomy_dir) if taxonomy_dir else defaults.taxonomy_dir,
        taxonomy_strict=_as_bool(pick("taxonomy_strict"), defaults.taxonomy_strict)
    )


@lru_cache()
def get_config() -> CoreConfig:
    """Get cached config instance."""
    return load_core_config()
