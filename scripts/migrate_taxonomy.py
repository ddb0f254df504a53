import json
import shutil
from datetime import datetime
from pathlib import Path
from typing import Optional

from cuisine_core.core.config import get_config
from cuisine_core.core.logging_config import get_logger, setup_logging
from cuisine_core.services.taxonomy_store import (
    LEGACY_FILENAME,
    V2_FILENAME,
    migrate_legacy_to_v2,
    validate_v2,
)

logger = get_logger(__name__)


def migrate(taxonomy_dir: Optional[Path] = None) -> Path:
    """Write the v2 taxonomy next to the legacy file and keep a backup of the legacy file."""
    directory = Path(taxonomy_dir or get_config().taxonomy_dir)
    legacy_path = directory / LEGACY_FILENAME
    with open(legacy_path, "r", encoding="utf-8") as handle:
        legacy = json.load(handle)

    taxonomy = migrate_legacy_to_v2(legacy)
    payload = taxonomy.model_dump(exclude_none=True)
    errors = validate_v2(payload)
    if errors:
        raise RuntimeError(f"Migrated taxonomy is invalid: {'; '.join(errors)}")

    stamp = datetime.now().strftime("%Y%m%d%H%M%S")
    backup_path = directory / f"{legacy_path.stem}.backup-{stamp}.json"
    shutil.copyfile(legacy_path, backup_path)

    output_path = directory / V2_FILENAME
    with open(output_path, "w", encoding="utf-8") as handle:
        json.dump(payload, handle, indent=2)

    logger.info(f"Migrated {taxonomy.total_cuisines} cuisines to {output_path} (backup at {backup_path})")
    return output_path


def main():
    setup_logging()
    migrate()


if __name__ == "__main__":
    main()
