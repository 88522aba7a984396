"""Practice catalog loader: reads the YAML catalog and seeds storage."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

from wellsense.core.storage.models import Practice

if TYPE_CHECKING:
    from wellsense.core.storage.repository import WellnessRepository

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_PATH = Path(__file__).resolve().parent / "practices.yaml"


class CatalogError(Exception):
    """Raised when a catalog file cannot be read or is malformed."""


def _lower_list(values: Any) -> list[str]:
    if not isinstance(values, list):
        return []
    return [str(v).strip().lower() for v in values if str(v).strip()]


def load_practice_catalog(path: str | Path = DEFAULT_CATALOG_PATH) -> list[Practice]:
    """Parse a practice catalog YAML file.

    Raises:
        CatalogError: If the file is missing, unparseable, or an entry lacks
            an id, title or category.
    """
    path = Path(path)
    try:
        with open(path) as f:
            data: dict[str, Any] = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise CatalogError(f"Cannot read practice catalog {path}: {exc}") from exc

    practices: list[Practice] = []
    for entry in data.get("practices", []):
        missing = [k for k in ("id", "title", "category") if not entry.get(k)]
        if missing:
            raise CatalogError(f"Practice entry {entry!r} is missing {', '.join(missing)}")
        practices.append(
            Practice(
                id=str(entry["id"]),
                title=str(entry["title"]),
                category=str(entry["category"]).strip().lower(),
                description=str(entry.get("description", "")).strip(),
                duration_minutes=entry.get("duration_minutes"),
                difficulty=entry.get("difficulty"),
                tags=_lower_list(entry.get("tags")),
                benefits=[str(b) for b in entry.get("benefits", [])],
                popularity=int(entry.get("popularity", 0)),
            )
        )
    return practices


def seed_practice_catalog(
    repository: WellnessRepository,
    path: str | Path = DEFAULT_CATALOG_PATH,
) -> int:
    """Insert catalog practices that are not stored yet.

    Existing rows (and their popularity counters) are left untouched.

    Returns:
        Number of newly inserted practices.
    """
    inserted = sum(1 for practice in load_practice_catalog(path) if repository.add_practice(practice))
    logger.info("Seeded %d new practices from %s", inserted, path)
    return inserted
