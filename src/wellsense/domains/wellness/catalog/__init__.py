"""Bundled wellness practice catalog."""

from wellsense.domains.wellness.catalog.loader import (
    DEFAULT_CATALOG_PATH,
    CatalogError,
    load_practice_catalog,
    seed_practice_catalog,
)

__all__ = [
    "DEFAULT_CATALOG_PATH",
    "CatalogError",
    "load_practice_catalog",
    "seed_practice_catalog",
]
