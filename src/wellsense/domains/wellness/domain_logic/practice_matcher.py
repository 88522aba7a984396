"""Practice matching: links insight practice types to catalog practices."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Protocol

from wellsense.core.storage.models import Practice

logger = logging.getLogger(__name__)

MAX_MATCHED_PRACTICES = 3


class PracticeCatalog(Protocol):
    """Queryable catalog: category-equals OR tags-contain, popularity descending."""

    def find_practices(self, terms: Iterable[str], *, limit: int = 3) -> list[Practice]: ...


class PracticeMatcher:
    """Maps requested practice categories/tags to the most popular catalog practices."""

    def __init__(self, catalog: PracticeCatalog, limit: int = MAX_MATCHED_PRACTICES) -> None:
        self._catalog = catalog
        self._limit = limit

    def match(self, requested: Iterable[str] | None) -> list[Practice]:
        """Return up to ``limit`` practices for the requested categories/tags.

        Empty input returns ``[]`` without touching the catalog.
        """
        terms = [t.strip().lower() for t in (requested or []) if t and t.strip()]
        if not terms:
            return []
        practices = self._catalog.find_practices(terms, limit=self._limit)
        logger.debug("Matched %d practices for %s", len(practices), terms)
        return practices
