"""WellSense MCP server application factory.

``create_app()`` builds a fresh server per call (tests inject an in-memory
repository and a scripted analyst); the module-level ``mcp`` is created on
first access for ``fastmcp run`` discovery.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from fastmcp import FastMCP

from wellsense.core.config.settings import get_settings
from wellsense.core.llm.provider import LLMProvider, resolve_analyst_provider
from wellsense.core.storage.database import WellnessDatabase
from wellsense.core.storage.encryption import EncryptionError, FieldEncryptor
from wellsense.core.storage.repository import WellnessRepository
from wellsense.domains.wellness.catalog import CatalogError, seed_practice_catalog
from wellsense.domains.wellness.domain_logic.pipeline import WellnessPipeline

logger = logging.getLogger(__name__)

SERVER_VERSION = "0.1.0"


def create_app(
    *,
    repository_override: WellnessRepository | None = None,
    provider_resolver_override: Callable[[], LLMProvider | None] | None = None,
) -> FastMCP:
    """Create and configure the WellSense MCP server.

    1. Creates the FastMCP server
    2. Initializes the encrypted storage layer (wellness data bank)
    3. Seeds the practice catalog
    4. Builds the analysis pipeline (analyst resolved per run)
    5. Registers all tools
    """
    settings = get_settings()

    server = FastMCP(
        "WellSense",
        instructions=(
            "Wearable wellness analysis server. Ingests wearable readings, "
            "summarizes them per metric, asks an analyst LLM for wellness scores "
            "and insights, and links insights to suggested practices."
        ),
    )

    # --- Initialize encrypted storage (wellness data bank) ---
    repository: WellnessRepository | None = None
    if repository_override is not None:
        repository = repository_override
    elif settings.encryption_key:
        try:
            encryptor = FieldEncryptor(settings.encryption_key)
            wellness_db = WellnessDatabase(settings.db_path)
            wellness_db.initialize()
            repository = WellnessRepository(wellness_db, encryptor)
            logger.info(
                "Wellness data bank initialized: %s (schema v%d)",
                settings.db_path,
                wellness_db.get_schema_version(),
            )
        except EncryptionError as exc:
            logger.error("Failed to initialize storage: %s", exc)
            logger.warning("Continuing without persistence; wellness tools are disabled")
    else:
        logger.info(
            "No ENCRYPTION_KEY configured; running without persistence. "
            "Set ENCRYPTION_KEY to enable the wellness data bank."
        )

    # --- Seed practice catalog ---
    if repository is not None and settings.seed_practice_catalog:
        try:
            if settings.practice_catalog_path:
                seed_practice_catalog(repository, settings.practice_catalog_path)
            else:
                seed_practice_catalog(repository)
        except CatalogError as exc:
            logger.error("Practice catalog not seeded: %s", exc)

    resolver = provider_resolver_override or resolve_analyst_provider

    @server.tool
    def health_check() -> dict:
        """Check server health and return basic status information."""
        status = {
            "status": "ok",
            "server": "WellSense",
            "version": SERVER_VERSION,
            "storage_enabled": repository is not None,
            "analyst_configured": resolver() is not None,
            "llm_provider": get_settings().llm_provider,
        }
        if repository is not None:
            status["practices_available"] = repository.count_practices()
        return status

    # --- Register wellness and practice tools (require storage) ---
    if repository is not None:
        from wellsense.domains.wellness.tools.practice_tools import register_practice_tools
        from wellsense.domains.wellness.tools.wellness_tools import register_wellness_tools

        pipeline = WellnessPipeline(repository, provider_resolver=resolver)
        register_wellness_tools(server, repository, pipeline)
        register_practice_tools(server, repository)
        logger.info("Wellness and practice tools registered")

    return server


# Module-level instance for FastMCP discovery ("...app.py:mcp").
# Lazy: only created when accessed (not when tests import create_app).
def __getattr__(name: str):
    if name == "mcp":
        global mcp  # noqa: PLW0603
        mcp = create_app()
        return mcp
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
