"""WellSense server entry point: ``wellsense-server`` or ``python -m wellsense.core.server.main``."""

from __future__ import annotations

import logging
from ipaddress import ip_address

from wellsense.core.config.settings import Settings, get_settings
from wellsense.core.server.app import create_app

logger = logging.getLogger(__name__)

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _configure_logging(level_name: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level_name.upper(), logging.INFO),
        format=_LOG_FORMAT,
    )


def _bind_is_local(host: str) -> bool:
    if host == "localhost":
        return True
    try:
        return ip_address(host).is_loopback
    except ValueError:
        return False


def _check_bind(settings: Settings) -> None:
    """Refuse non-loopback binds unless explicitly allowed.

    The tools carry wellness data and there is no auth layer in front of them.
    """
    if _bind_is_local(settings.wellsense_host):
        return
    if not settings.wellsense_allow_insecure_bind:
        raise RuntimeError(
            f"Refusing to bind WellSense to {settings.wellsense_host}: no auth layer. "
            "Set WELLSENSE_ALLOW_INSECURE_BIND=true to override (unsafe)."
        )
    logger.warning("Binding to non-loopback host %s without authentication", settings.wellsense_host)


def run() -> None:
    """Start the WellSense MCP server with Streamable HTTP transport."""
    settings = get_settings()
    _configure_logging(settings.wellsense_log_level)
    _check_bind(settings)

    logger.info(
        "Starting WellSense on %s:%d (analyst provider: %s)",
        settings.wellsense_host,
        settings.wellsense_port,
        settings.llm_provider,
    )
    create_app().run(
        transport="streamable-http",
        host=settings.wellsense_host,
        port=settings.wellsense_port,
    )


if __name__ == "__main__":
    run()
