"""Integration tests for the WellSense MCP server."""

from __future__ import annotations

import asyncio
import json

import pytest
from fastmcp import Client

from wellsense.core.server.app import create_app

WELLNESS_TOOLS = [
    "record_wearable_sample",
    "list_wearable_samples",
    "process_wellness_data",
    "get_wellness_scores",
    "get_latest_wellness_scores",
    "list_insights",
    "update_insight_status",
    "list_practices",
    "get_practice",
    "get_recommended_practices",
    "get_wellness_dashboard",
]


def _run(coro):
    """Run an async coroutine synchronously (no pytest-asyncio required)."""
    loop = asyncio.new_event_loop()
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


def _payload(result) -> dict:
    content = getattr(result, "content", result)
    return json.loads(content[0].text)


@pytest.fixture
def client(seeded_repository):
    """MCP client against a server backed by the in-memory data bank."""
    mcp = create_app(
        repository_override=seeded_repository,
        provider_resolver_override=lambda: None,
    )
    return Client(mcp)


def test_server_starts_and_lists_tools(client):
    """Server should start and expose all registered tools."""
    async def _check():
        async with client:
            tools = await client.list_tools()
            tool_names = [t.name for t in tools]
            for expected in ["health_check", *WELLNESS_TOOLS]:
                assert expected in tool_names, f"Missing tool: {expected}"
    _run(_check())


def test_health_check_returns_ok(client):
    """health_check tool should return status ok."""
    async def _check():
        async with client:
            status = _payload(await client.call_tool("health_check", {}))
            assert status["status"] == "ok"
            assert status["storage_enabled"] is True
            assert status["analyst_configured"] is False
            assert status["practices_available"] == 11
    _run(_check())


def test_without_encryption_key_only_health_check():
    """No ENCRYPTION_KEY means no data bank and no wellness tools."""
    async def _check():
        async with Client(create_app()) as client:
            tool_names = [t.name for t in await client.list_tools()]
            assert tool_names == ["health_check"]
            status = _payload(await client.call_tool("health_check", {}))
            assert status["storage_enabled"] is False
            assert "practices_available" not in status
    _run(_check())


def test_encryption_key_enables_storage(monkeypatch):
    """A configured key builds the data bank and seeds the catalog."""
    from wellsense.core.storage.encryption import FieldEncryptor

    monkeypatch.setenv("ENCRYPTION_KEY", FieldEncryptor.generate_key())

    async def _check():
        async with Client(create_app()) as client:
            status = _payload(await client.call_tool("health_check", {}))
            assert status["storage_enabled"] is True
            assert status["practices_available"] == 11
    _run(_check())


def test_invalid_encryption_key_disables_storage(monkeypatch):
    monkeypatch.setenv("ENCRYPTION_KEY", "not-a-valid-key")

    async def _check():
        async with Client(create_app()) as client:
            status = _payload(await client.call_tool("health_check", {}))
            assert status["storage_enabled"] is False
    _run(_check())


def test_analyst_configured_follows_settings(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-live-abc123")

    async def _check():
        async with Client(create_app()) as client:
            status = _payload(await client.call_tool("health_check", {}))
            assert status["analyst_configured"] is True
            assert status["llm_provider"] == "openai"
    _run(_check())
