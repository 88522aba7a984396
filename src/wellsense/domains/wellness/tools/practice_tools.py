"""MCP tools for browsing the practice catalog and insight-linked recommendations."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

from fastmcp import Context, FastMCP

from wellsense.domains.wellness.domain_logic.models import InsightStatus

if TYPE_CHECKING:
    from wellsense.core.storage.repository import WellnessRepository

logger = logging.getLogger(__name__)

RECOMMENDATION_INSIGHTS = 5
POPULAR_FALLBACK = 10


def register_practice_tools(mcp: FastMCP, repository: WellnessRepository) -> None:
    """Register practice catalog tools on the MCP server."""

    @mcp.tool
    async def list_practices(
        ctx: Context,
        category: str | None = None,
        difficulty: str | None = None,
        tag: str | None = None,
        limit: int = 20,
    ) -> str:
        """Browse wellness practices, most popular first.

        Args:
            category: e.g. 'meditation', 'breathing', 'yoga', 'movement', 'sleep'.
            difficulty: e.g. 'beginner', 'intermediate'.
            tag: Only practices carrying this tag.
        """
        practices = repository.list_practices(
            category=category, difficulty=difficulty, tag=tag, limit=limit
        )
        return json.dumps({"practices": [p.to_dict() for p in practices]})

    @mcp.tool
    async def get_practice(ctx: Context, practice_id: str) -> str:
        """Get practice details. Viewing a practice counts toward its popularity."""
        practice = repository.get_practice(practice_id)
        if practice is None:
            return json.dumps({
                "status": "not_found",
                "practice_id": practice_id,
                "message": "Practice not found.",
            })
        repository.increment_practice_popularity(practice_id)
        return json.dumps({"practice": practice.to_dict()})

    @mcp.tool
    async def get_recommended_practices(ctx: Context, user_id: str) -> str:
        """Practices linked to the user's top active insights.

        Falls back to the most popular practices when those insights link
        none.
        """
        insights = repository.list_insights(
            user_id, status=InsightStatus.ACTIVE.value, limit=RECOMMENDATION_INSIGHTS
        )
        linked = [pid for insight in insights for pid in insight.practice_ids]
        practices = repository.get_practices_by_ids(linked)
        source = "insights"
        if not practices:
            practices = repository.list_practices(limit=POPULAR_FALLBACK)
            source = "popular"
        logger.debug("Recommending %d %s practices to user %s", len(practices), source, user_id)
        return json.dumps({
            "source": source,
            "practices": [p.to_dict() for p in practices],
        })
