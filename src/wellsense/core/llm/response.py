"""Tolerant extraction of a JSON object from free-form LLM output."""

from __future__ import annotations

import json
import re
from typing import Any

_TRAILING_COMMA = re.compile(r",\s*([}\]])")


class ReplyParseError(Exception):
    """Raised when an LLM reply does not contain parseable JSON."""


def extract_json_block(text: str) -> str:
    """Slice ``text`` to the span from the first ``{`` to the last ``}``.

    Models often wrap JSON in prose or ```json fences. If no such span
    exists the text is returned unchanged.
    """
    first = text.find("{")
    last = text.rfind("}")
    if first != -1 and last != -1 and last > first:
        return text[first:last + 1]
    return text


def strip_trailing_commas(text: str) -> str:
    """Remove commas that directly precede a closing brace or bracket."""
    return _TRAILING_COMMA.sub(r"\1", text)


def parse_json_reply(text: str) -> Any:
    """Parse an LLM reply into Python data.

    Raises:
        ReplyParseError: If no JSON can be decoded from the reply.
    """
    if not text:
        raise ReplyParseError("Empty reply")
    candidate = strip_trailing_commas(extract_json_block(text))
    try:
        return json.loads(candidate)
    except json.JSONDecodeError as exc:
        raise ReplyParseError(f"Reply is not valid JSON: {exc}") from exc
