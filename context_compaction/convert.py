"""Conversion of conversation messages to the Responses API input format.

Chat-style content items (``text``, ``image_url``, ``file``) are rewritten
to their Responses API counterparts (``input_text``, ``input_image``,
``input_file``). Items already in Responses format, and any tag this
module does not know (provider media, documents, inline data, ...), are
passed through unchanged so nothing is dropped.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from .types import ContentKind
from .utils import get_message_content, get_message_role

logger = logging.getLogger(__name__)

HUMAN_ROLES = ("human", "user")
AI_ROLES = ("ai", "assistant")

_KNOWN_KINDS = {kind.value: kind for kind in ContentKind if kind is not ContentKind.UNKNOWN}


def classify_content_item(item: dict[str, Any]) -> ContentKind:
    """Classify a content item by its ``type`` tag, UNKNOWN when unrecognized."""
    tag = item.get("type")
    if isinstance(tag, str):
        return _KNOWN_KINDS.get(tag, ContentKind.UNKNOWN)
    return ContentKind.UNKNOWN


def map_role(role: str) -> str:
    """Map an internal role to a Responses API role."""
    if role in HUMAN_ROLES:
        return "user"
    if role in AI_ROLES:
        return "assistant"
    return "system"


def convert_content_item(item: Any) -> Any:
    """Convert a single content item to Responses API format.

    Returns a new dict for converted items; the original item otherwise.
    """
    if not isinstance(item, dict):
        return item

    kind = classify_content_item(item)

    if kind is ContentKind.TEXT:
        return {"type": "input_text", "text": item.get("text")}

    if kind is ContentKind.IMAGE_URL:
        image_url = item.get("image_url")
        if isinstance(image_url, dict) and image_url.get("url"):
            image_url = image_url["url"]
        return {"type": "input_image", "image_url": image_url}

    if kind is ContentKind.FILE:
        file = item.get("file")
        if not isinstance(file, dict):
            file = {}
        return {
            "type": "input_file",
            "filename": file.get("filename"),
            "file_data": file.get("file_data"),
        }

    # input_* items are already in Responses format; unknown tags pass through.
    return item


def convert_to_responses_input(messages: Iterable[Any]) -> list[dict[str, Any]]:
    """Convert conversation messages to Responses API ``input`` records.

    Args:
        messages: Message dicts, Message models, or objects with role/type and content

    Returns:
        List of ``{"role", "content"}`` dicts. The caller's messages and
        content lists are never modified.
    """
    converted: list[dict[str, Any]] = []

    for message in messages:
        role = map_role(get_message_role(message))
        content = get_message_content(message)

        if isinstance(content, str):
            converted.append({"role": role, "content": content})
        elif isinstance(content, list):
            converted.append(
                {"role": role, "content": [convert_content_item(item) for item in content]}
            )
        else:
            logger.debug(
                "Skipping message with unsupported content type %s", type(content).__name__
            )

    return converted


def build_compaction_request(
    model: str,
    messages: Iterable[Any],
    instructions: str | None = None,
    preserve_instructions: bool = True,
) -> dict[str, Any]:
    """Build the JSON body for the compact endpoint.

    Instructions are attached at the top level, never folded into ``input``,
    and only when ``preserve_instructions`` is set.
    """
    body: dict[str, Any] = {
        "model": model,
        "input": convert_to_responses_input(messages),
    }
    if instructions and preserve_instructions:
        body["instructions"] = instructions
    return body
