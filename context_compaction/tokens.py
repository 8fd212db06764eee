"""Token estimation utilities for context compaction.

Uses a simple heuristic: ~4 characters per token. This is an approximation,
not a tokenizer. Payloads that look like binary data (data-URI images,
long base64 runs) and image/file content items are charged a fixed cost
instead, so embedded attachments are not counted as if they were prose.
"""

from __future__ import annotations

import math
import re
from collections.abc import Iterable
from typing import Any

from .convert import classify_content_item
from .types import ContentKind
from .utils import get_message_content

# Fixed cost for an image or file attachment. Providers bill images by
# detail level rather than payload size; ~1000 is the high-detail ceiling.
IMAGE_TOKEN_ESTIMATE = 1000

CHARS_PER_TOKEN = 4

_BASE64_PREFIX_LENGTH = 100
_BASE64_MIN_LENGTH = 1000
_BASE64_RE = re.compile(r"[A-Za-z0-9+/=]+")

_ATTACHMENT_KINDS = (
    ContentKind.IMAGE_URL,
    ContentKind.INPUT_IMAGE,
    ContentKind.FILE,
    ContentKind.INPUT_FILE,
)
_TEXT_KINDS = (ContentKind.TEXT, ContentKind.INPUT_TEXT)


def is_base64_image_data(text: str) -> bool:
    """Return True if the string looks like an image or other binary payload."""
    if text.startswith("data:image/"):
        return True
    return len(text) > _BASE64_MIN_LENGTH and bool(
        _BASE64_RE.fullmatch(text[:_BASE64_PREFIX_LENGTH])
    )


def _estimate_text(text: str) -> int:
    return math.ceil(len(text) / CHARS_PER_TOKEN)


def estimate_tokens(content: Any) -> int:
    """Estimate the token count of message content of any shape.

    Strings are measured (or charged the fixed image cost when they look
    binary), lists are treated as content items, and dicts are walked
    recursively. Anything else counts as zero.
    """
    if isinstance(content, str):
        if is_base64_image_data(content):
            return IMAGE_TOKEN_ESTIMATE
        return _estimate_text(content)
    if isinstance(content, list):
        return _estimate_content_items(content)
    if isinstance(content, dict):
        return _estimate_object(content)
    return 0


def _estimate_content_items(items: list[Any]) -> int:
    total = 0
    for item in items:
        # Nested lists are walked value by value; bare scalars in a content list are not counted.
        if isinstance(item, list):
            total += _estimate_values(item)
            continue
        if not isinstance(item, dict):
            continue
        kind = classify_content_item(item)
        if kind in _ATTACHMENT_KINDS:
            total += IMAGE_TOKEN_ESTIMATE
        elif kind in _TEXT_KINDS:
            text = item.get("text") or item.get("content") or ""
            if isinstance(text, str):
                total += _estimate_text(text)
            else:
                total += estimate_tokens(text)
        else:
            total += _estimate_object(item)
    return total


def _estimate_object(obj: dict[str, Any]) -> int:
    """Estimate a generic mapping, charging binary-looking values the fixed cost."""
    return _estimate_values(obj.values())


def _estimate_values(values: Iterable[Any]) -> int:
    total = 0
    for value in values:
        if isinstance(value, str):
            if is_base64_image_data(value):
                total += IMAGE_TOKEN_ESTIMATE
            else:
                total += _estimate_text(value)
        elif isinstance(value, (dict, list)):
            total += estimate_tokens(value)
    return total


def estimate_message_tokens(message: Any) -> int:
    """Estimate token count for a single conversation message."""
    return estimate_tokens(get_message_content(message))


def estimate_conversation_tokens(messages: Iterable[Any], instructions: str | None = None) -> int:
    """Estimate total tokens for a conversation plus optional system instructions."""
    total = 0
    if instructions:
        total += estimate_tokens(instructions)
    for message in messages:
        total += estimate_message_tokens(message)
    return total
