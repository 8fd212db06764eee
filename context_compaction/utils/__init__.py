"""Utility functions for context compaction."""

from .messages import get_message_content, get_message_role

__all__ = [
    "get_message_content",
    "get_message_role",
]
