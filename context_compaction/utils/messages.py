from typing import Any


def get_message_role(message: Any) -> str:
    """
    Read the role of a message.

    Accepts dicts and objects, using ``role`` first and the LangChain-style
    ``type`` as a fallback.

    Args:
        message: Message dict or object

    Returns:
        Role string, or an empty string when none is present
    """
    if isinstance(message, dict):
        role = message.get("role") or message.get("type")
    else:
        role = getattr(message, "role", None) or getattr(message, "type", None)
    return role if isinstance(role, str) else ""


def get_message_content(message: Any) -> Any:
    """
    Read the content payload of a message.

    Args:
        message: Message dict or object

    Returns:
        The content (string, list of content items, or anything else the caller stored)
    """
    if isinstance(message, dict):
        return message.get("content")
    return getattr(message, "content", None)
