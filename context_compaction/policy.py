"""Model policy table and the compaction trigger decision."""

from __future__ import annotations

import logging
from typing import Any

from .types import CompactionConfig, NormalizedCompactionConfig

logger = logging.getLogger(__name__)

# Models that support compaction via the Responses API compact endpoint.
COMPACTION_SUPPORTED_MODELS: tuple[str, ...] = ("gpt-5.2",)

# (model-name substring, context window in tokens), checked in order; first match wins.
# Values should match real model limits so compaction triggers before the API rejects a request.
MODEL_CONTEXT_WINDOWS: tuple[tuple[str, int], ...] = (
    ("gpt-5.2", 400000),
    ("gpt-5.2-pro", 400000),
    ("gpt-5.2-codex", 400000),
)

DEFAULT_CONTEXT_WINDOW = 128000

DEFAULT_THRESHOLD_PERCENT = 0.70
DEFAULT_MIN_TOKENS_BEFORE_COMPACTION = 10000


def normalize_compaction_config(
    config: CompactionConfig | dict[str, Any] | None = None,
) -> NormalizedCompactionConfig:
    """Merge a user-facing config over the defaults.

    Raises:
        pydantic.ValidationError: If a value is out of range
    """
    if config is None:
        config = CompactionConfig()
    elif isinstance(config, dict):
        config = CompactionConfig.model_validate(config)

    return NormalizedCompactionConfig(
        enabled=config.enabled if config.enabled is not None else False,
        threshold_percent=(
            config.threshold_percent
            if config.threshold_percent is not None
            else DEFAULT_THRESHOLD_PERCENT
        ),
        min_tokens_before_compaction=(
            config.min_tokens_before_compaction
            if config.min_tokens_before_compaction is not None
            else DEFAULT_MIN_TOKENS_BEFORE_COMPACTION
        ),
        preserve_instructions=(
            config.preserve_instructions if config.preserve_instructions is not None else True
        ),
        compaction_prompt=config.compaction_prompt,
    )


def supports_compaction(model: str | None) -> bool:
    """Check if a model supports compaction."""
    if not model:
        return False
    lower_model = model.lower()
    return any(supported in lower_model for supported in COMPACTION_SUPPORTED_MODELS)


def get_context_window(model: str | None) -> int:
    """Get the context window size for a model, falling back to DEFAULT_CONTEXT_WINDOW."""
    lower_model = (model or "").lower()
    for key, window in MODEL_CONTEXT_WINDOWS:
        if key in lower_model:
            return window
    return DEFAULT_CONTEXT_WINDOW


def should_compact(current_tokens: int, model: str, config: NormalizedCompactionConfig) -> bool:
    """Decide whether a conversation of ``current_tokens`` should be compacted.

    All of the following must hold, checked in this order:

    1. Compaction is enabled
    2. The model supports compaction
    3. current_tokens >= min_tokens_before_compaction
    4. current_tokens >= context window * threshold_percent
    """
    if not config.enabled:
        logger.debug("Compaction disabled")
        return False

    if not supports_compaction(model):
        logger.debug("Model %s does not support compaction", model)
        return False

    if current_tokens < config.min_tokens_before_compaction:
        logger.debug(
            "Tokens %d below min threshold %d",
            current_tokens,
            config.min_tokens_before_compaction,
        )
        return False

    context_window = get_context_window(model)
    threshold = context_window * config.threshold_percent
    decision = current_tokens >= threshold

    logger.debug(
        "Token check: %d tokens, context window: %d, threshold: %.0f (%.0f%%), compact: %s",
        current_tokens,
        context_window,
        threshold,
        config.threshold_percent * 100,
        decision,
    )
    return decision
