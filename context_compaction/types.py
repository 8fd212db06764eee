"""Types for context compaction.

- CompactionConfig: user-facing, every field optional
- NormalizedCompactionConfig: defaults merged in, validated, immutable
- CompactionResult: outcome of a single compact() call
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ContentKind(str, Enum):
    """Classification of a content item by its ``type`` tag.

    UNKNOWN covers every tag not listed here (and untagged items); such
    items are estimated generically and passed through the converter as-is.
    """

    TEXT = "text"
    IMAGE_URL = "image_url"
    FILE = "file"
    INPUT_TEXT = "input_text"
    INPUT_IMAGE = "input_image"
    INPUT_FILE = "input_file"
    UNKNOWN = "unknown"


class Message(BaseModel):
    """A role-tagged conversation message."""

    role: str
    content: str | list[dict[str, Any]] = ""


class CompactionConfig(BaseModel):
    """User-facing compaction configuration."""

    enabled: bool | None = None
    threshold_percent: float | None = None
    min_tokens_before_compaction: int | None = None
    preserve_instructions: bool | None = None
    compaction_prompt: str | None = None


class NormalizedCompactionConfig(BaseModel):
    """Internal - all fields resolved to concrete values."""

    model_config = ConfigDict(frozen=True)

    enabled: bool
    threshold_percent: float = Field(gt=0, le=1)
    min_tokens_before_compaction: int = Field(ge=0)
    preserve_instructions: bool
    compaction_prompt: str | None = None


class CompactionResult(BaseModel):
    """Result from CompactionClient.compact."""

    compacted: bool
    original_tokens: int
    compacted_tokens: int | None = None
    compacted_input: list[Any] | None = None

    @model_validator(mode="after")
    def check_compacted_fields(self) -> CompactionResult:
        if self.compacted and (self.compacted_tokens is None or self.compacted_input is None):
            raise ValueError("compacted results require compacted_tokens and compacted_input")
        return self
