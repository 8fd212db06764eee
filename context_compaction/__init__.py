__version__ = "0.1.0"

from .client import (
    COMPACT_PATH,
    DEFAULT_BASE_URL,
    CompactionAPIError,
    CompactionClient,
    create_compaction_client,
)
from .convert import (
    build_compaction_request,
    classify_content_item,
    convert_content_item,
    convert_to_responses_input,
    map_role,
)
from .policy import (
    COMPACTION_SUPPORTED_MODELS,
    DEFAULT_CONTEXT_WINDOW,
    MODEL_CONTEXT_WINDOWS,
    get_context_window,
    normalize_compaction_config,
    should_compact,
    supports_compaction,
)
from .tokens import (
    IMAGE_TOKEN_ESTIMATE,
    estimate_conversation_tokens,
    estimate_message_tokens,
    estimate_tokens,
    is_base64_image_data,
)
from .types import (
    CompactionConfig,
    CompactionResult,
    ContentKind,
    Message,
    NormalizedCompactionConfig,
)

__all__ = [
    "COMPACT_PATH",
    "COMPACTION_SUPPORTED_MODELS",
    "DEFAULT_BASE_URL",
    "DEFAULT_CONTEXT_WINDOW",
    "IMAGE_TOKEN_ESTIMATE",
    "MODEL_CONTEXT_WINDOWS",
    "CompactionAPIError",
    "CompactionClient",
    "CompactionConfig",
    "CompactionResult",
    "ContentKind",
    "Message",
    "NormalizedCompactionConfig",
    "build_compaction_request",
    "classify_content_item",
    "convert_content_item",
    "convert_to_responses_input",
    "create_compaction_client",
    "estimate_conversation_tokens",
    "estimate_message_tokens",
    "estimate_tokens",
    "get_context_window",
    "is_base64_image_data",
    "map_role",
    "normalize_compaction_config",
    "should_compact",
    "supports_compaction",
]
