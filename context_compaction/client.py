"""Client for the Responses API compact endpoint.

CompactionClient estimates the size of a conversation, decides whether it
is close enough to the model's context window to be worth compacting, and
if so sends it to ``{base_url}/responses/compact``. Any failure of that
call is logged and reported as "not compacted" so the caller can carry on
with the original conversation.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from typing import Any

import httpx
from dotenv import load_dotenv

from .convert import build_compaction_request
from .policy import normalize_compaction_config, should_compact
from .tokens import estimate_conversation_tokens, estimate_tokens
from .tracing import compaction_span, record_failure, record_success
from .types import CompactionConfig, CompactionResult, NormalizedCompactionConfig

logger = logging.getLogger(__name__)

load_dotenv()

DEFAULT_BASE_URL = "https://api.openai.com/v1"
COMPACT_PATH = "/responses/compact"
DEFAULT_TIMEOUT_SECONDS = 300.0


class CompactionAPIError(Exception):
    """
    Exception raised when the compact endpoint returns a non-2xx response.
    """

    def __init__(self, status_code: int, body: str | None = None):
        self.status_code = status_code
        self.body = body
        super().__init__(f"Compact API error: {status_code} - {body}")


def _configure_file_logging(log_file: str) -> None:
    """Send this package's logs to a file as well, leaving the root logger untouched."""
    package_logger = logging.getLogger("context_compaction")
    path = os.path.abspath(log_file)
    for existing in package_logger.handlers:
        if isinstance(existing, logging.FileHandler) and existing.baseFilename == path:
            return
    handler = logging.FileHandler(path, mode="a")
    handler.setLevel(logging.INFO)
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)-8s %(name)s: %(message)s"))
    package_logger.addHandler(handler)
    if package_logger.level == logging.NOTSET or package_logger.level > logging.INFO:
        package_logger.setLevel(logging.INFO)


class CompactionClient:
    """Compacts conversations through the Responses API when they near the context limit.

    The client only holds configuration fixed at construction, so one
    instance can serve concurrent ``compact()`` calls.

    Usage::

        client = CompactionClient(model="gpt-5.2", config={"enabled": True})
        result = await client.compact(messages, instructions=system_prompt)
        if result.compacted:
            next_input = result.compacted_input
    """

    def __init__(
        self,
        model: str,
        api_key: str | None = None,
        base_url: str | None = None,
        config: CompactionConfig | dict[str, Any] | None = None,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        log_file: str | None = None,
    ):
        """
        Initialize the compaction client.

        Args:
            model: Model identifier sent with the request and used for policy lookups
            api_key: API key. If not provided, uses OPENAI_API_KEY env var.
            base_url: Base URL of the API. If not provided, uses OPENAI_BASE_URL env var
                     or OpenAI's URL.
            config: Compaction config, merged over the defaults
            http_client: Optional httpx.AsyncClient to reuse. It is not closed by this client.
            timeout: Timeout in seconds for requests made with an internally created client
            log_file: Optional file to also write this package's logs to
        """
        if log_file:
            _configure_file_logging(log_file)

        self._api_key = api_key or os.getenv("OPENAI_API_KEY")
        if not self._api_key:
            raise ValueError(
                "API key not provided. Set OPENAI_API_KEY environment variable "
                "or pass api_key parameter."
            )

        self._base_url = (base_url or os.getenv("OPENAI_BASE_URL") or DEFAULT_BASE_URL).rstrip("/")
        self._model = model
        self._config = normalize_compaction_config(config)
        self._http_client = http_client
        self._timeout = timeout

    @property
    def model(self) -> str:
        return self._model

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def config(self) -> NormalizedCompactionConfig:
        return self._config

    @property
    def compact_url(self) -> str:
        return f"{self._base_url}{COMPACT_PATH}"

    def _get_headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self._api_key}",
        }

    def should_compact(self, current_tokens: int) -> bool:
        """Check if a conversation of ``current_tokens`` should be compacted."""
        return should_compact(current_tokens, self._model, self._config)

    def estimate_conversation_tokens(
        self, messages: Iterable[Any], instructions: str | None = None
    ) -> int:
        """Estimate total tokens in a conversation."""
        return estimate_conversation_tokens(messages, instructions)

    async def compact(
        self, messages: Iterable[Any], instructions: str | None = None
    ) -> CompactionResult:
        """Compact the conversation if it is over the configured threshold.

        1. Estimate tokens of messages + instructions
        2. If should_compact is False -> not compacted, no request made
        3. Otherwise convert to Responses input and call the compact endpoint
        4. On any failure -> log error, not compacted
        5. On success -> compacted, with the server's token count if reported,
           else a local estimate of the returned output

        Never raises for a failed remote call.
        """
        messages = list(messages)
        original_tokens = self.estimate_conversation_tokens(messages, instructions)

        if not self.should_compact(original_tokens):
            return CompactionResult(compacted=False, original_tokens=original_tokens)

        logger.debug(
            "Compacting conversation: %d tokens, model: %s", original_tokens, self._model
        )

        with compaction_span(self._model, original_tokens) as span:
            try:
                body = build_compaction_request(
                    self._model,
                    messages,
                    instructions=instructions,
                    preserve_instructions=self._config.preserve_instructions,
                )
                data = await self._request_compaction(body)
                output = data["output"]
                compacted_tokens = self._compacted_token_count(data, output)
            except Exception as err:
                logger.error("Compaction failed: %s", err)
                record_failure(span, err)
                return CompactionResult(compacted=False, original_tokens=original_tokens)

            record_success(span, compacted_tokens)

        logger.debug("Compaction complete: %d -> %d tokens", original_tokens, compacted_tokens)

        return CompactionResult(
            compacted=True,
            compacted_input=output,
            original_tokens=original_tokens,
            compacted_tokens=compacted_tokens,
        )

    async def _request_compaction(self, body: dict[str, Any]) -> dict[str, Any]:
        """POST to the compact endpoint and return the decoded response body.

        Raises:
            CompactionAPIError: If the response status is not 2xx
            httpx.HTTPError: On transport failures
            ValueError: If the body is not JSON or is missing the output list
        """
        if self._http_client is not None:
            response = await self._http_client.post(
                self.compact_url, json=body, headers=self._get_headers()
            )
        else:
            async with httpx.AsyncClient(timeout=httpx.Timeout(self._timeout)) as client:
                response = await client.post(
                    self.compact_url, json=body, headers=self._get_headers()
                )

        if not response.is_success:
            raise CompactionAPIError(response.status_code, response.text)

        data = response.json()
        if not isinstance(data, dict):
            raise ValueError("Compact API response is not a JSON object")
        if not isinstance(data.get("output"), list):
            raise ValueError("Compact API response has no output list")
        return data

    @staticmethod
    def _compacted_token_count(data: dict[str, Any], output: list[Any]) -> int:
        # The server's own accounting wins over the local estimate when present.
        usage = data.get("usage")
        total_tokens = usage.get("total_tokens") if isinstance(usage, dict) else None
        if isinstance(total_tokens, (int, float)) and not isinstance(total_tokens, bool):
            if total_tokens > 0:
                return int(total_tokens)
        return estimate_tokens(output)


def create_compaction_client(**options: Any) -> CompactionClient:
    """Create a compaction client instance."""
    return CompactionClient(**options)
