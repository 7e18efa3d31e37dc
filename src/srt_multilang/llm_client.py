"""LLM API client utilities."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, List, Dict, Optional
from enum import Enum

from openai import (
    AsyncOpenAI,
    APIConnectionError,
    RateLimitError,
    AuthenticationError,
    BadRequestError,
    APIStatusError,
)

from .config import TranslatorConfig
from .errors import BackendUnavailable, MissingCredential

logger = logging.getLogger(__name__)

# (prompt_text, model_identifier) -> response_text
TranslationBackend = Callable[[str, str], Awaitable[str]]


class APIErrorType(Enum):
    """API error categories."""
    RATE_LIMIT = "rate_limit"      # 429, retryable
    CONNECTION = "connection"      # network, retryable
    AUTH = "auth"                  # 401
    BAD_REQUEST = "bad_request"    # 400
    SERVER = "server"              # 5xx, retryable
    UNKNOWN = "unknown"


def classify_error(error: Exception) -> tuple[APIErrorType, bool]:
    """
    Classify an API error and decide whether it is worth retrying.

    Returns:
        (error type, retryable)
    """
    if isinstance(error, RateLimitError):
        return APIErrorType.RATE_LIMIT, True
    elif isinstance(error, APIConnectionError):
        return APIErrorType.CONNECTION, True
    elif isinstance(error, AuthenticationError):
        return APIErrorType.AUTH, False
    elif isinstance(error, BadRequestError):
        return APIErrorType.BAD_REQUEST, False
    elif isinstance(error, APIStatusError):
        if getattr(error, 'status_code', 0) >= 500:
            return APIErrorType.SERVER, True
        return APIErrorType.UNKNOWN, False
    else:
        return APIErrorType.UNKNOWN, False


def retry_delay(error_type: APIErrorType, attempt: int) -> int:
    """Backoff in seconds before retry number ``attempt + 1``."""
    if error_type == APIErrorType.RATE_LIMIT:
        return min(2 ** (attempt + 2), 60)  # 4, 8, 16... max 60
    return 2 ** (attempt + 1)  # 2, 4, 8


async def call_llm_async(
    client: AsyncOpenAI,
    model: str,
    messages: List[Dict[str, str]],
    temperature: float = 0.3,
    max_retries: int = 1,
) -> str:
    """
    Make async call to LLM API.

    Args:
        client: AsyncOpenAI client instance
        model: Model name to use
        messages: List of message dictionaries
        temperature: Sampling temperature
        max_retries: Total attempts; 1 means a single request without retry

    Returns:
        Response content as string

    Raises:
        BackendUnavailable: transport/service error, or an empty response
    """
    last_error: Optional[Exception] = None
    attempts = max(max_retries, 1)

    for attempt in range(attempts):
        try:
            response = await client.chat.completions.create(
                model=model,
                messages=messages,
                temperature=temperature,
            )
        except Exception as e:
            last_error = e
            error_type, retryable = classify_error(e)

            if not retryable or attempt + 1 >= attempts:
                logger.error(f"Backend request failed ({error_type.value}): {e}")
                break

            delay = retry_delay(error_type, attempt)
            logger.warning(
                f"Retryable error ({error_type.value}): {e}. "
                f"Retry {attempt + 1}/{attempts - 1} in {delay}s..."
            )
            await asyncio.sleep(delay)
            continue

        content = response.choices[0].message.content if response.choices else None
        if not content or not content.strip():
            raise BackendUnavailable("Empty response from translation backend")
        return content

    raise BackendUnavailable(
        f"Failed to get a valid response from the AI model: {last_error}"
    ) from last_error


class OpenAIBackend:
    """Translation backend talking to an OpenAI-compatible chat endpoint."""

    def __init__(self, client: AsyncOpenAI, max_retries: int = 1, temperature: float = 0.3):
        self.client = client
        self.max_retries = max_retries
        self.temperature = temperature

    async def __call__(self, prompt: str, model: str) -> str:
        return await call_llm_async(
            self.client,
            model,
            [{"role": "user", "content": prompt}],
            temperature=self.temperature,
            max_retries=self.max_retries,
        )


def create_client(
    api_key: str,
    base_url: str = "https://api.deepseek.com",
    timeout: float = 60.0
) -> AsyncOpenAI:
    """
    Create an AsyncOpenAI client.

    Retries are handled by ``call_llm_async``, so the SDK's own retry
    loop is disabled.
    """
    return AsyncOpenAI(
        api_key=api_key,
        base_url=base_url,
        timeout=timeout,
        max_retries=0,
    )


def create_backend(config: TranslatorConfig) -> OpenAIBackend:
    """Build the backend for ``config``; fails fast without an API key."""
    if not config.api_key:
        raise MissingCredential()

    client = create_client(config.api_key, config.base_url, config.request_timeout)
    logger.debug(f"Using backend {config.base_url} with model {config.model_name}")
    return OpenAIBackend(client, max_retries=config.max_retries)
