"""LLM client abstraction using LiteLLM.

This module provides a unified interface for LLM calls across different providers
(Anthropic, OpenAI, etc.) using LiteLLM as the backend. Both one-shot and
streamed completions are supported.
"""

from collections.abc import AsyncIterator
from dataclasses import dataclass
from typing import Any

import litellm
from litellm import acompletion

from onefact.core.config import get_config
from onefact.core.exceptions import LLMError
from onefact.core.logging import get_logger

logger = get_logger(__name__)

# Drop unsupported params for each provider
litellm.drop_params = True


@dataclass
class LLMConfig:
    """LLM configuration for a specific use case.

    Attributes:
        model: Model identifier (e.g., "anthropic/claude-3-5-haiku-20241022")
        max_tokens: Maximum tokens in response
        temperature: Sampling temperature
        timeout: Request timeout in seconds
    """

    model: str
    max_tokens: int = 1000
    temperature: float = 0.7
    timeout: int = 60


@dataclass
class LLMResponse:
    """Standardized LLM response.

    Attributes:
        content: Generated text content
        model: Model used for generation
        usage: Token usage statistics
        raw_response: Raw response from provider
    """

    content: str
    model: str
    usage: dict[str, int]
    raw_response: Any = None


class LLMClient:
    """Unified LLM client using LiteLLM.

    Model naming convention:
        - Anthropic: "anthropic/claude-3-5-haiku-20241022"
        - OpenAI: "openai/gpt-4o-mini"

    Example:
        >>> client = LLMClient()
        >>> response = await client.complete(
        ...     config=LLMConfig(model="anthropic/claude-3-5-haiku-20241022"),
        ...     messages=[{"role": "user", "content": "Hello!"}]
        ... )
        >>> print(response.content)
    """

    def __init__(self) -> None:
        """Initialize LLM client with API keys from config."""
        config = get_config()
        if config.anthropic_api_key:
            litellm.api_key = config.anthropic_api_key
        if config.openai_api_key:
            litellm.openai_key = config.openai_api_key

        logger.info("LLMClient initialized")

    async def complete(
        self,
        config: LLMConfig,
        messages: list[dict[str, str]],
        **kwargs: Any,
    ) -> LLMResponse:
        """Generate completion from LLM.

        Args:
            config: LLM configuration
            messages: List of message dicts with 'role' and 'content'
            **kwargs: Additional parameters passed to the model

        Returns:
            LLMResponse with generated content

        Raises:
            LLMError: If generation fails
        """
        try:
            logger.debug(
                "LLM request",
                model=config.model,
                max_tokens=config.max_tokens,
                message_count=len(messages),
            )

            response = await acompletion(
                model=config.model,
                messages=messages,
                max_tokens=config.max_tokens,
                temperature=config.temperature,
                timeout=config.timeout,
                **kwargs,
            )

            content = response.choices[0].message.content or ""

            usage = {}
            if response.usage:
                usage = {
                    "prompt_tokens": response.usage.prompt_tokens or 0,
                    "completion_tokens": response.usage.completion_tokens or 0,
                    "total_tokens": response.usage.total_tokens or 0,
                }

            logger.debug(
                "LLM response",
                model=response.model,
                content_length=len(content),
                usage=usage,
            )

            return LLMResponse(
                content=content,
                model=response.model or config.model,
                usage=usage,
                raw_response=response,
            )

        except Exception as e:
            logger.error(
                "LLM request failed",
                model=config.model,
                error=str(e),
                exc_info=True,
            )
            raise LLMError(f"LLM request failed: {e}", model=config.model) from e

    async def stream(
        self,
        config: LLMConfig,
        messages: list[dict[str, str]],
        **kwargs: Any,
    ) -> AsyncIterator[str]:
        """Stream completion text chunks from the LLM.

        Args:
            config: LLM configuration
            messages: List of message dicts with 'role' and 'content'
            **kwargs: Additional parameters passed to the model

        Yields:
            Non-empty text deltas in arrival order

        Raises:
            LLMError: If the request or the stream fails
        """
        logger.debug("LLM stream request", model=config.model, message_count=len(messages))
        try:
            response = await acompletion(
                model=config.model,
                messages=messages,
                max_tokens=config.max_tokens,
                temperature=config.temperature,
                timeout=config.timeout,
                stream=True,
                **kwargs,
            )
            async for chunk in response:
                delta = chunk.choices[0].delta.content if chunk.choices else None
                if delta:
                    yield delta
        except Exception as e:
            logger.error(
                "LLM stream failed",
                model=config.model,
                error=str(e),
                exc_info=True,
            )
            raise LLMError(f"LLM stream failed: {e}", model=config.model) from e


__all__ = [
    "LLMClient",
    "LLMConfig",
    "LLMResponse",
    "LLMError",
]
