"""Infrastructure layer components.

External API clients shared by the services: the pooled HTTP client used
by the fact sources and the LiteLLM client used by the chat assistant.
"""

from onefact.infrastructure.http_client import HTTPClient
from onefact.infrastructure.llm import LLMClient, LLMConfig, LLMResponse

__all__ = ["HTTPClient", "LLMClient", "LLMConfig", "LLMResponse"]
