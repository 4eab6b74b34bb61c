"""Chat assistant for exploring a served fact.

The user's conversation is sent to the LLM behind a single system prompt
that carries the fact being discussed.
"""

from collections.abc import AsyncIterator
from typing import Literal

from pydantic import BaseModel, Field

from onefact.core.logging import get_logger
from onefact.infrastructure.llm import LLMClient, LLMConfig
from onefact.services.collector.base import ProcessedFact
from onefact.services.facts import FactService

logger = get_logger(__name__)

SYSTEM_PROMPT = """You are an educational assistant in the OneFact app. \
Your role is to help users explore and understand interesting facts.

CURRENT FACT:
{content}

CATEGORY: {category}
SOURCE: {source}

INSTRUCTIONS:
1. Discuss this specific fact and give additional context.
2. Answer questions in a conversational, friendly manner.
3. If the user drifts to something unrelated, gently steer back to the fact.
4. Be accurate and cite sources when you can.
5. Suggest a follow-up question that deepens understanding.
6. Keep responses concise.

The user can already see the fact on screen."""


class ChatMessage(BaseModel):
    """One conversation turn."""

    role: Literal["user", "assistant", "system"]
    content: str = Field(..., min_length=1)


class FactChatService:
    """Answers questions about a fact with an LLM.

    Attributes:
        facts: Fact service used to resolve the fact under discussion
        llm: LLM client
        llm_config: Model and sampling settings
    """

    def __init__(self, facts: FactService, llm: LLMClient, llm_config: LLMConfig) -> None:
        self.facts = facts
        self.llm = llm
        self.llm_config = llm_config

    async def reply(self, fact_id: str | None, messages: list[ChatMessage]) -> ChatMessage:
        """Generate the assistant's next message.

        Args:
            fact_id: Fact under discussion (today's fact if None)
            messages: Conversation so far

        Returns:
            Assistant message

        Raises:
            FactNotFoundError: If the fact cannot be resolved
            LLMError: If the LLM call fails
        """
        fact = await self._resolve_fact(fact_id)
        response = await self.llm.complete(self.llm_config, self.build_messages(fact, messages))
        logger.info("Chat reply generated", fact_id=fact.id, model=response.model)
        return ChatMessage(role="assistant", content=response.content or "...")

    async def stream(self, fact_id: str | None, messages: list[ChatMessage]) -> AsyncIterator[str]:
        """Stream the assistant's next message as text chunks.

        The fact is resolved before the first chunk, so lookup failures
        surface before streaming begins.
        """
        fact = await self._resolve_fact(fact_id)
        payload = self.build_messages(fact, messages)
        logger.info("Chat stream started", fact_id=fact.id)
        return self.llm.stream(self.llm_config, payload)

    @staticmethod
    def build_messages(fact: ProcessedFact, messages: list[ChatMessage]) -> list[dict[str, str]]:
        """Prepend the system prompt; client-supplied system turns are dropped."""
        system = SYSTEM_PROMPT.format(
            content=fact.content,
            category=fact.category or "General",
            source=fact.source,
        )
        return [{"role": "system", "content": system}] + [
            {"role": m.role, "content": m.content} for m in messages if m.role != "system"
        ]

    async def _resolve_fact(self, fact_id: str | None) -> ProcessedFact:
        if fact_id and fact_id != "latest":
            return await self.facts.get_fact(fact_id)
        return await self.facts.find_daily_fact()


__all__ = ["ChatMessage", "FactChatService", "SYSTEM_PROMPT"]
