"""Request and response models for the HTTP API."""

from datetime import datetime

from pydantic import BaseModel, Field

from onefact.services.chat import ChatMessage
from onefact.services.collector.base import CollectionRun, ProcessedFact


class FactCreate(BaseModel):
    """Admin request to create a fact."""

    content: str = Field(..., min_length=1)
    category: str = ""
    tags: list[str] = Field(default_factory=list)
    urls: list[str] = Field(default_factory=list)
    metadata: dict[str, str] = Field(default_factory=dict)
    source: str = "admin"
    publish_date: datetime | None = None


class FactUpdate(BaseModel):
    """Admin request to update a fact. Omitted fields are left unchanged."""

    content: str | None = Field(default=None, min_length=1)
    category: str | None = None
    tags: list[str] | None = None
    urls: list[str] | None = None
    metadata: dict[str, str] | None = None
    verified: bool | None = None
    publish_date: datetime | None = None


class FactList(BaseModel):
    """A page of facts."""

    facts: list[ProcessedFact]
    count: int


class CategoryList(BaseModel):
    categories: list[str]


class CollectionStatus(BaseModel):
    """Scheduler state and the most recent pass."""

    running: bool
    interval_seconds: float
    pass_count: int
    last_run: CollectionRun | None = None


class ChatRequest(BaseModel):
    """Chat turn request.

    Attributes:
        fact_id: Fact under discussion ("latest" or omitted for today's fact)
        messages: Conversation so far
    """

    fact_id: str | None = None
    messages: list[ChatMessage] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    """Body returned for handled application errors."""

    error_type: str
    message: str
    context: dict[str, object] = Field(default_factory=dict)


__all__ = [
    "CategoryList",
    "ChatRequest",
    "CollectionStatus",
    "ErrorResponse",
    "FactCreate",
    "FactList",
    "FactUpdate",
]
