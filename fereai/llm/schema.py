# fereai/llm/schema.py
from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


def local_timestamp() -> str:
    """Current instant in the local time zone, ISO-8601 with offset."""
    return datetime.now().astimezone().isoformat(timespec="seconds")


class ChatRequest(BaseModel):
    """Outbound payload, sent once per connection."""

    agent: str
    message: str
    stream: bool = True
    user_time: str = Field(default_factory=local_timestamp)
    x_hours: int = Field(1, ge=0)
    parent: Union[int, str] = 0

    @field_validator("parent", mode="before")
    @classmethod
    def _parent(cls, v):
        if v is None or v == "0":
            return 0
        return v

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(include={"agent", "stream", "user_time", "x_hours", "parent", "message"})


class _Envelope(BaseModel):
    model_config = ConfigDict(extra="allow")

    chat_id: Optional[Any] = None
    agent_api_name: Optional[Any] = None
    query_summary: Optional[Any] = None
    agent_credits: Optional[Any] = None
    credits_available: Optional[Any] = None


class ChatEnvelope(_Envelope):
    answer: str
    representation: Optional[Any] = None


class SummaryEnvelope(_Envelope):
    summary: str
    agent_version: Optional[Any] = None
    is_summary: Optional[Any] = True
