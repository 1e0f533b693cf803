# fereai/agent/types.py
"""
Type definitions shared by the router, session and adapter.

- Agent identifiers
- Routes (closed set of endpoint templates)
- Per-model chat settings
- Normalized generate results
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal

# Core type aliases
AgentId = Literal["ProAgent", "MarketAnalyzerAgent", "Casso"]
FinishReason = Literal["stop"]

KNOWN_AGENTS: tuple[str, ...] = ("ProAgent", "MarketAnalyzerAgent", "Casso")


class Route(Enum):
    """Endpoint path templates; {user_id} is filled in by the router."""

    PRO_CHAT = "chat/v2/ws/{user_id}"
    MARKET_CHAT = "chat/v1/ws/{user_id}"
    MARKET_SUMMARY = "ws/generate_summary/{user_id}"

    @property
    def is_summary(self) -> bool:
        return self is Route.MARKET_SUMMARY

    @property
    def text_field(self) -> str:
        """Envelope field holding the result text for this route."""
        return "summary" if self.is_summary else "answer"


@dataclass
class ChatSettings:
    """Per-model request settings."""

    context_duration: int = 1
    parent_id: int | str | None = None
    stream: bool = True


@dataclass
class Usage:
    prompt_tokens: int = 0
    completion_tokens: int = 0


@dataclass
class GenerateResult:
    """Normalized completion result."""

    text: str
    route: Route
    finish_reason: FinishReason = "stop"
    usage: Usage = field(default_factory=Usage)
    raw_call: dict[str, Any] = field(default_factory=dict)
    raw_response: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary format."""
        return {
            "text": self.text,
            "finish_reason": self.finish_reason,
            "usage": self.usage.__dict__,
            "route": self.route.name,
            "raw_response": self.raw_response,
        }
