"""
FereAI provider: routes generate-text requests to the FereAI websocket backend.

Main components:
- create_fereai / FereAIProvider / FereAIChatModel: generic completion interface
- route / build_url: agent + prompt -> endpoint
- WebSocketSession: one socket, one outcome
- adapt: envelope -> GenerateResult
"""

from .agent.router import build_url, route
from .agent.types import ChatSettings, GenerateResult, Route, Usage
from .config import ProviderConfig, Settings, get_settings, resolve_config
from .errors import (
    EmptyResponseError,
    FereAIError,
    FrameDecodeError,
    MalformedResponseError,
    MissingConfigurationError,
    TransportError,
    UnsupportedAgentError,
    UnsupportedFunctionalityError,
)
from .llm.adapter import adapt
from .llm.provider import FereAIChatModel, FereAIProvider, create_fereai
from .llm.session import SessionState, WebSocketSession

__all__ = [
    # Main entry points
    "create_fereai",
    "FereAIProvider",
    "FereAIChatModel",
    # Core pieces
    "route",
    "build_url",
    "WebSocketSession",
    "SessionState",
    "adapt",
    # Types
    "ChatSettings",
    "GenerateResult",
    "Route",
    "Usage",
    # Config
    "Settings",
    "ProviderConfig",
    "get_settings",
    "resolve_config",
    # Errors
    "FereAIError",
    "MissingConfigurationError",
    "UnsupportedAgentError",
    "TransportError",
    "EmptyResponseError",
    "MalformedResponseError",
    "FrameDecodeError",
    "UnsupportedFunctionalityError",
]
