# fereai/errors.py
"""Exception taxonomy for the FereAI provider."""
from __future__ import annotations


class FereAIError(RuntimeError):
    """Base error raised for FereAI failures."""


class MissingConfigurationError(FereAIError):
    """Raised before routing when api key, user id or host is absent."""

    def __init__(self, missing: list[str] | tuple[str, ...]):
        self.missing = tuple(missing)
        super().__init__(f"Missing required API configuration: {', '.join(self.missing)}")


class UnsupportedAgentError(FereAIError):
    """Raised when an agent identifier has no endpoint."""

    def __init__(self, agent: str):
        self.agent = agent
        super().__init__(f"Unsupported agent: {agent}")


class TransportError(FereAIError):
    """Raised when the websocket fails before a clean close."""


class EmptyResponseError(FereAIError):
    """Raised when the socket closes without delivering a JSON envelope."""


class MalformedResponseError(FereAIError):
    """Raised when an envelope lacks the field the route expects."""


class FrameDecodeError(MalformedResponseError):
    """Raised when a frame that looks like a JSON object fails to parse."""


class UnsupportedFunctionalityError(FereAIError):
    def __init__(self, functionality: str):
        self.functionality = functionality
        super().__init__(f"'{functionality}' functionality not supported.")
