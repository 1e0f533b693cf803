# fereai/llm/provider.py
from __future__ import annotations

import asyncio
import logging
from dataclasses import asdict, dataclass
from typing import Any, Mapping, Optional, Sequence, Union

from fereai.agent.router import INTENT_AGENTS, build_url, redact_url, route
from fereai.agent.types import ChatSettings, GenerateResult, Route
from fereai.config import ProviderConfig, Settings, resolve_config
from fereai.errors import UnsupportedFunctionalityError
from fereai.llm.adapter import adapt
from fereai.llm.schema import ChatRequest
from fereai.llm.session import Connector, WebSocketSession
from fereai.obs.metrics import INTENT_VERDICTS

log = logging.getLogger(__name__)

Message = Mapping[str, Any]
Prompt = Union[str, Sequence[Message]]


def extract_prompt_text(prompt: Prompt) -> str:
    """
    Return the text the router and payload use.

    Accepts a plain string or a list of chat messages
    ({"role": "user", "content": str | [{"type": "text", "text": ...}]});
    the last user message wins.
    """
    if isinstance(prompt, str):
        return prompt
    for message in reversed(list(prompt)):
        if message.get("role") != "user":
            continue
        content = message.get("content")
        if isinstance(content, str):
            return content
        parts = [p.get("text", "") for p in content or [] if p.get("type") == "text"]
        return "\n".join(parts)
    raise ValueError("prompt contains no user message")


@dataclass(frozen=True)
class PreparedCall:
    route: Route
    url: str
    payload: dict[str, Any]


class FereAIChatModel:
    """
    Generic completion interface backed by one FereAI websocket per call.

    Streaming is not offered: the socket stream is collapsed into one result.
    """

    provider = "fereai"
    specification_version = "v1"

    def __init__(
        self,
        model_id: str,
        settings: Optional[ChatSettings] = None,
        *,
        config: ProviderConfig,
        connect: Optional[Connector] = None,
    ):
        self.model_id = model_id
        self.settings = settings or ChatSettings()
        self.config = config
        self._connect = connect

    def create_payload(self, message: str) -> dict[str, Any]:
        return ChatRequest(
            agent=self.model_id,
            message=message,
            stream=self.settings.stream,
            x_hours=self.settings.context_duration,
            parent=self.settings.parent_id,
        ).to_payload()

    def prepare(self, prompt: Prompt) -> PreparedCall:
        """
        Pre-flight, no I/O: config check, routing, URL and payload.

        Raises MissingConfigurationError / UnsupportedAgentError.
        """
        text = extract_prompt_text(prompt)
        config = self.config.require()
        route_ = route(self.model_id, text)
        url = build_url(route_, config)
        log.debug("agent=%s route=%s url=%s", self.model_id, route_.name, redact_url(url))
        return PreparedCall(route=route_, url=url, payload=self.create_payload(text))

    def route_for(self, prompt: Prompt) -> Route:
        return self.prepare(prompt).route

    async def do_generate(self, prompt: Prompt) -> GenerateResult:
        call = self.prepare(prompt)
        if self.model_id in INTENT_AGENTS:
            INTENT_VERDICTS.labels(verdict=str(call.route.is_summary).lower()).inc()
        session = WebSocketSession(call.url, call.route, connect=self._connect)
        envelope = await session.execute(call.payload)
        result = adapt(
            envelope,
            call.route,
            raw_call={"raw_prompt": prompt, "raw_settings": asdict(self.settings)},
        )
        log.debug("result route=%s text=%r", call.route.name, result.text[:200])
        return result

    def generate(self, prompt: Prompt) -> GenerateResult:
        """Blocking wrapper around do_generate (for scripts and the CLI)."""
        return asyncio.run(self.do_generate(prompt))

    async def do_stream(self, prompt: Prompt):
        raise UnsupportedFunctionalityError("stream")


class FereAIProvider:
    """Factory for FereAI chat models sharing one resolved configuration."""

    def __init__(self, config: ProviderConfig, *, connect: Optional[Connector] = None):
        self.config = config
        self._connect = connect

    def __call__(self, model_id: str, settings: Optional[ChatSettings] = None) -> FereAIChatModel:
        return self.chat(model_id, settings)

    def chat(self, model_id: str, settings: Optional[ChatSettings] = None) -> FereAIChatModel:
        return FereAIChatModel(model_id, settings, config=self.config, connect=self._connect)

    language_model = chat

    def text_embedding_model(self, model_id: str = ""):
        raise UnsupportedFunctionalityError("textEmbeddingModel")


def create_fereai(
    base_url: Optional[str] = None,
    api_key: Optional[str] = None,
    user_id: Optional[str] = None,
    *,
    overrides: Optional[Mapping[str, Optional[str]]] = None,
    settings: Optional[Settings] = None,
    connect: Optional[Connector] = None,
) -> FereAIProvider:
    """
    Build a provider. Configuration is resolved once, here.

    base_url / api_key / user_id are defaults: FEREAI_* environment values win
    over them, and `overrides` win over both.
    """
    config = resolve_config(
        defaults={"base_url": base_url, "api_key": api_key, "user_id": user_id},
        overrides=overrides,
        settings=settings,
    )
    return FereAIProvider(config, connect=connect)
