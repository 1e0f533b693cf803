# fereai/agent/router.py
from __future__ import annotations

from urllib.parse import urlencode

from fereai.agent.intent import DEFAULT_THRESHOLD, SummaryIntentClassifier
from fereai.agent.types import Route
from fereai.config import ProviderConfig
from fereai.errors import UnsupportedAgentError

SUMMARY_PHRASES: tuple[str, ...] = (
    "generate summary",
    "create summary",
    "build summary",
    "provide summary",
    "produce summary",
    "compile summary",
    "draft summary",
    "prepare summary",
    "write summary",
    "deliver summary",
    "offer summary",
    "summary of the latest",
    "summary of the last",
    "summarize the market",
)

_summary_intent = SummaryIntentClassifier(SUMMARY_PHRASES, DEFAULT_THRESHOLD)  # module-level reuse

# (agent, is_summary) -> route. None means the prompt is not consulted.
ROUTES: dict[tuple[str, bool | None], Route] = {
    ("ProAgent", None): Route.PRO_CHAT,
    ("MarketAnalyzerAgent", False): Route.MARKET_CHAT,
    ("MarketAnalyzerAgent", True): Route.MARKET_SUMMARY,
}

INTENT_AGENTS = frozenset(agent for agent, verdict in ROUTES if verdict is not None)
_SINGLE_ENDPOINT = frozenset(agent for agent, verdict in ROUTES if verdict is None)

AUTH_PARAM = "X-FRIDAY-KEY"


def route(agent: str, prompt: str) -> Route:
    """
    Pick the endpoint for (agent, prompt).

    Only agents with more than one endpoint run the summary classifier.
    Raises UnsupportedAgentError for anything not in ROUTES.
    """
    if agent in _SINGLE_ENDPOINT:
        return ROUTES[(agent, None)]
    if agent in INTENT_AGENTS:
        return ROUTES[(agent, _summary_intent.classify(prompt))]
    raise UnsupportedAgentError(agent)


def build_url(route_: Route, config: ProviderConfig) -> str:
    """wss://<host>/<path>?X-FRIDAY-KEY=<api_key>"""
    path = route_.value.format(user_id=config.user_id)
    return f"wss://{config.host}/{path}?{urlencode({AUTH_PARAM: config.api_key})}"


def redact_url(url: str) -> str:
    """Hide the api key in a routed URL (for logs and dry-run output)."""
    head, sep, _ = url.partition(f"{AUTH_PARAM}=")
    return f"{head}{sep}***" if sep else url
