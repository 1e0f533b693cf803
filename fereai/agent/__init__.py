"""
Routing for FereAI agents.

- intent: fuzzy summary-intent classifier
- router: (agent, prompt) -> Route, Route -> websocket URL
- types: agent ids, routes, settings and results
"""

from .intent import SummaryIntentClassifier, classify, combined_score, normalize_text
from .router import ROUTES, SUMMARY_PHRASES, build_url, redact_url, route
from .types import AgentId, ChatSettings, GenerateResult, Route, Usage

__all__ = [
    "classify",
    "combined_score",
    "normalize_text",
    "SummaryIntentClassifier",
    "route",
    "build_url",
    "redact_url",
    "ROUTES",
    "SUMMARY_PHRASES",
    "AgentId",
    "ChatSettings",
    "GenerateResult",
    "Route",
    "Usage",
]
