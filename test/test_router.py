import pytest
from prometheus_client import REGISTRY

from fereai.agent.router import ROUTES, build_url, redact_url, route
from fereai.agent.types import Route
from fereai.config import ProviderConfig
from fereai.errors import UnsupportedAgentError

CONFIG = ProviderConfig(api_key="test-api-key", user_id="test-user-id", host="api.fereai.xyz")


def test_pro_agent_ignores_prompt():
    assert route("ProAgent", "Test prompt") is Route.PRO_CHAT
    assert route("ProAgent", "generate summary") is Route.PRO_CHAT


def test_market_agent_summary_prompt():
    assert route("MarketAnalyzerAgent", "Test generate summary prompt") is Route.MARKET_SUMMARY


def test_market_agent_chat_prompt():
    assert route("MarketAnalyzerAgent", "Test prompt") is Route.MARKET_CHAT
    assert route("MarketAnalyzerAgent", "what happened with $TOKEN") is Route.MARKET_CHAT


@pytest.mark.parametrize("agent", ["Casso", "UnknownAgent", "", "proagent"])
def test_unsupported_agents_never_default(agent):
    with pytest.raises(UnsupportedAgentError) as exc:
        route(agent, "generate summary")
    assert agent in str(exc.value)


def test_routing_is_deterministic():
    prompts = ["summarize the market", "price of eth?", ""]
    for agent in ("ProAgent", "MarketAnalyzerAgent"):
        assert [route(agent, p) for p in prompts] == [route(agent, p) for p in prompts]


def test_route_table_covers_every_route():
    assert set(ROUTES.values()) == set(Route)


@pytest.mark.parametrize(
    "route_, expected",
    [
        (Route.PRO_CHAT, "wss://api.fereai.xyz/chat/v2/ws/test-user-id?X-FRIDAY-KEY=test-api-key"),
        (Route.MARKET_CHAT, "wss://api.fereai.xyz/chat/v1/ws/test-user-id?X-FRIDAY-KEY=test-api-key"),
        (
            Route.MARKET_SUMMARY,
            "wss://api.fereai.xyz/ws/generate_summary/test-user-id?X-FRIDAY-KEY=test-api-key",
        ),
    ],
)
def test_build_url(route_, expected):
    assert build_url(route_, CONFIG) == expected


def test_redact_url_hides_key():
    url = build_url(Route.PRO_CHAT, CONFIG)
    assert redact_url(url).endswith("X-FRIDAY-KEY=***")
    assert "test-api-key" not in redact_url(url)


def test_route_text_field():
    assert Route.MARKET_SUMMARY.is_summary
    assert Route.MARKET_SUMMARY.text_field == "summary"
    assert Route.PRO_CHAT.text_field == Route.MARKET_CHAT.text_field == "answer"


def test_routing_records_no_metrics():
    before = REGISTRY.get_sample_value("fereai_intent_verdicts_total", {"verdict": "true"})
    route("MarketAnalyzerAgent", "generate summary")
    assert REGISTRY.get_sample_value("fereai_intent_verdicts_total", {"verdict": "true"}) == before
