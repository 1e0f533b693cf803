import pytest

from fereai.agent.types import Route, Usage
from fereai.errors import MalformedResponseError
from fereai.llm.adapter import adapt

CHAT = {
    "answer": "Test Answer",
    "chat_id": "test_chat_id",
    "representation": [],
    "agent_api_name": "ProAgent",
    "query_summary": "Test Query",
    "agent_credits": 10,
    "credits_available": 100,
}

SUMMARY = {
    "chat_id": "test_chat_id",
    "summary": "Test Summary",
    "agent_version": "1.0.0",
    "agent_api_name": "MarketAnalyzerAgent",
    "query_summary": "Test Query",
    "is_summary": True,
    "agent_credits": 10,
    "credits_available": 100,
}


@pytest.mark.parametrize("route", [Route.PRO_CHAT, Route.MARKET_CHAT])
def test_chat_routes_read_answer(route):
    result = adapt(CHAT, route)
    assert result.text == "Test Answer"
    assert result.route is route
    assert result.finish_reason == "stop"
    assert result.usage == Usage(prompt_tokens=0, completion_tokens=0)
    assert result.raw_response == CHAT


def test_summary_route_reads_summary():
    result = adapt(SUMMARY, Route.MARKET_SUMMARY)
    assert result.text == "Test Summary"
    assert result.to_dict()["route"] == "MARKET_SUMMARY"


def test_unknown_fields_are_kept():
    result = adapt({"answer": "ok", "extra": {"nested": 1}}, Route.PRO_CHAT)
    assert result.text == "ok"
    assert result.raw_response["extra"] == {"nested": 1}


@pytest.mark.parametrize(
    "envelope, route",
    [
        (SUMMARY, Route.PRO_CHAT),
        (CHAT, Route.MARKET_SUMMARY),
        ({"answer": None}, Route.MARKET_CHAT),
        ({"summary": 42}, Route.MARKET_SUMMARY),
        ({}, Route.PRO_CHAT),
    ],
)
def test_missing_text_field_is_malformed(envelope, route):
    with pytest.raises(MalformedResponseError) as exc:
        adapt(envelope, route)
    assert route.text_field in str(exc.value)
