import json

from conftest import CLOSE, FakeConnection, FakeConnector, frame
from fereai import cli


def _env(monkeypatch):
    monkeypatch.setenv("FEREAI_API_KEY", "cli-key")
    monkeypatch.setenv("FEREAI_USER_ID", "cli-user")


def test_route_only(monkeypatch, capsys):
    _env(monkeypatch)
    code = cli.main(["generate summary", "--agent", "MarketAnalyzerAgent", "--route-only"])
    assert code == 0
    out = json.loads(capsys.readouterr().out)
    assert out["route"] == "MARKET_SUMMARY"
    assert "cli-key" not in out["url"]


def test_generate_text_format(monkeypatch, capsys):
    _env(monkeypatch)
    connector = FakeConnector(FakeConnection(frame('{"answer": "from cli"}'), CLOSE))
    monkeypatch.setattr("websockets.connect", connector)

    code = cli.main(["what happened with $TOKEN", "--agent", "MarketAnalyzerAgent", "--format", "text"])

    assert code == 0
    assert "from cli" in capsys.readouterr().out
    assert connector.urls[0].startswith("wss://api.fereai.xyz/chat/v1/ws/cli-user")


def test_missing_configuration_exit_code(monkeypatch):
    monkeypatch.setattr("websockets.connect", FakeConnector())
    assert cli.main(["hello"]) == 1


def test_empty_prompt_rejected(monkeypatch):
    _env(monkeypatch)
    assert cli.main(["   "]) == 1
