from conftest import CLOSE, FakeConnection, error, frame


def test_422_shape(api_client):
    client, _ = api_client()
    # Missing prompt on /generate triggers validation error
    r = client.post("/generate", json={})
    assert r.status_code == 422
    payload = r.json()
    assert payload["error"] == "validation_error"
    assert payload["path"] == "/generate"


def test_unsupported_agent_is_400(api_client):
    client, connector = api_client()
    r = client.post("/generate", json={"agent": "Casso", "prompt": "hello"})
    assert r.status_code == 400
    assert r.json()["error"] == "unsupported_agent"
    assert connector.urls == []


def test_missing_configuration_is_503(api_client):
    client, connector = api_client(api_key=None)
    r = client.post("/generate", json={"agent": "ProAgent", "prompt": "hello"})
    assert r.status_code == 503
    body = r.json()
    assert body["error"] == "missing_configuration"
    assert body["detail"] == {"missing": ["api_key"]}
    assert connector.urls == []


def test_transport_error_is_502(api_client):
    client, _ = api_client(FakeConnection(error(OSError("reset"))))
    r = client.post("/generate", json={"agent": "ProAgent", "prompt": "hello"})
    assert r.status_code == 502
    assert r.json()["error"] == "upstream_transport_error"


def test_empty_response_is_502(api_client):
    client, _ = api_client(FakeConnection(CLOSE))
    r = client.post("/generate", json={"agent": "ProAgent", "prompt": "hello"})
    assert r.status_code == 502
    assert r.json()["error"] == "upstream_empty_response"


def test_malformed_response_is_502(api_client):
    client, _ = api_client(FakeConnection(frame('{"chat_id": "no answer"}'), CLOSE))
    r = client.post("/generate", json={"agent": "ProAgent", "prompt": "hello"})
    assert r.status_code == 502
    assert r.json()["error"] == "upstream_malformed_response"
