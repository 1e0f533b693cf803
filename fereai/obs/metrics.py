from prometheus_client import Counter, Histogram

# HTTP layer
HTTP_REQUESTS = Counter(
    "fereai_http_requests_total", "HTTP requests", ["path", "method", "status"]
)
HTTP_LATENCY = Histogram(
    "fereai_http_request_duration_seconds", "HTTP request duration (s)", ["path", "method"]
)

# Websocket sessions
SESSIONS = Counter(
    "fereai_sessions_total", "Websocket sessions by outcome", ["route", "outcome"]  # outcome: ok|empty|transport_error|decode_error
)
SESSION_LATENCY = Histogram(
    "fereai_session_duration_seconds", "Connect-to-settle duration (s)", ["route"]
)
FRAMES = Counter("fereai_frames_total", "Inbound frames received", ["route"])

# Routing
INTENT_VERDICTS = Counter(
    "fereai_intent_verdicts_total", "Summary-intent classifier verdicts", ["verdict"]
)
