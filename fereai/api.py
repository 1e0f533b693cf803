# fereai/api.py
import asyncio
from typing import Any, Optional, Union

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from prometheus_client import make_asgi_app
from pydantic import BaseModel, Field
from starlette.exceptions import HTTPException as StarletteHTTPException

from fereai.agent.router import redact_url
from fereai.agent.types import ChatSettings
from fereai.config import get_settings
from fereai.errors import FereAIError
from fereai.http_errors import (
    fereai_exception_handler,
    generic_exception_handler,
    http_exception_handler,
    request_validation_exception_handler,
)
from fereai.llm.provider import create_fereai
from fereai.obs.middleware import ObservabilityMiddleware
from fereai.obs.tracing import setup_logging, setup_tracing

settings = get_settings()

# --- FastAPI App ---
app = FastAPI(title="FereAI-Provider")

setup_logging(settings.log_level)
setup_tracing(app)
app.add_middleware(ObservabilityMiddleware)
# expose /metrics (Prometheus text format)
app.mount("/metrics", make_asgi_app())

app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(FereAIError, fereai_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)

# --- Components ---
# credentials are resolved once; a missing key surfaces per request as 503
_provider = create_fereai(settings=settings)


# --- Request Models ---
class RouteReq(BaseModel):
    agent: str = Field(default_factory=lambda: settings.default_agent)
    prompt: str


class GenerateReq(RouteReq):
    context_duration: int = Field(1, ge=0)
    parent_id: Optional[Union[int, str]] = None
    stream: bool = True


class RouteResp(BaseModel):
    agent: str
    route: str
    url: str


class GenerateResp(BaseModel):
    text: str
    finish_reason: str
    usage: dict[str, int]
    route: str
    raw_response: dict[str, Any]


# --- Endpoints ---
@app.get("/healthz")
def health():
    return {"ok": True}


@app.post("/route", response_model=RouteResp)
def route_prompt(req: RouteReq):
    """Dry run: which endpoint would serve this prompt (no connection is made)."""
    call = _provider.chat(req.agent).prepare(req.prompt)
    return RouteResp(agent=req.agent, route=call.route.name, url=redact_url(call.url))


@app.post("/generate", response_model=GenerateResp)
async def generate(req: GenerateReq):
    model = _provider.chat(
        req.agent,
        ChatSettings(context_duration=req.context_duration, parent_id=req.parent_id, stream=req.stream),
    )
    try:
        result = await asyncio.wait_for(model.do_generate(req.prompt), timeout=settings.request_timeout)
    except asyncio.TimeoutError:
        raise HTTPException(status_code=504, detail="FereAI did not close the session in time")
    return result.to_dict()
