# fereai/llm/adapter.py
from __future__ import annotations

from typing import Any, Mapping, Optional

from pydantic import ValidationError

from fereai.agent.types import GenerateResult, Route, Usage
from fereai.errors import MalformedResponseError
from fereai.llm.schema import ChatEnvelope, SummaryEnvelope


def adapt(
    envelope: Mapping[str, Any],
    route: Route,
    raw_call: Optional[dict[str, Any]] = None,
) -> GenerateResult:
    """
    Map a captured envelope to a GenerateResult.

    The summary route reads `summary`; every chat route reads `answer`.
    Token usage is not reported by the backend and stays at zero.
    """
    model = SummaryEnvelope if route.is_summary else ChatEnvelope
    try:
        parsed = model.model_validate(dict(envelope))
    except ValidationError as exc:
        raise MalformedResponseError(
            f"{route.name} response missing text field '{route.text_field}'"
        ) from exc

    return GenerateResult(
        text=getattr(parsed, route.text_field),
        route=route,
        finish_reason="stop",
        usage=Usage(prompt_tokens=0, completion_tokens=0),
        raw_call=raw_call or {},
        raw_response=dict(envelope),
    )
