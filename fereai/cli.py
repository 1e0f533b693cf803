# fereai/cli.py
"""
Command-line interface for the FereAI provider.

Sends one prompt to a FereAI agent and prints the normalized result, or
(with --route-only) just shows which endpoint the prompt would be routed to.
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import Any

from fereai.agent.router import redact_url
from fereai.agent.types import KNOWN_AGENTS, ChatSettings
from fereai.config import get_settings
from fereai.errors import FereAIError
from fereai.llm.provider import create_fereai
from fereai.obs.tracing import setup_logging

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """
    Main CLI function.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    settings = get_settings()
    parser = argparse.ArgumentParser(
        description="Send a prompt to a FereAI agent",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m fereai.cli "Give me a summary of the latest crypto news today"
  python -m fereai.cli "What has happened with $DEGEN?" --agent MarketAnalyzerAgent
  python -m fereai.cli "generate summary for today" --agent MarketAnalyzerAgent --route-only
        """,
    )

    parser.add_argument("prompt", help="Prompt text to send")
    parser.add_argument("--agent", default=settings.default_agent, choices=KNOWN_AGENTS, help="FereAI agent")
    parser.add_argument("--hours", type=int, default=1, help="Context duration in hours (x_hours)")
    parser.add_argument("--parent", default=None, help="Parent conversation id")
    parser.add_argument("--route-only", action="store_true", help="Print the routed endpoint without connecting")
    parser.add_argument("--timeout", type=float, default=settings.request_timeout, help="Seconds to wait for the session")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    parser.add_argument("--format", choices=["json", "text"], default="json", help="Output format")

    args = parser.parse_args(argv)

    setup_logging("DEBUG" if args.verbose else settings.log_level)

    if not args.prompt.strip():
        logger.error("Prompt cannot be empty")
        return 1

    model = create_fereai(settings=settings).chat(
        args.agent,
        ChatSettings(context_duration=args.hours, parent_id=args.parent),
    )

    try:
        if args.route_only:
            call = model.prepare(args.prompt)
            print(json.dumps({"agent": args.agent, "route": call.route.name, "url": redact_url(call.url)}, indent=2))
            return 0

        result = asyncio.run(asyncio.wait_for(model.do_generate(args.prompt), timeout=args.timeout))
    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        return 1
    except asyncio.TimeoutError:
        logger.error("No response within %.0fs", args.timeout)
        return 1
    except FereAIError as e:
        logger.error("FereAI request failed: %s", e)
        return 1

    output = result.to_dict()
    if args.format == "text":
        print(_format_as_text(output))
    else:
        print(json.dumps(output, ensure_ascii=False, indent=2))
    return 0


def _format_as_text(data: dict[str, Any]) -> str:
    lines = []
    lines.append("=" * 60)
    lines.append(f"FEREAI RESPONSE ({data.get('route', '?')})")
    lines.append("=" * 60)
    lines.append("")
    lines.append(data.get("text") or "No response text.")
    lines.append("")
    lines.append(f"Finish reason: {data.get('finish_reason')}")
    lines.append("=" * 60)
    return "\n".join(lines)


if __name__ == "__main__":
    sys.exit(main())
