"""Token usage extraction from worker output."""

import json
import math
import re

from ..models import TokenUsage

_JSON_USAGE = re.compile(
    r'"(?:input_tokens?|prompt_tokens?)"\s*:\s*(\d+).*?'
    r'"(?:output_tokens?|completion_tokens?)"\s*:\s*(\d+)',
    re.IGNORECASE | re.DOTALL,
)
_INPUT_TOKENS = re.compile(r"(?:input[_\s]?tokens?|prompt[_\s]?tokens?)[\s:=]+([\d,]+)", re.IGNORECASE)
_OUTPUT_TOKENS = re.compile(
    r"(?:output[_\s]?tokens?|completion[_\s]?tokens?)[\s:=]+([\d,]+)", re.IGNORECASE
)
_TOTAL_TOKENS = re.compile(r"total[_\s]?tokens?[\s:=]+([\d,]+)", re.IGNORECASE)

CHARS_PER_TOKEN = 4


def parse_stream_event(line: str) -> dict | None:
    """Decode one line of ``stream-json`` output, or None if it is not an event."""
    line = line.strip()
    if not line.startswith("{"):
        return None
    try:
        data = json.loads(line)
    except json.JSONDecodeError:
        return None
    return data if isinstance(data, dict) else None


def stream_event_text(event: dict) -> str:
    """Text carried by an ``assistant`` event's content blocks."""
    if event.get("type") != "assistant":
        return ""
    message = event.get("message")
    content = message.get("content") if isinstance(message, dict) else None
    if not isinstance(content, list):
        return ""
    return "".join(
        block.get("text") or ""
        for block in content
        if isinstance(block, dict) and block.get("type") == "text"
    )


def parse_envelope(stdout: str) -> dict | None:
    """Parse the CLI's JSON result envelope.

    In ``stream-json`` output the last ``result`` event is the envelope.
    Otherwise leading noise before the first ``{`` is skipped and the rest
    is decoded as one object. Returns None when no JSON object can be
    decoded.
    """
    for line in reversed(stdout.splitlines()):
        event = parse_stream_event(line)
        if event is not None and event.get("type") == "result":
            return event

    text = stdout.strip()
    start = text.find("{")
    if start == -1:
        return None
    try:
        data = json.loads(text[start:])
    except json.JSONDecodeError:
        return None
    return data if isinstance(data, dict) else None


def usage_from_envelope(envelope: dict) -> TokenUsage | None:
    """Token usage reported in the envelope's ``usage`` block.

    Cache creation and cache read tokens count as input. ``total_cost_usd``
    becomes the cost when present.
    """
    usage = envelope.get("usage")
    if not isinstance(usage, dict):
        return None

    input_tokens = (
        int(usage.get("input_tokens") or 0)
        + int(usage.get("cache_creation_input_tokens") or 0)
        + int(usage.get("cache_read_input_tokens") or 0)
    )
    output_tokens = int(usage.get("output_tokens") or 0)
    cost = envelope.get("total_cost_usd")
    return TokenUsage(
        input_tokens=input_tokens,
        output_tokens=output_tokens,
        total_tokens=input_tokens + output_tokens,
        cost=float(cost) if cost is not None else None,
    )


def extract_usage(text: str) -> TokenUsage | None:
    """Extract usage from token markers in free text.

    A JSON-style pair wins; otherwise individual input/output/total markers
    are used. Returns None when no marker is present.
    """
    match = _JSON_USAGE.search(text)
    if match:
        input_tokens = int(match.group(1))
        output_tokens = int(match.group(2))
        return TokenUsage(
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            total_tokens=input_tokens + output_tokens,
        )

    input_tokens = _extract_int(_INPUT_TOKENS, text)
    output_tokens = _extract_int(_OUTPUT_TOKENS, text)
    if input_tokens is None and output_tokens is None:
        return None

    input_tokens = input_tokens or 0
    output_tokens = output_tokens or 0
    total = _extract_int(_TOTAL_TOKENS, text)
    return TokenUsage(
        input_tokens=input_tokens,
        output_tokens=output_tokens,
        total_tokens=total if total is not None else input_tokens + output_tokens,
    )


def estimate_usage(output: str) -> TokenUsage | None:
    """Rough output-only estimate; the prompt side cannot be estimated."""
    estimated = math.ceil(len(output) / CHARS_PER_TOKEN)
    if estimated <= 0:
        return None
    return TokenUsage(input_tokens=0, output_tokens=estimated, total_tokens=estimated)


def _extract_int(pattern: re.Pattern[str], text: str) -> int | None:
    match = pattern.search(text)
    if match is None:
        return None
    raw = match.group(1).replace(",", "").strip()
    return int(raw) if raw.isdigit() else None
