"""Extraction of structured payloads from free-text model replies.

Models wrap JSON in prose and markdown fences often enough that the reply
cannot be handed to ``json.loads`` directly. The strategy used everywhere is
"first balanced-brace span": scan for the first opening bracket, follow
nesting depth while skipping over JSON string literals, and decode the span
once depth returns to zero. Spans that do not decode are skipped and the scan
resumes at the next opening bracket.
"""

import json
import re
from collections.abc import Iterator

_BULLET_PREFIX = re.compile(r"^\s*(?:[-*•]+|\d+[.)])\s*")
_FENCE = re.compile(r"^\s*```")


class MalformedResponseError(ValueError):
    """Model reply has no usable payload or breaks the structural contract."""


class ExcessiveNestingError(MalformedResponseError):
    """Model reply nests deeper than the JSON decoder can follow."""


def extract_json_object(text: str) -> dict[str, object]:
    """Return the first balanced ``{...}`` span in the text that decodes to an object."""
    for candidate in _balanced_spans(text, "{", "}"):
        payload = _decode(candidate)
        if isinstance(payload, dict):
            return payload
    raise MalformedResponseError("No JSON object found in model reply")


def extract_json_array(text: str) -> list[object]:
    """Return the first balanced ``[...]`` span in the text that decodes to a list."""
    for candidate in _balanced_spans(text, "[", "]"):
        payload = _decode(candidate)
        if isinstance(payload, list):
            return payload
    raise MalformedResponseError("No JSON array found in model reply")


def parse_insights(text: str, limit: int = 5) -> list[str]:
    """Parse an insight list from a JSON array or from line-delimited text.

    Raises ``ExcessiveNestingError`` when the reply holds JSON too deep to decode.
    """
    if not text.strip():
        return []
    payload = _insight_payload(text)
    if isinstance(payload, list):
        items = [item.strip() for item in payload if isinstance(item, str)]
    else:
        items = _insight_lines(text)
    return [item for item in items if item][:limit]


def _insight_payload(text: str) -> object:
    try:
        return extract_json_array(text)
    except ExcessiveNestingError:
        raise
    except MalformedResponseError:
        pass
    try:
        return extract_json_object(text).get("insights")
    except ExcessiveNestingError:
        raise
    except MalformedResponseError:
        return None


def _insight_lines(text: str) -> list[str]:
    lines = [
        line for line in text.splitlines() if line.strip() and not _FENCE.match(line)
    ]
    bulleted = [line for line in lines if _BULLET_PREFIX.match(line)]
    if bulleted:
        lines = bulleted
    else:
        # Lead-in lines such as "Here are your insights:".
        lines = [line for line in lines if not line.rstrip().endswith(":")]
    return [_BULLET_PREFIX.sub("", line).strip() for line in lines]


def _decode(candidate: str) -> object:
    try:
        return json.loads(candidate)
    except json.JSONDecodeError:
        return None
    except RecursionError as exc:
        # Every later span starts inside this one, so stop scanning.
        raise ExcessiveNestingError("JSON in model reply is nested too deeply") from exc


def _balanced_spans(text: str, opener: str, closer: str) -> Iterator[str]:
    start = text.find(opener)
    while start != -1:
        end = _span_end(text, start, opener, closer)
        if end is None:
            # Unterminated span: everything after it is nested inside.
            return
        yield text[start : end + 1]
        start = text.find(opener, start + 1)


def _span_end(text: str, start: int, opener: str, closer: str) -> int | None:
    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char == opener:
            depth += 1
        elif char == closer:
            depth -= 1
            if depth == 0:
                return index
    return None
