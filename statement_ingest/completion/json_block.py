"""Locates JSON inside free-form completion text.

Replies are an untrusted boundary: models wrap JSON in prose or code fences,
so the first balanced block that opens with the expected bracket is taken
instead of parsing the reply verbatim.
"""

import json
from typing import Any

from statement_ingest.completion.exceptions import AIResponseMalformed

_CLOSERS = {"{": "}", "[": "]"}


def find_json_block(text: str, opener: str) -> str | None:
    """Return the first balanced `{...}` or `[...]` substring, or None."""
    closer = _CLOSERS[opener]
    start = text.find(opener)
    while start != -1:
        end = _match_closing(text, start, opener, closer)
        if end is not None:
            return text[start : end + 1]
        start = text.find(opener, start + 1)
    return None


def parse_json_block(text: str, opener: str) -> Any:
    """Locate and decode the first JSON block of the given kind.

    Raises:
        AIResponseMalformed: if no block is found or it is not valid JSON.
    """
    block = find_json_block(text, opener)
    if block is None:
        kind = "object" if opener == "{" else "array"
        raise AIResponseMalformed(f"No JSON {kind} found in AI response")
    try:
        return json.loads(block)
    except json.JSONDecodeError as exc:
        raise AIResponseMalformed(f"Invalid JSON response: {exc}") from exc


def _match_closing(text: str, start: int, opener: str, closer: str) -> int | None:
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
