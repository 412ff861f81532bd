"""Recover a JSON object from generated text.

Generated text is routinely wrapped in markdown fences, followed by
commentary, or cut off mid-object when the token budget runs out. The
repair here is a structural patch driven by a small scanner, not a JSON
grammar: it closes whatever is left open at the cut-off point and leaves
well-formed input untouched.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)

_LEADING_FENCE = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
_TRAILING_FENCE = re.compile(r"\s*```$")
_TRAILING_COMMA = re.compile(r",(\s*[\]}])")
# Only a `\u` preceded by an odd run of backslashes is an escape
_PARTIAL_UNICODE_ESCAPE = re.compile(r"((?:^|[^\\])(?:\\\\)*)\\u[0-9a-fA-F]{0,3}$")
# Bare literal cut short after a separator: `"a": tru`, `[1, fals`
_PARTIAL_LITERAL = re.compile(r"([:,\[])\s*(?:t|tr|tru|f|fa|fal|fals|n|nu|nul)$")
_PARTIAL_NUMBER_TAIL = re.compile(r"(\d)[.eE+-]+$")
# Number cut off before its first digit: `"a": -`, `[1, -`
_DANGLING_SIGN = re.compile(r"([:,\[])\s*[-+.]$")
# An object key with no value yet: `{"a": 1, "b"`
_DANGLING_KEY = re.compile(r'([{,])\s*"(?:[^"\\]|\\.)*"\s*$')
_DANGLING_COLON = re.compile(r":\s*$")
_DANGLING_COMMA = re.compile(r",\s*$")

_CLOSERS = {"{": "}", "[": "]"}


@dataclass
class ScanState:
    """Scanner state after consuming a JSON-ish segment."""

    in_string: bool = False
    escape_pending: bool = False
    stack: list[str] = field(default_factory=list)
    end: int | None = None  # index just past the balanced top-level value


def scan(segment: str) -> ScanState:
    """Track string/escape state and bracket nesting over ``segment``.

    Stops at the character that balances the first opener, so trailing
    commentary after a complete object is excluded.
    """
    state = ScanState()
    for i, ch in enumerate(segment):
        if state.in_string:
            if state.escape_pending:
                state.escape_pending = False
            elif ch == "\\":
                state.escape_pending = True
            elif ch == '"':
                state.in_string = False
            continue

        if ch == '"':
            state.in_string = True
        elif ch in _CLOSERS:
            state.stack.append(ch)
        elif ch in ("}", "]"):
            if state.stack and _CLOSERS[state.stack[-1]] == ch:
                state.stack.pop()
                if not state.stack:
                    state.end = i + 1
                    return state
    return state


def repair_truncated(segment: str) -> str:
    """Close open strings, drop dangling separators, restore bracket balance."""
    state = scan(segment)
    if state.end is not None:
        return segment[: state.end]

    repaired = segment
    if state.in_string:
        if state.escape_pending:
            repaired = repaired[:-1]
        repaired = _PARTIAL_UNICODE_ESCAPE.sub(r"\1", repaired)
        repaired += '"'
    else:
        repaired = repaired.rstrip()
        repaired = _PARTIAL_LITERAL.sub(r"\1", repaired)
        repaired = _PARTIAL_NUMBER_TAIL.sub(r"\1", repaired)
        repaired = _DANGLING_SIGN.sub(r"\1", repaired)

    if state.stack and state.stack[-1] == "{":
        repaired = _DANGLING_KEY.sub(r"\1", repaired)
    repaired = _DANGLING_COLON.sub(": null", repaired)
    repaired = _DANGLING_COMMA.sub("", repaired)

    for opener in reversed(state.stack):
        repaired += _CLOSERS[opener]
    return repaired


def _strip_fences(text: str) -> str:
    processed = text.strip()
    processed = _LEADING_FENCE.sub("", processed)
    return _TRAILING_FENCE.sub("", processed)


def _try_parse(text: str) -> Any | None:
    try:
        return json.loads(text)
    except (json.JSONDecodeError, ValueError):
        return None


def extract(raw_text: str | None) -> Any | None:
    """Best-effort recovery of a JSON value from generated text.

    Returns ``None`` when nothing parseable can be recovered; callers treat
    that as an ordinary outcome.
    """
    if not raw_text:
        return None

    processed = _strip_fences(raw_text)
    parsed = _try_parse(processed)
    if parsed is not None:
        return parsed

    start = processed.find("{")
    if start == -1:
        logger.debug("No JSON object found in generated text")
        return None

    repaired = repair_truncated(processed[start:])
    parsed = _try_parse(repaired)
    if parsed is not None:
        return parsed

    parsed = _try_parse(_TRAILING_COMMA.sub(r"\1", repaired))
    if parsed is None:
        logger.debug("Structural repair failed for %d chars of text", len(raw_text))
    return parsed
