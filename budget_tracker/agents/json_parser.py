"""
Best-effort JSON extraction from LLM replies.

LLM replies are supposed to be JSON but routinely arrive wrapped in
prose, inside a ```json fenced block, or with chatter before and after
the object. parse_llm_json digs the first usable JSON value out of
such text.

Contract: given ANY input, return a ParsedJson. Never raise.
"""

import json
import re
from typing import Any, Iterator, Optional

from pydantic import BaseModel


_FENCED_BLOCK = re.compile(r"```[\w+-]*[ \t]*\n?(.*?)```", re.DOTALL)
_decoder = json.JSONDecoder()


class ParsedJson(BaseModel):
    """Outcome of parse_llm_json."""

    success: bool
    result: Any = None
    error: Optional[str] = None

    @classmethod
    def found(cls, value: Any) -> "ParsedJson":
        return cls(success=True, result=value)

    @classmethod
    def not_found(cls, error: str) -> "ParsedJson":
        return cls(success=False, error=error)


def _candidates(text: str) -> Iterator[Any]:
    """Yield every JSON value we can isolate, most likely first."""
    # 1. The whole reply is JSON
    try:
        yield json.loads(text)
    except ValueError:
        pass

    # 2. Fenced code blocks
    for match in _FENCED_BLOCK.finditer(text):
        body = match.group(1).strip()
        if not body:
            continue
        try:
            yield json.loads(body)
        except ValueError:
            yield from _scan(body)

    # 3. Any object/array embedded in prose
    yield from _scan(text)


def _scan(text: str) -> Iterator[Any]:
    for index, char in enumerate(text):
        if char not in "{[":
            continue
        try:
            value, _ = _decoder.raw_decode(text, index)
        except ValueError:
            continue
        yield value


def parse_llm_json(text: Any, expected_type: Optional[type] = None) -> ParsedJson:
    """
    Extract the first JSON value from free-form text.

    Args:
        text: The reply text (anything else is reported as not found)
        expected_type: If given (e.g. dict), skip values of other types

    Returns:
        ParsedJson with success=True and the value, or success=False
        and a reason.
    """
    if not isinstance(text, str):
        return ParsedJson.not_found(f"expected text, got {type(text).__name__}")

    stripped = text.strip()
    if not stripped:
        return ParsedJson.not_found("empty reply")

    try:
        for value in _candidates(stripped):
            if expected_type is None or isinstance(value, expected_type):
                return ParsedJson.found(value)
    except RecursionError:
        return ParsedJson.not_found("reply nested too deeply to decode")

    if expected_type is not None:
        return ParsedJson.not_found(
            f"no JSON {expected_type.__name__} found in reply"
        )
    return ParsedJson.not_found("no JSON value found in reply")
