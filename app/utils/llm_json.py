"""
Fallible parsing of LLM output.

Each parser turns raw completion text into a JSON object or a ParseError.
``run_parsers`` tries them in order and hands every candidate object to a
shape function, which validates it and produces the final value.
"""
import json
import re
from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, Sequence, TypeVar, Union

T = TypeVar("T")

EMBEDDED_OBJECT = re.compile(r"\{.*\}", re.DOTALL)
LIST_MARKER = re.compile(r"^(?:[-*•]|\d+[.)])\s*")
JSON_SYNTAX = re.compile(r"[{}\"]")


@dataclass(frozen=True)
class ParseOk(Generic[T]):
    value: T


@dataclass(frozen=True)
class ParseError:
    reason: str


ParseResult = Union[ParseOk[T], ParseError]
Parser = Callable[[str], ParseResult]


def _load_object(text: str) -> ParseResult:
    try:
        parsed = json.loads(text)
    except (json.JSONDecodeError, TypeError) as e:
        return ParseError(f"invalid JSON: {e}")
    if not isinstance(parsed, dict):
        return ParseError("JSON is not an object")
    return ParseOk(parsed)


def parse_direct(text: str) -> ParseResult:
    """Parse the whole response as a JSON object."""
    return _load_object(text)


def parse_embedded_object(text: str) -> ParseResult:
    """Parse the outermost ``{...}`` span found in the response."""
    match = EMBEDDED_OBJECT.search(text or "")
    if not match:
        return ParseError("no JSON object found")
    return _load_object(match.group(0))


def parse_question_marks(text: str) -> ParseResult:
    """
    Last resort for question lists: split free text on question marks.

    Fragments carrying JSON syntax are rejected, so a JSON reply with the
    wrong shape is never split into questions.

    Example:
        >>> parse_question_marks("1. Why? 2. When? 3. How?").value
        {'questions': ['Why?', 'When?', 'How?']}
    """
    fragments = [LIST_MARKER.sub("", part.strip()).strip() for part in (text or "").split("?")]
    questions = [f"{fragment}?" for fragment in fragments if fragment]
    if not questions:
        return ParseError("no question marks found")
    if any(JSON_SYNTAX.search(question) for question in questions):
        return ParseError("text contains JSON syntax")
    return ParseOk({"questions": questions})


def run_parsers(
    text: str,
    parsers: Sequence[Parser],
    shape: Callable[[dict[str, Any]], ParseResult],
    fallback: Optional[Parser] = None,
) -> ParseResult:
    """
    Try each parser in order and return the first result that fits the shape.

    ``fallback`` runs only when none of ``parsers`` found a JSON object at
    all; an object with the wrong shape is a failure, not free text.

    Returns:
        ParseOk with the shaped value, or ParseError listing every failure
    """
    reasons = []
    found_object = False
    for parser in parsers:
        raw = parser(text)
        if isinstance(raw, ParseOk):
            found_object = True
            raw = shape(raw.value)
            if isinstance(raw, ParseOk):
                return raw
        reasons.append(f"{parser.__name__}: {raw.reason}")

    if fallback is not None and not found_object:
        raw = fallback(text)
        if isinstance(raw, ParseOk):
            raw = shape(raw.value)
            if isinstance(raw, ParseOk):
                return raw
        reasons.append(f"{fallback.__name__}: {raw.reason}")
    return ParseError("; ".join(reasons) or "no parsers")
