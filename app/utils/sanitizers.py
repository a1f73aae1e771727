"""Whitelist/trim helpers applied to request bodies and LLM output."""
import math
import uuid
from datetime import datetime, timezone
from typing import Any, Optional

FREQUENCIES = ("daily", "weekly", "monthly", "once")
DEFAULT_FREQUENCY = "once"
WEEK_DAYS = ("mon", "tue", "wed", "thu", "fri", "sat", "sun")
SMART_FIELDS = ("specific", "measurable", "achievable", "relevant", "timeBased")


def clean_text(value: Any) -> str:
    """Return a trimmed string, or an empty string for non-strings."""
    return value.strip() if isinstance(value, str) else ""


def clean_frequency(value: Any) -> str:
    """
    Clamp a cadence to one of the known frequencies.

    Example:
        >>> clean_frequency("WEEKLY")
        'weekly'
        >>> clean_frequency("bogus")
        'once'
    """
    frequency = clean_text(value).lower()
    return frequency if frequency in FREQUENCIES else DEFAULT_FREQUENCY


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def clean_repeat_config(raw: Any) -> Optional[dict]:
    """
    Keep only valid week days and a day of month in [1, 31].

    Returns None when neither sub-field survives.
    """
    if not isinstance(raw, dict):
        return None

    on_days = None
    if isinstance(raw.get("onDays"), list):
        on_days = [
            day
            for day in (clean_text(d).lower() for d in raw["onDays"])
            if day in WEEK_DAYS
        ]

    day_of_month = raw.get("dayOfMonth")
    if _is_number(day_of_month) and math.isfinite(day_of_month) and 1 <= day_of_month <= 31:
        day_of_month = math.floor(day_of_month)
    else:
        day_of_month = None

    config = {}
    if on_days:
        config["onDays"] = on_days
    if day_of_month:
        config["dayOfMonth"] = day_of_month

    return config or None


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse a timestamp into a naive UTC datetime.

    Numbers are epoch milliseconds. Strings are ISO-8601; a bare date means
    midnight UTC. Anything unparseable yields None.
    """
    if _is_number(value):
        if not math.isfinite(value):
            return None
        try:
            parsed = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
    elif isinstance(value, datetime):
        parsed = value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    else:
        return None

    return parsed.astimezone(timezone.utc).replace(tzinfo=None)


def to_iso(value: Optional[datetime]) -> Optional[str]:
    """Render a naive UTC datetime as an ISO-8601 string with a Z suffix."""
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.isoformat(timespec="milliseconds") + "Z"


def clean_answers(value: Any, limit: int = 3) -> list[str]:
    """Keep up to ``limit`` non-empty string answers."""
    if not isinstance(value, list):
        return []
    answers = [clean_text(item) for item in value if isinstance(item, str)]
    return [answer for answer in answers if answer][:limit]


def clean_smart(value: Any) -> Optional[dict]:
    """Return the five trimmed SMART fields, or None if any is empty."""
    if not isinstance(value, dict):
        return None

    cleaned = {}
    for field in SMART_FIELDS:
        text = clean_text(value.get(field))
        if not text:
            return None
        cleaned[field] = text
    return cleaned


def clean_question(value: Any) -> str:
    """Trim a question and make sure it ends with a question mark."""
    if not isinstance(value, str):
        return ""
    text = value.strip()
    return text if text.endswith("?") else text + "?"


def clean_questions(value: Any, limit: int = 3) -> list[str]:
    if not isinstance(value, list):
        return []
    questions = [clean_question(item) for item in value]
    return [q for q in questions if len(q) > 1][:limit]


def clean_action_suggestion(
    raw: Any,
    index: int,
    fallback_target_id: str,
    now: datetime,
) -> Optional[dict]:
    """
    Sanitize one generated action suggestion.

    Args:
        raw: Action object as produced by the model
        index: Position in the generated list (used for default order)
        fallback_target_id: Target id used when the model gave none
        now: Creation time used when the model gave no valid createdAt

    Returns:
        Suggestion dict, or None if the suggestion has no title
    """
    if not isinstance(raw, dict):
        return None

    title = clean_text(raw.get("title"))
    if not title:
        return None

    completed_dates = []
    if isinstance(raw.get("completedDates"), list):
        for item in raw["completedDates"]:
            parsed = parse_timestamp(item)
            if parsed is not None:
                completed_dates.append(to_iso(parsed))

    order = raw.get("order")
    suggestion = {
        "actionId": clean_text(raw.get("actionId")) or str(uuid.uuid4()),
        "targetId": clean_text(raw.get("targetId")) or fallback_target_id,
        "title": title,
        "frequency": clean_frequency(raw.get("frequency")),
        "order": order if _is_number(order) else index + 1,
        "completedDates": completed_dates,
        "isArchived": raw.get("isArchived") is True,
        "createdAt": to_iso(parse_timestamp(raw.get("createdAt")) or now),
    }

    description = clean_text(raw.get("description"))
    if description:
        suggestion["description"] = description

    repeat_config = clean_repeat_config(raw.get("repeatConfig"))
    if repeat_config:
        suggestion["repeatConfig"] = repeat_config

    return suggestion
