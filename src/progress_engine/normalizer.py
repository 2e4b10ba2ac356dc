"""
Score Normalizer.

Maps raw check-in answers onto the numeric scales used for averaging:
numeric questions pass through (1-10), frequency and sleep-hours answers
are looked up in fixed ordinal tables.
"""
import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Mapping, Optional

from .errors import (
    InvalidTimestamp,
    MalformedEntry,
    MissingIndicator,
    OutOfRangeValue,
    UnknownEnumValue,
)
from .indicators import INDICATORS, IndicatorDefinition

logger = logging.getLogger(__name__)

# Extended calendar date and a time of day; date-only and compact basic forms are rejected
_DATE_TIME = re.compile(r"\d{4}-\d{2}-\d{2}[T ]\d{2}:\d{2}")


@dataclass(frozen=True)
class SurveyEntry:
    """One submitted check-in with a parsed timestamp and raw answers."""

    timestamp: datetime
    indicators: Mapping[str, Any]
    index: int = 0
    raw_timestamp: Optional[Any] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], index: int = 0) -> "SurveyEntry":
        """
        Build an entry from a request payload item.

        Accepts the answers under either ``indicators`` or ``responses``.

        Raises:
            MalformedEntry: if the item or its answers are not mappings
            InvalidTimestamp: if the timestamp is missing or unparseable
        """
        if not isinstance(data, Mapping):
            raise MalformedEntry(
                f"Entry {index}: expected an object, got {type(data).__name__}",
                index=index,
            )

        raw_ts = data.get("timestamp")
        answers = data.get("indicators")
        if answers is None:
            answers = data.get("responses") or {}
        if not isinstance(answers, Mapping):
            raise MalformedEntry(
                f"Entry {index}: indicators must be an object, got {type(answers).__name__}",
                index=index,
                timestamp=raw_ts,
                field="indicators",
            )
        return cls(
            timestamp=parse_timestamp(raw_ts, index),
            indicators=dict(answers),
            index=index,
            raw_timestamp=raw_ts,
        )


@dataclass(frozen=True)
class NormalizedEntry:
    """A check-in whose indicators are all numeric scores."""

    timestamp: datetime
    scores: Mapping[str, float] = field(default_factory=dict)
    index: int = 0

    def __post_init__(self):
        object.__setattr__(self, "scores", MappingProxyType(dict(self.scores)))


def parse_timestamp(value: Any, index: Optional[int] = None) -> datetime:
    """
    Parse an ISO-8601 date-time into an aware datetime.

    Naive values are interpreted as UTC.

    Raises:
        InvalidTimestamp: for anything that is not a valid date-time
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        try:
            if not _DATE_TIME.match(value.strip()):
                raise ValueError("not an extended date-time")
            parsed = datetime.fromisoformat(value.strip())
        except ValueError:
            raise InvalidTimestamp(
                f"Entry {index}: timestamp {value!r} is not a valid ISO-8601 date-time",
                index=index,
                timestamp=value,
            ) from None
    else:
        raise InvalidTimestamp(
            f"Entry {index}: timestamp is missing or not a string",
            index=index,
            timestamp=value,
        )

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _raw_answer(indicator: IndicatorDefinition, answers: Mapping[str, Any]) -> Any:
    # Short names take precedence over intake question keys
    if answers.get(indicator.name) is not None:
        return answers[indicator.name]
    return answers.get(indicator.source_key)


def _score_numeric(indicator: IndicatorDefinition, value: Any, entry: SurveyEntry) -> float:
    low, high = indicator.value_range
    is_number = isinstance(value, (int, float)) and not isinstance(value, bool)
    if not is_number or not low <= value <= high or value != int(value):
        raise OutOfRangeValue(
            f"Entry {entry.index}: {indicator.name} must be an integer between "
            f"{low} and {high}, got {value!r}",
            index=entry.index,
            timestamp=entry.raw_timestamp or entry.timestamp.isoformat(),
            field=indicator.name,
        )
    return float(value)


def _score_ordinal(indicator: IndicatorDefinition, value: Any, entry: SurveyEntry) -> float:
    try:
        return float(indicator.ordinal[value])
    except (KeyError, TypeError):
        raise UnknownEnumValue(
            f"Entry {entry.index}: {indicator.name} must be one of "
            f"{list(indicator.ordinal)}, got {value!r}",
            index=entry.index,
            timestamp=entry.raw_timestamp or entry.timestamp.isoformat(),
            field=indicator.name,
        ) from None


def normalize(entry: SurveyEntry) -> NormalizedEntry:
    """
    Convert every tracked indicator of a check-in to its numeric score.

    Unknown answer keys are ignored.

    Raises:
        MissingIndicator: a tracked indicator has no answer
        OutOfRangeValue: a numeric answer is outside its range
        UnknownEnumValue: an ordinal answer is not a known label
    """
    scores = {}
    for indicator in INDICATORS:
        value = _raw_answer(indicator, entry.indicators)
        if value is None:
            raise MissingIndicator(
                f"Entry {entry.index}: missing required indicator {indicator.name}",
                index=entry.index,
                timestamp=entry.raw_timestamp or entry.timestamp.isoformat(),
                field=indicator.name,
            )
        if indicator.is_ordinal:
            scores[indicator.name] = _score_ordinal(indicator, value, entry)
        else:
            scores[indicator.name] = _score_numeric(indicator, value, entry)

    return NormalizedEntry(timestamp=entry.timestamp, scores=scores, index=entry.index)
