"""
Trend Classifier.

Labels a series of indicator means as Improving, Declining or Stable by
comparing the mean of its first half with the mean of its second half.
Whether a rise is good or bad depends on the indicator: less sadness,
anxiety and stress is better, more sleep and hopefulness is better.
"""
import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Sequence

from .indicators import DEFAULT_DIRECTIONS, Direction

logger = logging.getLogger(__name__)


class TrendStatus(str, Enum):
    """Coarse status label for a month."""

    IMPROVING = "Improving"
    DECLINING = "Declining"
    STABLE = "Stable"


@dataclass(frozen=True)
class TrendPolicy:
    """
    Thresholding policy for trend labels.

    Attributes:
        threshold: smallest half-to-half change on the normalized scale
            that counts as movement
        directions: favourable direction per indicator
    """

    threshold: float = 0.5
    directions: Mapping[str, Direction] = field(default_factory=lambda: dict(DEFAULT_DIRECTIONS))

    def __post_init__(self):
        # Read-only copy so a policy cannot be changed after construction
        object.__setattr__(self, "directions", MappingProxyType(dict(self.directions)))


def _mean(values: Sequence[float]) -> float:
    return math.fsum(values) / len(values)


def classify(
    series: Sequence[float],
    direction: Direction = Direction.LOWER_IS_BETTER,
    threshold: float = 0.5,
) -> TrendStatus:
    """
    Classify one chronological series.

    With ``h = len(series) // 2`` the first ``h`` values are compared with
    the last ``h``; the middle value of an odd-length series is ignored.
    """
    half = len(series) // 2
    if half == 0:
        return TrendStatus.STABLE

    delta = _mean(series[-half:]) - _mean(series[:half])
    if abs(delta) < threshold:
        return TrendStatus.STABLE

    rising_is_good = direction == Direction.HIGHER_IS_BETTER
    if (delta > 0) == rising_is_good:
        return TrendStatus.IMPROVING
    return TrendStatus.DECLINING


def classify_indicators(
    series_by_indicator: Mapping[str, Sequence[float]],
    policy: Optional[TrendPolicy] = None,
) -> Dict[str, TrendStatus]:
    """Label every indicator that has a known direction."""
    policy = policy or TrendPolicy()
    labels = {}
    for name, series in series_by_indicator.items():
        direction = policy.directions.get(name)
        if direction is None:
            continue
        labels[name] = classify(series, direction, policy.threshold)
    return labels


def classify_month(
    series_by_indicator: Mapping[str, Sequence[float]],
    policy: Optional[TrendPolicy] = None,
) -> TrendStatus:
    """
    Overall status from per-indicator votes.

    Stable indicators abstain; the majority of the rest wins and a tie is
    Stable.
    """
    labels = classify_indicators(series_by_indicator, policy)
    improving = sum(1 for label in labels.values() if label == TrendStatus.IMPROVING)
    declining = sum(1 for label in labels.values() if label == TrendStatus.DECLINING)

    logger.debug(f"[TREND] votes improving={improving} declining={declining} labels={labels}")

    if improving > declining:
        return TrendStatus.IMPROVING
    if declining > improving:
        return TrendStatus.DECLINING
    return TrendStatus.STABLE
