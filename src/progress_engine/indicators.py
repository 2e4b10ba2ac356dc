"""Wellness indicator definitions used by the normalizer and trend classifier."""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple


class Direction(str, Enum):
    """Which way an indicator moves when the user is doing better."""

    LOWER_IS_BETTER = "lower"
    HIGHER_IS_BETTER = "higher"


@dataclass(frozen=True)
class IndicatorDefinition:
    """How one check-in question maps onto a numeric score."""

    name: str
    source_key: str  # key used by the intake form
    direction: Direction
    value_range: Optional[Tuple[int, int]] = None  # numeric indicators
    ordinal: Optional[Dict[str, int]] = None  # enum indicators

    @property
    def is_ordinal(self) -> bool:
        return self.ordinal is not None


ANXIETY_FREQUENCY = {
    "Never": 1,
    "Rarely": 2,
    "Sometimes": 3,
    "Often": 4,
    "Always": 5,
}

SLEEP_HOURS = {
    "Less than 4": 1,
    "4-6": 2,
    "6-8": 3,
    "More than 8": 4,
}

# Output order for chart rows follows this tuple.
INDICATORS: Tuple[IndicatorDefinition, ...] = (
    IndicatorDefinition(
        name="sadness",
        source_key="q1_sadnessLevel",
        direction=Direction.LOWER_IS_BETTER,
        value_range=(1, 10),
    ),
    IndicatorDefinition(
        name="anxiety",
        source_key="q2_anxietyFrequency",
        direction=Direction.LOWER_IS_BETTER,
        ordinal=ANXIETY_FREQUENCY,
    ),
    IndicatorDefinition(
        name="stress",
        source_key="q5_stressLevel",
        direction=Direction.LOWER_IS_BETTER,
        value_range=(1, 10),
    ),
    IndicatorDefinition(
        name="hopefulness",
        source_key="q17_hopefulness",
        direction=Direction.HIGHER_IS_BETTER,
        value_range=(1, 10),
    ),
    IndicatorDefinition(
        name="sleep",
        source_key="q6_sleepHours",
        direction=Direction.HIGHER_IS_BETTER,
        ordinal=SLEEP_HOURS,
    ),
)

INDICATOR_NAMES: Tuple[str, ...] = tuple(ind.name for ind in INDICATORS)

INDICATORS_BY_NAME: Dict[str, IndicatorDefinition] = {ind.name: ind for ind in INDICATORS}

DEFAULT_DIRECTIONS: Dict[str, Direction] = {ind.name: ind.direction for ind in INDICATORS}
