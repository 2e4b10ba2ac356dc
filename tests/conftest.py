"""
Pytest fixtures for progress report tests.
"""
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from dotenv import load_dotenv

# Ensure src/ and the project root are importable without installing.
ROOT = Path(__file__).resolve().parent.parent
SRC = ROOT / "src"
for path in (SRC, ROOT):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

# Load environment variables
load_dotenv()


# ============================================================================
# Check-in Fixtures
# ============================================================================

DEFAULT_ANSWERS = {
    "sadness": 5,
    "anxiety": "Sometimes",
    "stress": 5,
    "sleep": "6-8",
    "hopefulness": 5,
}


def make_check_in(timestamp, **answers) -> dict:
    """
    Build a request-shaped check-in dict.

    Args:
        timestamp: ISO string or datetime
        **answers: indicator overrides on top of DEFAULT_ANSWERS
    """
    if isinstance(timestamp, datetime):
        timestamp = timestamp.isoformat()
    return {"timestamp": timestamp, "indicators": {**DEFAULT_ANSWERS, **answers}}


@pytest.fixture
def check_in():
    """Factory fixture for single check-ins."""
    return make_check_in


@pytest.fixture
def daily_history():
    """
    Factory fixture: one check-in per day starting at ``start``.

    Returns a function accepting (days, start, **answers).
    """

    def _build(days: int, start: datetime = datetime(2025, 6, 1, 10, 0, tzinfo=timezone.utc), **answers):
        return [make_check_in(start + timedelta(days=i), **answers) for i in range(days)]

    return _build


@pytest.fixture
def sample_history():
    """Two check-ins a week apart, as shown on the progress page example."""
    return [
        {
            "timestamp": "2025-06-01T10:00:00Z",
            "indicators": {
                "sadness": 6,
                "anxiety": "Often",
                "stress": 7,
                "sleep": "4-6",
                "hopefulness": 3,
            },
        },
        {
            "timestamp": "2025-06-08T11:00:00Z",
            "indicators": {
                "sadness": 5,
                "anxiety": "Sometimes",
                "stress": 6,
                "sleep": "6-8",
                "hopefulness": 4,
            },
        },
    ]
