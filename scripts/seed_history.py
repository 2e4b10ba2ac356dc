#!/usr/bin/env python3
"""
Seed the SQLite history store with simulated wellness check-ins.

Generates one or more check-ins per day for a demo user, drifting the
scores so the progress report shows a visible trend.

Usage:
    python scripts/seed_history.py --user demo-user --days 90
    python scripts/seed_history.py --user demo-user --days 30 --trend declining
"""
import argparse
import random
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

from dotenv import load_dotenv

# Base directory (project root)
BASE_DIR = Path(__file__).parent.parent
sys.path.insert(0, str(BASE_DIR))
sys.path.insert(0, str(BASE_DIR / "src"))

from progress_engine.indicators import ANXIETY_FREQUENCY, SLEEP_HOURS  # noqa: E402
from server.progress_api.config import get_settings  # noqa: E402
from server.progress_api.database import SQLiteHistoryStore  # noqa: E402

ANXIETY_LABELS = list(ANXIETY_FREQUENCY)
SLEEP_LABELS = list(SLEEP_HOURS)


def clamp(value: float, low: int, high: int) -> int:
    return int(max(low, min(high, round(value))))


def simulate_check_in(progress: float, direction: int, rng: random.Random) -> dict:
    """
    One check-in's answers.

    Args:
        progress: 0.0 at the start of the period, 1.0 at the end
        direction: +1 improving, -1 declining, 0 flat
        rng: random source
    """
    shift = direction * progress * 3
    return {
        "sadness": clamp(6 - shift + rng.gauss(0, 1), 1, 10),
        "anxiety": ANXIETY_LABELS[clamp(3 - shift / 2 + rng.gauss(0, 0.7), 1, 5) - 1],
        "stress": clamp(7 - shift + rng.gauss(0, 1), 1, 10),
        "sleep": SLEEP_LABELS[clamp(2 + shift / 2 + rng.gauss(0, 0.5), 1, 4) - 1],
        "hopefulness": clamp(4 + shift + rng.gauss(0, 1), 1, 10),
    }


def main():
    """Populate the history store."""
    load_dotenv()

    parser = argparse.ArgumentParser(description="Seed wellness check-in history")
    parser.add_argument("--user", default="demo-user", help="User id to seed")
    parser.add_argument("--days", type=int, default=90, help="Days of history")
    parser.add_argument(
        "--trend",
        choices=["improving", "declining", "flat"],
        default="improving",
        help="Direction the simulated scores drift",
    )
    parser.add_argument("--skip-rate", type=float, default=0.2, help="Chance a day has no check-in")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--db", default=None, help="SQLite path (defaults to settings)")
    args = parser.parse_args()

    rng = random.Random(args.seed)
    direction = {"improving": 1, "declining": -1, "flat": 0}[args.trend]
    store = SQLiteHistoryStore(args.db or get_settings().history_db_file)

    print("=" * 60)
    print("Wellness History Seeding Script")
    print("=" * 60)
    print(f"\nDatabase: {store.db_path}")
    print(f"User: {args.user}, days: {args.days}, trend: {args.trend}\n")

    start = datetime.now(timezone.utc).replace(hour=9, minute=0, second=0, microsecond=0)
    start -= timedelta(days=args.days - 1)
    total = 0

    for day in range(args.days):
        if rng.random() < args.skip_rate:
            continue
        progress = day / max(args.days - 1, 1)
        for slot in range(rng.choice([1, 1, 1, 2])):
            timestamp = start + timedelta(days=day, hours=slot * 10)
            store.append(
                args.user,
                timestamp.isoformat(),
                simulate_check_in(progress, direction, rng),
            )
            total += 1

    print("=" * 60)
    print(f"Complete! Check-ins inserted: {total}")
    print("=" * 60)


if __name__ == "__main__":
    main()
