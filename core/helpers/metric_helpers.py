"""
Metric helper functions for productivity analytics.
Implements streak detection, completion rates, productivity scores and
time bucketing.

Everything here is pure: callers fetch rows once and pass plain dates and
datetimes in. Streak runs use NumPy run-length encoding, time buckets use
pandas.
"""
from collections import OrderedDict
from datetime import date, datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, List, Optional

import numpy as np
import pandas as pd
from django.utils import timezone

from core.utils.time_utils import local_date, today as local_today

WEEKDAY_NAMES = [
    'Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday', 'Sunday'
]


def round_half_up(value: float, digits: int = 0):
    """
    Round halves away from zero (2.5 -> 3), unlike the builtin round().

    Returns an int when ``digits`` is 0.
    """
    quantum = Decimal(1).scaleb(-digits)
    rounded = Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    return int(rounded) if digits == 0 else float(rounded)


def completion_rate(done: int, total: int) -> float:
    """Percentage of done over total; 0 when there is nothing to complete."""
    if not total:
        return 0.0
    return done / total * 100


def _as_date(value) -> date:
    if isinstance(value, datetime):
        return local_date(value)
    return value


def consecutive_day_streak(
    days: Iterable,
    today: Optional[date] = None,
    max_days: int = 365,
    allow_today_gap: bool = False
) -> int:
    """
    Count consecutive days present in ``days``, walking back from today.

    Args:
        days: Dates (or aware datetimes) on which the event happened
        today: Reference day, defaults to the local today
        max_days: Upper bound on how far back to look
        allow_today_gap: When True, an empty today does not break the streak

    Returns:
        Number of consecutive days, at most ``max_days``
    """
    today = today or local_today()
    present = {_as_date(d) for d in days if d is not None}

    streak = 0
    for offset in range(max_days):
        day = today - timedelta(days=offset)
        if day in present:
            streak += 1
        elif offset == 0 and allow_today_gap:
            continue
        else:
            break
    return streak


def longest_run(days: Iterable) -> int:
    """
    Longest run of consecutive calendar days.

    Duplicates count once. Uses run-length encoding over sorted ordinals.
    """
    ordinals = np.unique(np.array(
        [_as_date(d).toordinal() for d in days if d is not None], dtype=np.int64
    ))
    if ordinals.size == 0:
        return 0

    # A run breaks wherever the gap to the previous day isn't exactly 1
    breaks = np.flatnonzero(np.diff(ordinals) != 1)
    run_starts = np.concatenate(([0], breaks + 1))
    run_ends = np.concatenate((breaks + 1, [ordinals.size]))
    return int((run_ends - run_starts).max())


def productivity_score_analytics(rate: float, streak: int) -> int:
    """Score used by the analytics report: rate weighted 0.7 plus a streak bonus capped at 30."""
    return round_half_up(rate * 0.7 + min(streak * 2, 30))


def productivity_score_stats(rate: float, streak: int) -> int:
    """Score used by the stats widget: rate plus a streak bonus capped at 20, max 100."""
    return min(round_half_up(rate + min(streak * 2, 20)), 100)


# ============================================================================
# TIME BUCKETS
# ============================================================================

def bucket_daily(timestamps: Iterable, days: int, today: Optional[date] = None) -> "OrderedDict[date, int]":
    """
    Count events per local calendar day for the last ``days`` days.

    Keys run oldest first and every day in the window is present.
    """
    today = today or local_today()
    buckets = OrderedDict(
        (today - timedelta(days=offset), 0) for offset in range(days - 1, -1, -1)
    )
    for ts in timestamps:
        if ts is None:
            continue
        day = _as_date(ts)
        if day in buckets:
            buckets[day] += 1
    return buckets


def _to_local_naive(ts: datetime) -> datetime:
    if timezone.is_aware(ts):
        ts = timezone.localtime(ts)
    return ts.replace(tzinfo=None)


def _local_index(timestamps: Iterable) -> pd.DatetimeIndex:
    # Bucket by local wall clock, not UTC
    return pd.DatetimeIndex([_to_local_naive(ts) for ts in timestamps if ts is not None])


def bucket_weekday(timestamps: Iterable) -> List[Dict]:
    """Event counts for Monday..Sunday."""
    index = _local_index(timestamps)
    counts = pd.Series(index.dayofweek).value_counts().reindex(range(7), fill_value=0)
    return [
        {'day': WEEKDAY_NAMES[i], 'count': int(counts[i])}
        for i in range(7)
    ]


def bucket_hour(timestamps: Iterable) -> List[Dict]:
    """Event counts for hours 0..23."""
    index = _local_index(timestamps)
    counts = pd.Series(index.hour).value_counts().reindex(range(24), fill_value=0)
    return [{'hour': h, 'count': int(counts[h])} for h in range(24)]


def best_bucket(buckets: List[Dict], key: str):
    """
    Label of the bucket with the highest count (earliest wins ties),
    or None when every bucket is empty.
    """
    best = None
    best_count = 0
    for bucket in buckets:
        if bucket['count'] > best_count:
            best = bucket[key]
            best_count = bucket['count']
    return best
