"""Summary figures and monthly volume for the translation history."""

from dataclasses import dataclass
from datetime import datetime

from loka.store.schema import HistoryItem, HistoryStatus


@dataclass
class HistorySummary:
    total: int
    total_words: int
    edit_rate: str  # percentage, one decimal


@dataclass
class MonthlyBucket:
    name: str  # short month name
    year: int
    month: int
    volume: int = 0
    edits: int = 0


def summarize(history: list[HistoryItem]) -> HistorySummary:
    """Count jobs and words, and the share of jobs the reviewer edited."""
    total = len(history)
    total_words = sum(item.word_count for item in history)
    if total:
        edited = sum(1 for item in history if item.status == HistoryStatus.EDITED)
        edit_rate = f"{edited / total * 100:.1f}"
    else:
        edit_rate = "0.0"
    return HistorySummary(total=total, total_words=total_words, edit_rate=edit_rate)


def monthly_volume(history: list[HistoryItem]) -> list[MonthlyBucket]:
    """Group history by calendar month, oldest first.

    Items whose date cannot be parsed are skipped.
    """
    buckets: dict[tuple[int, int], MonthlyBucket] = {}
    for item in history:
        try:
            when = datetime.fromisoformat(item.date)
        except ValueError:
            continue

        key = (when.year, when.month)
        bucket = buckets.get(key)
        if bucket is None:
            bucket = MonthlyBucket(name=when.strftime("%b"), year=when.year, month=when.month)
            buckets[key] = bucket

        bucket.volume += 1
        if item.status == HistoryStatus.EDITED:
            bucket.edits += 1

    return [buckets[key] for key in sorted(buckets)]
