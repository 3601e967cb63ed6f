"""Sentiment buckets and feedback analytics computation"""
import math
from enum import Enum
from typing import Dict, Iterable, Optional, Sequence, Tuple


class SentimentBucket(str, Enum):
    """Sentiment buckets based on star ratings"""
    WORST = "worst"
    AVERAGE = "average"
    EXCELLENT = "excellent"


# Rating to sentiment bucket mapping
RATING_TO_BUCKET = {
    1: SentimentBucket.WORST,
    2: SentimentBucket.AVERAGE,
    3: SentimentBucket.EXCELLENT,
}

# (category, rating_count, rating_sum)
CategoryRow = Tuple[str, int, int]
# (table_id, category, rating, count)
HistogramRow = Tuple[str, str, int, int]


def get_sentiment_bucket(rating: int) -> Optional[SentimentBucket]:
    """
    Convert a rating to its sentiment bucket.

    Args:
        rating: Rating value (1-3)

    Returns:
        SentimentBucket, or None for values outside 1-3
    """
    return RATING_TO_BUCKET.get(rating)


def empty_buckets() -> Dict[str, int]:
    return {bucket.value: 0 for bucket in SentimentBucket}


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def compute_sentiment_score(buckets: Dict[str, int]) -> int:
    """
    Map the mean bucket value (1..3) of a category onto a 0-100 score.

    All-worst scores 0, an even split scores 50, all-excellent scores 100.
    A category without ratings scores 0.
    """
    worst = buckets.get(SentimentBucket.WORST.value, 0)
    average = buckets.get(SentimentBucket.AVERAGE.value, 0)
    excellent = buckets.get(SentimentBucket.EXCELLENT.value, 0)
    total = worst + average + excellent
    if total == 0:
        return 0
    mean = (worst * 1 + average * 2 + excellent * 3) / total
    return _round_half_up((mean - 1) / 2 * 100)


def compute_table_breakdown(
    rows: Iterable[HistogramRow],
    categories: Sequence[str],
) -> Dict[str, Dict[str, Dict[str, int]]]:
    """
    Build the per-table, per-category sentiment histogram.

    Only tables that appear in ``rows`` are included; each included table
    carries every category, zero-filled where nothing was rated.
    """
    breakdown: Dict[str, Dict[str, Dict[str, int]]] = {}
    for table_id, category, rating, count in rows:
        table = breakdown.setdefault(
            table_id, {name: empty_buckets() for name in categories}
        )
        bucket = get_sentiment_bucket(rating)
        if category not in table or bucket is None:
            continue
        table[category][bucket.value] += count
    return {table_id: breakdown[table_id] for table_id in sorted(breakdown, key=_table_sort_key)}


def _table_sort_key(table_id: str):
    # Numeric ids first in numeric order, then everything else alphabetically
    return (0, int(table_id), "") if table_id.isdigit() else (1, 0, table_id)


def compute_category_buckets(
    table_breakdown: Dict[str, Dict[str, Dict[str, int]]],
    categories: Sequence[str],
) -> Dict[str, Dict[str, int]]:
    """Sum the per-table histograms into one histogram per category."""
    totals = {name: empty_buckets() for name in categories}
    for table in table_breakdown.values():
        for name in categories:
            for bucket, count in table.get(name, {}).items():
                totals[name][bucket] += count
    return totals


def compute_category_stats(
    category_rows: Iterable[CategoryRow],
    histogram_rows: Iterable[HistogramRow],
    categories: Sequence[str],
) -> Tuple[Dict[str, Dict], Dict[str, Dict[str, Dict[str, int]]]]:
    """
    Compute per-category counts, sums, averages and sentiment.

    Metrics computed per category:
    - feedback_count: number of ratings tagged with the category
    - total_rating_sum: sum of those rating values
    - average_rating: total_rating_sum / feedback_count, 0 without ratings
    - sentiment: worst/average/excellent counts across all tables
    - sentiment_score: 0-100 score from the sentiment buckets

    Returns:
        Tuple of (category_stats, table_breakdown)
    """
    counts = {name: (0, 0) for name in categories}
    for category, rating_count, rating_sum in category_rows:
        if category in counts:
            counts[category] = (int(rating_count), int(rating_sum or 0))

    table_breakdown = compute_table_breakdown(histogram_rows, categories)
    buckets = compute_category_buckets(table_breakdown, categories)

    stats = {}
    for name in categories:
        feedback_count, total_rating_sum = counts[name]
        stats[name] = {
            "feedback_count": feedback_count,
            "total_rating_sum": total_rating_sum,
            "average_rating": total_rating_sum / feedback_count if feedback_count > 0 else 0.0,
            "sentiment": buckets[name],
            "sentiment_score": compute_sentiment_score(buckets[name]),
        }
    return stats, table_breakdown


def compute_overall_average(category_stats: Dict[str, Dict]) -> float:
    """Weighted mean of all ratings, rounded to 2 decimals; 0 when nothing was rated."""
    rating_count = sum(s["feedback_count"] for s in category_stats.values())
    rating_sum = sum(s["total_rating_sum"] for s in category_stats.values())
    if rating_count == 0:
        return 0.0
    return round(rating_sum / rating_count, 2)


def compute_record_average(ratings: Sequence[int]) -> float:
    """Mean rating of a single feedback record"""
    if not ratings:
        return 0.0
    return sum(ratings) / len(ratings)


def compute_table_summary(record_averages: Sequence[float]) -> Dict:
    """
    Summarize one table from the per-record rating averages.

    Returns:
        Dictionary with feedback_count and average_rating (1 decimal)
    """
    if not record_averages:
        return {"feedback_count": 0, "average_rating": 0.0}
    return {
        "feedback_count": len(record_averages),
        "average_rating": round(sum(record_averages) / len(record_averages), 1),
    }
