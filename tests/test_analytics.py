"""
Tests for sentiment buckets and analytics aggregation
"""
from table_feedback.config import DEFAULT_CATEGORIES
from table_feedback.feedback.analytics import (
    SentimentBucket,
    get_sentiment_bucket,
    compute_sentiment_score,
    compute_category_stats,
    compute_overall_average,
    compute_table_breakdown,
    compute_table_summary,
    compute_record_average,
)


def test_sentiment_bucket_mapping():
    """Test that ratings map to the right sentiment buckets."""
    assert get_sentiment_bucket(1) == SentimentBucket.WORST
    assert get_sentiment_bucket(2) == SentimentBucket.AVERAGE
    assert get_sentiment_bucket(3) == SentimentBucket.EXCELLENT


def test_sentiment_bucket_invalid():
    """Test handling of out-of-range ratings."""
    assert get_sentiment_bucket(0) is None
    assert get_sentiment_bucket(5) is None


def test_sentiment_score_empty():
    assert compute_sentiment_score({"worst": 0, "average": 0, "excellent": 0}) == 0


def test_sentiment_score_all_excellent():
    assert compute_sentiment_score({"worst": 0, "average": 0, "excellent": 7}) == 100


def test_sentiment_score_all_worst():
    assert compute_sentiment_score({"worst": 4, "average": 0, "excellent": 0}) == 0


def test_sentiment_score_even_split():
    assert compute_sentiment_score({"worst": 2, "average": 2, "excellent": 2}) == 50


def test_sentiment_score_mixed():
    """Mean of 2.5 sits three quarters of the way up the scale."""
    assert compute_sentiment_score({"worst": 0, "average": 1, "excellent": 1}) == 75


def test_compute_category_stats_empty():
    """Test every category is present with zero values when nothing was rated."""
    stats, breakdown = compute_category_stats([], [], DEFAULT_CATEGORIES)

    assert list(stats) == list(DEFAULT_CATEGORIES)
    for category_stats in stats.values():
        assert category_stats["feedback_count"] == 0
        assert category_stats["total_rating_sum"] == 0
        assert category_stats["average_rating"] == 0.0
        assert category_stats["sentiment"] == {"worst": 0, "average": 0, "excellent": 0}
        assert category_stats["sentiment_score"] == 0
    assert breakdown == {}
    assert compute_overall_average(stats) == 0.0


def test_compute_category_stats_mixed():
    """Test counts, sums, averages and sentiment for a small data set."""
    category_rows = [("taste", 3, 8), ("service", 2, 3)]
    histogram_rows = [
        ("1", "taste", 3, 2),
        ("2", "taste", 2, 1),
        ("1", "service", 1, 1),
        ("2", "service", 2, 1),
    ]
    stats, breakdown = compute_category_stats(category_rows, histogram_rows, DEFAULT_CATEGORIES)

    assert stats["taste"]["feedback_count"] == 3
    assert stats["taste"]["total_rating_sum"] == 8
    assert round(stats["taste"]["average_rating"], 4) == round(8 / 3, 4)
    assert stats["taste"]["sentiment"] == {"worst": 0, "average": 1, "excellent": 2}
    assert stats["service"]["average_rating"] == 1.5
    assert stats["service"]["sentiment_score"] == 25
    assert stats["ambience"]["feedback_count"] == 0

    # (8 + 3) / (3 + 2)
    assert compute_overall_average(stats) == 2.2


def test_compute_table_breakdown_fills_every_category():
    """Test tables with feedback carry the full category schema."""
    breakdown = compute_table_breakdown([("4", "value", 1, 3)], DEFAULT_CATEGORIES)

    assert list(breakdown) == ["4"]
    assert list(breakdown["4"]) == list(DEFAULT_CATEGORIES)
    assert breakdown["4"]["value"] == {"worst": 3, "average": 0, "excellent": 0}
    assert breakdown["4"]["taste"] == {"worst": 0, "average": 0, "excellent": 0}


def test_compute_table_breakdown_ignores_unknown_categories():
    breakdown = compute_table_breakdown([("1", "parking", 3, 1)], DEFAULT_CATEGORIES)
    assert "parking" not in breakdown["1"]


def test_compute_table_breakdown_orders_tables():
    rows = [("10", "taste", 3, 1), ("2", "taste", 3, 1), ("patio", "taste", 3, 1)]
    assert list(compute_table_breakdown(rows, DEFAULT_CATEGORIES)) == ["2", "10", "patio"]


def test_aggregation_is_idempotent():
    """Test computing twice over the same rows gives the same result."""
    category_rows = [("taste", 1, 3), ("service", 1, 1)]
    histogram_rows = [("1", "taste", 3, 1), ("1", "service", 1, 1)]

    first = compute_category_stats(category_rows, histogram_rows, DEFAULT_CATEGORIES)
    second = compute_category_stats(category_rows, histogram_rows, DEFAULT_CATEGORIES)
    assert first == second


def test_table_summary():
    averages = [compute_record_average([3, 1]), compute_record_average([3])]
    assert compute_table_summary(averages) == {"feedback_count": 2, "average_rating": 2.5}
    assert compute_table_summary([]) == {"feedback_count": 0, "average_rating": 0.0}
