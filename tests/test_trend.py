from datetime import date, datetime, timezone

import pytest

from glycotrack.api.models.schema_models import HbA1cReading, PriorSummary
from glycotrack.config.constants import NO_HISTORY_MESSAGE
from glycotrack.hba1c.trend import build_trend_summary, classify_direction, format_percentage


def reading(day, value):
    return HbA1cReading(reading_date=day, value=value)


def test_empty_history_returns_fixed_message():
    assert build_trend_summary([], []) == NO_HISTORY_MESSAGE
    assert build_trend_summary(None) == NO_HISTORY_MESSAGE


def test_rising_history():
    history = [reading(date(2024, 1, 1), 6.0), reading(date(2024, 6, 1), 7.5)]

    assert build_trend_summary(history, []) == (
        "Latest HbA1c 7.5% on 2024-06-01. "
        "Trend looks rising from 6.0% to 7.5%. "
        "Average across 2 readings: 6.8%."
    )


def test_improving_history():
    history = [reading(date(2024, 1, 1), 8.2), reading(date(2024, 3, 1), 7.9), reading(date(2024, 6, 1), 7.0)]

    text = build_trend_summary(history, [])

    assert "Trend looks improving from 8.2% to 7.0%." in text
    assert "Average across 3 readings: 7.7%." in text


def test_small_change_is_stable():
    history = [reading(date(2024, 1, 1), 7.0), reading(date(2024, 2, 1), 7.05)]

    assert "Trend looks stable" in build_trend_summary(history, [])


def test_change_of_exactly_threshold_is_not_stable():
    history = [reading(date(2024, 1, 1), 6.0), reading(date(2024, 2, 1), 6.1)]

    assert "Trend looks rising" in build_trend_summary(history, [])


def test_single_reading_is_stable():
    text = build_trend_summary([reading(date(2024, 5, 5), 6.4)], [])

    assert text == (
        "Latest HbA1c 6.4% on 2024-05-05. "
        "Trend looks stable from 6.4% to 6.4%. "
        "Average across 1 readings: 6.4%."
    )


def test_result_does_not_depend_on_input_order():
    ordered = [reading(date(2023, 11, 1), 8.1), reading(date(2024, 1, 1), 7.2), reading(date(2024, 6, 1), 6.9)]
    shuffled = [ordered[2], ordered[0], ordered[1]]

    assert build_trend_summary(shuffled, []) == build_trend_summary(ordered, [])


def test_caller_history_is_not_mutated():
    history = [reading(date(2024, 6, 1), 7.5), reading(date(2024, 1, 1), 6.0)]
    snapshot = list(history)

    build_trend_summary(history, [])

    assert history == snapshot


def test_prior_summary_date_is_cited():
    history = [reading(date(2024, 1, 1), 6.0), reading(date(2024, 6, 1), 7.5)]
    summaries = [
        PriorSummary(summary="latest", report_date=date(2024, 6, 1)),
        PriorSummary(summary="older", report_date=date(2024, 1, 1)),
    ]

    text = build_trend_summary(history, summaries)

    assert text.endswith("Average across 2 readings: 6.8%. Last summary recorded on 2024-06-01.")
    assert text.count("Last summary recorded") == 1


def test_prior_summary_falls_back_to_created_at():
    summaries = [PriorSummary(summary="latest", created_at=datetime(2024, 7, 2, 9, 30, tzinfo=timezone.utc))]

    text = build_trend_summary([reading(date(2024, 6, 1), 7.5)], summaries)

    assert text.endswith(" Last summary recorded on 2024-07-02.")


def test_prior_summary_without_any_date_is_omitted():
    text = build_trend_summary([reading(date(2024, 6, 1), 7.5)], [PriorSummary(summary="no date")])

    assert "Last summary" not in text


def test_raw_storage_rows_are_accepted():
    history = [
        {"reading_date": "2024-06-01", "value": 7.5},
        {"reading_date": "2024-01-01", "value": "6.0"},
    ]
    summaries = [{"summary": "x", "created_at": "2024-06-03T10:00:00Z", "reports": {"report_date": "2024-06-01"}}]

    assert build_trend_summary(history, summaries) == (
        "Latest HbA1c 7.5% on 2024-06-01. "
        "Trend looks rising from 6.0% to 7.5%. "
        "Average across 2 readings: 6.8%. "
        "Last summary recorded on 2024-06-01."
    )


def test_missing_value_renders_placeholder_and_counts_as_zero():
    history = [{"reading_date": "2024-01-01", "value": None}, {"reading_date": "2024-02-01", "value": 7.0}]

    assert build_trend_summary(history, []) == (
        "Latest HbA1c 7.0% on 2024-02-01. "
        "Trend looks rising from n/a% to 7.0%. "
        "Average across 2 readings: 3.5%."
    )


def test_malformed_date_renders_placeholder():
    text = build_trend_summary([{"reading_date": "sometime", "value": 6.2}], [])

    assert text.startswith("Latest HbA1c 6.2% on n/a. ")


@pytest.mark.parametrize(
    "value, expected",
    [
        (6.75, "6.8"),
        (6.25, "6.3"),
        (6.0, "6.0"),
        (-0.25, "-0.3"),
        (7.04, "7.0"),
        (None, "n/a"),
        (float("nan"), "n/a"),
        ("abc", "n/a"),
    ],
)
def test_format_percentage(value, expected):
    assert format_percentage(value) == expected


@pytest.mark.parametrize("change, expected", [(0, "stable"), (0.09, "stable"), (0.5, "rising"), (-0.5, "improving")])
def test_classify_direction(change, expected):
    from decimal import Decimal

    assert classify_direction(Decimal(str(change))) == expected


@pytest.mark.parametrize("huge", [1e30, "1e40", 10 ** 30])
def test_absurdly_large_value_degrades_to_placeholder(huge):
    history = [{"reading_date": "2024-01-01", "value": 6.0}, {"reading_date": "2024-02-01", "value": huge}]

    assert build_trend_summary(history, []) == (
        "Latest HbA1c n/a% on 2024-02-01. "
        "Trend looks improving from 6.0% to n/a%. "
        "Average across 2 readings: 3.0%."
    )


def test_format_percentage_of_unrenderable_decimal_is_placeholder():
    from decimal import Decimal

    assert format_percentage(Decimal("1e40")) == "n/a"
