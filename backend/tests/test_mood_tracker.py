"""
Tests for the mood tracker service
==================================
Covers:
- aggregate: per-day average, dominant label = last of day, dates ascending,
  empty days omitted, bot / untagged messages ignored
- aggregate: unknown label falls back to score 3 and the neutral color
- aggregate: timezone shift moves late-night messages to the local day
- aggregate: out-of-order input still picks the chronologically last label
- aggregate: pure — same input, same output
- evaluate_trend: improving / declining / stable / insufficient data,
  hysteresis band edges, only the last 6 points count
- get_advice: every tier, the 1.5-2.5 gap resolves to support,
  critical ignores trend, payload is the exact template
- mood_summary bands
- build_tracker: end-to-end view, empty history

Run: pytest tests/test_mood_tracker.py -v
"""

from __future__ import annotations

import uuid
from datetime import date, datetime, timedelta, timezone

import pytest

from app.models.message import Message, Sender
from app.models.mood import (
    DEFAULT_MOOD_COLOR,
    MOOD_COLORS,
    MOOD_SCORES,
    AdviceTier,
    MoodLabel,
    MoodTag,
    TrendClassification,
)
from app.services.mood_tracker import (
    ADVICE_CRITICAL,
    ADVICE_EARLY_PROGRESS,
    ADVICE_EXCELLENT,
    ADVICE_IMPROVING,
    ADVICE_MAINTAIN,
    ADVICE_SUPPORT,
    ADVICE_THRIVING,
    LOOKBACK_WINDOW,
    RECENT_WINDOW,
    TREND_MARGIN,
    aggregate,
    build_tracker,
    evaluate_trend,
    get_advice,
    mood_score,
    mood_summary,
)

# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------

_DAY1 = datetime(2026, 3, 1, tzinfo=timezone.utc)


def _msg(
    ts: datetime,
    mood: str | None = None,
    sender: Sender = Sender.USER,
    text: str = "hello",
) -> Message:
    tag = None
    if mood is not None:
        tag = MoodTag(label=mood, color=MOOD_COLORS.get(mood, DEFAULT_MOOD_COLOR))
    return Message(id=str(uuid.uuid4()), text=text, sender=sender, timestamp=ts, mood=tag)


def _at(day_offset: int, hour: int) -> datetime:
    return _DAY1 + timedelta(days=day_offset, hours=hour)


# ---------------------------------------------------------------------------
# aggregate
# ---------------------------------------------------------------------------

class TestAggregate:

    def test_three_days_one_untagged(self):
        """Day 1 [Happy, Sad], day 2 [Anxious], day 3 untagged → 2 points."""
        messages = [
            _msg(_at(0, 9), "Happy"),
            _msg(_at(0, 18), "Sad"),
            _msg(_at(1, 10), "Anxious"),
            _msg(_at(2, 11)),
        ]

        points = aggregate(messages)

        assert len(points) == 2
        assert points[0].date == date(2026, 3, 1)
        assert points[0].average_score == pytest.approx(3.5)
        assert points[0].dominant_label == "Sad"
        assert points[0].color == MOOD_COLORS["Sad"]
        assert points[1].date == date(2026, 3, 2)
        assert points[1].average_score == pytest.approx(2.0)
        assert points[1].dominant_label == "Anxious"

    def test_dominant_is_last_not_mode(self):
        messages = [
            _msg(_at(0, 8), "Happy"),
            _msg(_at(0, 9), "Happy"),
            _msg(_at(0, 10), "Angry"),
        ]
        point = aggregate(messages)[0]
        assert point.dominant_label == "Angry"
        assert point.average_score == pytest.approx((5 + 5 + 1) / 3)

    def test_unsorted_input_uses_chronological_last(self):
        messages = [
            _msg(_at(0, 20), "Neutral"),
            _msg(_at(0, 7), "Happy"),
        ]
        assert aggregate(messages)[0].dominant_label == "Neutral"

    def test_output_sorted_by_date(self):
        messages = [
            _msg(_at(2, 9), "Happy"),
            _msg(_at(0, 9), "Sad"),
            _msg(_at(1, 9), "Neutral"),
        ]
        dates = [p.date for p in aggregate(messages)]
        assert dates == sorted(dates)
        assert len(dates) == 3

    def test_bot_messages_ignored(self):
        messages = [
            _msg(_at(0, 9), "Happy", sender=Sender.BOT),
            _msg(_at(0, 10), "Sad"),
        ]
        point = aggregate(messages)[0]
        assert point.average_score == pytest.approx(2.0)
        assert point.dominant_label == "Sad"

    def test_no_tagged_messages_returns_empty(self):
        assert aggregate([_msg(_at(0, 9)), _msg(_at(1, 9), sender=Sender.BOT)]) == []
        assert aggregate([]) == []

    def test_unknown_label_falls_back_to_neutral(self):
        messages = [_msg(_at(0, 9), "Ecstatic"), _msg(_at(0, 10), "Ecstatic")]
        point = aggregate(messages)[0]
        assert point.average_score == pytest.approx(3.0)
        assert point.dominant_label == "Ecstatic"
        assert point.color == DEFAULT_MOOD_COLOR

    def test_timezone_shifts_day_boundary(self):
        # 23:30 UTC on day 1 is 02:30 on day 2 at UTC+3.
        messages = [_msg(_DAY1 + timedelta(hours=23, minutes=30), "Happy")]
        utc_plus_3 = timezone(timedelta(hours=3))

        assert aggregate(messages)[0].date == date(2026, 3, 1)
        assert aggregate(messages, tz=utc_plus_3)[0].date == date(2026, 3, 2)

    def test_idempotent(self):
        messages = [
            _msg(_at(0, 9), "Happy"),
            _msg(_at(0, 18), "Sad"),
            _msg(_at(1, 10), "Anxious"),
        ]
        assert aggregate(messages) == aggregate(messages)

    def test_scores_match_fixed_table(self):
        assert MOOD_SCORES == {"Happy": 5, "Neutral": 3, "Anxious": 2, "Sad": 2, "Angry": 1}
        for label in MoodLabel:
            assert mood_score(label.value) == MOOD_SCORES[label.value]
        assert mood_score("Confused") == 3


# ---------------------------------------------------------------------------
# evaluate_trend
# ---------------------------------------------------------------------------

class TestTrend:

    def test_windows_and_margin_constants(self):
        assert RECENT_WINDOW == 3
        assert LOOKBACK_WINDOW == 6
        assert TREND_MARGIN == 0.5

    def test_improving(self):
        assert evaluate_trend([2, 2, 2, 4, 4, 4]) == TrendClassification.IMPROVING

    def test_declining(self):
        assert evaluate_trend([4, 4, 4, 2, 2, 2]) == TrendClassification.DECLINING

    def test_stable(self):
        assert evaluate_trend([3, 3, 3, 3]) == TrendClassification.STABLE

    @pytest.mark.parametrize("points", [[], [3.0]])
    def test_fewer_than_two_points(self, points):
        assert evaluate_trend(points) == TrendClassification.INSUFFICIENT_DATA

    @pytest.mark.parametrize("points", [[1, 5], [1, 3, 5]])
    def test_no_earlier_slice(self, points):
        assert evaluate_trend(points) == TrendClassification.INSUFFICIENT_DATA

    def test_exactly_margin_is_stable(self):
        # recent 3.5 vs earlier 3.0 is not strictly above the band.
        assert evaluate_trend([3, 3, 3, 3.5, 3.5, 3.5]) == TrendClassification.STABLE
        assert evaluate_trend([3.5, 3.5, 3.5, 3, 3, 3]) == TrendClassification.STABLE

    def test_just_over_margin(self):
        assert evaluate_trend([3, 3, 3, 3.6, 3.6, 3.6]) == TrendClassification.IMPROVING

    def test_only_last_six_points_count(self):
        # Leading 5s would pull the earlier average up if they were included.
        assert evaluate_trend([5, 5, 5, 2, 2, 2, 4, 4, 4]) == TrendClassification.IMPROVING

    def test_four_points_compares_one_earlier(self):
        assert evaluate_trend([1, 3, 3, 3]) == TrendClassification.IMPROVING


# ---------------------------------------------------------------------------
# get_advice
# ---------------------------------------------------------------------------

class TestAdvice:

    @pytest.mark.parametrize("trend", list(TrendClassification))
    def test_critical_ignores_trend(self, trend):
        assert get_advice(1.0, trend) == ADVICE_CRITICAL

    def test_critical_declining(self):
        assert get_advice(1.0, TrendClassification.DECLINING).tier == AdviceTier.CRITICAL

    def test_low_improving(self):
        assert get_advice(2.0, TrendClassification.IMPROVING) == ADVICE_EARLY_PROGRESS

    @pytest.mark.parametrize("trend", [
        TrendClassification.DECLINING,
        TrendClassification.STABLE,
        TrendClassification.INSUFFICIENT_DATA,
    ])
    def test_low_without_improvement_is_support(self, trend):
        assert get_advice(2.0, trend) == ADVICE_SUPPORT

    def test_moderate_improving_exact_template(self):
        advice = get_advice(3.0, TrendClassification.IMPROVING)
        assert advice == ADVICE_IMPROVING
        assert advice.tier == AdviceTier.IMPROVING
        assert advice.message == (
            "Great progress! You're moving in a positive direction. Let's keep this momentum going!"
        )
        assert advice.suggestions == [
            "🎉 Celebrate your progress - you deserve recognition!",
            "Keep up your healthy routines and habits",
            "Continue any mindfulness or relaxation practices",
        ]

    def test_moderate_declining_is_support(self):
        assert get_advice(3.0, TrendClassification.DECLINING) == ADVICE_SUPPORT

    @pytest.mark.parametrize("trend", [TrendClassification.STABLE, TrendClassification.INSUFFICIENT_DATA])
    def test_moderate_otherwise_maintain(self, trend):
        assert get_advice(3.0, trend) == ADVICE_MAINTAIN

    def test_thriving(self):
        assert get_advice(4.0, TrendClassification.DECLINING) == ADVICE_THRIVING

    def test_excellent(self):
        assert get_advice(4.5, TrendClassification.STABLE) == ADVICE_EXCELLENT
        assert get_advice(5.0, TrendClassification.DECLINING) == ADVICE_EXCELLENT

    @pytest.mark.parametrize("avg,tier", [
        (1.49, AdviceTier.CRITICAL),
        (1.5, AdviceTier.SUPPORT),
        (2.5, AdviceTier.MAINTAIN),
        (3.5, AdviceTier.THRIVING),
        (4.49, AdviceTier.THRIVING),
        (4.5, AdviceTier.EXCELLENT),
    ])
    def test_band_edges(self, avg, tier):
        assert get_advice(avg, TrendClassification.STABLE).tier == tier

    def test_two_improving_templates_differ(self):
        assert ADVICE_EARLY_PROGRESS.tier == ADVICE_IMPROVING.tier
        assert ADVICE_EARLY_PROGRESS.message != ADVICE_IMPROVING.message

    def test_every_payload_is_complete(self):
        for advice in (
            ADVICE_CRITICAL, ADVICE_EARLY_PROGRESS, ADVICE_IMPROVING, ADVICE_SUPPORT,
            ADVICE_MAINTAIN, ADVICE_THRIVING, ADVICE_EXCELLENT,
        ):
            assert advice.message
            assert advice.encouragement
            assert advice.suggestions
            assert all(s == s.strip() for s in advice.suggestions)
            assert advice.color.startswith("#")
            assert advice.icon


# ---------------------------------------------------------------------------
# mood_summary / build_tracker
# ---------------------------------------------------------------------------

class TestSummary:

    @pytest.mark.parametrize("avg,label", [
        (5.0, "😊 Great"),
        (4.5, "😊 Great"),
        (4.0, "🙂 Good"),
        (3.0, "😐 Okay"),
        (2.0, "😔 Low"),
        (1.0, "😢 Struggling"),
        (0.0, "😢 Struggling"),
    ])
    def test_bands(self, avg, label):
        assert mood_summary(avg) == label


class TestBuildTracker:

    def test_empty_history(self):
        view = build_tracker([])
        assert view.points == []
        assert view.total_days == 0
        assert view.average_mood == 0.0
        assert view.trend == TrendClassification.INSUFFICIENT_DATA
        assert view.advice is None

    def test_full_chain(self):
        labels = ["Sad", "Sad", "Sad", "Happy", "Happy", "Happy"]
        messages = [_msg(_at(i, 12), label) for i, label in enumerate(labels)]

        view = build_tracker(messages)

        assert view.total_days == 6
        assert [p.average_score for p in view.points] == [2, 2, 2, 5, 5, 5]
        assert view.average_mood == pytest.approx(3.5)
        assert view.summary == "🙂 Good"
        assert view.trend == TrendClassification.IMPROVING
        assert view.advice == ADVICE_THRIVING

    def test_single_day_has_advice(self):
        view = build_tracker([_msg(_at(0, 9), "Angry")])
        assert view.total_days == 1
        assert view.trend == TrendClassification.INSUFFICIENT_DATA
        assert view.advice == ADVICE_CRITICAL
