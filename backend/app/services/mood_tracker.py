"""
Mood Tracker Service
====================
Derives the tracker view from a user's chat history.

    messages ──aggregate──▶ DailyMoodPoints ──evaluate_trend──▶ Trend
                                   │                              │
                                   └──── mean ────▶ get_advice ◀──┘

Nothing here is persisted or cached. GET /api/v1/tracker recomputes the
whole chain from the message log on every request, so there is no derived
state that can go stale after a new message or a history wipe.

All functions are pure. Same messages in, same points out.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, tzinfo
from typing import Optional, Sequence

import pandas as pd

from app.models.message import Message, Sender
from app.models.mood import (
    DEFAULT_MOOD_COLOR,
    DEFAULT_MOOD_SCORE,
    MOOD_COLORS,
    MOOD_SCORES,
    AdvicePayload,
    AdviceTier,
    DailyMoodPoint,
    TrackerResponse,
    TrendClassification,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

MIN_TREND_POINTS = 2
RECENT_WINDOW = 3    # points in the "recent" slice
LOOKBACK_WINDOW = 6  # recent + earlier slices together
TREND_MARGIN = 0.5   # hysteresis band around the earlier average

# Upper bounds (exclusive) of the advice / summary bands.
CRITICAL_BELOW = 1.5
LOW_BELOW = 2.5
MODERATE_BELOW = 3.5
GOOD_BELOW = 4.5


# ---------------------------------------------------------------------------
# Label lookups
# ---------------------------------------------------------------------------

def mood_score(label: str) -> int:
    """Numeric score for a mood label. Unknown labels score as Neutral."""
    return MOOD_SCORES.get(label, DEFAULT_MOOD_SCORE)


def mood_color(label: str) -> str:
    return MOOD_COLORS.get(label, DEFAULT_MOOD_COLOR)


def mood_summary(average: float) -> str:
    """Short label for an average score, shown on the tracker header."""
    if average >= GOOD_BELOW:
        return "😊 Great"
    if average >= MODERATE_BELOW:
        return "🙂 Good"
    if average >= LOW_BELOW:
        return "😐 Okay"
    if average >= CRITICAL_BELOW:
        return "😔 Low"
    return "😢 Struggling"


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------

def _local_date(timestamp: datetime, tz: Optional[tzinfo]) -> date:
    if tz is not None and timestamp.tzinfo is not None:
        return timestamp.astimezone(tz).date()
    return timestamp.date()


def aggregate(messages: Sequence[Message], tz: Optional[tzinfo] = None) -> list[DailyMoodPoint]:
    """Group mood-tagged user messages into one point per calendar day.

    - Bot messages and untagged messages are ignored.
    - ``tz`` shifts aware timestamps into the user's local day before
      grouping. Without it the timestamp's own date is used.
    - average_score is the mean of the day's label scores.
    - dominant_label is the label of the chronologically last tagged
      message that day, not the most frequent one.
    - Days without tagged messages are omitted. Output is date ascending.
    """
    rows = [
        {
            "date": _local_date(m.timestamp, tz),
            "timestamp": m.timestamp,
            "label": m.mood.label,
        }
        for m in messages
        if m.sender == Sender.USER and m.mood is not None
    ]
    if not rows:
        return []

    df = pd.DataFrame(rows)
    df["ts"] = pd.to_datetime(df["timestamp"], utc=True)
    df["score"] = df["label"].map(mood_score)

    daily = (
        df.sort_values("ts", kind="stable")
        .groupby("date", sort=True)
        .agg(average_score=("score", "mean"), dominant_label=("label", "last"))
        .reset_index()
    )

    return [
        DailyMoodPoint(
            date=row.date,
            average_score=float(row.average_score),
            dominant_label=str(row.dominant_label),
            color=mood_color(row.dominant_label),
        )
        for row in daily.itertuples(index=False)
    ]


# ---------------------------------------------------------------------------
# Trend
# ---------------------------------------------------------------------------

def evaluate_trend(points: Sequence[float]) -> TrendClassification:
    """Compare the last 3 daily averages against the 3 before them.

    Needs at least 4 points to say anything: with 2 or 3 points the
    earlier slice is empty and the result is still INSUFFICIENT_DATA.
    """
    if len(points) < MIN_TREND_POINTS:
        return TrendClassification.INSUFFICIENT_DATA

    recent = list(points[-RECENT_WINDOW:])
    earlier = list(points[-LOOKBACK_WINDOW:-RECENT_WINDOW])
    if not recent or not earlier:
        return TrendClassification.INSUFFICIENT_DATA

    recent_avg = sum(recent) / len(recent)
    earlier_avg = sum(earlier) / len(earlier)

    if recent_avg > earlier_avg + TREND_MARGIN:
        return TrendClassification.IMPROVING
    if recent_avg < earlier_avg - TREND_MARGIN:
        return TrendClassification.DECLINING
    return TrendClassification.STABLE


# ---------------------------------------------------------------------------
# Advice
# ---------------------------------------------------------------------------

_TIER_COLORS: dict[AdviceTier, str] = {
    AdviceTier.CRITICAL: "#f56565",
    AdviceTier.SUPPORT: "#4299e1",
    AdviceTier.IMPROVING: "#48bb78",
    AdviceTier.MAINTAIN: "#ecc94b",
    AdviceTier.THRIVING: "#48bb78",
    AdviceTier.EXCELLENT: "#667eea",
}

_TIER_ICONS: dict[AdviceTier, str] = {
    AdviceTier.CRITICAL: "🆘",
    AdviceTier.SUPPORT: "💙",
    AdviceTier.IMPROVING: "📈",
    AdviceTier.MAINTAIN: "⚖️",
    AdviceTier.THRIVING: "🌟",
    AdviceTier.EXCELLENT: "🎉",
}


def _advice(tier: AdviceTier, message: str, suggestions: list[str], encouragement: str) -> AdvicePayload:
    return AdvicePayload(
        tier=tier,
        message=message,
        suggestions=suggestions,
        encouragement=encouragement,
        color=_TIER_COLORS[tier],
        icon=_TIER_ICONS[tier],
    )


ADVICE_CRITICAL = _advice(
    AdviceTier.CRITICAL,
    "I'm concerned about how you're feeling. Please reach out for immediate support. "
    "You don't have to go through this alone.",
    [
        "Contact a mental health professional",
        "Reach out to someone you trust immediately",
        "Use the crisis resources in your menu",
    ],
    "You are important. Your feelings are valid. Help is available and people care about you. "
    "Please reach out now.",
)

# Low average, but heading up.
ADVICE_EARLY_PROGRESS = _advice(
    AdviceTier.IMPROVING,
    "I see you're starting to feel a bit better - that's a positive sign! "
    "Let's keep building on this progress.",
    [
        "Keep doing what's helping - you're on the right track",
        "Set one small achievable goal for today",
        "Try a 10-minute walk in fresh air",
        "Journal about one thing that went well today",
    ],
    "You're making progress! Every small step forward matters. I'm proud of you for "
    "continuing to try. Keep going! 💪",
)

ADVICE_IMPROVING = _advice(
    AdviceTier.IMPROVING,
    "Great progress! You're moving in a positive direction. Let's keep this momentum going!",
    [
        "🎉 Celebrate your progress - you deserve recognition!",
        "Keep up your healthy routines and habits",
        "Continue any mindfulness or relaxation practices",
    ],
    "You're doing amazing! The effort you're putting in is paying off. Keep believing in "
    "yourself - you're stronger than you know! 🌟",
)

ADVICE_SUPPORT = _advice(
    AdviceTier.SUPPORT,
    "I notice things have been tougher recently. Let's work on getting you back to feeling better.",
    [
        "Ask for help - it's a sign of strength, not weakness",
        "Schedule something to look forward to",
        "Challenge negative thoughts with evidence",
    ],
    "Ups and downs are normal in recovery. This setback doesn't erase your progress. "
    "You have the strength to bounce back. 💙",
)

ADVICE_MAINTAIN = _advice(
    AdviceTier.MAINTAIN,
    "You're maintaining a steady balance. That's valuable - let's keep you here and continue "
    "building resilience.",
    [
        "Focus on small, consistent healthy habits",
        "Practice gratitude - write down 3 things daily",
        "Nurture your support network",
    ],
    "Stability is progress! You're managing well. Keep taking care of yourself - you're worth it! 🌻",
)

ADVICE_THRIVING = _advice(
    AdviceTier.THRIVING,
    "You're doing really well! Your positive momentum shows the work you're putting into your wellbeing.",
    [
        "Acknowledge how far you've come - be proud!",
        "Consider helping others - it boosts wellbeing",
        "Keep challenging yourself to grow",
        "Explore new activities that bring joy",
    ],
    "You're thriving! Your dedication to your mental health is inspiring. Keep up the excellent "
    "work - you're an example of resilience! 🌈✨",
)

ADVICE_EXCELLENT = _advice(
    AdviceTier.EXCELLENT,
    "Wow! You're in an excellent place mentally. Your consistent effort has paid off beautifully!",
    [
        "Set new personal growth goals",
        "Continue your self-care practices religiously",
        "Reflect on what's working and document it",
        "Celebrate yourself - you've earned it!",
    ],
    "You're absolutely crushing it! Your mental health journey is an inspiration. Remember this "
    "feeling and the work that got you here. You're proof that healing and growth are possible! 🎉🌟",
)


def get_advice(avg_mood: float, trend: TrendClassification) -> AdvicePayload:
    """Map (average mood, trend) to an advice payload. Pure lookup.

    Below 1.5 the trend is ignored. Between 1.5 and 2.5 anything other
    than an improving trend gets the support tier.
    """
    if avg_mood < CRITICAL_BELOW:
        return ADVICE_CRITICAL

    if avg_mood < LOW_BELOW:
        if trend == TrendClassification.IMPROVING:
            return ADVICE_EARLY_PROGRESS
        return ADVICE_SUPPORT

    if avg_mood < MODERATE_BELOW:
        if trend == TrendClassification.IMPROVING:
            return ADVICE_IMPROVING
        if trend == TrendClassification.DECLINING:
            return ADVICE_SUPPORT
        return ADVICE_MAINTAIN

    if avg_mood < GOOD_BELOW:
        return ADVICE_THRIVING

    return ADVICE_EXCELLENT


# ---------------------------------------------------------------------------
# Tracker view
# ---------------------------------------------------------------------------

def build_tracker(messages: Sequence[Message], tz: Optional[tzinfo] = None) -> TrackerResponse:
    """Run the full aggregate → trend → advice chain for the tracker view."""
    points = aggregate(messages, tz=tz)
    scores = [p.average_score for p in points]

    average = sum(scores) / len(scores) if scores else 0.0
    trend = evaluate_trend(scores)
    advice = get_advice(average, trend) if points else None

    logger.debug(
        "Tracker computed: %d days, average %.2f, trend %s",
        len(points), average, trend.value,
    )

    return TrackerResponse(
        points=points,
        total_days=len(points),
        average_mood=round(average, 2),
        summary=mood_summary(average),
        trend=trend,
        advice=advice,
    )
