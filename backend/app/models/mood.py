"""
Mood Schemas
============
Pydantic models for mood tags, mood logs and the derived tracker view.

Key design decisions:
- The mood label set is closed. Every label has exactly one score,
  one color and one emoji, and inbound requests are validated against
  ``MoodLabel``.
- Tags read back from the store keep their raw label as a plain string,
  so a legacy or hand-edited row with an unknown label degrades to the
  neutral fallback instead of failing the whole tracker view.
- DailyMoodPoint, TrendClassification and AdvicePayload are derived on
  every request and never persisted.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Allowed values
# ---------------------------------------------------------------------------

class MoodLabel(str, Enum):
    HAPPY = "Happy"
    NEUTRAL = "Neutral"
    ANXIOUS = "Anxious"
    SAD = "Sad"
    ANGRY = "Angry"


MOOD_SCORES: dict[str, int] = {
    MoodLabel.HAPPY.value: 5,
    MoodLabel.NEUTRAL.value: 3,
    MoodLabel.ANXIOUS.value: 2,
    MoodLabel.SAD.value: 2,
    MoodLabel.ANGRY.value: 1,
}

MOOD_COLORS: dict[str, str] = {
    MoodLabel.HAPPY.value: "#48bb78",
    MoodLabel.NEUTRAL.value: "#a0aec0",
    MoodLabel.ANXIOUS.value: "#ecc94b",
    MoodLabel.SAD.value: "#4299e1",
    MoodLabel.ANGRY.value: "#f56565",
}

MOOD_EMOJIS: dict[str, str] = {
    MoodLabel.HAPPY.value: "😊",
    MoodLabel.NEUTRAL.value: "😐",
    MoodLabel.ANXIOUS.value: "😰",
    MoodLabel.SAD.value: "😢",
    MoodLabel.ANGRY.value: "😠",
}

# Fallbacks for labels outside the closed set.
DEFAULT_MOOD_SCORE = 3
DEFAULT_MOOD_COLOR = "#a0aec0"


class TrendClassification(str, Enum):
    IMPROVING = "improving"
    DECLINING = "declining"
    STABLE = "stable"
    INSUFFICIENT_DATA = "insufficient_data"


class AdviceTier(str, Enum):
    CRITICAL = "critical"
    SUPPORT = "support"
    IMPROVING = "improving"
    MAINTAIN = "maintain"
    THRIVING = "thriving"
    EXCELLENT = "excellent"


# ---------------------------------------------------------------------------
# Mood tag
# ---------------------------------------------------------------------------

class MoodTag(BaseModel):
    """Label + emoji + color attached to a user message at send time."""

    model_config = {"frozen": True}

    label: str
    emoji: str = ""
    color: str = DEFAULT_MOOD_COLOR

    @classmethod
    def for_label(cls, label: MoodLabel) -> "MoodTag":
        return cls(
            label=label.value,
            emoji=MOOD_EMOJIS[label.value],
            color=MOOD_COLORS[label.value],
        )


# ---------------------------------------------------------------------------
# Mood logs
# ---------------------------------------------------------------------------

class MoodLogCreate(BaseModel):
    """Payload for POST /api/v1/moods."""

    mood: MoodLabel
    emoji: Optional[str] = Field(
        default=None,
        max_length=16,
        description="Emoji override. Defaults to the label's emoji.",
    )
    notes: Optional[str] = Field(default=None, max_length=1000)


class MoodLog(BaseModel):
    id: str
    mood: str
    emoji: Optional[str] = None
    notes: Optional[str] = None
    timestamp: datetime


class MoodLogCreatedResponse(BaseModel):
    message: str = "Mood logged"
    data: MoodLog


class MoodHistoryResponse(BaseModel):
    moods: list[MoodLog]


class MoodStats(BaseModel):
    """Label counts and percentages over a lookback window."""

    total_logs: int
    counts: dict[str, int]
    percentages: dict[str, float] = Field(
        ...,
        description="Share of logs per label, 0-100, rounded to 2 decimals.",
    )
    period: str = Field(..., description="Human-readable window, e.g. '30 days'.")


# ---------------------------------------------------------------------------
# Derived tracker view
# ---------------------------------------------------------------------------

class DailyMoodPoint(BaseModel):
    """One chart point: a calendar day's average mood."""

    model_config = {"frozen": True}

    date: date
    average_score: float
    dominant_label: str = Field(
        ...,
        description="Label of the last tagged message that day (not the mode).",
    )
    color: str


class AdvicePayload(BaseModel):
    model_config = {"frozen": True}

    tier: AdviceTier
    message: str
    suggestions: list[str]
    encouragement: str
    color: str
    icon: str


class TrackerResponse(BaseModel):
    """Everything the tracker view renders, computed in one pass."""

    points: list[DailyMoodPoint]
    total_days: int
    average_mood: float
    summary: str
    trend: TrendClassification
    advice: Optional[AdvicePayload] = Field(
        default=None,
        description="Null until the user has at least one tagged message.",
    )
