"""
Scripted Responder
==================
Keyword classifier + canned response selector behind
POST /api/v1/messages/ai-response.

There is no model here. ``classify`` maps text to a Category with ordered
substring rules and ``ResponseSelector`` picks one of that category's fixed
replies at random.

Rule order (first match wins):
    1. crisis     — always checked first, overrides everything else
    2. greeting   — anchored at the start of the message
    3. topic buckets in fixed order: anxiety, sad, stress, happy, sleep,
       breathing, meditation, help, gratitude
    4. default

Bucket order is deliberate: "I feel anxious but happy" is an anxiety
message. Difficult emotions are matched before positive ones.
"""

from __future__ import annotations

import logging
import random
import re
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)


class Category(str, Enum):
    CRISIS = "crisis"
    GREETING = "greeting"
    ANXIETY = "anxiety"
    SAD = "sad"
    STRESS = "stress"
    HAPPY = "happy"
    SLEEP = "sleep"
    BREATHING = "breathing"
    MEDITATION = "meditation"
    HELP = "help"
    GRATITUDE = "gratitude"
    DEFAULT = "default"


class EmptyInputError(ValueError):
    """Raised when classify() is called with blank text."""


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------

CRISIS_PHRASES: tuple[str, ...] = (
    "suicide",
    "kill myself",
    "end it all",
    "want to die",
    "no reason to live",
)

GREETING_PATTERN = re.compile(r"^(hi|hello|hey|greetings|good morning|good evening)")

# Ordered. The first bucket with any substring hit wins.
TOPIC_KEYWORDS: tuple[tuple[Category, tuple[str, ...]], ...] = (
    (Category.ANXIETY, ("anxious", "anxiety", "worried", "panic", "nervous")),
    (Category.SAD, ("sad", "depressed", "down", "lonely", "empty")),
    (Category.STRESS, ("stress", "overwhelm", "pressure", "too much")),
    (Category.HAPPY, ("happy", "good", "great", "joy", "excited")),
    (Category.SLEEP, ("sleep", "insomnia", "tired", "rest", "can't sleep")),
    (Category.BREATHING, ("breath", "breathing")),
    (Category.MEDITATION, ("meditat", "mindful")),
    (Category.HELP, ("help", "what can you do", "how do you work")),
    (Category.GRATITUDE, ("thank", "grateful", "gratitude")),
)


def classify(text: str) -> Category:
    """Return the first category whose rule matches *text*.

    Raises EmptyInputError for blank input. Callers are expected to drop
    blank messages before they get here.
    """
    if not text or not text.strip():
        raise EmptyInputError("Cannot classify empty input")

    lowered = text.lower()

    if any(phrase in lowered for phrase in CRISIS_PHRASES):
        return Category.CRISIS

    if GREETING_PATTERN.match(lowered):
        return Category.GREETING

    for category, keywords in TOPIC_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return category

    return Category.DEFAULT


# ---------------------------------------------------------------------------
# Response templates
# ---------------------------------------------------------------------------

RESPONSE_TEMPLATES: dict[Category, tuple[str, ...]] = {
    Category.GREETING: (
        "Hello! It's wonderful to hear from you. I'm here to support you. How can I help you today?",
        "Hi there! Thank you for reaching out. I'm here to listen and support you. What's on your mind?",
        "Welcome! I'm glad you're here. This is a safe space for you. How are you feeling today?",
    ),
    Category.ANXIETY: (
        "I understand anxiety can be overwhelming. Let's try a grounding technique: Name 5 things you can see, "
        "4 you can touch, 3 you can hear, 2 you can smell, and 1 you can taste. This can help bring you back "
        "to the present moment.",
        "Anxiety is your body's natural response to stress. Remember: this feeling is temporary. Try taking "
        "slow, deep breaths - inhale for 4 counts, hold for 4, exhale for 6. You've got this.",
        "Thank you for sharing. When anxiety strikes, remember that it's okay to take a break. Have you tried "
        "progressive muscle relaxation? It can really help ease physical tension.",
        "I hear you. Anxiety can feel intense, but you're not alone in this. Let's work through it together. "
        "Can you identify what's triggering these feelings right now?",
    ),
    Category.SAD: (
        "I hear that you're feeling down. Your feelings are valid, and it's okay to not be okay sometimes. "
        "What's one small thing that usually brings you comfort?",
        "Sadness is a natural emotion. Be gentle with yourself. Sometimes just acknowledging how we feel is "
        "the first step toward healing. I'm here to listen.",
        "Thank you for trusting me with your feelings. Remember, reaching out like this shows strength. Would "
        "you like to talk about what's weighing on your mind?",
        "I'm sorry you're going through this. Sadness can feel heavy, but please know that it's temporary. "
        "What has helped you feel better in the past?",
    ),
    Category.STRESS: (
        "Stress can feel like carrying a heavy weight. Let's lighten that load together. What's the biggest "
        "source of stress for you right now?",
        "I understand you're under pressure. Remember to take breaks - even 5 minutes can help. Have you had "
        "water and eaten today? Basic self-care matters.",
        "Stress is tough, but you're tougher. Let's break things down into smaller, manageable steps. What's "
        "one thing you can do today to ease the pressure?",
        "It sounds like you're dealing with a lot. Let's prioritize together. What's the most urgent thing "
        "you need to address right now?",
    ),
    Category.HAPPY: (
        "That's wonderful to hear! Happiness is precious - I'm glad you're experiencing this moment. What's "
        "bringing you joy today?",
        "Your positivity is uplifting! It's important to acknowledge and celebrate the good moments. Keep "
        "nurturing what makes you happy.",
        "I love hearing this! Positive emotions are just as important to process as difficult ones. What's "
        "contributing to your good mood?",
        "That's fantastic! Celebrating the good times is so important. How does this happiness feel in your body?",
    ),
    Category.SLEEP: (
        "Sleep issues can really impact mental health. Try establishing a bedtime routine: dim lights, no "
        "screens 30 minutes before bed, and perhaps some calming music or meditation.",
        "Quality sleep is crucial for wellbeing. Consider keeping your bedroom cool, dark, and quiet. Have you "
        "tried progressive relaxation or guided sleep meditations?",
        "Sleep difficulties are common with stress and anxiety. A consistent sleep schedule can help. What's "
        "your current bedtime routine like?",
        "I understand how frustrating sleep problems can be. Creating a wind-down routine can signal your body "
        "it's time to rest. What relaxation techniques have you tried?",
    ),
    Category.BREATHING: (
        "Breathing exercises are wonderful! Try this: Breathe in slowly through your nose for 4 counts, hold "
        "for 4, then exhale through your mouth for 6 counts. Repeat this 5 times. How do you feel?",
        "Deep breathing activates your body's relaxation response. Let's do the 4-7-8 technique: Inhale for 4, "
        "hold for 7, exhale for 8. This can calm your nervous system.",
        "Great choice! Breathing exercises can quickly reduce stress. Try box breathing: Inhale for 4, hold "
        "for 4, exhale for 4, hold for 4. Repeat.",
    ),
    Category.MEDITATION: (
        "Meditation is a powerful tool for mental health. Start with just 5 minutes a day. Focus on your "
        "breath, and when your mind wanders, gently bring it back. Be patient with yourself.",
        "That's great you're interested in meditation! Try a body scan: Close your eyes and slowly bring "
        "awareness to each part of your body, from your toes to your head, releasing tension as you go.",
        "Meditation takes practice. Start small - even 2-3 minutes daily can make a difference. Apps like Calm "
        "or Headspace can guide you through beginner practices.",
    ),
    Category.HELP: (
        "I'm here to help! You can talk to me about your feelings, learn coping techniques, track your mood, "
        "or just have someone listen. What would be most helpful for you right now?",
        "There are many ways I can support you: discussing your emotions, teaching relaxation techniques, or "
        "just being a compassionate listener. What's on your mind?",
        "I'm glad you asked! I can help you process emotions, suggest coping strategies, or simply be here to "
        "listen without judgment. How can I best support you?",
    ),
    Category.GRATITUDE: (
        "Gratitude is such a powerful practice! It shifts our focus to the positive. What are three things "
        "you're grateful for today?",
        "That's beautiful. Practicing gratitude can really improve our mental wellbeing. Would you like to "
        "share what you're thankful for?",
        "Gratitude journaling is wonderful for mental health. Even on tough days, finding small things to "
        "appreciate can help.",
    ),
    Category.CRISIS: (
        "I'm concerned about what you're sharing. Please know that you deserve support. If you're in immediate "
        "danger, please call 988 (Suicide & Crisis Lifeline) or go to your nearest emergency room. You are not alone.",
        "Thank you for trusting me, but I want to connect you with professionals who can provide the help you "
        "need right now. Please call 988 or text 'HELLO' to 741741. Your life matters.",
        "What you're feeling is serious, and I want to make sure you get proper support. Please reach out to "
        "a crisis counselor at 988 or visit your nearest ER. They can help you through this.",
    ),
    Category.DEFAULT: (
        "Thank you for sharing that with me. I'm here to support you. Can you tell me more about what you're "
        "experiencing?",
        "I appreciate you opening up. Your mental health journey is unique, and I'm here to walk alongside "
        "you. What would help you most right now?",
        "I'm listening. Remember, there's no judgment here - this is a safe space for you to express yourself. "
        "How can I best support you today?",
        "That sounds challenging. I want you to know that what you're feeling is valid. Would you like to "
        "explore this further together?",
        "I hear you. It takes courage to share these feelings. What do you need most in this moment?",
    ),
}


# ---------------------------------------------------------------------------
# Selector
# ---------------------------------------------------------------------------

class ResponseSelector:
    """Uniform random choice over a category's templates.

    Pass a seeded ``random.Random`` for deterministic tests. Each call is
    independent, so the same reply can come up twice in a row.
    """

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self._rng = rng or random.Random()

    def select(self, category: Category) -> str:
        return self._rng.choice(RESPONSE_TEMPLATES[category])

    def respond(self, text: str) -> tuple[Category, str]:
        """Classify *text* and pick a reply in one step."""
        category = classify(text)
        if category is Category.CRISIS:
            # Category only. Message text is never logged.
            logger.info("Crisis keywords detected, replying with crisis resources")
        return category, self.select(category)


# ---------------------------------------------------------------------------
# Singleton
# ---------------------------------------------------------------------------

_default_selector: ResponseSelector | None = None


def get_response_selector() -> ResponseSelector:
    global _default_selector
    if _default_selector is None:
        _default_selector = ResponseSelector()
    return _default_selector
