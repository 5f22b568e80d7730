"""
Static lexicon tables for the wellness analyzers.

Every table is immutable (tuples, frozensets, read-only mappings) so a
single process can share it across concurrent analyses of different users.
"""

import re
from types import MappingProxyType
from typing import Mapping, Tuple

from wellness_engine.core.models import PracticeTemplate


def _frozen(mapping: dict) -> Mapping:
    return MappingProxyType(mapping)


class LexiconConfig:
    """Centralized keyword configuration for the wellness analyzers."""

    # ========================================================================
    # SENTIMENT
    # ========================================================================
    POSITIVE_WORDS: Tuple[str, ...] = (
        'happy', 'good', 'great', 'excellent', 'joy', 'excited', 'hopeful', 'motivated',
        'satisfied', 'peaceful', 'glad', 'wonderful', 'fantastic', 'terrific', 'delighted',
        'pleased', 'content', 'cheerful', 'fine', 'better',
    )
    NEGATIVE_WORDS: Tuple[str, ...] = (
        'sad', 'depressed', 'anxious', 'worried', 'stressed', 'tired', 'exhausted', 'angry',
        'frustrated', 'overwhelmed', 'unhappy', 'bad', 'terrible', 'awful', 'miserable',
        'upset', 'concerned', 'uncomfortable', 'distressed', 'low',
    )

    # Each match weighs x3
    POSITIVE_PATTERNS: Tuple[re.Pattern, ...] = (
        re.compile(r"\b(?:i am|i'm|i feel|feeling)\s+(?:happy|good|great|fine|better|okay|alright)"),
        re.compile(r"\b(?:doing|going)\s+(?:well|good|great|fine|better)"),
    )
    # Each match weighs x2
    NEGATIVE_PATTERNS: Tuple[re.Pattern, ...] = (
        re.compile(r"\b(?:i am|i'm|i feel|feeling)\s+(?:sad|bad|depressed|anxious|worried|stressed|tired)"),
        re.compile(r"\b(?:not|don't|can't|cant|cannot)\s+(?:feel|feeling|doing|going)\s+(?:well|good|great)"),
    )

    EXACT_POSITIVE_WEIGHT = 2
    PARTIAL_POSITIVE_WEIGHT = 1
    POSITIVE_PATTERN_WEIGHT = 3
    NEGATIVE_WORD_WEIGHT = 1
    NEGATIVE_PATTERN_WEIGHT = 2

    # ========================================================================
    # TOPICS
    # ========================================================================
    TOPIC_SYNONYMS: Mapping[str, Tuple[str, ...]] = _frozen({
        'wellness': ('wellness', 'wellbeing', 'well-being', 'health', 'healthy', 'mental health'),
        'work': ('work', 'job', 'career', 'office', 'profession', 'workplace', 'employment'),
        'sleep': ('sleep', 'insomnia', 'rest', 'nap', 'tired', 'bed', 'snooze', 'sleepy'),
        'family': ('family', 'parent', 'child', 'children', 'mom', 'dad', 'mother', 'father',
                   'sibling', 'brother', 'sister', 'relative'),
        'relationship': ('relationship', 'marriage', 'partner', 'spouse', 'boyfriend', 'girlfriend',
                         'husband', 'wife', 'dating', 'romance'),
        'exercise': ('exercise', 'workout', 'fitness', 'gym', 'run', 'jog', 'training', 'sport',
                     'yoga', 'physical activity'),
        'meditation': ('meditation', 'mindfulness', 'zen', 'calm', 'breathing', 'focus',
                       'relaxation', 'awareness'),
        'anxiety': ('anxiety', 'anxious', 'worry', 'fear', 'nervous', 'apprehension', 'panic', 'stress'),
        'stress': ('stress', 'pressure', 'burden', 'tension', 'overwhelm', 'stressful', 'strain'),
        'diet': ('diet', 'food', 'eating', 'nutrition', 'meal', 'weight', 'healthy eating'),
        'social': ('social', 'friend', 'community', 'people', 'socializing', 'gathering',
                   'social media', 'interaction'),
        'finance': ('finance', 'money', 'financial', 'budget', 'spending', 'income', 'debt',
                    'savings', 'investment'),
        'happiness': ('happiness', 'happy', 'joy', 'content', 'pleased', 'satisfied', 'cheerful', 'bliss'),
        'sadness': ('sadness', 'sad', 'unhappy', 'depressed', 'depression', 'down', 'blue', 'gloomy'),
        'feeling': ('feeling', 'feel', 'emotion', 'mood', 'emotional', 'state of mind', 'sentiment'),
    })

    TALK_ABOUT_PATTERN: re.Pattern = re.compile(
        r"\b(?:i want to|let's|i'd like to|can we) (?:talk|chat|discuss) about\s+(\w+)\b"
    )
    EXPLICIT_TOPIC_WEIGHT = 3
    NEW_TOPIC_WEIGHT = 2

    SENTENCE_SPLIT_PATTERN: re.Pattern = re.compile(r"[.!?]+")
    MIN_SENTENCE_LENGTH = 10
    MIN_TOPIC_WORD_LENGTH = 3
    TOPIC_STOP_WORDS: frozenset = frozenset({
        'this', 'that', 'these', 'those', 'with', 'from', 'about', 'have', 'would',
    })

    DEFAULT_TOPICS: Tuple[str, ...] = ("mental wellness", "self-care")

    # ========================================================================
    # EMOTIONS
    # ========================================================================
    EMOTION_KEYWORDS: Mapping[str, Tuple[str, ...]] = _frozen({
        'calm': ('calm', 'peaceful', 'relaxed', 'serene'),
        'anxious': ('anxious', 'worried', 'nervous', 'fear'),
        'happy': ('happy', 'joy', 'pleased', 'delighted', 'great', 'good', 'wonderful',
                  'excellent', 'amazing', 'fantastic'),
        'sad': ('sad', 'down', 'unhappy', 'depressed'),
        'energetic': ('energy', 'active', 'motivated', 'excited'),
        'tired': ('tired', 'exhausted', 'fatigue', 'drained'),
    })

    # Each pattern that matches adds HAPPY_PHRASE_WEIGHT once
    HAPPY_PHRASES: Tuple[re.Pattern, ...] = (
        re.compile(r"\bi(?:'m| am) happy\b"),
        re.compile(r"\bi(?:'m| am) feeling (?:good|great|wonderful|fantastic|excellent|amazing)"),
        re.compile(r"\bi feel (?:good|great|wonderful|fantastic|excellent|amazing|happy)"),
        re.compile(r"\bi(?:'m| am) having a (?:good|great|wonderful|fantastic) day"),
        re.compile(r"\bfeeling (?:good|great|happy|positive)"),
    )
    HAPPY_PHRASE_WEIGHT = 5
    FULL_INTENSITY_COUNT = 5.0

    # ========================================================================
    # STRENGTHS & GROWTH AREAS
    # ========================================================================
    STRENGTH_TEMPLATES: Tuple[str, ...] = (
        "Self-awareness in discussing %s",
        "Open communication about %s",
        "Positive approach to %s",
        "Seeking support with %s",
        "Consistency in %s practices",
    )
    GROWTH_TEMPLATES: Tuple[str, ...] = (
        "Managing %s more effectively",
        "Developing better %s habits",
        "Finding balance with %s",
        "Building resilience against %s",
        "Creating healthier boundaries around %s",
    )
    DEFAULT_STRENGTHS: Tuple[str, ...] = (
        "Self-awareness in seeking support",
        "Openness to personal growth",
    )
    DEFAULT_GROWTH_AREAS: Tuple[str, ...] = (
        "Building consistent wellness routines",
        "Managing daily stressors more effectively",
    )
    MAX_INSIGHTS = 3

    # ========================================================================
    # PRACTICE LIBRARY
    # ========================================================================
    GENERAL_ISSUE = "general"

    PRACTICE_LIBRARY: Tuple[PracticeTemplate, ...] = (
        PracticeTemplate(
            "Daily Mindfulness Meditation",
            "Start with 5-10 minutes of mindfulness meditation each day to reduce stress and improve focus.",
            "Daily",
            frozenset({"stress", "anxiety", "focus", "general"}),
        ),
        PracticeTemplate(
            "Breathing Exercises",
            "Practice deep breathing techniques like 4-7-8 breathing when feeling overwhelmed or anxious.",
            "As needed",
            frozenset({"anxiety", "stress", "overwhelm", "general"}),
        ),
        PracticeTemplate(
            "Gratitude Journaling",
            "Write down three things you're grateful for each day to improve mood and perspective.",
            "Daily",
            frozenset({"depression", "negative outlook", "general"}),
        ),
        PracticeTemplate(
            "Digital Detox",
            "Take regular breaks from screens and social media to reduce stress and improve sleep.",
            "Weekly",
            frozenset({"sleep", "stress", "technology", "general"}),
        ),
        PracticeTemplate(
            "Progressive Muscle Relaxation",
            "Tense and release muscle groups to reduce physical tension and promote relaxation.",
            "Daily",
            frozenset({"tension", "anxiety", "stress", "general"}),
        ),
        PracticeTemplate(
            "Sleep Hygiene Routine",
            "Create a consistent bedtime routine and environment to improve sleep quality.",
            "Daily",
            frozenset({"sleep", "fatigue", "general"}),
        ),
        PracticeTemplate(
            "Weekly Physical Activity",
            "Engage in moderate exercise for at least 150 minutes per week to boost mood and energy.",
            "Weekly",
            frozenset({"energy", "mood", "general"}),
        ),
        PracticeTemplate(
            "Social Connection Time",
            "Schedule regular time to connect with supportive friends or family members.",
            "Weekly",
            frozenset({"isolation", "depression", "general"}),
        ),
    )

    # Mood name -> issue tag, raised when intensity exceeds MOOD_ISSUE_THRESHOLD
    MOOD_ISSUES: Mapping[str, str] = _frozen({
        'anxious': 'anxiety',
        'sad': 'depression',
        'tired': 'fatigue',
    })
    MOOD_ISSUE_THRESHOLD = 0.3

    TOPIC_ISSUES: Mapping[str, str] = _frozen({
        'sleep': 'sleep',
        'stress': 'stress',
        'anxiety': 'anxiety',
        'social': 'isolation',
        'relationship': 'isolation',
        'work': 'stress',
    })

    # ========================================================================
    # STARTER ACTIVITIES
    # ========================================================================
    DEFAULT_ACTIVITIES: Tuple[Tuple[str, str, str], ...] = (
        ('Daily Mindfulness', 'Start with 5 minutes of mindfulness meditation each day.', 'Daily'),
        ('Deep Breathing', 'Practice deep breathing when feeling stressed.', 'As needed'),
        ('Journaling', 'Write about your thoughts, feelings, and experiences for self-reflection.', 'Daily'),
        ('Progressive Muscle Relaxation',
         'Tense and then relax muscle groups to reduce physical tension and stress.', 'As needed'),
        ('Mindful Movement',
         'Practice gentle movement like Tai Chi, Qigong, or Yoga to connect mind and body.', 'Weekly'),
    )
