"""
Lexical wellness analysis of a user's conversation history.

Signals extracted from user-authored text:
- Sentiment (positive / negative keyword and phrase counts)
- Topics (synonym groups, explicit "let's talk about X" requests)
- Emotions (keyword groups normalised to a 0-1 intensity)

They are combined into a 1-10 wellness score, optionally adjusted by the
user's activity streaks, then turned into strengths, growth areas and a
short list of recommended practices.

Randomised choices (insight templates, practice sampling) draw from an
explicit ``random.Random`` so results are reproducible under a seed.
"""

import logging
import random
import re
from dataclasses import dataclass, field
from datetime import datetime
from functools import lru_cache
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from wellness_engine.core.activities import ActivityScoreCalculator
from wellness_engine.core.lexicon import LexiconConfig
from wellness_engine.core.models import (
    Activity, Message, RecommendedPractice, WellnessProfile,
    NEUTRAL_SCORE, MAX_TOPICS, MAX_PRACTICES, clamp_intensity, clamp_score, utc_now,
)

logger = logging.getLogger(__name__)


# ============================================================================
# MATCHING HELPERS
# ============================================================================

@lru_cache(maxsize=None)
def _word_pattern(word: str) -> re.Pattern:
    return re.compile(r"\b" + re.escape(word) + r"\b")


def count_words(text: str, word: str) -> int:
    """Counts whole-word occurrences of ``word`` in ``text``."""
    return len(_word_pattern(word).findall(text))


def count_any(text: str, words: Iterable[str]) -> int:
    return sum(count_words(text, word) for word in words)


def build_corpus(messages: Sequence[Message]) -> Tuple[List[str], str]:
    """
    Keeps user-authored messages only.

    Returns:
        Tuple of (user texts as recorded, lowercased space-joined corpus).
    """
    texts = [m.text for m in messages if m.is_from_user and m.text]
    return texts, " ".join(texts).lower()


# ============================================================================
# SIGNAL ANALYZERS
# ============================================================================

class SentimentAnalyzer:
    """Counts weighted positive and negative cues in the corpus."""

    @staticmethod
    def analyze(corpus: str) -> Tuple[int, int]:
        """
        Scores the lowercased corpus.

        Positive words: exact hit x2, extra substring hit x1 ("happier").
        Positive phrases x3. Negative words exact only x1, phrases x2.
        """
        if not corpus:
            return 0, 0

        positive = 0
        for word in LexiconConfig.POSITIVE_WORDS:
            exact = count_words(corpus, word)
            partial = max(0, corpus.count(word) - exact)
            positive += exact * LexiconConfig.EXACT_POSITIVE_WEIGHT
            positive += partial * LexiconConfig.PARTIAL_POSITIVE_WEIGHT

        for pattern in LexiconConfig.POSITIVE_PATTERNS:
            positive += len(pattern.findall(corpus)) * LexiconConfig.POSITIVE_PATTERN_WEIGHT

        negative = 0
        for word in LexiconConfig.NEGATIVE_WORDS:
            negative += count_words(corpus, word) * LexiconConfig.NEGATIVE_WORD_WEIGHT

        for pattern in LexiconConfig.NEGATIVE_PATTERNS:
            negative += len(pattern.findall(corpus)) * LexiconConfig.NEGATIVE_PATTERN_WEIGHT

        logger.debug(f"[SENTIMENT] positive={positive} negative={negative}")
        return positive, negative


class TopicAnalyzer:
    """Ranks conversation topics by frequency."""

    @staticmethod
    def _match_known_topic(word: str) -> Optional[str]:
        for topic, synonyms in LexiconConfig.TOPIC_SYNONYMS.items():
            if any(word in synonym or synonym in word for synonym in synonyms):
                return topic
        return None

    @staticmethod
    def _sentence_topics(corpus: str) -> Dict[str, int]:
        """Fallback: first content word of every sentence."""
        counts: Dict[str, int] = {}
        for sentence in LexiconConfig.SENTENCE_SPLIT_PATTERN.split(corpus):
            if len(sentence.strip()) <= LexiconConfig.MIN_SENTENCE_LENGTH:
                continue
            words = [
                w.strip(",;:\"'()") for w in sentence.split()
            ]
            words = [
                w for w in words
                if len(w) > LexiconConfig.MIN_TOPIC_WORD_LENGTH
                and w not in LexiconConfig.TOPIC_STOP_WORDS
            ]
            if words:
                counts[words[0]] = counts.get(words[0], 0) + 1
        return counts

    @classmethod
    def count_topics(cls, corpus: str) -> Dict[str, int]:
        """Raw topic counts in first-seen order."""
        counts: Dict[str, int] = {}
        if not corpus:
            return counts

        for topic, synonyms in LexiconConfig.TOPIC_SYNONYMS.items():
            hits = count_any(corpus, synonyms)
            if hits > 0:
                counts[topic] = hits

        for match in LexiconConfig.TALK_ABOUT_PATTERN.finditer(corpus):
            word = match.group(1).lower()
            topic = cls._match_known_topic(word)
            if topic:
                counts[topic] = counts.get(topic, 0) + LexiconConfig.EXPLICIT_TOPIC_WEIGHT
            else:
                counts[word] = counts.get(word, 0) + LexiconConfig.NEW_TOPIC_WEIGHT
                logger.debug(f"[TOPICS] New topic requested: {word}")

        if not counts:
            counts = cls._sentence_topics(corpus)

        return counts

    @classmethod
    def extract(cls, corpus: str) -> List[str]:
        """Top topics by count, ties kept in first-seen order."""
        counts = cls.count_topics(corpus)
        ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
        return [topic for topic, _ in ranked[:MAX_TOPICS]]


class EmotionAnalyzer:
    """Builds the mood trend map (emotion -> intensity in [0, 1])."""

    @staticmethod
    def fallback_from_score(score: int) -> Dict[str, float]:
        """Two synthetic moods when the text names no emotion at all."""
        if score >= 7:
            return {'happy': (score - 5) / 5, 'calm': 0.6}
        if score <= 4:
            return {'sad': (6 - score) / 5, 'anxious': 0.5}
        return {'neutral': 0.7, 'calm': 0.4}

    @classmethod
    def analyze(cls, corpus: str, positive: int, negative: int,
                draft_score: int) -> Dict[str, float]:
        raw: Dict[str, int] = {name: 0 for name in LexiconConfig.EMOTION_KEYWORDS}

        for pattern in LexiconConfig.HAPPY_PHRASES:
            if pattern.search(corpus):
                raw['happy'] += LexiconConfig.HAPPY_PHRASE_WEIGHT

        for name, keywords in LexiconConfig.EMOTION_KEYWORDS.items():
            raw[name] += count_any(corpus, keywords)

        trends = {
            name: min(1.0, count / LexiconConfig.FULL_INTENSITY_COUNT)
            for name, count in raw.items() if count > 0
        }

        # Strong positive sentiment promotes happy without explicit keywords
        if positive > negative * 2 and trends.get('happy', 0.0) < 0.5:
            trends['happy'] = min(1.0, positive / 10)

        if not trends:
            trends = cls.fallback_from_score(draft_score)

        return {name: clamp_intensity(value) for name, value in trends.items()}


class WellnessScoreCalculator:
    """Turns sentiment counts into the 1-10 wellness score."""

    @staticmethod
    def from_sentiment(positive: int, negative: int) -> int:
        total = positive + negative
        if total > 0:
            return clamp_score((positive / total) * 9 + 1)
        if positive > 0:
            # Unreachable while total == positive + negative
            return min(10, 7 + min(positive, 3))
        return NEUTRAL_SCORE

    @staticmethod
    def blend(draft_score: float, activity_contribution: float) -> int:
        return clamp_score(draft_score + activity_contribution)


class StrengthGrowthClassifier:
    """Splits topics into strengths and growth areas by local sentiment."""

    @staticmethod
    def topic_balance(user_texts: Sequence[str], topic: str) -> Tuple[int, int]:
        """Positive and negative word counts over messages mentioning ``topic``."""
        topic_text = " ".join(t for t in user_texts if topic in t.lower()).lower()
        return (
            count_any(topic_text, LexiconConfig.POSITIVE_WORDS),
            count_any(topic_text, LexiconConfig.NEGATIVE_WORDS),
        )

    @classmethod
    def classify(cls, user_texts: Sequence[str], topics: Sequence[str],
                 rng: random.Random) -> Tuple[List[str], List[str]]:
        positive_topics: List[str] = []
        negative_topics: List[str] = []
        for topic in topics:
            pos, neg = cls.topic_balance(user_texts, topic)
            if pos > neg:
                positive_topics.append(topic)
            elif neg > pos:
                negative_topics.append(topic)

        strengths = [
            rng.choice(LexiconConfig.STRENGTH_TEMPLATES).replace("%s", topic)
            for topic in positive_topics[:LexiconConfig.MAX_INSIGHTS]
        ] or list(LexiconConfig.DEFAULT_STRENGTHS)

        growth = [
            rng.choice(LexiconConfig.GROWTH_TEMPLATES).replace("%s", topic)
            for topic in negative_topics[:LexiconConfig.MAX_INSIGHTS]
        ] or list(LexiconConfig.DEFAULT_GROWTH_AREAS)

        return strengths, growth


class RecommendationSelector:
    """Samples practices from the library matching the detected issues."""

    @staticmethod
    def detect_issues(mood_trends: Dict[str, float], topics: Sequence[str]) -> Set[str]:
        issues = {LexiconConfig.GENERAL_ISSUE}
        for mood, issue in LexiconConfig.MOOD_ISSUES.items():
            if mood_trends.get(mood, 0.0) > LexiconConfig.MOOD_ISSUE_THRESHOLD:
                issues.add(issue)
        for topic in topics:
            if topic in LexiconConfig.TOPIC_ISSUES:
                issues.add(LexiconConfig.TOPIC_ISSUES[topic])
        return issues

    @classmethod
    def select(cls, mood_trends: Dict[str, float], topics: Sequence[str],
               rng: random.Random) -> List[RecommendedPractice]:
        issues = cls.detect_issues(mood_trends, topics)
        relevant = [p for p in LexiconConfig.PRACTICE_LIBRARY if p.tags & issues]
        rng.shuffle(relevant)
        logger.debug(f"[PRACTICES] Issues {sorted(issues)} -> {len(relevant)} candidates")
        return [p.to_practice() for p in relevant[:MAX_PRACTICES]]


# ============================================================================
# MAIN ANALYZER
# ============================================================================

@dataclass
class WellnessAnalysis:
    """Everything computed for one user in one run."""

    positive_score: int
    negative_score: int
    draft_score: int
    activity_contribution: float
    wellness_score: int
    mood_trends: Dict[str, float]
    common_topics: List[str]
    strengths: List[str]
    areas_for_growth: List[str]
    recommended_practices: List[RecommendedPractice]
    created_at: datetime = field(default_factory=utc_now)

    def to_profile(self, user_id: str) -> WellnessProfile:
        return WellnessProfile(
            user_id=user_id,
            mood_trends=dict(self.mood_trends),
            common_topics=list(self.common_topics),
            wellness_score=self.wellness_score,
            strengths=list(self.strengths),
            areas_for_growth=list(self.areas_for_growth),
            recommended_practices=list(self.recommended_practices),
            last_updated=self.created_at,
        ).normalized()


class WellnessDataAnalyzer:
    """Orchestrates the text analyzers into a cohesive wellness report."""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()
        self.sentiment_analyzer = SentimentAnalyzer()
        self.topic_analyzer = TopicAnalyzer()
        self.emotion_analyzer = EmotionAnalyzer()
        self.classifier = StrengthGrowthClassifier()
        self.selector = RecommendationSelector()

    def analyze(self, messages: Sequence[Message],
                activities: Sequence[Activity] = ()) -> Optional[WellnessAnalysis]:
        """
        Runs the full text pipeline.

        The draft score comes from sentiment alone; the emotion fallback may
        read it, and the activity contribution is applied last.

        Returns:
            The analysis, or None when there is no user-authored text.
        """
        user_texts, corpus = build_corpus(messages)
        if not user_texts:
            return None

        positive, negative = self.sentiment_analyzer.analyze(corpus)
        draft_score = WellnessScoreCalculator.from_sentiment(positive, negative)

        topics = self.topic_analyzer.extract(corpus)
        mood_trends = self.emotion_analyzer.analyze(corpus, positive, negative, draft_score)
        strengths, growth = self.classifier.classify(user_texts, topics, self.rng)
        practices = self.selector.select(mood_trends, topics, self.rng)

        contribution = ActivityScoreCalculator.contribution(activities) if activities else 0.0
        final_score = WellnessScoreCalculator.blend(draft_score, contribution)

        return WellnessAnalysis(
            positive_score=positive,
            negative_score=negative,
            draft_score=draft_score,
            activity_contribution=contribution,
            wellness_score=final_score,
            mood_trends=mood_trends,
            common_topics=topics or list(LexiconConfig.DEFAULT_TOPICS),
            strengths=strengths,
            areas_for_growth=growth,
            recommended_practices=practices,
        )


def log_analysis(analysis: WellnessAnalysis, _logger: logging.Logger) -> None:
    """Helper to log analysis summary."""
    _logger.info("[WELLNESS] Analysis complete")
    _logger.info(
        f"[WELLNESS] Sentiment +{analysis.positive_score}/-{analysis.negative_score} "
        f"| draft {analysis.draft_score} | activities +{analysis.activity_contribution:.2f} "
        f"| score {analysis.wellness_score}"
    )
    _logger.info(f"[WELLNESS] Topics: {', '.join(analysis.common_topics)}")
    if analysis.mood_trends:
        top_mood = max(analysis.mood_trends.items(), key=lambda x: x[1])[0]
        _logger.info(f"[WELLNESS] Top mood: {top_mood}")
