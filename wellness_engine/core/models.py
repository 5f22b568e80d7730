"""
Record types shared by the analysis engine and the repositories.

Stores hand back plain dicts (MongoDB documents); the ``from_dict``
constructors normalise them and coerce malformed persisted values so the
analyzers never see a NaN streak or an out-of-range score.
"""

import math
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timezone
from typing import Any, Dict, FrozenSet, List, Optional

MAX_TOPICS = 5
MAX_PRACTICES = 3
MIN_SCORE = 1
MAX_SCORE = 10
NEUTRAL_SCORE = 5

USER_SENDER = "user"
ASSISTANT_SENDER = "assistant"


# ============================================================================
# COERCION HELPERS
# ============================================================================

def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def coerce_streak(value: Any) -> int:
    """Returns a non-negative integer streak, 0 for anything malformed."""
    if isinstance(value, bool) or value is None:
        return 0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if math.isnan(number) or math.isinf(number) or number < 0:
        return 0
    return int(number)


def coerce_date(value: Any) -> Optional[date]:
    """Reduces a date, datetime or ISO-8601 string to its calendar date."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value[:10])
        except ValueError:
            return None
    return None


def coerce_timestamp(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.replace('Z', '+00:00'))
        except ValueError:
            pass
    return utc_now()


def clamp_score(value: Any) -> int:
    """Rounds half-up and clamps into [1, 10]; unusable input becomes 5."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return NEUTRAL_SCORE
    if math.isnan(number):
        return NEUTRAL_SCORE
    return int(max(MIN_SCORE, min(MAX_SCORE, math.floor(number + 0.5))))


def clamp_intensity(value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(number):
        return 0.0
    return max(0.0, min(1.0, number))


def coerce_string_list(value: Any) -> List[str]:
    """Keeps the string items of a stored list; anything else becomes []."""
    if not isinstance(value, (list, tuple)):
        return []
    return [item for item in value if isinstance(item, str)]


def coerce_mood_trends(value: Any) -> Dict[str, float]:
    if not isinstance(value, dict):
        return {}
    return {str(name): clamp_intensity(intensity) for name, intensity in value.items()}


# ============================================================================
# RECORDS
# ============================================================================

@dataclass(frozen=True)
class Message:
    """A recorded chat message. Read-only input to the engine."""

    sender: str
    text: str
    timestamp: Optional[datetime] = None

    @property
    def is_from_user(self) -> bool:
        return self.sender == USER_SENDER

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Message":
        sender = data.get("sender")
        if sender is None:
            sender = USER_SENDER if data.get("is_from_user") else ASSISTANT_SENDER
        elif sender == "ai":
            sender = ASSISTANT_SENDER
        timestamp = data.get("timestamp") or data.get("created_at")
        return cls(
            sender=sender,
            text=str(data.get("text", data.get("content", "")) or ""),
            timestamp=coerce_timestamp(timestamp) if timestamp else None,
        )


@dataclass(frozen=True)
class Activity:
    """A wellness activity tracked with a day-granularity streak."""

    title: str
    completed: bool = False
    streak: int = 0
    last_completed: Optional[date] = None
    activity_id: Optional[str] = None
    description: str = ""
    frequency: str = "Daily"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Activity":
        activity_id = data.get("activity_id", data.get("id", data.get("_id")))
        return cls(
            title=str(data.get("title") or ""),
            completed=bool(data.get("completed", False)),
            streak=coerce_streak(data.get("streak")),
            last_completed=coerce_date(data.get("last_completed")),
            activity_id=str(activity_id) if activity_id is not None else None,
            description=str(data.get("description") or ""),
            frequency=str(data.get("frequency") or "Daily"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "frequency": self.frequency,
            "completed": self.completed,
            "streak": self.streak,
            "last_completed": self.last_completed.isoformat() if self.last_completed else None,
        }


@dataclass(frozen=True)
class PracticeTemplate:
    """Catalog entry in the practice library."""

    title: str
    description: str
    frequency: str
    tags: FrozenSet[str]

    def to_practice(self) -> "RecommendedPractice":
        return RecommendedPractice(self.title, self.description, self.frequency)


@dataclass(frozen=True)
class RecommendedPractice:
    title: str
    description: str
    frequency: str = "Daily"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RecommendedPractice":
        return cls(
            title=str(data.get("title", "")),
            description=str(data.get("description", "")),
            frequency=str(data.get("frequency") or "Daily"),
        )

    def to_dict(self) -> Dict[str, str]:
        return {"title": self.title, "description": self.description, "frequency": self.frequency}


@dataclass(frozen=True)
class WellnessProfile:
    """One user's current wellness profile. Overwritten on every run."""

    user_id: str
    mood_trends: Dict[str, float] = field(default_factory=dict)
    common_topics: List[str] = field(default_factory=list)
    wellness_score: int = NEUTRAL_SCORE
    strengths: List[str] = field(default_factory=list)
    areas_for_growth: List[str] = field(default_factory=list)
    recommended_practices: List[RecommendedPractice] = field(default_factory=list)
    last_updated: datetime = field(default_factory=utc_now)

    # Holds dicts and lists, so equality only
    __hash__ = None

    def normalized(self) -> "WellnessProfile":
        """Returns a copy with every invariant re-applied."""
        return replace(
            self,
            mood_trends={k: clamp_intensity(v) for k, v in self.mood_trends.items()},
            common_topics=list(self.common_topics)[:MAX_TOPICS],
            wellness_score=clamp_score(self.wellness_score),
            strengths=list(self.strengths),
            areas_for_growth=list(self.areas_for_growth),
            recommended_practices=list(self.recommended_practices)[:MAX_PRACTICES],
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WellnessProfile":
        practices = []
        stored_practices = data.get("recommended_practices")
        if not isinstance(stored_practices, (list, tuple)):
            stored_practices = []
        for item in stored_practices:
            if isinstance(item, RecommendedPractice):
                practices.append(item)
            elif isinstance(item, dict):
                practices.append(RecommendedPractice.from_dict(item))
        profile = cls(
            user_id=str(data.get("user_id", "")),
            mood_trends=coerce_mood_trends(data.get("mood_trends")),
            common_topics=coerce_string_list(data.get("common_topics")),
            wellness_score=data.get("wellness_score", NEUTRAL_SCORE),
            strengths=coerce_string_list(data.get("strengths")),
            areas_for_growth=coerce_string_list(data.get("areas_for_growth")),
            recommended_practices=practices,
            last_updated=coerce_timestamp(data.get("last_updated")),
        )
        return profile.normalized()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "user_id": self.user_id,
            "mood_trends": dict(self.mood_trends),
            "common_topics": list(self.common_topics),
            "wellness_score": self.wellness_score,
            "strengths": list(self.strengths),
            "areas_for_growth": list(self.areas_for_growth),
            "recommended_practices": [p.to_dict() for p in self.recommended_practices],
            "last_updated": self.last_updated.isoformat(),
        }
