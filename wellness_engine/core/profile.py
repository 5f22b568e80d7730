"""
Wellness profile service: the engine's public entry point.

Reads messages and activities, runs the analysis pipeline and upserts the
resulting profile. Store failures are logged and recovered locally, so
callers always receive a usable ``WellnessProfile``.
"""

import logging
import random
from dataclasses import replace
from datetime import date, datetime
from typing import Any, Callable, Dict, List, Optional

from wellness_engine.adapters.repositories.base import (
    ActivityStore, MessageStore, ProfileStore, StoreError,
)
from wellness_engine.core.activities import (
    ActivityScoreCalculator, ActivityStreakTracker, missing_default_activities, practice_activities,
)
from wellness_engine.core.analyzer import WellnessDataAnalyzer, WellnessScoreCalculator, log_analysis
from wellness_engine.core.models import (
    Activity, RecommendedPractice, WellnessProfile, NEUTRAL_SCORE, utc_now,
)

logger = logging.getLogger(__name__)

DAILY_MINDFULNESS = RecommendedPractice(
    "Daily Mindfulness", "Start with 5 minutes of mindfulness meditation each day.", "Daily"
)
DEEP_BREATHING = RecommendedPractice(
    "Deep Breathing", "Practice deep breathing when feeling stressed.", "As needed"
)


# ============================================================================
# PROFILE BUILDERS
# ============================================================================

def safe_default_profile(user_id: str, now: Optional[datetime] = None) -> WellnessProfile:
    """Degraded profile returned when nothing else is available."""
    return WellnessProfile(
        user_id=user_id,
        wellness_score=NEUTRAL_SCORE,
        recommended_practices=[DAILY_MINDFULNESS],
        last_updated=now or utc_now(),
    )


def initial_profile(user_id: str, now: Optional[datetime] = None) -> WellnessProfile:
    """Profile created on a user's first request."""
    return WellnessProfile(
        user_id=user_id,
        mood_trends={"calm": 0.7, "focused": 0.5},
        common_topics=["mental wellness", "self-improvement"],
        wellness_score=NEUTRAL_SCORE,
        strengths=["Seeking support", "Self-awareness"],
        areas_for_growth=["Regular practice", "Stress management"],
        recommended_practices=[DAILY_MINDFULNESS, DEEP_BREATHING],
        last_updated=now or utc_now(),
    )


def merge_profile(existing: WellnessProfile, patch: Dict[str, Any],
                  now: Optional[datetime] = None) -> WellnessProfile:
    """
    Builds a new profile from ``existing`` with ``patch`` fields applied.

    ``user_id`` is never overridden, ``last_updated`` is refreshed and all
    profile invariants are re-applied. ``existing`` is not modified.
    """
    document = existing.to_dict()
    document.update({k: v for k, v in patch.items() if k != "user_id"})
    document["last_updated"] = now or utc_now()
    return WellnessProfile.from_dict(document)


def profile_patch(profile: WellnessProfile) -> Dict[str, Any]:
    """Store document for every recomputed field."""
    document = profile.to_dict()
    document.pop("user_id")
    return document


# ============================================================================
# SERVICE
# ============================================================================

class WellnessProfileService:
    """Orchestrates analysis and persistence for one user per call."""

    def __init__(self, message_store: MessageStore, activity_store: ActivityStore,
                 profile_store: ProfileStore, rng: Optional[random.Random] = None,
                 clock: Optional[Callable[[], datetime]] = None):
        self.message_store = message_store
        self.activity_store = activity_store
        self.profile_store = profile_store
        self.clock = clock or utc_now
        self.analyzer = WellnessDataAnalyzer(rng)

    # ------------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------------

    def get_profile(self, user_id: str) -> WellnessProfile:
        """
        Current profile without recomputation.

        Creates and stores the initial profile when none exists. If that
        insert fails the initial profile is still returned; if the read
        itself fails a minimal default is returned.
        """
        try:
            profile = self.profile_store.get_profile(user_id)
        except StoreError as e:
            logger.error(f"[PROFILE] Read failed for {user_id}: {e}")
            return safe_default_profile(user_id, self.clock())

        if profile is not None:
            return profile

        default = initial_profile(user_id, self.clock())
        try:
            created = self.profile_store.create_profile(default)
            logger.info(f"[PROFILE] Created initial profile for {user_id}")
            return created
        except StoreError as e:
            logger.error(f"[PROFILE] Initial insert failed for {user_id}: {e}")
            return default

    # ------------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------------

    def save_profile(self, user_id: str, profile: WellnessProfile) -> WellnessProfile:
        """
        Create-or-update upsert.

        On a write failure the profile is returned unsaved.
        """
        profile = replace(profile, user_id=user_id).normalized()
        try:
            if self.profile_store.get_profile(user_id) is None:
                logger.info(f"[PROFILE] Creating profile for {user_id}")
                return self.profile_store.create_profile(profile)
            logger.info(f"[PROFILE] Updating profile for {user_id}")
            return self.profile_store.update_profile(user_id, profile_patch(profile))
        except StoreError as e:
            logger.error(f"[PROFILE] Save failed for {user_id}: {e}")
            return profile

    def analyze_and_update_profile(self, user_id: str) -> WellnessProfile:
        """
        Full pipeline: read, analyze, blend activities, upsert.

        - no user text, no activities: existing profile returned unchanged
        - no user text, activities: existing profile with score 5 + activities
        - user text: fully recomputed profile
        """
        now = self.clock()
        existing = self.get_profile(user_id)

        try:
            messages = self.message_store.list_user_messages(user_id)
            activities = self.activity_store.list_user_activities(user_id)
        except StoreError as e:
            logger.error(f"[PROFILE] Input read failed for {user_id}: {e}")
            return existing

        logger.info(f"[PROFILE] {len(messages)} messages, {len(activities)} activities for {user_id}")

        try:
            analysis = self.analyzer.analyze(messages, activities)
            if analysis is None:
                if not activities:
                    return existing
                contribution = ActivityScoreCalculator.contribution(activities)
                score = WellnessScoreCalculator.blend(NEUTRAL_SCORE, contribution)
                logger.info(f"[PROFILE] Activity-only score for {user_id}: {score}")
                updated = merge_profile(existing, {"wellness_score": score}, now)
            else:
                log_analysis(analysis, logger)
                updated = replace(analysis.to_profile(user_id), last_updated=now)
        except Exception as e:
            logger.exception(f"[PROFILE] Analysis failed for {user_id}: {e}")
            return existing

        return self.save_profile(user_id, updated)

    # ------------------------------------------------------------------------
    # Activities
    # ------------------------------------------------------------------------

    def complete_activity(self, user_id: str, activity_id: str,
                          today: Optional[date] = None) -> Optional[Activity]:
        """Toggles today's completion for one activity and persists it."""
        today = today or self.clock().date()
        try:
            activity = self.activity_store.get_activity(user_id, activity_id)
            if activity is None:
                logger.warning(f"[ACTIVITY] Unknown activity {activity_id} for {user_id}")
                return None
            updated = ActivityStreakTracker.toggle(activity, today)
            self.activity_store.update_activity(
                activity_id, updated.completed, updated.streak, updated.last_completed
            )
        except StoreError as e:
            logger.error(f"[ACTIVITY] Update failed for {activity_id}: {e}")
            return None

        logger.info(
            f"[ACTIVITY] '{updated.title}' completed={updated.completed} streak={updated.streak}"
        )
        return updated

    def ensure_default_activities(self, user_id: str) -> List[Activity]:
        """
        Adds any missing starter activity and returns the user's activities.

        A user with no activities at all is also seeded with one activity
        per practice recommended in their current profile.
        """
        try:
            activities = self.activity_store.list_user_activities(user_id)
        except StoreError as e:
            logger.error(f"[ACTIVITY] Read failed for {user_id}: {e}")
            return []

        missing = missing_default_activities(activities)
        if not activities:
            practices = self.get_profile(user_id).recommended_practices
            missing += practice_activities(practices, missing)

        for activity in missing:
            try:
                activities.append(self.activity_store.create_activity(user_id, activity))
            except StoreError as e:
                logger.warning(f"[ACTIVITY] Could not add '{activity.title}': {e}")

        today = self.clock().date()
        return [ActivityStreakTracker.refresh(a, today) for a in activities]
