"""
Activity streak tracking and the activity contribution to the wellness score.

Streaks have day granularity: completing an activity the day after its
last completion extends the streak, any longer gap restarts it at 1.
"""

import logging
from dataclasses import replace
from datetime import date, timedelta
from typing import Iterable, List, Sequence

from wellness_engine.core.lexicon import LexiconConfig
from wellness_engine.core.models import Activity, RecommendedPractice, coerce_streak

logger = logging.getLogger(__name__)


class ActivityStreakTracker:
    """Applies the completion state machine to a single activity."""

    @staticmethod
    def complete(activity: Activity, today: date) -> Activity:
        """
        Marks an activity as completed today.

        last_completed == today      -> unchanged (already done)
        last_completed == yesterday  -> streak + 1
        last_completed is None       -> streak = 1
        anything older               -> streak = 1 (broken)
        """
        last = activity.last_completed
        if last == today:
            return activity

        if last == today - timedelta(days=1):
            streak = coerce_streak(activity.streak) + 1
        elif last is None:
            streak = 1
        else:
            logger.debug(f"[ACTIVITY] Streak broken for '{activity.title}' (last: {last})")
            streak = 1

        return replace(activity, completed=True, streak=streak, last_completed=today)

    @staticmethod
    def uncomplete(activity: Activity) -> Activity:
        """Undoes today's completion. Streak floors at 0."""
        return replace(
            activity,
            completed=False,
            streak=max(0, coerce_streak(activity.streak) - 1),
            last_completed=None,
        )

    @classmethod
    def toggle(cls, activity: Activity, today: date) -> Activity:
        """Single tap action: undo if already done today, complete otherwise."""
        if activity.last_completed == today:
            return cls.uncomplete(activity)
        return cls.complete(activity, today)

    @staticmethod
    def refresh(activity: Activity, today: date) -> Activity:
        """Clears the completed flag on a new day. The streak is left untouched."""
        if activity.completed and activity.last_completed != today:
            return replace(activity, completed=False)
        return activity


class ActivityScoreCalculator:
    """Folds completions and streaks into a bounded score adjustment."""

    COMPLETION_WEIGHT = 0.3
    COMPLETION_CAP = 1.5
    TOTAL_STREAK_WEIGHT = 0.05
    TOTAL_STREAK_CAP = 1.0
    HIGHEST_STREAK_WEIGHT = 0.1
    HIGHEST_STREAK_CAP = 0.5
    VARIETY_WEIGHT = 0.2
    VARIETY_CAP = 1.0
    TOTAL_CAP = 3.0

    @classmethod
    def contribution(cls, activities: Sequence[Activity]) -> float:
        """Returns the contribution in [0, 3.0]. No activities gives 0."""
        if not activities:
            return 0.0

        completed = [a for a in activities if a.completed]
        streaks: List[int] = [coerce_streak(a.streak) for a in activities]
        total_streak = sum(streaks)
        highest_streak = max(streaks, default=0)
        unique_titles = len({a.title for a in completed if a.title})

        score = (
            min(cls.COMPLETION_CAP, len(completed) * cls.COMPLETION_WEIGHT)
            + min(cls.TOTAL_STREAK_CAP, total_streak * cls.TOTAL_STREAK_WEIGHT)
            + min(cls.HIGHEST_STREAK_CAP, highest_streak * cls.HIGHEST_STREAK_WEIGHT)
            + min(cls.VARIETY_CAP, unique_titles * cls.VARIETY_WEIGHT)
        )
        final_score = min(cls.TOTAL_CAP, score)

        logger.info(
            f"[ACTIVITY] Contribution {final_score:.2f} ({len(completed)} completed, "
            f"{total_streak} total streak days, {highest_streak} highest streak, "
            f"{unique_titles} unique activities)"
        )
        return final_score


def missing_default_activities(existing: Iterable[Activity]) -> List[Activity]:
    """Starter activities whose title is not yet tracked for the user."""
    titles = {a.title for a in existing}
    return [
        Activity(title=title, description=description, frequency=frequency)
        for title, description, frequency in LexiconConfig.DEFAULT_ACTIVITIES
        if title not in titles
    ]


def practice_activities(practices: Iterable[RecommendedPractice],
                        existing: Iterable[Activity]) -> List[Activity]:
    """One activity per recommended practice, skipping titles already tracked."""
    titles = {a.title for a in existing}
    activities = []
    for practice in practices:
        if practice.title and practice.title not in titles:
            titles.add(practice.title)
            activities.append(Activity(
                title=practice.title,
                description=practice.description,
                frequency=practice.frequency or "Daily",
            ))
    return activities
