"""
In-process stores for dry runs and tests.

Same contracts as the MongoDB stores; data lives in plain dicts for the
lifetime of the object.
"""

import logging
import uuid
from dataclasses import replace
from datetime import date
from typing import Any, Dict, List, Optional

from wellness_engine.adapters.repositories.base import (
    ActivityStore, MessageStore, ProfileStore, StoreOperationError,
)
from wellness_engine.core.models import Activity, Message, WellnessProfile

logger = logging.getLogger(__name__)


class InMemoryMessageStore(MessageStore):

    def __init__(self, messages: Optional[Dict[str, List[Message]]] = None):
        self._messages: Dict[str, List[Message]] = {
            user_id: list(items) for user_id, items in (messages or {}).items()
        }

    def add_message(self, user_id: str, message: Message) -> None:
        self._messages.setdefault(user_id, []).append(message)

    def list_user_messages(self, user_id: str) -> List[Message]:
        return list(self._messages.get(user_id, []))


class InMemoryActivityStore(ActivityStore):

    def __init__(self):
        self._activities: Dict[str, Activity] = {}
        self._owners: Dict[str, str] = {}

    def list_user_activities(self, user_id: str) -> List[Activity]:
        return [a for key, a in self._activities.items() if self._owners[key] == user_id]

    def get_activity(self, user_id: str, activity_id: str) -> Optional[Activity]:
        if self._owners.get(activity_id) != user_id:
            return None
        return self._activities.get(activity_id)

    def create_activity(self, user_id: str, activity: Activity) -> Activity:
        for existing in self.list_user_activities(user_id):
            if existing.title == activity.title:
                raise StoreOperationError(f"Duplicate activity '{activity.title}' for {user_id}")
        activity_id = activity.activity_id or uuid.uuid4().hex
        stored = replace(activity, activity_id=activity_id)
        self._activities[activity_id] = stored
        self._owners[activity_id] = user_id
        return stored

    def update_activity(self, activity_id: str, completed: bool, streak: int,
                        last_completed: Optional[date]) -> None:
        if activity_id not in self._activities:
            raise StoreOperationError(f"Unknown activity {activity_id}")
        self._activities[activity_id] = replace(
            self._activities[activity_id],
            completed=completed, streak=streak, last_completed=last_completed,
        )


class InMemoryProfileStore(ProfileStore):

    def __init__(self):
        self._profiles: Dict[str, WellnessProfile] = {}

    def get_profile(self, user_id: str) -> Optional[WellnessProfile]:
        return self._profiles.get(user_id)

    def create_profile(self, profile: WellnessProfile) -> WellnessProfile:
        if profile.user_id in self._profiles:
            raise StoreOperationError(f"Profile already exists for {profile.user_id}")
        self._profiles[profile.user_id] = profile
        return profile

    def update_profile(self, user_id: str, partial_profile: Dict[str, Any]) -> WellnessProfile:
        existing = self._profiles.get(user_id)
        if existing is None:
            raise StoreOperationError(f"No profile for {user_id}")
        document = existing.to_dict()
        document.update(partial_profile)
        document["user_id"] = user_id
        updated = WellnessProfile.from_dict(document)
        self._profiles[user_id] = updated
        return updated
