"""
Store contracts consumed by the wellness engine.

Concrete stores raise ``StoreError`` subclasses for every read or write
failure; "not found" is reported as ``None``, never as an exception.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Any, Dict, List, Optional

from wellness_engine.core.models import Activity, Message, WellnessProfile


# ============================================================================
# EXCEPTIONS
# ============================================================================

class StoreError(Exception):
    """Base class for collaborator store failures."""
    pass


class StoreConnectionError(StoreError):
    """Raised when the backing database cannot be reached."""
    pass


class StoreOperationError(StoreError):
    """Raised when a read or write operation fails."""
    pass


# ============================================================================
# CONTRACTS
# ============================================================================

class MessageStore(ABC):

    @abstractmethod
    def list_user_messages(self, user_id: str) -> List[Message]:
        """Messages for the user, oldest first."""


class ActivityStore(ABC):

    @abstractmethod
    def list_user_activities(self, user_id: str) -> List[Activity]:
        ...

    @abstractmethod
    def get_activity(self, user_id: str, activity_id: str) -> Optional[Activity]:
        """The activity if it exists and belongs to ``user_id``, else None."""

    @abstractmethod
    def create_activity(self, user_id: str, activity: Activity) -> Activity:
        """Inserts the activity and returns it with its store id set."""

    @abstractmethod
    def update_activity(self, activity_id: str, completed: bool, streak: int,
                        last_completed: Optional[date]) -> None:
        ...


class ProfileStore(ABC):

    @abstractmethod
    def get_profile(self, user_id: str) -> Optional[WellnessProfile]:
        ...

    @abstractmethod
    def create_profile(self, profile: WellnessProfile) -> WellnessProfile:
        ...

    @abstractmethod
    def update_profile(self, user_id: str, partial_profile: Dict[str, Any]) -> WellnessProfile:
        """Applies the given fields to an existing profile and returns the result."""
