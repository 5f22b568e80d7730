"""
MongoDB stores for chat messages, wellness activities and wellness profiles.

This module provides database operations for:
- Reading a user's chat history (oldest first)
- Reading and updating activity streak records
- Creating, reading and updating the per-user wellness profile
"""

import os
import logging
from datetime import date
from typing import Any, Dict, List, Optional

import pymongo
from bson import ObjectId
from bson.errors import InvalidId
from pymongo import MongoClient
from pymongo.errors import DuplicateKeyError, OperationFailure, PyMongoError, ServerSelectionTimeoutError
import certifi

from wellness_engine.adapters.repositories.base import (
    ActivityStore, MessageStore, ProfileStore, StoreConnectionError, StoreOperationError,
)
from wellness_engine.core.models import Activity, Message, WellnessProfile

logger = logging.getLogger(__name__)


# ============================================================================
# CONSTANTS
# ============================================================================

DEFAULT_DATABASE_NAME = "wellness_profile"
MESSAGES_COLLECTION_NAME = "chat_messages"
ACTIVITIES_COLLECTION_NAME = "user_activities"
PROFILES_COLLECTION_NAME = "user_analysis"

CONNECTION_TIMEOUT_MS = 10000
DEFAULT_MESSAGE_LIMIT = 100


# ============================================================================
# DATABASE CONNECTION
# ============================================================================

class DatabaseConfig:
    """Encapsulates MongoDB connection configuration."""

    def __init__(self, uri: Optional[str] = None, database_name: Optional[str] = None):
        """
        Initialize database configuration.

        Args:
            uri: MongoDB connection URI (defaults to MONGODB_URI env var)
            database_name: Database name (defaults to WELLNESS_DB_NAME env var)

        Raises:
            ValueError: If URI not provided and env var not set
        """
        self.uri = uri or os.environ.get("MONGODB_URI")
        if not self.uri:
            raise ValueError("MONGODB_URI environment variable not set")
        self.database_name = database_name or os.environ.get("WELLNESS_DB_NAME", DEFAULT_DATABASE_NAME)

    def get_client(self) -> MongoClient:
        """
        Creates a MongoDB client with secure SSL/TLS configuration.

        Returns:
            Connected MongoClient instance.

        Raises:
            StoreConnectionError: If connection fails.
        """
        try:
            client = MongoClient(
                self.uri,
                tlsCAFile=certifi.where(),
                serverSelectionTimeoutMS=CONNECTION_TIMEOUT_MS,
                connectTimeoutMS=CONNECTION_TIMEOUT_MS
            )
            # Verify connection
            client.admin.command('ping')
            logger.info("[OK] MongoDB connected successfully")
            return client

        except ServerSelectionTimeoutError:
            logger.error("MongoDB connection timeout")
            raise StoreConnectionError("Connection timeout") from None
        except OperationFailure as e:
            logger.error(f"MongoDB authentication failed: {e}")
            raise StoreConnectionError(f"Authentication failed: {e}") from None
        except PyMongoError as e:
            logger.error(f"MongoDB connection failed: {e}")
            raise StoreConnectionError(str(e)) from e


class DatabaseConnection:
    """Singleton connection manager for MongoDB."""

    _instance: Optional['DatabaseConnection'] = None
    _client: Optional[MongoClient] = None
    _database_name: str = DEFAULT_DATABASE_NAME

    def __new__(cls) -> 'DatabaseConnection':
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def get_client(self) -> MongoClient:
        """
        Gets or creates MongoDB client.

        Raises:
            StoreConnectionError: If configuration is missing or connection fails.
        """
        if self._client is None:
            try:
                config = DatabaseConfig()
            except ValueError as e:
                logger.error(str(e))
                raise StoreConnectionError(str(e)) from e
            self._client = config.get_client()
            self._database_name = config.database_name

        return self._client

    def get_database(self) -> pymongo.database.Database:
        client = self.get_client()
        return client[self._database_name]

    def close(self) -> None:
        """Closes database connection."""
        if self._client:
            self._client.close()
            self._client = None
            logger.info("MongoDB connection closed")


def get_database() -> pymongo.database.Database:
    """
    Gets database instance.
    This is the main entry point for database access.

    Raises:
        StoreConnectionError: If connection fails.
    """
    try:
        return DatabaseConnection().get_database()
    except StoreConnectionError as e:
        logger.error(f"Database connection failed: {e}")
        raise


def ensure_indexes(db: pymongo.database.Database) -> None:
    """One profile per user, activity titles unique per user."""
    try:
        db[PROFILES_COLLECTION_NAME].create_index("user_id", unique=True)
        db[ACTIVITIES_COLLECTION_NAME].create_index(
            [("user_id", pymongo.ASCENDING), ("title", pymongo.ASCENDING)], unique=True
        )
        db[MESSAGES_COLLECTION_NAME].create_index(
            [("user_id", pymongo.ASCENDING), ("created_at", pymongo.ASCENDING)]
        )
    except PyMongoError as e:
        logger.warning(f"Index creation failed: {e}")


# ============================================================================
# STORES
# ============================================================================

class MongoMessageStore(MessageStore):
    """Read-only access to recorded chat messages."""

    def __init__(self, collection: pymongo.collection.Collection,
                 limit: Optional[int] = None):
        self.collection = collection
        self.limit = limit or int(os.environ.get("WELLNESS_MESSAGE_LIMIT", DEFAULT_MESSAGE_LIMIT))

    def list_user_messages(self, user_id: str) -> List[Message]:
        try:
            cursor = self.collection.find({"user_id": user_id}).sort(
                "created_at",
                pymongo.ASCENDING
            ).limit(self.limit)
            messages = [Message.from_dict(doc) for doc in cursor]
            logger.info(f"[OK] Retrieved {len(messages)} messages for {user_id}")
            return messages
        except PyMongoError as e:
            logger.error(f"Failed to retrieve messages for {user_id}: {e}")
            raise StoreOperationError(f"Message retrieval failed: {e}") from e


class MongoActivityStore(ActivityStore):
    """Activity records keyed by ObjectId, one title per user."""

    def __init__(self, collection: pymongo.collection.Collection):
        self.collection = collection

    @staticmethod
    def _object_id(activity_id: str) -> ObjectId:
        try:
            return ObjectId(activity_id)
        except (InvalidId, TypeError) as e:
            raise StoreOperationError(f"Invalid activity id: {activity_id}") from e

    def list_user_activities(self, user_id: str) -> List[Activity]:
        try:
            return [Activity.from_dict(doc) for doc in self.collection.find({"user_id": user_id})]
        except PyMongoError as e:
            logger.error(f"Failed to retrieve activities for {user_id}: {e}")
            raise StoreOperationError(f"Activity retrieval failed: {e}") from e

    def get_activity(self, user_id: str, activity_id: str) -> Optional[Activity]:
        try:
            doc = self.collection.find_one({"_id": self._object_id(activity_id), "user_id": user_id})
        except PyMongoError as e:
            raise StoreOperationError(f"Activity lookup failed: {e}") from e
        return Activity.from_dict(doc) if doc else None

    def create_activity(self, user_id: str, activity: Activity) -> Activity:
        document = activity.to_dict()
        document["user_id"] = user_id
        try:
            result = self.collection.insert_one(document)
        except DuplicateKeyError as e:
            logger.error(f"Duplicate activity '{activity.title}' for {user_id}")
            raise StoreOperationError(f"Duplicate activity: {activity.title}") from e
        except PyMongoError as e:
            logger.error(f"Failed to create activity: {e}")
            raise StoreOperationError(f"Create failed: {e}") from e
        document["_id"] = result.inserted_id
        return Activity.from_dict(document)

    def update_activity(self, activity_id: str, completed: bool, streak: int,
                        last_completed: Optional[date]) -> None:
        update = {
            "completed": completed,
            "streak": streak,
            "last_completed": last_completed.isoformat() if last_completed else None,
        }
        try:
            result = self.collection.update_one({"_id": self._object_id(activity_id)}, {"$set": update})
        except PyMongoError as e:
            logger.error(f"Failed to update activity {activity_id}: {e}")
            raise StoreOperationError(f"Update failed: {e}") from e
        if result.matched_count == 0:
            raise StoreOperationError(f"Unknown activity {activity_id}")


class MongoProfileStore(ProfileStore):
    """One wellness profile document per user_id."""

    def __init__(self, collection: pymongo.collection.Collection):
        self.collection = collection

    def get_profile(self, user_id: str) -> Optional[WellnessProfile]:
        try:
            doc = self.collection.find_one({"user_id": user_id})
        except PyMongoError as e:
            logger.error(f"Failed to read profile for {user_id}: {e}")
            raise StoreOperationError(f"Profile read failed: {e}") from e
        return self._to_profile(user_id, doc) if doc else None

    @staticmethod
    def _to_profile(user_id: str, doc: Dict[str, Any]) -> WellnessProfile:
        try:
            return WellnessProfile.from_dict(doc)
        except (TypeError, ValueError, AttributeError) as e:
            logger.error(f"Unreadable profile document for {user_id}: {e}")
            raise StoreOperationError(f"Malformed profile for {user_id}: {e}") from e

    def create_profile(self, profile: WellnessProfile) -> WellnessProfile:
        try:
            self.collection.insert_one(profile.to_dict())
            logger.info(f"[OK] New profile inserted for {profile.user_id}")
            return profile
        except DuplicateKeyError as e:
            logger.error(f"Duplicate key error: {e}")
            raise StoreOperationError(f"Profile already exists for {profile.user_id}") from e
        except PyMongoError as e:
            logger.error(f"Failed to create profile: {e}")
            raise StoreOperationError(f"Create failed: {e}") from e

    def update_profile(self, user_id: str, partial_profile: Dict[str, Any]) -> WellnessProfile:
        fields = {k: v for k, v in partial_profile.items() if k not in ("_id", "user_id")}
        try:
            doc = self.collection.find_one_and_update(
                {"user_id": user_id},
                {"$set": fields},
                return_document=pymongo.ReturnDocument.AFTER
            )
        except PyMongoError as e:
            logger.error(f"Failed to update profile for {user_id}: {e}")
            raise StoreOperationError(f"Update failed: {e}") from e
        if doc is None:
            raise StoreOperationError(f"No profile for {user_id}")
        logger.info(f"[OK] Profile updated for {user_id}")
        return self._to_profile(user_id, doc)


# ============================================================================
# PUBLIC API
# ============================================================================

def build_stores(db: Optional[pymongo.database.Database] = None):
    """
    Creates the three stores on one database.

    Returns:
        Tuple of (MongoMessageStore, MongoActivityStore, MongoProfileStore).

    Raises:
        StoreConnectionError: If connection fails.
    """
    db = db if db is not None else get_database()
    ensure_indexes(db)
    return (
        MongoMessageStore(db[MESSAGES_COLLECTION_NAME]),
        MongoActivityStore(db[ACTIVITIES_COLLECTION_NAME]),
        MongoProfileStore(db[PROFILES_COLLECTION_NAME]),
    )
